"""Selective request body binding.

``filter_body`` decodes a JSON payload into its destination shape and, when
the shape declares members outside the caller's binding contract, returns a
fresh value that only carries the allowed members. Everything else keeps the
shape's default value.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Any

from bodyfilter.decoder import Payload, decode
from bodyfilter.reconstruct import excluded_members, needs_filtering, rebuild
from bodyfilter.shapes import Member, shape_of

logger = logging.getLogger(__name__)


def filter_body(stream: Payload, destination: Any, valid: AbstractSet[Member]) -> Any:
    shape = shape_of(destination)
    baseline = decode(stream, shape)

    if not needs_filtering(shape, valid):
        logger.debug(
            "Bound body without filtering",
            extra={"context": {"shape": shape.name}},
        )
        return baseline

    result = rebuild(baseline, shape, valid)
    logger.debug(
        "Bound body with filtering",
        extra={
            "context": {
                "shape": shape.name,
                "excluded": [str(member) for member in excluded_members(shape, valid)],
            }
        },
    )
    return result
