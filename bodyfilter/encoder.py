"""JSON encoding of response values, the counterpart of the body decoder."""

from __future__ import annotations

from typing import Any

from fastapi import Response

from bodyfilter.decoder import adapter_for
from bodyfilter.media_types import JSON_MEDIA_TYPE, admits

FILE_EXTENSIONS = ("json",)


def can_encode(accept: str | None) -> bool:
    return admits(accept)


def encode(value: Any) -> bytes:
    """Serialize any value to JSON using the host's naming conventions.

    Models are written by alias (camelCase) and datetimes in ISO 8601. No
    members are filtered on the way out.
    """
    return adapter_for(type(value)).dump_json(value, by_alias=True)


class JsonBodyResponse(Response):
    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:
        return encode(content)
