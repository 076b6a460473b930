"""FastAPI dependency that binds a request body through the selective filter."""

from __future__ import annotations

import io
from typing import Any, Callable, Iterable

from fastapi import Request

from bodyfilter.body_filter import filter_body
from bodyfilter.errors import UnsupportedMediaTypeError
from bodyfilter.media_types import admits
from bodyfilter.shapes import shape_of, valid_members


def _require_json_content_type(request: Request) -> bool:
    config = getattr(request.app.state, "config", None)
    return bool(getattr(config, "require_json_content_type", True))


def bind_body(
    destination: Any,
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> Callable[[Request], Any]:
    """Return a dependency yielding the request body bound to ``destination``.

    The binding contract is resolved once, when the route is declared, so an
    unknown member name fails at import time rather than per request.
    """
    shape = shape_of(destination)
    valid = valid_members(shape, include=include, exclude=exclude)

    async def dependency(request: Request) -> Any:
        content_type = request.headers.get("content-type")
        if _require_json_content_type(request) and not admits(content_type):
            raise UnsupportedMediaTypeError(
                "Request body must be JSON.",
                {"contentType": content_type},
            )
        body = await request.body()
        return filter_body(io.BytesIO(body), shape, valid)

    return dependency
