"""Media-type gate shared by the JSON body decoder and encoder."""

from __future__ import annotations

JSON_MEDIA_TYPE = "application/json"
LEGACY_JSON_MEDIA_TYPE = "text/json"
VENDOR_PREFIX = "application/vnd"
VENDOR_SUFFIX = "+json"


def admits(media_type: str | None) -> bool:
    """Return True when a Content-Type or Accept value denotes JSON.

    Parameters such as ``; charset=utf-8`` are discarded before matching.
    """
    if not media_type:
        return False

    mime_type = media_type.split(";", 1)[0].strip().lower()
    if not mime_type:
        return False

    return (
        mime_type == JSON_MEDIA_TYPE
        or mime_type == LEGACY_JSON_MEDIA_TYPE
        or (mime_type.startswith(VENDOR_PREFIX) and mime_type.endswith(VENDOR_SUFFIX))
    )
