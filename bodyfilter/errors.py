"""Structured error types for body binding failures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class ErrorResponse:
    """Serializable error payload returned to API callers."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class BindingError(RuntimeError):
    """Exception carrying a structured error response."""

    code = "BINDING_ERROR"

    def __init__(
        self, message: str, details: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.error = ErrorResponse(
            code=self.code, message=message, details=dict(details or {})
        )


class DecodeError(BindingError):
    """Payload could not be parsed into the requested shape."""

    code = "DECODE_ERROR"


class UnsupportedMediaTypeError(BindingError):
    """Request body is not declared as JSON."""

    code = "UNSUPPORTED_MEDIA_TYPE"


class ReconstructionError(BindingError):
    """Destination shape cannot be allocated or populated."""

    code = "RECONSTRUCTION_ERROR"


class ShapeError(BindingError):
    """Python type cannot be described as a destination shape."""

    code = "UNSUPPORTED_SHAPE"


class UnknownMemberError(BindingError):
    """A binding contract names a member the shape does not declare."""

    code = "UNKNOWN_MEMBER"


# Client-correctable failures map to 4xx; everything else is a broken
# binding contract on the server side.
ERROR_STATUS_MAP: dict[type[BindingError], int] = {
    DecodeError: 400,
    UnsupportedMediaTypeError: 415,
    ReconstructionError: 500,
    ShapeError: 500,
    UnknownMemberError: 500,
}


def status_for(exc: BindingError) -> int:
    for error_type in type(exc).__mro__:
        status = ERROR_STATUS_MAP.get(error_type)
        if status is not None:
            return status
    return 500


def success_response(payload: Any) -> dict[str, Any]:
    """Wrap a successful response in the standard envelope."""
    return {"ok": True, "data": payload}


def error_response(error: ErrorResponse) -> dict[str, Any]:
    """Wrap an error response in the standard envelope."""
    return {"ok": False, "error": error.to_dict()}
