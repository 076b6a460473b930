"""Baseline JSON decoding into a destination shape."""

from __future__ import annotations

from typing import Any, IO, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import from_json

from bodyfilter.errors import DecodeError
from bodyfilter.shapes import CollectionShape, Shape, zero_value

Payload = Union[bytes, bytearray, str, IO[bytes], IO[str]]

_ADAPTERS: dict[Any, TypeAdapter] = {}


def adapter_for(python_type: Any) -> TypeAdapter:
    adapter = _ADAPTERS.get(python_type)
    if adapter is None:
        adapter = _ADAPTERS.setdefault(python_type, TypeAdapter(python_type))
    return adapter


def read_payload(stream: Payload) -> bytes | str:
    """Return the full payload, rewinding seekable streams first."""
    if isinstance(stream, (bytes, str)):
        return stream
    if isinstance(stream, bytearray):
        return bytes(stream)
    if not hasattr(stream, "read"):
        raise DecodeError(
            "Payload must be bytes, text, or a readable stream.",
            {"type": type(stream).__name__},
        )
    seekable = getattr(stream, "seekable", None)
    if callable(seekable) and seekable():
        stream.seek(0)
    return stream.read()


def _model_type(annotation: Any) -> type[BaseModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def fill_absent_members(data: Any, model_type: type[BaseModel]) -> Any:
    """Give required fields missing from a JSON object their zero value.

    Absent members are not a decode failure; they end up holding the same
    value a filtered-out member would. Nested records are filled as well.
    """
    if not isinstance(data, dict):
        return data
    filled = dict(data)
    for name, info in model_type.model_fields.items():
        key = info.alias or name
        present = key if key in filled else name if name in filled else None
        if present is None:
            if info.is_required():
                filled[key] = zero_value(info.annotation)
            continue
        nested = _model_type(info.annotation)
        if nested is not None:
            filled[present] = fill_absent_members(filled[present], nested)
    return filled


def _fill_payload(data: Any, shape: Shape) -> Any:
    if isinstance(shape, CollectionShape):
        element = _model_type(shape.element_type)
        if element is None or not isinstance(data, list):
            return data
        return [fill_absent_members(item, element) for item in data]
    return fill_absent_members(data, shape.python_type)


def _describe_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors(include_url=False, include_input=False)
    ]


def decode(stream: Payload, shape: Shape) -> Any:
    """Decode the whole payload into one instance of ``shape``.

    No filtering happens here: every member present in the payload is set.
    Collections are decoded as a list of elements; the concrete kind is built
    by the reconstructor.
    """
    raw = read_payload(stream)
    try:
        data = from_json(raw)
    except ValueError as exc:
        raise DecodeError(
            f"Request body could not be decoded as {shape.name}.",
            {
                "shape": shape.name,
                "location": [],
                "errors": [{"loc": [], "msg": str(exc), "type": "json_invalid"}],
            },
        ) from exc

    try:
        return adapter_for(shape.decode_type).validate_python(_fill_payload(data, shape))
    except ValidationError as exc:
        errors = _describe_errors(exc)
        raise DecodeError(
            f"Request body could not be decoded as {shape.name}.",
            {
                "shape": shape.name,
                "location": errors[0]["loc"] if errors else [],
                "errors": errors,
            },
        ) from exc
