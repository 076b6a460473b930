"""Membership comparison and filtered reconstruction of bound values."""

from __future__ import annotations

from typing import AbstractSet, Any

from bodyfilter.errors import ReconstructionError
from bodyfilter.shapes import (
    CollectionShape,
    Member,
    RecordShape,
    Shape,
    enumerate_members,
)


def excluded_members(shape: Shape, valid: AbstractSet[Member]) -> tuple[Member, ...]:
    """Members of ``shape`` the binding contract does not allow."""
    return tuple(member for member in enumerate_members(shape) if member not in valid)


def needs_filtering(shape: Shape, valid: AbstractSet[Member]) -> bool:
    """Return True when the decoded value must be rebuilt.

    Collections are always rebuilt into a fresh container.
    """
    if isinstance(shape, CollectionShape):
        return True
    return bool(excluded_members(shape, valid))


def _rebuild_collection(baseline: Any, shape: CollectionShape) -> Any:
    capability = shape.capability
    if capability is None:
        raise ReconstructionError(
            "Collection shape has no single-element insertion operation.",
            {"shape": shape.name, "kind": shape.kind.__name__},
        )
    try:
        collection = capability.factory()
    except Exception as exc:
        raise ReconstructionError(
            "Collection could not be allocated.",
            {"shape": shape.name, "reason": str(exc)},
        ) from exc

    for element in baseline:
        try:
            capability.insert(collection, element)
        except Exception as exc:
            raise ReconstructionError(
                "Element could not be inserted into the collection.",
                {"shape": shape.name, "reason": str(exc)},
            ) from exc
    return collection


def _rebuild_record(
    baseline: Any, shape: RecordShape, valid: AbstractSet[Member]
) -> Any:
    try:
        instance = shape.allocate()
    except Exception as exc:
        raise ReconstructionError(
            "Record shape could not be allocated.",
            {"shape": shape.name, "reason": str(exc)},
        ) from exc
    if not isinstance(instance, shape.python_type):
        raise ReconstructionError(
            "Record allocator returned an instance of the wrong type.",
            {"shape": shape.name, "type": type(instance).__name__},
        )

    for member in shape.members:
        if member not in valid:
            continue
        try:
            member.write(instance, member.read(baseline))
        except Exception as exc:
            raise ReconstructionError(
                "Member could not be copied into the rebuilt record.",
                {"shape": shape.name, "member": str(member), "reason": str(exc)},
            ) from exc
    return instance


def rebuild(baseline: Any, shape: Shape, valid: AbstractSet[Member]) -> Any:
    """Build a fresh value holding only what the binding contract allows."""
    if isinstance(shape, CollectionShape):
        return _rebuild_collection(baseline, shape)
    return _rebuild_record(baseline, shape, valid)
