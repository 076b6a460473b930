"""Destination shapes and their settable members.

A shape describes how to allocate and introspect a value that a request body
is bound to. Record shapes wrap a pydantic model class and expose its fields
and writable properties as :class:`Member` objects. Collection shapes wrap a
homogeneous container type together with an explicit insertion capability
taken from a registry, never from a method looked up by name.

Shapes are derived from static type information only and are cached per
Python type. Entries are written once and never mutated, so concurrent
readers need no lock. ``register_collection_kind`` is the one exception: it
evicts cached collection shapes of the registered kind and belongs in
application startup, before any request is bound.
"""

from __future__ import annotations

import enum
import inspect
import types
from collections import deque
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Annotated, Any, Callable, Literal, Union, get_args, get_origin

from pydantic import BaseModel

from bodyfilter.errors import ShapeError, UnknownMemberError


class MemberKind(str, enum.Enum):
    FIELD = "field"
    PROPERTY = "property"


@dataclass(frozen=True)
class Member:
    """A named, independently settable field or property of a record shape."""

    owner: type
    name: str
    kind: MemberKind

    def read(self, instance: Any) -> Any:
        return getattr(instance, self.name)

    def write(self, instance: Any, value: Any) -> None:
        if self.kind is MemberKind.PROPERTY:
            descriptor = inspect.getattr_static(self.owner, self.name)
            descriptor.__set__(instance, value)
            return
        # Skips pydantic's assignment hooks; frozen models are writable here.
        object.__setattr__(instance, self.name, value)
        instance.__pydantic_fields_set__.add(self.name)

    def __str__(self) -> str:
        return f"{self.owner.__name__}.{self.name}"


@dataclass(frozen=True)
class RecordShape:
    python_type: type[BaseModel]
    members: tuple[Member, ...]
    allocate: Callable[[], BaseModel] = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.python_type.__name__

    @property
    def decode_type(self) -> Any:
        return self.python_type

    def member_names(self) -> tuple[str, ...]:
        return tuple(member.name for member in self.members)


@dataclass(frozen=True)
class CollectionKind:
    """Capability of a container class to be built one element at a time."""

    kind: type
    factory: Callable[[], Any]
    insert: Callable[[Any, Any], None]


@dataclass(frozen=True)
class CollectionShape:
    python_type: Any
    kind: type
    element_type: Any
    capability: CollectionKind | None = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        element = getattr(self.element_type, "__name__", repr(self.element_type))
        return f"{self.kind.__name__}[{element}]"

    @property
    def decode_type(self) -> Any:
        """Type the payload is decoded as before the concrete kind is built."""
        return list[self.element_type]


Shape = Union[RecordShape, CollectionShape]

_COLLECTION_KINDS: dict[type, CollectionKind] = {
    list: CollectionKind(list, list, list.append),
    deque: CollectionKind(deque, deque, deque.append),
    set: CollectionKind(set, set, set.add),
}
_SHAPE_CACHE: dict[Any, Shape] = {}


def register_collection_kind(
    kind: type,
    insert: Callable[[Any, Any], None],
    factory: Callable[[], Any] | None = None,
) -> CollectionKind:
    """Declare how a container class is allocated and extended.

    Call at startup; shapes already cached for ``kind`` are dropped so the
    next lookup picks up the new capability.
    """
    capability = CollectionKind(kind, factory or kind, insert)
    _COLLECTION_KINDS[kind] = capability
    stale = [
        key
        for key, shape in list(_SHAPE_CACHE.items())
        if isinstance(shape, CollectionShape) and shape.kind is kind
    ]
    for key in stale:
        _SHAPE_CACHE.pop(key, None)
    return capability


def zero_value(annotation: Any) -> Any:
    """Return the value a member holds when nothing was bound to it."""
    if annotation is None or annotation is type(None) or annotation is Any:
        return None

    origin = get_origin(annotation)
    if origin is Annotated:
        return zero_value(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        if type(None) in args:
            return None
        return zero_value(args[0])
    if origin is Literal:
        return get_args(annotation)[0]
    if origin is not None:
        annotation = origin

    if not isinstance(annotation, type):
        return None
    if issubclass(annotation, BaseModel):
        return record_shape(annotation).allocate()
    if issubclass(annotation, enum.Enum):
        return next(iter(annotation), None)
    if issubclass(annotation, (bool, int, float, complex, str, bytes, Decimal)):
        return annotation()
    if issubclass(annotation, (list, dict, set, frozenset, tuple, deque)):
        return annotation()
    return None


def construct_bare(model_type: type[BaseModel]) -> BaseModel:
    """Allocate a model without running validation or ``__init__``.

    Fields with defaults take them; required fields take their type's zero
    value. The instance starts with an empty ``model_fields_set``.
    """
    values = {
        name: zero_value(info.annotation)
        for name, info in model_type.model_fields.items()
        if info.is_required()
    }
    return model_type.model_construct(_fields_set=set(), **values)


def _writable_properties(model_type: type[BaseModel]) -> list[str]:
    names: list[str] = []
    for klass in reversed(model_type.__mro__):
        if klass is object or klass is BaseModel or not issubclass(klass, BaseModel):
            continue
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and name not in names:
                names.append(name)

    writable = []
    for name in names:
        if name.startswith("_") or name in model_type.model_fields:
            continue
        descriptor = inspect.getattr_static(model_type, name)
        if isinstance(descriptor, property) and descriptor.fset is not None:
            writable.append(name)
    return writable


def record_shape(model_type: type[BaseModel]) -> RecordShape:
    """Describe a pydantic model as a record shape."""
    cached = _SHAPE_CACHE.get(model_type)
    if isinstance(cached, RecordShape):
        return cached
    if not (isinstance(model_type, type) and issubclass(model_type, BaseModel)):
        raise ShapeError(
            "Record shapes must be pydantic models.",
            {"type": repr(model_type)},
        )

    members = [
        Member(model_type, name, MemberKind.FIELD)
        for name in model_type.model_fields
    ]
    members.extend(
        Member(model_type, name, MemberKind.PROPERTY)
        for name in _writable_properties(model_type)
    )

    allocate = getattr(model_type, "bare", None)
    if not callable(allocate):
        def allocate() -> BaseModel:
            return construct_bare(model_type)

    shape = RecordShape(model_type, tuple(members), allocate)
    return _SHAPE_CACHE.setdefault(model_type, shape)


def _is_collection_type(origin: Any) -> bool:
    if not isinstance(origin, type):
        return False
    if issubclass(origin, (str, bytes, bytearray, Mapping, BaseModel)):
        return False
    return issubclass(origin, Collection)


def collection_shape(collection_type: Any) -> CollectionShape:
    """Describe a homogeneous container type as a collection shape.

    ``list``, ``deque`` and ``set`` are registered out of the box; a set keeps
    its own deduplication. Containers without a registered insertion
    capability (``tuple``, ``frozenset``) still get a shape, and rebuilding
    such a shape fails with ``ReconstructionError``.
    """
    cached = _SHAPE_CACHE.get(collection_type)
    if isinstance(cached, CollectionShape):
        return cached

    origin = get_origin(collection_type) or collection_type
    if not _is_collection_type(origin):
        raise ShapeError(
            "Collection shapes must be homogeneous sequence types.",
            {"type": repr(collection_type)},
        )

    args = [arg for arg in get_args(collection_type) if arg is not Ellipsis]
    if len(args) > 1:
        raise ShapeError(
            "Collection shapes must have a single element type.",
            {"type": repr(collection_type)},
        )
    element_type = args[0] if args else Any

    shape = CollectionShape(
        python_type=collection_type,
        kind=origin,
        element_type=element_type,
        capability=_COLLECTION_KINDS.get(origin),
    )
    return _SHAPE_CACHE.setdefault(collection_type, shape)


def shape_of(destination: Any) -> Shape:
    """Resolve a Python type, or an existing shape, to its cached shape."""
    if isinstance(destination, (RecordShape, CollectionShape)):
        return destination
    cached = _SHAPE_CACHE.get(destination)
    if cached is not None:
        return cached
    if isinstance(destination, type) and issubclass(destination, BaseModel):
        return record_shape(destination)
    if _is_collection_type(get_origin(destination) or destination):
        return collection_shape(destination)
    raise ShapeError(
        "Type cannot be used as a binding destination.",
        {"type": repr(destination)},
    )


def enumerate_members(shape: Shape) -> tuple[Member, ...]:
    """Return the externally settable members of a shape in stable order.

    Collections are rebuilt wholesale, so they expose no members.
    """
    if isinstance(shape, RecordShape):
        return shape.members
    return ()


def valid_members(
    destination: Any,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> frozenset[Member]:
    """Build the set of members a binding may populate.

    ``include`` whitelists member names; ``exclude`` removes names from the
    whitelist (or from every member when ``include`` is omitted).
    """
    shape = shape_of(destination)
    members = {member.name: member for member in enumerate_members(shape)}

    requested = set(include) if include is not None else set(members)
    blocked = set(exclude or ())
    unknown = sorted((requested | blocked) - set(members))
    if unknown:
        raise UnknownMemberError(
            "Binding contract names members the shape does not declare.",
            {"shape": shape.name, "members": unknown},
        )
    return frozenset(members[name] for name in requested - blocked)
