"""Selective JSON body binding that guards against over-assignment."""

from bodyfilter.body_filter import filter_body
from bodyfilter.errors import (
    BindingError,
    DecodeError,
    ReconstructionError,
    ShapeError,
    UnknownMemberError,
    UnsupportedMediaTypeError,
)
from bodyfilter.media_types import admits
from bodyfilter.shapes import (
    CollectionShape,
    Member,
    MemberKind,
    RecordShape,
    enumerate_members,
    register_collection_kind,
    shape_of,
    valid_members,
)

__all__ = [
    "BindingError",
    "CollectionShape",
    "DecodeError",
    "Member",
    "MemberKind",
    "ReconstructionError",
    "RecordShape",
    "ShapeError",
    "UnknownMemberError",
    "UnsupportedMediaTypeError",
    "admits",
    "enumerate_members",
    "filter_body",
    "register_collection_kind",
    "shape_of",
    "valid_members",
]
