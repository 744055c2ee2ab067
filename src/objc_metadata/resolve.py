"""
Type resolution.

Turns an oracle type handle into a TypeMetadata tree: canonical form,
layout, nullability, and the pointer / array / block composition beneath it.
"""

import logging

from .models import BlockSignature, NullabilityKind, TypeMetadata
from .oracle import TypeHandle

log = logging.getLogger(__name__)

BLOCK_POINTER_KIND = "BlockPointer"
VOID_KIND = "Void"


def _layout(value: int) -> int | None:
    # libclang reports CXTypeLayoutError_* as negative numbers
    return value if value >= 0 else None


def _nullability(value: int) -> NullabilityKind:
    try:
        return NullabilityKind(value)
    except ValueError:
        return NullabilityKind.INVALID


def _block_signature(pointee: TypeHandle) -> BlockSignature:
    result = pointee.get_result()
    return_type = None
    if result is not None:
        resolved = resolve(result)
        if resolved.canonical_kind != VOID_KIND:
            return_type = resolved

    count = max(pointee.get_num_argument_types(), 0)
    parameters = tuple(resolve(pointee.get_argument_type(i)) for i in range(count))
    return BlockSignature(return_type=return_type, parameters=parameters)


def resolve(type_: TypeHandle) -> TypeMetadata:
    """
    Build the metadata for one type.

    Never raises for a handle the oracle produced: missing components come
    back as None fields.
    """
    canonical = type_.get_canonical()
    canonical_kind = canonical.kind_spelling
    element = type_.get_array_element_type()
    pointee = type_.get_pointee()
    array_size = type_.get_array_size()

    block = None
    if canonical_kind == BLOCK_POINTER_KIND and pointee is not None:
        block = _block_signature(pointee)

    return TypeMetadata(
        name=type_.spelling,
        kind=type_.kind_spelling,
        nullable=_nullability(type_.nullability),
        canonical=canonical.spelling,
        canonical_kind=canonical_kind,
        size=_layout(type_.get_size()),
        alignment=_layout(type_.get_align()),
        file=type_.get_definition_file(),
        element_type=resolve(element) if element is not None else None,
        pointee_type=resolve(pointee) if pointee is not None else None,
        array_size=array_size if array_size >= 0 else None,
        block=block,
    )
