"""
The query surface the extractor needs from a parsed AST.

Cursor and type handles are opaque: the extractor only calls what is listed
here. `clang_ast` implements it over libclang; the tests implement it with
plain in-memory objects.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol


class CursorKind(enum.IntEnum):
    # subset of libclang's CXCursorKind
    OBJC_INTERFACE_DECL = 11
    OBJC_CATEGORY_DECL = 12
    OBJC_PROTOCOL_DECL = 13
    OBJC_PROPERTY_DECL = 14
    OBJC_IVAR_DECL = 15
    OBJC_INSTANCE_METHOD_DECL = 16
    OBJC_CLASS_METHOD_DECL = 17
    OBJC_SUPER_CLASS_REF = 40
    OBJC_PROTOCOL_REF = 41
    OBJC_CLASS_REF = 42


# CXObjCPropertyAttrKind bits
PROPERTY_ATTR_READONLY = 0x01
PROPERTY_ATTR_GETTER = 0x02
PROPERTY_ATTR_ASSIGN = 0x04
PROPERTY_ATTR_READWRITE = 0x08
PROPERTY_ATTR_RETAIN = 0x10
PROPERTY_ATTR_COPY = 0x20
PROPERTY_ATTR_NONATOMIC = 0x40
PROPERTY_ATTR_SETTER = 0x80
PROPERTY_ATTR_ATOMIC = 0x100
PROPERTY_ATTR_WEAK = 0x200
PROPERTY_ATTR_STRONG = 0x400
PROPERTY_ATTR_UNSAFE_UNRETAINED = 0x800
PROPERTY_ATTR_CLASS = 0x1000

Version = tuple[int, int, int]  # (major, minor, subminor), -1 for missing parts


@dataclass
class PlatformEntry:
    platform: str
    introduced: Version = (-1, -1, -1)
    deprecated: Version = (-1, -1, -1)
    obsoleted: Version = (-1, -1, -1)
    unavailable: bool = False
    message: str = ""


@dataclass
class PlatformAvailability:
    """Raw availability annotations of one declaration."""
    always_deprecated: bool = False
    deprecated_message: str = ""
    always_unavailable: bool = False
    unavailable_message: str = ""
    platforms: list[PlatformEntry] = field(default_factory=list)


class TypeHandle(Protocol):
    spelling: str
    kind_spelling: str
    nullability: int

    def get_canonical(self) -> "TypeHandle": ...

    def get_size(self) -> int: ...

    def get_align(self) -> int: ...

    def get_array_element_type(self) -> Optional["TypeHandle"]: ...

    def get_array_size(self) -> int: ...

    def get_pointee(self) -> Optional["TypeHandle"]: ...

    def get_result(self) -> Optional["TypeHandle"]: ...

    def get_num_argument_types(self) -> int: ...

    def get_argument_type(self, index: int) -> "TypeHandle": ...

    def get_definition_file(self) -> str | None: ...


class CursorHandle(Protocol):
    kind: int
    spelling: str
    file: str | None
    referenced: Optional["CursorHandle"]
    type: TypeHandle
    result_type: TypeHandle
    objc_property_attributes: int
    objc_property_getter: str
    objc_property_setter: str

    def get_children(self) -> Iterable["CursorHandle"]: ...

    def get_num_arguments(self) -> int: ...

    def get_argument(self, index: int) -> "CursorHandle": ...

    def pretty_printed(self) -> str: ...

    def platform_availability(self) -> PlatformAvailability: ...
