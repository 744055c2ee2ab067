"""
libclang-backed cursor and type handles.

clang.cindex covers most queries. Nullability, pretty printing, ObjC
property attributes/accessors and platform availability are not wrapped by
it, so those are bound here with ctypes against the same shared library.
"""

import ctypes
import logging
from ctypes import POINTER, Structure, byref, c_char_p, c_int, c_uint, c_void_p

from clang.cindex import Cursor, Type, conf

from .oracle import PlatformAvailability, PlatformEntry

log = logging.getLogger(__name__)

_MAX_PLATFORMS = 16

# CXTypeKind values clang.cindex may not know
_TYPE_INVALID = 0
_TYPE_ATTRIBUTED = 163


class _String(Structure):
    # CXString; disposed explicitly by _take()
    _fields_ = [("data", c_void_p), ("private_flags", c_uint)]


class _Version(Structure):
    _fields_ = [("major", c_int), ("minor", c_int), ("subminor", c_int)]

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.subminor)


class _PlatformAvailability(Structure):
    _fields_ = [
        ("platform", _String),
        ("introduced", _Version),
        ("deprecated", _Version),
        ("obsoleted", _Version),
        ("unavailable", c_int),
        ("message", _String),
    ]


_FUNCTIONS = [
    ("clang_getCString", [_String], c_char_p),
    ("clang_disposeString", [_String], None),
    ("clang_Type_getNullability", [Type], c_int),
    ("clang_getNumArgTypes", [Type], c_int),
    ("clang_getTypeKindSpelling", [c_int], _String),
    ("clang_Type_getModifiedType", [Type], Type),
    ("clang_getCursorPrintingPolicy", [Cursor], c_void_p),
    ("clang_PrintingPolicy_dispose", [c_void_p], None),
    ("clang_getCursorPrettyPrinted", [Cursor, c_void_p], _String),
    ("clang_Cursor_getObjCPropertyAttributes", [Cursor, c_uint], c_uint),
    ("clang_Cursor_getObjCPropertyGetterName", [Cursor], _String),
    ("clang_Cursor_getObjCPropertySetterName", [Cursor], _String),
    ("clang_getCursorPlatformAvailability", [
        Cursor,
        POINTER(c_int), POINTER(_String),
        POINTER(c_int), POINTER(_String),
        POINTER(_PlatformAvailability), c_int,
    ], c_int),
    ("clang_disposeCXPlatformAvailability", [POINTER(_PlatformAvailability)], None),
]

_LIB: ctypes.CDLL | None = None


def _lib() -> ctypes.CDLL:
    """A second handle on the libclang clang.cindex loaded, with our own prototypes."""
    global _LIB
    if _LIB is None:
        lib = ctypes.CDLL(conf.lib._name)
        for name, argtypes, restype in _FUNCTIONS:
            fn = getattr(lib, name)
            fn.argtypes = argtypes
            fn.restype = restype
        _LIB = lib
    return _LIB


def _take(value: _String) -> str:
    raw = _lib().clang_getCString(value)
    text = raw.decode("utf-8", errors="replace") if raw else ""
    _lib().clang_disposeString(value)
    return text


def _text(value: _String) -> str:
    # for strings owned by a structure that is disposed as a whole
    raw = _lib().clang_getCString(value)
    return raw.decode("utf-8", errors="replace") if raw else ""


def _modified(type_: Type) -> Type:
    """Strip attribute sugar such as _Nonnull; the result answers structural queries."""
    while type_._kind_id == _TYPE_ATTRIBUTED:
        inner = _lib().clang_Type_getModifiedType(type_)
        # cindex resolves cursors and types through the owning translation unit
        inner._tu = type_._tu
        type_ = inner
    return type_


class ClangType:
    """A clang.cindex.Type seen through the TypeHandle surface."""

    __slots__ = ("_type",)

    def __init__(self, type_: Type) -> None:
        self._type = type_

    @staticmethod
    def wrap(type_: Type | None) -> "ClangType | None":
        if type_ is None or type_._kind_id == _TYPE_INVALID:
            return None
        return ClangType(type_)

    @property
    def spelling(self) -> str:
        return self._type.spelling

    @property
    def kind_spelling(self) -> str:
        return _take(_lib().clang_getTypeKindSpelling(self._type._kind_id))

    @property
    def nullability(self) -> int:
        return _lib().clang_Type_getNullability(self._type)

    def get_canonical(self) -> "ClangType":
        return ClangType(self._type.get_canonical())

    def get_size(self) -> int:
        return self._type.get_size()

    def get_align(self) -> int:
        return self._type.get_align()

    def get_array_element_type(self) -> "ClangType | None":
        return ClangType.wrap(_modified(self._type).get_array_element_type())

    def get_array_size(self) -> int:
        return _modified(self._type).get_array_size()

    def get_pointee(self) -> "ClangType | None":
        return ClangType.wrap(_modified(self._type).get_pointee())

    def get_result(self) -> "ClangType | None":
        return ClangType.wrap(_modified(self._type).get_result())

    def get_num_argument_types(self) -> int:
        return _lib().clang_getNumArgTypes(_modified(self._type))

    def get_argument_type(self, index: int) -> "ClangType":
        return ClangType(conf.lib.clang_getArgType(_modified(self._type), index))

    def get_definition_file(self) -> str | None:
        declaration = _modified(self._type).get_declaration()
        if declaration is None:
            return None
        definition = declaration.get_definition()
        if definition is None or definition.location.file is None:
            return None
        return definition.location.file.name


class ClangCursor:
    """A clang.cindex.Cursor seen through the CursorHandle surface."""

    __slots__ = ("_cursor",)

    def __init__(self, cursor: Cursor) -> None:
        self._cursor = cursor

    @property
    def kind(self) -> int:
        return self._cursor._kind_id

    @property
    def spelling(self) -> str:
        return self._cursor.spelling

    @property
    def file(self) -> str | None:
        location_file = self._cursor.location.file
        return location_file.name if location_file is not None else None

    @property
    def referenced(self) -> "ClangCursor | None":
        referenced = self._cursor.referenced
        return ClangCursor(referenced) if referenced is not None else None

    @property
    def type(self) -> ClangType:
        return ClangType(self._cursor.type)

    @property
    def result_type(self) -> ClangType:
        return ClangType(self._cursor.result_type)

    @property
    def objc_property_attributes(self) -> int:
        return _lib().clang_Cursor_getObjCPropertyAttributes(self._cursor, 0)

    @property
    def objc_property_getter(self) -> str:
        return _take(_lib().clang_Cursor_getObjCPropertyGetterName(self._cursor))

    @property
    def objc_property_setter(self) -> str:
        return _take(_lib().clang_Cursor_getObjCPropertySetterName(self._cursor))

    def get_children(self):
        for child in self._cursor.get_children():
            yield ClangCursor(child)

    def get_num_arguments(self) -> int:
        return conf.lib.clang_Cursor_getNumArguments(self._cursor)

    def get_argument(self, index: int) -> "ClangCursor":
        return ClangCursor(conf.lib.clang_Cursor_getArgument(self._cursor, index))

    def pretty_printed(self) -> str:
        lib = _lib()
        policy = lib.clang_getCursorPrintingPolicy(self._cursor)
        try:
            return _take(lib.clang_getCursorPrettyPrinted(self._cursor, policy))
        finally:
            lib.clang_PrintingPolicy_dispose(policy)

    def platform_availability(self) -> PlatformAvailability:
        lib = _lib()
        always_deprecated = c_int(0)
        always_unavailable = c_int(0)
        deprecated_message = _String()
        unavailable_message = _String()
        platforms = (_PlatformAvailability * _MAX_PLATFORMS)()

        count = lib.clang_getCursorPlatformAvailability(
            self._cursor,
            byref(always_deprecated), byref(deprecated_message),
            byref(always_unavailable), byref(unavailable_message),
            platforms, _MAX_PLATFORMS,
        )
        if count > _MAX_PLATFORMS:
            log.warning("%s: %d availability entries, keeping %d",
                        self.spelling, count, _MAX_PLATFORMS)

        entries: list[PlatformEntry] = []
        for i in range(min(count, _MAX_PLATFORMS)):
            item = platforms[i]
            entries.append(PlatformEntry(
                platform=_text(item.platform),
                introduced=item.introduced.as_tuple(),
                deprecated=item.deprecated.as_tuple(),
                obsoleted=item.obsoleted.as_tuple(),
                unavailable=bool(item.unavailable),
                message=_text(item.message),
            ))
            lib.clang_disposeCXPlatformAvailability(byref(item))

        return PlatformAvailability(
            always_deprecated=bool(always_deprecated.value),
            deprecated_message=_take(deprecated_message),
            always_unavailable=bool(always_unavailable.value),
            unavailable_message=_take(unavailable_message),
            platforms=entries,
        )
