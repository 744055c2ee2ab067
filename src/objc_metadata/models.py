"""Core data structures for objc-metadata."""

import enum
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path


class NullabilityKind(enum.IntEnum):
    # values match libclang's CXTypeNullabilityKind
    NON_NULL = 0
    NULLABLE = 1
    UNSPECIFIED = 2
    INVALID = 3
    NULLABLE_RESULT = 4


@dataclass(frozen=True)
class TypeMetadata:
    name: str                   # spelling as written, "" for anonymous types
    kind: str                   # libclang kind spelling, e.g. "ObjCObjectPointer"
    nullable: NullabilityKind
    canonical: str              # spelling of the desugared type
    canonical_kind: str
    size: int | None            # bytes; None for incomplete/dependent types
    alignment: int | None
    file: str | None = None     # header defining the named declaration
    element_type: "TypeMetadata | None" = None
    pointee_type: "TypeMetadata | None" = None
    array_size: int | None = None
    block: "BlockSignature | None" = None


@dataclass(frozen=True)
class BlockSignature:
    return_type: TypeMetadata | None
    parameters: tuple[TypeMetadata, ...] = ()


@dataclass
class AvailabilityEntry:
    platform: str               # "macos", "ios", ...
    introduced: str | None = None
    deprecated: str | None = None
    obsoleted: str | None = None
    unavailable: bool = False
    message: str | None = None


@dataclass
class NamedDecl:
    name: str


@dataclass
class ParameterDecl(NamedDecl):
    type: TypeMetadata
    type_string: str


@dataclass(kw_only=True)
class MethodDecl(NamedDecl):
    parameters: list[ParameterDecl] = field(default_factory=list)
    result: TypeMetadata
    type_string: str
    availability: list[AvailabilityEntry] = field(default_factory=list)


@dataclass
class PropertyDecl(NamedDecl):
    type: TypeMetadata
    getter: str
    setter: str
    static: bool = False
    readonly: bool = False
    nonatomic: bool = False
    weak: bool = False
    availability: list[AvailabilityEntry] = field(default_factory=list)


@dataclass
class ClassRef:
    """Reference to a superclass by name and declaring header."""
    name: str
    module: str


@dataclass
class InterfaceDecl(NamedDecl):
    file: str
    type_string: str
    superclass: ClassRef | None = field(default=None, metadata={"json": "super"})
    properties: list[PropertyDecl] = field(default_factory=list)
    instance_methods: list[MethodDecl] = field(default_factory=list)
    class_methods: list[MethodDecl] = field(default_factory=list)
    availability: list[AvailabilityEntry] = field(default_factory=list)


@dataclass
class FrameworkMetadata:
    framework: str
    sdk: str
    platform: str
    interfaces: list[InterfaceDecl] = field(default_factory=list)


@dataclass
class ExtractConfig:
    sdk: str                    # SDK root, e.g. .../MacOSX.sdk
    framework: str              # framework name, e.g. "Foundation"
    platform: str = "macos"     # availability platform to gate on
    include_deprecated: bool = False
    exclude_headers: list[str] = field(default_factory=list)  # gitwildmatch patterns
    clang_args: list[str] = field(default_factory=list)
    db_path: str = field(default_factory=lambda: str(Path.cwd() / ".objc-metadata.duckdb"))
    libclang: str | None = None  # explicit libclang shared library


# ── JSON form ────────────────────────────────────────────────────────────────

def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_json_dict(obj):
    """
    Convert a model (or a list of models) into plain JSON values.

    Dataclass fields become camelCase keys, None-valued fields are omitted,
    enums are emitted by name.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        out = {}
        for f in fields(obj):
            value = getattr(obj, f.name)
            if value is None:
                continue
            key = f.metadata.get("json", _camel(f.name))
            out[key] = to_json_dict(value)
        return out
    if isinstance(obj, enum.Enum):
        return obj.name
    if isinstance(obj, (list, tuple)):
        return [to_json_dict(v) for v in obj]
    return obj
