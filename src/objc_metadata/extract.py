"""
Declaration extraction from libclang cursors.

Walks one @interface cursor and collects its superclass, properties and
methods. Declarations that fail the availability gate are left out entirely;
nothing here raises for a well-formed AST.
"""

import logging

from .availability import get_availability
from .models import (
    ClassRef,
    ExtractConfig,
    InterfaceDecl,
    MethodDecl,
    ParameterDecl,
    PropertyDecl,
)
from .oracle import (
    PROPERTY_ATTR_CLASS,
    PROPERTY_ATTR_NONATOMIC,
    PROPERTY_ATTR_READONLY,
    PROPERTY_ATTR_WEAK,
    CursorHandle,
    CursorKind,
)
from .resolve import resolve

log = logging.getLogger(__name__)

_INTERFACE_TOKEN = "@interface"


def _header(pretty: str) -> str:
    """Keep the line carrying @interface, dropping attributes before it and the body after."""
    start = pretty.find(_INTERFACE_TOKEN)
    if start < 0:
        start = 0
    line = pretty[start:].split("\n", 1)[0]
    # an ivar block can open on the same line
    return line.split("{", 1)[0].strip()


def _class_ref(cursor: CursorHandle) -> ClassRef:
    referenced = cursor.referenced
    module = referenced.file if referenced is not None and referenced.file else cursor.file
    return ClassRef(name=cursor.spelling, module=module or "")


# ── Members ──────────────────────────────────────────────────────────────────

def extract_property(cursor: CursorHandle, config: ExtractConfig) -> PropertyDecl | None:
    availability = get_availability(cursor, config)
    if availability is None:
        return None

    attrs = cursor.objc_property_attributes
    return PropertyDecl(
        name=cursor.spelling,
        type=resolve(cursor.type),
        getter=cursor.objc_property_getter,
        setter=cursor.objc_property_setter,
        static=(attrs & PROPERTY_ATTR_CLASS) != 0,
        readonly=(attrs & PROPERTY_ATTR_READONLY) != 0,
        nonatomic=(attrs & PROPERTY_ATTR_NONATOMIC) != 0,
        weak=(attrs & PROPERTY_ATTR_WEAK) != 0,
        availability=availability,
    )


def extract_method(cursor: CursorHandle, config: ExtractConfig) -> MethodDecl | None:
    availability = get_availability(cursor, config)
    if availability is None:
        return None

    parameters: list[ParameterDecl] = []
    for i in range(max(cursor.get_num_arguments(), 0)):
        arg = cursor.get_argument(i)
        parameters.append(ParameterDecl(
            name=arg.spelling,
            type=resolve(arg.type),
            type_string=arg.pretty_printed(),
        ))

    return MethodDecl(
        name=cursor.spelling,
        result=resolve(cursor.result_type),
        type_string=cursor.pretty_printed(),
        parameters=parameters,
        availability=availability,
    )


# ── Interfaces ───────────────────────────────────────────────────────────────

def extract_interface(cursor: CursorHandle, config: ExtractConfig) -> InterfaceDecl | None:
    """
    Extract an @interface declaration, or None when it is unavailable.

    Children are visited once, in source order; members keep that order.
    """
    availability = get_availability(cursor, config)
    if availability is None:
        return None

    decl = InterfaceDecl(
        name=cursor.spelling,
        file=cursor.file or "",
        type_string=_header(cursor.pretty_printed()),
        availability=availability,
    )

    for child in cursor.get_children():
        kind = child.kind
        if kind == CursorKind.OBJC_SUPER_CLASS_REF:
            if decl.superclass is not None:
                log.warning(
                    "%s: superclass %s replaced by %s",
                    decl.name, decl.superclass.name, child.spelling,
                )
            decl.superclass = _class_ref(child)

        elif kind == CursorKind.OBJC_PROPERTY_DECL:
            prop = extract_property(child, config)
            if prop is not None:
                decl.properties.append(prop)

        elif kind == CursorKind.OBJC_INSTANCE_METHOD_DECL:
            method = extract_method(child, config)
            if method is not None:
                decl.instance_methods.append(method)

        elif kind == CursorKind.OBJC_CLASS_METHOD_DECL:
            method = extract_method(child, config)
            if method is not None:
                decl.class_methods.append(method)

    log.debug(
        "Extracted %s: %d properties, %d instance methods, %d class methods",
        decl.name, len(decl.properties), len(decl.instance_methods), len(decl.class_methods),
    )
    return decl
