import json

from fakes import block_of, bool_type, int32, interface, method, param, prop, superclass_ref, void

from objc_metadata.extract import extract_interface
from objc_metadata.models import ExtractConfig, FrameworkMetadata, to_json_dict
from objc_metadata.oracle import PROPERTY_ATTR_READONLY
from objc_metadata.resolve import resolve

CONFIG = ExtractConfig(sdk="/SDK", framework="Foo", db_path=":memory:")


def test_type_json_omits_absent_fields_and_uses_camel_case():
    data = to_json_dict(resolve(int32()))

    assert data == {
        "name": "int",
        "kind": "Int",
        "nullable": "UNSPECIFIED",
        "canonical": "int",
        "canonicalKind": "Int",
        "size": 4,
        "alignment": 4,
    }


def test_block_json_shape():
    data = to_json_dict(resolve(block_of(void(), bool_type())))

    assert "returnType" not in data["block"]
    assert data["block"]["parameters"][0]["canonicalKind"] == "Bool"
    assert data["pointeeType"]["kind"] == "FunctionProto"


def test_interface_json_shape():
    cursor = interface(
        "Foo",
        superclass_ref("NSObject"),
        prop("count", int32(), attrs=PROPERTY_ATTR_READONLY),
        method("setCount:", void(), param("count", int32())),
        method("new", void(), class_method=True),
    )
    data = to_json_dict(extract_interface(cursor, CONFIG))

    assert data["super"] == {"name": "NSObject", "module": "/SDK/objc/NSObject.h"}
    assert "superclass" not in data
    assert data["typeString"] == "@interface Foo"
    assert data["properties"][0]["readonly"] is True
    assert data["properties"][0]["static"] is False
    assert data["instanceMethods"][0]["parameters"][0]["typeString"] == "int count"
    assert data["classMethods"][0]["name"] == "new"
    assert data["availability"] == []


def test_root_interface_json_has_no_super_key():
    data = to_json_dict(extract_interface(interface("Root"), CONFIG))
    assert "super" not in data


def test_framework_json_is_serializable():
    meta = FrameworkMetadata(
        framework="Foo",
        sdk="/SDK",
        platform="macos",
        interfaces=[extract_interface(interface("Foo", superclass_ref("NSObject")), CONFIG)],
    )

    text = json.dumps(to_json_dict(meta))

    assert json.loads(text)["interfaces"][0]["name"] == "Foo"


def test_method_json_key_order():
    cursor = interface("Foo", method("setCount:", void(), param("count", int32())))
    data = to_json_dict(extract_interface(cursor, CONFIG))

    assert list(data["instanceMethods"][0]) == [
        "name", "parameters", "result", "typeString", "availability",
    ]
