import pytest

from fakes import FakeCursor, available, entry, interface, superclass_ref

from objc_metadata import indexer
from objc_metadata.models import ExtractConfig
from objc_metadata.oracle import CursorKind
from objc_metadata.parse import FrameworkParseError


def _sdk(tmp_path):
    headers = tmp_path / "System" / "Library" / "Frameworks" / "Foo.framework" / "Headers"
    headers.mkdir(parents=True)
    (headers / "Foo.h").write_text("@interface Foo\n@end\n")
    (headers / "Bar.h").write_text("@interface Bar\n@end\n")
    return headers


def _root(headers):
    foo_h = str(headers / "Foo.h")
    bar_h = str(headers / "Bar.h")
    return FakeCursor(kind=300, spelling="main.m", children=[
        interface("NSObject", file="/SDK/usr/include/objc/NSObject.h"),
        FakeCursor(kind=CursorKind.OBJC_CLASS_REF, spelling="Forward", file=foo_h),
        interface("Foo", superclass_ref("NSObject"), file=foo_h),
        interface("Bar", superclass_ref("Foo", foo_h), file=bar_h),
        interface("Foo", file=bar_h),
        interface("Gone", file=bar_h, availability=available(entry("macos", unavailable=True))),
    ])


def _config(tmp_path, **kwargs):
    return ExtractConfig(sdk=str(tmp_path), framework="Foo",
                         db_path=str(tmp_path / "meta.duckdb"), **kwargs)


def test_extract_framework_filters_and_dedupes(tmp_path):
    headers = _sdk(tmp_path)

    decls = indexer.extract_framework(_root(headers), _config(tmp_path), headers)

    assert [d.name for d in decls] == ["Foo", "Bar"]
    assert decls[0].superclass.name == "NSObject"


def test_extraction_error_skips_only_that_interface(tmp_path, monkeypatch):
    headers = _sdk(tmp_path)
    real = indexer.extract_interface

    def flaky(cursor, config):
        if cursor.spelling == "Foo":
            raise RuntimeError("boom")
        return real(cursor, config)

    monkeypatch.setattr(indexer, "extract_interface", flaky)

    decls = indexer.extract_framework(_root(headers), _config(tmp_path), headers)

    assert [d.name for d in decls] == ["Bar", "Foo"]


def test_generate_framework_metadata(tmp_path, monkeypatch):
    headers = _sdk(tmp_path)
    seen = {}

    def fake_load(config, header_list):
        seen["headers"] = header_list
        return _root(headers)

    monkeypatch.setattr(indexer, "load_framework", fake_load)

    meta = indexer.generate_framework_metadata(_config(tmp_path, platform="macos"))

    assert seen["headers"] == ["Bar.h", "Foo.h"]
    assert meta.framework == "Foo"
    assert meta.platform == "macos"
    assert [d.name for d in meta.interfaces] == ["Foo", "Bar"]


def test_generate_propagates_parse_errors(tmp_path, monkeypatch):
    def failing(config, header_list):
        raise FrameworkParseError("nope")

    monkeypatch.setattr(indexer, "load_framework", failing)

    with pytest.raises(FrameworkParseError):
        indexer.generate_framework_metadata(_config(tmp_path))


def test_run_index_skips_unchanged_headers(tmp_path, monkeypatch):
    headers = _sdk(tmp_path)
    calls = []

    def fake_load(config, header_list):
        calls.append(config.framework)
        return _root(headers)

    monkeypatch.setattr(indexer, "load_framework", fake_load)
    config = _config(tmp_path)

    first = indexer.run_index(config)
    second = indexer.run_index(config)

    assert first["skipped"] is False
    assert first["interfaces"] == 2
    assert first["headers"] == 2
    assert second["skipped"] is True
    assert len(calls) == 1

    (headers / "Bar.h").write_text("@interface Bar\n- (void)run;\n@end\n")
    third = indexer.run_index(config)
    forced = indexer.run_index(config, force=True)

    assert third["skipped"] is False
    assert forced["skipped"] is False
    assert len(calls) == 3


def test_run_index_reruns_when_settings_change(tmp_path, monkeypatch):
    headers = _sdk(tmp_path)
    calls = []

    def fake_load(config, header_list):
        calls.append(config.include_deprecated)
        return _root(headers)

    monkeypatch.setattr(indexer, "load_framework", fake_load)

    indexer.run_index(_config(tmp_path))
    indexer.run_index(_config(tmp_path, include_deprecated=True))

    assert calls == [False, True]
