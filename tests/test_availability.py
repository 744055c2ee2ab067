from fakes import FakeCursor, available, entry

from objc_metadata.availability import format_version, get_availability
from objc_metadata.models import AvailabilityEntry, ExtractConfig


def _config(**kwargs):
    return ExtractConfig(sdk="/SDK", framework="Foo", db_path=":memory:", **kwargs)


def _cursor(availability):
    return FakeCursor(kind=14, spelling="thing", availability=availability)


def test_format_version():
    assert format_version((10, 15, -1)) == "10.15"
    assert format_version((13, 0, 1)) == "13.0.1"
    assert format_version((11, -1, -1)) == "11"
    assert format_version((-1, -1, -1)) is None


def test_no_annotations_is_available():
    assert get_availability(_cursor(available()), _config()) == []


def test_entries_are_kept_in_order():
    avail = available(entry("macos", introduced=(10, 10, -1)), entry("ios", introduced=(8, 0, -1)))

    result = get_availability(_cursor(avail), _config())

    assert result == [
        AvailabilityEntry(platform="macos", introduced="10.10"),
        AvailabilityEntry(platform="ios", introduced="8.0"),
    ]


def test_always_unavailable_is_filtered():
    avail = available(always_unavailable=True)
    assert get_availability(_cursor(avail), _config()) is None


def test_unavailable_on_target_platform_is_filtered():
    avail = available(entry("macos", unavailable=True, message="use Bar"))
    assert get_availability(_cursor(avail), _config()) is None


def test_unavailable_on_other_platform_is_kept():
    avail = available(entry("ios", unavailable=True, message="macOS only"))

    result = get_availability(_cursor(avail), _config())

    assert result == [AvailabilityEntry(platform="ios", unavailable=True, message="macOS only")]


def test_obsoleted_on_target_platform_is_filtered():
    avail = available(entry("macos", introduced=(10, 0, -1), obsoleted=(10, 8, -1)))
    assert get_availability(_cursor(avail), _config()) is None


def test_deprecated_is_filtered_by_default():
    avail = available(entry("macos", introduced=(10, 0, -1), deprecated=(10, 10, -1)))
    assert get_availability(_cursor(avail), _config()) is None


def test_deprecated_kept_when_requested():
    avail = available(entry("macos", introduced=(10, 0, -1), deprecated=(10, 10, -1)))

    result = get_availability(_cursor(avail), _config(include_deprecated=True))

    assert result[0].deprecated == "10.10"


def test_always_deprecated_follows_include_flag():
    avail = available(always_deprecated=True)
    assert get_availability(_cursor(avail), _config()) is None
    assert get_availability(_cursor(avail), _config(include_deprecated=True)) == []


def test_platform_match_is_case_insensitive():
    avail = available(entry("iOS", unavailable=True))
    assert get_availability(_cursor(avail), _config(platform="ios")) is None


def test_to_be_deprecated_is_not_deprecated():
    avail = available(entry("macos", introduced=(10, 15, -1), deprecated=(100000, -1, -1)))

    result = get_availability(_cursor(avail), _config())

    assert result == [AvailabilityEntry(platform="macos", introduced="10.15", deprecated="100000")]
