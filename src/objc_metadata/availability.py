"""Availability annotations and the gate that drops unusable declarations."""

import logging

from .models import AvailabilityEntry, ExtractConfig
from .oracle import CursorHandle, PlatformEntry, Version

log = logging.getLogger(__name__)

# API_TO_BE_DEPRECATED expands to this version; it marks APIs that are still current
TO_BE_DEPRECATED_MAJOR = 100000


def format_version(version: Version) -> str | None:
    """(10, 15, -1) → "10.15"; a missing major version means no version at all."""
    major, minor, subminor = version
    if major < 0:
        return None
    parts = [major]
    if minor >= 0:
        parts.append(minor)
        if subminor >= 0:
            parts.append(subminor)
    return ".".join(str(p) for p in parts)


def _entry(platform: PlatformEntry) -> AvailabilityEntry:
    return AvailabilityEntry(
        platform=platform.platform,
        introduced=format_version(platform.introduced),
        deprecated=format_version(platform.deprecated),
        obsoleted=format_version(platform.obsoleted),
        unavailable=platform.unavailable,
        message=platform.message or None,
    )


def is_deprecated(version: Version) -> bool:
    major = version[0]
    return 0 <= major < TO_BE_DEPRECATED_MAJOR


def _rejection(platforms: list[PlatformEntry],
               always_unavailable: bool, always_deprecated: bool,
               config: ExtractConfig) -> str | None:
    """Return why the declaration is unusable on the target platform, or None."""
    if always_unavailable:
        return "unavailable"

    target = config.platform.lower()
    for platform in platforms:
        if platform.platform.lower() != target:
            continue
        if platform.unavailable:
            return f"unavailable on {platform.platform}"
        if platform.obsoleted[0] >= 0:
            return f"obsoleted in {platform.platform} {format_version(platform.obsoleted)}"
        if is_deprecated(platform.deprecated) and not config.include_deprecated:
            return f"deprecated in {platform.platform} {format_version(platform.deprecated)}"

    if always_deprecated and not config.include_deprecated:
        return "deprecated"
    return None


def get_availability(cursor: CursorHandle, config: ExtractConfig) -> list[AvailabilityEntry] | None:
    """
    Availability entries for a declaration, or None when it must be skipped.

    A declaration is skipped when it is unavailable or obsoleted on
    config.platform, and also when it is deprecated there unless
    config.include_deprecated is set. A "to be deprecated" version does not
    count as deprecated.
    """
    raw = cursor.platform_availability()

    reason = _rejection(raw.platforms, raw.always_unavailable, raw.always_deprecated, config)
    if reason is not None:
        log.debug("Skipping %s: %s", cursor.spelling or "<anonymous>", reason)
        return None
    return [_entry(p) for p in raw.platforms]
