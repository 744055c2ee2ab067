"""Header discovery: list a framework's public headers inside an SDK."""

import logging
from pathlib import Path

import pathspec

from .models import ExtractConfig

log = logging.getLogger(__name__)

_HEADER_SUFFIXES = {".h"}


def frameworks_dir(sdk: str) -> Path:
    return Path(sdk) / "System" / "Library" / "Frameworks"


def framework_headers_dir(config: ExtractConfig) -> Path:
    return frameworks_dir(config.sdk) / f"{config.framework}.framework" / "Headers"


def _exclude_spec(patterns: list[str]) -> pathspec.PathSpec | None:
    if not patterns:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def discover_headers(config: ExtractConfig) -> list[str]:
    """
    Return the framework's header paths relative to its Headers directory,
    sorted, with forward slashes.

    Headers matching config.exclude_headers are left out. A missing
    framework yields an empty list.
    """
    root = framework_headers_dir(config)
    if not root.is_dir():
        log.warning("No headers directory for %s at %s", config.framework, root)
        return []

    exclude = _exclude_spec(config.exclude_headers)
    results: list[str] = []

    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in _HEADER_SUFFIXES:
            continue

        rel_str = path.relative_to(root).as_posix()
        if exclude and exclude.match_file(rel_str):
            log.debug("Excluded header %s", rel_str)
            continue

        results.append(rel_str)

    log.info("Discovered %d headers for %s", len(results), config.framework)
    return results
