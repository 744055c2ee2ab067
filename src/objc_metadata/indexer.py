"""
Framework pipeline: wires discover → parse → extract → store.
"""

import logging
from pathlib import Path

from .discover import discover_headers, framework_headers_dir
from .extract import extract_interface
from .models import ExtractConfig, FrameworkMetadata, InterfaceDecl
from .oracle import CursorHandle, CursorKind
from .parse import header_hashes, is_framework_file, load_framework
from .store import MetadataStore

log = logging.getLogger(__name__)

_META_KEY_SETTINGS = "settings"


def _settings(config: ExtractConfig) -> str:
    return f"platform={config.platform};deprecated={config.include_deprecated}"


def extract_framework(
    root: CursorHandle,
    config: ExtractConfig,
    headers_dir: Path,
) -> list[InterfaceDecl]:
    """
    Extract every @interface declared at the top level of the framework's own headers.

    Interfaces keep translation-unit order; a repeated name keeps the first
    declaration. An error in one interface is logged and that interface
    skipped.
    """
    interfaces: list[InterfaceDecl] = []
    seen: set[str] = set()
    skipped = errors = 0

    for cursor in root.get_children():
        if cursor.kind != CursorKind.OBJC_INTERFACE_DECL:
            continue
        if not is_framework_file(cursor.file, headers_dir):
            continue
        if cursor.spelling in seen:
            log.debug("Duplicate interface %s ignored", cursor.spelling)
            continue

        try:
            decl = extract_interface(cursor, config)
        except Exception as e:
            log.warning("Extraction error in %s (%s): %s",
                        cursor.spelling, cursor.file, e, exc_info=True)
            errors += 1
            continue

        if decl is None:
            skipped += 1
            continue
        seen.add(decl.name)
        interfaces.append(decl)

    log.info(
        "Extracted %d interfaces from %s (%d unavailable, %d errors)",
        len(interfaces), config.framework, skipped, errors,
    )
    return interfaces


def generate_framework_metadata(config: ExtractConfig) -> FrameworkMetadata:
    """
    Parse a framework and return its metadata.

    Raises FrameworkParseError when the framework cannot be parsed.
    """
    headers = discover_headers(config)
    root = load_framework(config, headers)
    interfaces = extract_framework(root, config, framework_headers_dir(config))
    return FrameworkMetadata(
        framework=config.framework,
        sdk=config.sdk,
        platform=config.platform,
        interfaces=interfaces,
    )


def run_index(config: ExtractConfig, force: bool = False) -> dict:
    """
    Extract a framework into the metadata store.

    Skipped when the framework's headers are byte-identical to the last run
    with the same settings, unless force is set. Returns a stats dict.
    """
    store = MetadataStore(config.db_path)
    try:
        return _run_index_inner(config, store, force)
    finally:
        store.close()


def _run_index_inner(config: ExtractConfig, store: MetadataStore, force: bool) -> dict:
    headers = discover_headers(config)
    hashes = header_hashes(config, headers)
    settings_key = f"{_META_KEY_SETTINGS}:{config.framework}"

    up_to_date = (
        hashes
        and hashes == store.header_hashes(config.framework)
        and store.get_meta(settings_key) == _settings(config)
    )
    if up_to_date and not force:
        log.info("Nothing to index, %s already up to date", config.framework)
        stats = store.stats()
        stats["skipped"] = True
        return stats

    root = load_framework(config, headers)
    interfaces = extract_framework(root, config, framework_headers_dir(config))

    store.replace_interfaces(config.framework, interfaces)
    store.replace_headers(config.framework, hashes)
    store.set_meta(settings_key, _settings(config))
    log.info("Stored %d interfaces for %s", len(interfaces), config.framework)

    stats = store.stats()
    stats["skipped"] = False
    return stats
