"""libclang parsing of a framework's headers, plus content hashing."""

import hashlib
import logging
from pathlib import Path

from clang.cindex import (
    Config,
    Diagnostic,
    Index,
    TranslationUnit,
    TranslationUnitLoadError,
)

from .clang_ast import ClangCursor
from .discover import framework_headers_dir, frameworks_dir
from .models import ExtractConfig

log = logging.getLogger(__name__)

# CXTranslationUnit_Flags not exposed by clang.cindex
PARSE_INCLUDE_ATTRIBUTED_TYPES = 0x1000
PARSE_VISIT_IMPLICIT_ATTRIBUTES = 0x2000

_PARSE_OPTIONS = (
    TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD
    | TranslationUnit.PARSE_SKIP_FUNCTION_BODIES
    | PARSE_INCLUDE_ATTRIBUTED_TYPES
    | PARSE_VISIT_IMPLICIT_ATTRIBUTES
)

_MAIN_FILE = "main.m"
_MAX_LOGGED_DIAGNOSTICS = 20


class FrameworkParseError(Exception):
    pass


def content_hash(source: bytes) -> str:
    return hashlib.sha256(source).hexdigest()


def header_hashes(config: ExtractConfig, headers: list[str]) -> dict[str, str]:
    """Map each header (relative path) to the SHA256 of its bytes; unreadable headers are skipped."""
    root = framework_headers_dir(config)
    hashes: dict[str, str] = {}
    for rel_path in headers:
        try:
            hashes[rel_path] = content_hash((root / rel_path).read_bytes())
        except OSError as e:
            log.warning("Cannot read %s: %s", root / rel_path, e)
    return hashes


def configure_libclang(library_file: str | None) -> None:
    if library_file and not Config.loaded:
        Config.set_library_file(library_file)


def clang_args(config: ExtractConfig) -> list[str]:
    return [
        "-x", "objective-c",
        "-fblocks",
        "-isysroot", config.sdk,
        "-F", str(frameworks_dir(config.sdk)),
        *config.clang_args,
    ]


def umbrella_source(config: ExtractConfig, headers: list[str]) -> str:
    """The #import lines that pull the framework in: its umbrella header if it has one."""
    umbrella = f"{config.framework}.h"
    if umbrella in headers:
        return f"#import <{config.framework}/{umbrella}>\n"
    return "".join(f"#import <{config.framework}/{h}>\n" for h in headers)


def parse_source(filename: str, source: str, args: list[str]) -> TranslationUnit:
    """Parse an in-memory source file with the options extraction relies on."""
    return Index.create().parse(
        filename,
        args=args,
        unsaved_files=[(filename, source)],
        options=_PARSE_OPTIONS,
    )


def parse_framework(config: ExtractConfig, headers: list[str]) -> TranslationUnit:
    """
    Parse the framework into one translation unit.

    Raises FrameworkParseError when libclang cannot produce one. Error
    diagnostics are logged but do not fail the parse.
    """
    if not headers:
        raise FrameworkParseError(
            f"no headers found for {config.framework} in {framework_headers_dir(config)}"
        )

    configure_libclang(config.libclang)
    args = clang_args(config)
    log.info("Parsing %s (%d headers) with %s", config.framework, len(headers), " ".join(args))

    try:
        tu = parse_source(_MAIN_FILE, umbrella_source(config, headers), args)
    except TranslationUnitLoadError as e:
        raise FrameworkParseError(f"libclang could not parse {config.framework}: {e}") from e

    errors = [d for d in tu.diagnostics if d.severity >= Diagnostic.Error]
    for diag in errors[:_MAX_LOGGED_DIAGNOSTICS]:
        log.warning("clang: %s", diag)
    if len(errors) > _MAX_LOGGED_DIAGNOSTICS:
        log.warning("clang: %d more errors", len(errors) - _MAX_LOGGED_DIAGNOSTICS)

    return tu


def load_framework(config: ExtractConfig, headers: list[str]) -> ClangCursor:
    """Parse the framework and return its translation-unit cursor."""
    tu = parse_framework(config, headers)
    # the cursor keeps the translation unit alive
    return ClangCursor(tu.cursor)


def is_framework_file(path: str | None, headers_dir: Path) -> bool:
    if not path:
        return False
    try:
        Path(path).resolve().relative_to(headers_dir.resolve())
    except ValueError:
        return False
    return True
