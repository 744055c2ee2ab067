"""CLI entry point for objc-metadata."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .graph import build_hierarchy, hierarchy_stats, subclasses, superclass_chain
from .indexer import generate_framework_metadata, run_index
from .models import ExtractConfig, to_json_dict
from .parse import FrameworkParseError
from .store import MetadataStore

log = logging.getLogger(__name__)


def _default_db() -> str:
    return str(Path.cwd().resolve() / ".objc-metadata.duckdb")


def _config(args: argparse.Namespace) -> ExtractConfig:
    return ExtractConfig(
        sdk=str(Path(args.sdk).resolve()),
        framework=args.framework,
        platform=args.platform,
        include_deprecated=args.include_deprecated,
        exclude_headers=list(args.exclude or []),
        clang_args=list(args.clang_arg or []),
        db_path=getattr(args, "db", None) or _default_db(),
        libclang=args.libclang,
    )


def _get_store(db_path: str | None) -> MetadataStore:
    return MetadataStore(db_path or _default_db())


def cmd_generate(args: argparse.Namespace) -> int:
    config = _config(args)
    print(f"Extracting {config.framework} from {config.sdk}", file=sys.stderr)
    try:
        result = generate_framework_metadata(config)
    except FrameworkParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    text = json.dumps(to_json_dict(result), indent=2)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"  interfaces: {len(result.interfaces)} → {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0


def cmd_index(args: argparse.Namespace) -> int:
    config = _config(args)
    print(f"Indexing {config.framework} → {config.db_path}", file=sys.stderr)
    try:
        stats = run_index(config, force=args.force)
    except FrameworkParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if stats.get("skipped"):
        print("  up to date (use --force to re-extract)")
    print(f"  headers:    {stats.get('headers', 0)}")
    print(f"  interfaces: {stats.get('interfaces', 0)}")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    store = _get_store(args.db)
    try:
        stats = store.stats()
        g = build_hierarchy(store.superclass_edges())
    finally:
        store.close()

    print(f"Database:   {args.db or _default_db()}")
    print(f"Headers:    {stats.get('headers', 0)}")
    print(f"Interfaces: {stats.get('interfaces', 0)}")
    for framework, count in stats.get("by_framework", {}).items():
        print(f"  {framework}: {count}")
    h = hierarchy_stats(g)
    print(f"Roots:      {h['roots']}  (external superclasses: {h['external']})")
    print(f"Max depth:  {h['max_depth']}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    store = _get_store(args.db)
    try:
        decl = store.get_interface(args.name)
        matches = [] if decl else store.search_interfaces(args.name)
    finally:
        store.close()

    if decl is None:
        if matches:
            print(f"Interface not found: {args.name}. Similar:")
            for name, framework in matches:
                print(f"  {name}  ({framework})")
        else:
            print(f"Interface not found: {args.name}")
        return 1

    if args.json:
        print(json.dumps(decl, indent=2))
        return 0

    sup = decl.get("super")
    print(f"\n{decl['name']}" + (f" : {sup['name']}" if sup else ""))
    print(f"  file:       {decl['file']}")
    print(f"  declared:   {decl['typeString']}")
    print(f"  properties: {len(decl['properties'])}")
    for prop in decl["properties"]:
        flags = [f for f in ("static", "readonly", "nonatomic", "weak") if prop[f]]
        suffix = f"  ({', '.join(flags)})" if flags else ""
        print(f"    {prop['type']['name']} {prop['name']}{suffix}")
    print(f"  instance methods: {len(decl['instanceMethods'])}")
    for method in decl["instanceMethods"]:
        print(f"    - {method['name']}")
    print(f"  class methods: {len(decl['classMethods'])}")
    for method in decl["classMethods"]:
        print(f"    + {method['name']}")
    return 0


def cmd_hierarchy(args: argparse.Namespace) -> int:
    store = _get_store(args.db)
    try:
        g = build_hierarchy(store.superclass_edges())
    finally:
        store.close()

    if args.name not in g:
        print(f"Class not found: {args.name}")
        return 1

    chain = superclass_chain(g, args.name)
    print(" → ".join([args.name, *chain]))
    direct = subclasses(g, args.name)
    print(f"\nSubclasses ({len(direct)}):")
    for name in direct:
        print(f"  ← {name}")
    return 0


def _add_extract_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--sdk", required=True, help="SDK root, e.g. .../MacOSX.sdk")
    p.add_argument("--framework", required=True, help="Framework name, e.g. Foundation")
    p.add_argument("--platform", default="macos", help="Availability platform (default: macos)")
    p.add_argument("--include-deprecated", action="store_true",
                   help="Keep deprecated declarations")
    p.add_argument("--exclude", action="append", metavar="PATTERN",
                   help="Skip headers matching a gitwildmatch pattern (repeatable)")
    p.add_argument("--clang-arg", action="append", metavar="ARG",
                   help="Extra argument passed to clang (repeatable)")
    p.add_argument("--libclang", help="Path to the libclang shared library")


def main() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(
        prog="objc-metadata",
        description="Extract Objective-C framework metadata for binding generators",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    # generate
    p = sub.add_parser("generate", help="Write a framework's metadata as JSON")
    _add_extract_args(p)
    p.add_argument("-o", "--output", help="Output file (default: stdout)")

    # index
    p = sub.add_parser("index", help="Extract a framework into the metadata database")
    _add_extract_args(p)
    p.add_argument("--db", help="Database path (default: ./.objc-metadata.duckdb)")
    p.add_argument("--force", action="store_true", help="Re-extract even if headers are unchanged")

    # status
    p = sub.add_parser("status", help="Show database status")
    p.add_argument("--db", help="Database path")

    # query
    p = sub.add_parser("query", help="Look up an interface")
    p.add_argument("name", help="Class name")
    p.add_argument("--db", help="Database path")
    p.add_argument("--json", action="store_true", help="Print the stored JSON")

    # hierarchy
    p = sub.add_parser("hierarchy", help="Show a class's superclass chain and subclasses")
    p.add_argument("name", help="Class name")
    p.add_argument("--db", help="Database path")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger("objc_metadata").setLevel(logging.DEBUG)

    handlers = {
        "generate": cmd_generate,
        "index": cmd_index,
        "status": cmd_status,
        "query": cmd_query,
        "hierarchy": cmd_hierarchy,
    }

    sys.exit(handlers[args.command](args))


if __name__ == "__main__":
    main()
