"""DuckDB schema and MetadataStore, persistence for extracted framework metadata.

DuckDB connections are NOT thread-safe, so every public method holds a
threading.Lock for the full duration of execute-through-fetch.
"""

import json
import logging
import threading

import duckdb

from .models import InterfaceDecl, to_json_dict

log = logging.getLogger(__name__)

_DDL = """
CREATE TABLE IF NOT EXISTS meta (
    key     VARCHAR PRIMARY KEY,
    value   VARCHAR
);

CREATE TABLE IF NOT EXISTS headers (
    framework       VARCHAR NOT NULL,
    path            VARCHAR NOT NULL,
    content_hash    VARCHAR NOT NULL,
    last_indexed    TIMESTAMP DEFAULT now(),
    PRIMARY KEY (framework, path)
);

CREATE TABLE IF NOT EXISTS interfaces (
    name            VARCHAR PRIMARY KEY,
    framework       VARCHAR NOT NULL,
    file            VARCHAR NOT NULL,
    super_name      VARCHAR,
    super_module    VARCHAR,
    payload         VARCHAR NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_interfaces_framework ON interfaces(framework);
CREATE INDEX IF NOT EXISTS idx_interfaces_super ON interfaces(super_name);
"""


class MetadataStore:
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        self._con = duckdb.connect(db_path)
        for stmt in _DDL.strip().split(";"):
            stmt = stmt.strip()
            if stmt:
                self._con.execute(stmt)
        log.debug("MetadataStore opened: %s", db_path)

    def close(self) -> None:
        self._con.close()

    # ── meta ────────────────────────────────────────────────────────────────

    def get_meta(self, key: str) -> str | None:
        with self._lock:
            row = self._con.execute(
                "SELECT value FROM meta WHERE key = ?", [key]
            ).fetchone()
        return row[0] if row else None

    def set_meta(self, key: str, value: str) -> None:
        with self._lock:
            self._con.execute(
                "INSERT OR REPLACE INTO meta VALUES (?, ?)", [key, value]
            )

    # ── headers ──────────────────────────────────────────────────────────────

    def header_hashes(self, framework: str) -> dict[str, str]:
        with self._lock:
            rows = self._con.execute(
                "SELECT path, content_hash FROM headers WHERE framework = ?", [framework]
            ).fetchall()
        return {r[0]: r[1] for r in rows}

    def replace_headers(self, framework: str, hashes: dict[str, str]) -> None:
        rows = [(framework, path, h) for path, h in hashes.items()]
        with self._lock:
            self._con.execute("DELETE FROM headers WHERE framework = ?", [framework])
            if rows:
                self._con.executemany(
                    "INSERT INTO headers (framework, path, content_hash) VALUES (?, ?, ?)",
                    rows,
                )

    # ── interfaces ───────────────────────────────────────────────────────────

    def replace_interfaces(self, framework: str, interfaces: list[InterfaceDecl]) -> None:
        """Drop the framework's stored interfaces and insert the given ones."""
        rows = []
        for decl in interfaces:
            sup = decl.superclass
            rows.append((
                decl.name,
                framework,
                decl.file,
                sup.name if sup else None,
                sup.module if sup else None,
                json.dumps(to_json_dict(decl)),
            ))
        with self._lock:
            self._con.execute("DELETE FROM interfaces WHERE framework = ?", [framework])
            if rows:
                self._con.executemany(
                    """
                    INSERT INTO interfaces
                        (name, framework, file, super_name, super_module, payload)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT (name) DO UPDATE SET
                        framework    = excluded.framework,
                        file         = excluded.file,
                        super_name   = excluded.super_name,
                        super_module = excluded.super_module,
                        payload      = excluded.payload
                    """,
                    rows,
                )

    def get_interface(self, name: str) -> dict | None:
        """The stored JSON form of one interface."""
        with self._lock:
            row = self._con.execute(
                "SELECT payload FROM interfaces WHERE name = ?", [name]
            ).fetchone()
        return json.loads(row[0]) if row else None

    def search_interfaces(self, query: str, limit: int = 20) -> list[tuple[str, str]]:
        """Case-insensitive substring search; returns (name, framework) pairs."""
        pattern = f"%{query}%"
        with self._lock:
            rows = self._con.execute(
                "SELECT name, framework FROM interfaces WHERE name ILIKE ? "
                "ORDER BY name LIMIT ?",
                [pattern, limit],
            ).fetchall()
        return [(r[0], r[1]) for r in rows]

    def superclass_edges(self) -> list[tuple[str, str | None]]:
        """(name, super_name) for every stored interface."""
        with self._lock:
            rows = self._con.execute(
                "SELECT name, super_name FROM interfaces ORDER BY name"
            ).fetchall()
        return [(r[0], r[1]) for r in rows]

    # ── stats ────────────────────────────────────────────────────────────────

    def stats(self) -> dict:
        with self._lock:
            counts = {}
            for table in ("headers", "interfaces"):
                row = self._con.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
                counts[table] = row[0] if row else 0

            fw_rows = self._con.execute(
                "SELECT framework, COUNT(*) FROM interfaces GROUP BY framework ORDER BY framework"
            ).fetchall()
            counts["by_framework"] = {r[0]: r[1] for r in fw_rows}

        return counts
