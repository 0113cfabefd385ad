"""Read table and view names from a SQLite file's catalog.

The file is opened read-only through a ``file:`` URI. Nothing from the
file or the user's environment is executed: no init script is read, the
connection is ``query_only`` and ``trusted_schema`` is off. Opening and
querying share one wall-clock budget so a locked or very large database
cannot stall the shell.
"""

from __future__ import annotations

import contextlib
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from sqlite_glance.exceptions import CatalogQueryFailed, UnreadableDatabase
from sqlite_glance.helpers.autocompletions.utils import ascii_fold

KIND_TABLE = "table"
KIND_VIEW = "view"
KIND_VIRTUAL = "virtual"
KIND_SHADOW = "shadow"

VISIBLE_KINDS = frozenset({KIND_TABLE, KIND_VIEW, KIND_VIRTUAL})
HIDDEN_KINDS = frozenset({KIND_SHADOW})

SYSTEM_PREFIX = "sqlite_"

DEFAULT_TIMEOUT = 0.25

# pragma_table_list() exists from SQLite 3.37.0 on
_TABLE_LIST_MIN_VERSION = (3, 37, 0)
_TABLE_LIST_QUERY = "SELECT name, type FROM pragma_table_list WHERE schema = 'main'"
# Fallback: sqlite_master has no row for itself and cannot tell shadow tables apart
_SQLITE_MASTER_QUERY = (
    "SELECT name, CASE WHEN type = 'table' AND sql LIKE 'CREATE VIRTUAL TABLE%'"
    " THEN 'virtual' ELSE type END"
    " FROM main.sqlite_master WHERE type IN ('table', 'view')"
)
_SCHEMA_TABLE = "sqlite_schema"

# VM instructions between deadline checks
_PROGRESS_STEPS = 1000


@dataclass(frozen=True)
class SchemaObject:
    """A table or view in the main schema."""

    name: str
    kind: str

    @property
    def is_hidden(self) -> bool:
        """Shadow tables and SQLite's own ``sqlite_*`` tables."""
        return self.kind in HIDDEN_KINDS or ascii_fold(self.name).startswith(SYSTEM_PREFIX)


class Catalog(Protocol):
    """Source of schema objects for one database."""

    def list_objects(self) -> list[SchemaObject]:
        """Return every catalog entry of the main schema, in catalog order."""
        ...


CatalogFactory = Callable[[Path], Catalog]


class SqliteCatalog:
    """Catalog of a SQLite file, read through the ``sqlite3`` module."""

    def __init__(self, path: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.path = path
        self.timeout = timeout

    def _connect(self, deadline: float) -> sqlite3.Connection:
        """Open the file read-only and check that it is a database.

        Raises:
            UnreadableDatabase: Missing file, permission denied, not a database.
            CatalogQueryFailed: The database is locked or the budget ran out.
        """
        if not self.path.is_file():
            raise UnreadableDatabase(self.path, "no such file")

        uri = f"{self.path.absolute().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True, timeout=self.timeout)
        except sqlite3.Error as e:
            raise UnreadableDatabase(self.path, str(e)) from e

        conn.set_progress_handler(
            lambda: int(time.monotonic() > deadline), _PROGRESS_STEPS,
        )
        try:
            conn.execute("PRAGMA query_only = ON")
            conn.execute("PRAGMA trusted_schema = OFF")
            # Reads the header: fails here for files that are not databases
            conn.execute("PRAGMA schema_version").fetchone()
        except sqlite3.OperationalError as e:
            conn.close()
            if "locked" in str(e) or "interrupted" in str(e):
                raise CatalogQueryFailed(self.path, str(e)) from e
            raise UnreadableDatabase(self.path, str(e)) from e
        except sqlite3.Error as e:
            conn.close()
            raise UnreadableDatabase(self.path, str(e)) from e
        return conn

    def list_objects(self) -> list[SchemaObject]:
        """Return ``(name, kind)`` of every main-schema table and view.

        Raises:
            UnreadableDatabase: The file cannot be opened as a database.
            CatalogQueryFailed: The catalog query failed or timed out.
        """
        deadline = time.monotonic() + self.timeout
        has_table_list = sqlite3.sqlite_version_info >= _TABLE_LIST_MIN_VERSION
        query = _TABLE_LIST_QUERY if has_table_list else _SQLITE_MASTER_QUERY

        with contextlib.closing(self._connect(deadline)) as conn:
            try:
                rows = conn.execute(query).fetchall()
            except sqlite3.Error as e:
                raise CatalogQueryFailed(self.path, str(e)) from e

        objects = [SchemaObject(str(name), str(kind)) for name, kind in rows]
        if not has_table_list:
            objects.append(SchemaObject(_SCHEMA_TABLE, KIND_TABLE))
        return objects


def sqlite_catalog_factory(timeout: float = DEFAULT_TIMEOUT) -> CatalogFactory:
    """Return a factory opening :class:`SqliteCatalog` with ``timeout``."""

    def _factory(path: Path) -> Catalog:
        return SqliteCatalog(path, timeout=timeout)

    return _factory
