"""Shared fixtures for the completion test suite.

Provides a fake in-memory catalog (so resolver tests never touch SQLite)
and a ``make_database`` factory that builds real SQLite files in
``tmp_path`` for catalog and end-to-end tests.
"""

from __future__ import annotations

import contextlib
import sqlite3
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from sqlite_glance.helpers.autocompletions.catalog import SchemaObject
from tests.fakes import SAMPLE_OBJECTS, FakeCatalog, FakeCatalogFactory

# ---------------------------------------------------------------------------
# Fake catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_factory() -> Callable[..., FakeCatalogFactory]:
    """Build a recording factory around a :class:`FakeCatalog`.

    Usage::

        factory = fake_factory(SAMPLE_OBJECTS)
        factory = fake_factory(error=CatalogQueryFailed(path, "locked"))
    """

    def _make(
        objects: Sequence[SchemaObject] = SAMPLE_OBJECTS,
        error: Exception | None = None,
    ) -> FakeCatalogFactory:
        return FakeCatalogFactory(FakeCatalog(objects, error))

    return _make


# ---------------------------------------------------------------------------
# Real SQLite files
# ---------------------------------------------------------------------------

SAMPLE_SCHEMA = (
    "CREATE TABLE Users (id INTEGER PRIMARY KEY, name TEXT)",
    "CREATE TABLE orders (id INTEGER PRIMARY KEY AUTOINCREMENT, user_id INTEGER)",
    "CREATE VIEW UserLog AS SELECT id, name FROM Users",
    "CREATE INDEX orders_user ON orders (user_id)",
    "CREATE TRIGGER users_ai AFTER INSERT ON Users BEGIN SELECT 1; END",
)


@pytest.fixture()
def make_database(tmp_path: Path) -> Callable[..., Path]:
    """Create a SQLite file in ``tmp_path`` from a list of statements."""

    def _make(
        statements: Sequence[str] = SAMPLE_SCHEMA,
        name: str = "sample.db",
    ) -> Path:
        path = tmp_path / name
        with contextlib.closing(sqlite3.connect(path)) as conn:
            for statement in statements:
                conn.execute(statement)
            conn.commit()
        return path

    return _make


@pytest.fixture()
def sample_db(make_database: Callable[..., Path]) -> Path:
    """Database with tables ``Users``/``orders``, view ``UserLog``, index and trigger."""
    return make_database()
