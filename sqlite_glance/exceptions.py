"""Exceptions raised while resolving completion candidates.

None of these reach the shell: ``complete()`` turns every one of them into
an empty candidate list.
"""

from pathlib import Path


class CompletionError(Exception):
    """Base class for completion failures."""


class UnreadableDatabase(CompletionError):
    """The database file is missing, unreadable, or not a SQLite database."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot open database {path}: {reason}")
        self.path = path
        self.reason = reason


class CatalogQueryFailed(CompletionError):
    """The catalog query failed (corrupt schema, lock, timeout, engine error)."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Catalog query failed for {path}: {reason}")
        self.path = path
        self.reason = reason
