"""Shared utilities for autocompletion functions."""

from collections.abc import Mapping
from pathlib import Path

_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)


def find_file_upward(filename: str, start: Path, max_depth: int = 3) -> Path | None:
    """Search for a file by walking up the directory tree.

    Args:
        filename: Name of the file to search for.
        start: Directory to start from (the shell's working directory).
        max_depth: Maximum levels to search upward.

    Returns:
        Path to the file if found, None otherwise.

    Example:
        >>> find_file_upward('.sqlite-glance.yaml', Path('/work/data'))
        Path('/work/.sqlite-glance.yaml')
    """
    current = start
    for _ in range(max_depth):
        candidate = current / filename
        if candidate.is_file():
            return candidate
        if current == current.parent:
            break
        current = current.parent
    return None


def ascii_fold(text: str) -> str:
    """Lower-case ASCII letters only; every other character is kept as is."""
    return text.translate(_ASCII_FOLD)


def matches_prefix(name: str, prefix: str) -> bool:
    """True when ``name`` starts with ``prefix`` ignoring ASCII case.

    >>> matches_prefix("Users", "us")
    True
    >>> matches_prefix("Ärger", "ä")
    False
    """
    return ascii_fold(name[:len(prefix)]) == ascii_fold(prefix)


def resolve_user_path(raw: str, cwd: Path, env: Mapping[str, str]) -> Path:
    """Turn a path typed on the command line into an absolute path.

    ``~`` is expanded from ``env["HOME"]`` and relative paths are taken
    relative to ``cwd``; neither the process environment nor the process
    working directory is consulted.
    """
    if raw == "~" or raw.startswith("~/"):
        home = env.get("HOME")
        if home:
            raw = home + raw[1:]

    path = Path(raw)
    if not path.is_absolute():
        path = cwd / path
    return path
