#!/usr/bin/env python3
"""Shell autocompletion helpers for sqlite-glance.

Provides completion data for bash, zsh and fish. Context extraction,
catalog access and prefix matching are centralized here; the shell
dialects in ``sqlite_glance.cli.completions`` only format the output.

This module also serves as a small query dispatcher for scripts that want
raw data rather than a full command-line completion::

    python -m sqlite_glance.helpers.autocompletions --list-flags
    python -m sqlite_glance.helpers.autocompletions --list-objects app.db us
"""

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from sqlite_glance.helpers.autocompletions.catalog import sqlite_catalog_factory
from sqlite_glance.helpers.autocompletions.config import load_completion_config
from sqlite_glance.helpers.autocompletions.context import ObjectNameContext
from sqlite_glance.helpers.autocompletions.flags import list_flags
from sqlite_glance.helpers.autocompletions.resolver import (
    complete,
    resolve_candidates,
)
from sqlite_glance.helpers.autocompletions.utils import resolve_user_path

__all__ = [
    "complete",
    "list_objects_for_database",
    "main",
]

_MIN_ARGS_WITH_COMMAND = 2


def list_objects_for_database(database: str, prefix: str = "") -> list[str]:
    """List table/view names of ``database`` starting with ``prefix``.

    Uses the configuration and environment of the calling process.

    Example:
        >>> list_objects_for_database('app.db', 'us')
        ['Users', 'UserLog']
    """
    cwd = Path.cwd()
    env = dict(os.environ)
    config = load_completion_config(cwd, env)
    context = ObjectNameContext(resolve_user_path(database, cwd, env), prefix)
    candidates = resolve_candidates(
        context,
        sqlite_catalog_factory(config.timeout),
        include_hidden=config.hidden,
        log_file=config.log_file,
    )
    return [c.value for c in candidates]


# ---------------------------------------------------------------------------
# Command registration types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompletionCommand:
    """A single autocompletion command definition.

    Attributes:
        min_args: Number of positional args required (after command).
        max_args: Number of positional args accepted.
        arg_desc: Description of args (for error messages).
        handler: Function to call with positional args.
    """

    min_args: int
    max_args: int
    arg_desc: str
    handler: Callable[..., list[str]]


_COMMANDS: dict[str, CompletionCommand] = {
    "--list-flags": CompletionCommand(
        min_args=0,
        max_args=1,
        arg_desc="[prefix]",
        handler=list_flags,
    ),
    "--list-objects": CompletionCommand(
        min_args=1,
        max_args=2,
        arg_desc="database [prefix]",
        handler=list_objects_for_database,
    ),
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> int:
    """CLI entry point for autocompletion queries.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    if len(sys.argv) < _MIN_ARGS_WITH_COMMAND:
        print(
            "Usage: python -m sqlite_glance.helpers.autocompletions <command>",
            file=sys.stderr,
        )
        return 1

    command = sys.argv[1]
    cmd = _COMMANDS.get(command)
    if cmd is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        return 1

    positional = sys.argv[_MIN_ARGS_WITH_COMMAND:]
    if not cmd.min_args <= len(positional) <= cmd.max_args:
        print(
            f"Error: {command} takes {cmd.arg_desc}",
            file=sys.stderr,
        )
        return 1

    for item in cmd.handler(*positional):
        print(item)
    return 0


if __name__ == '__main__':
    sys.exit(main())
