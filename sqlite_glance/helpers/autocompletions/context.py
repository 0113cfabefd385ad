"""Classify what the word under the cursor of a ``sqlite-glance`` command is.

The shell hands over the words typed so far and the index of the word being
completed. That is enough to decide between an option flag, the database
file, a table/view name, or nothing completable.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from sqlite_glance.helpers.autocompletions.flags import HIDDEN_FLAG, VALUE_FLAGS
from sqlite_glance.helpers.autocompletions.utils import resolve_user_path

# Positional slots of ``sqlite-glance <file> [table]``
_FILE_SLOT = 0
_OBJECT_SLOT = 1


@dataclass(frozen=True)
class CommandLineState:
    """Words of the command line being completed.

    Attributes:
        words: All words, ``words[0]`` being the program name.
        cword: Index of the word under the cursor.
        cwd: Working directory of the shell, for relative database paths.
        env: Environment of the shell (only ``HOME`` is used).
    """

    words: tuple[str, ...]
    cword: int
    cwd: Path
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0 <= self.cword < len(self.words):
            raise ValueError(
                f"cword {self.cword} out of range for {len(self.words)} words"
            )

    @classmethod
    def from_words(
        cls,
        words: Sequence[str],
        cword: int,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> CommandLineState:
        """Build the state, adding the empty word a cursor after the last word implies."""
        word_list = list(words) or [""]
        if cword == len(word_list):
            word_list.append("")
        return cls(tuple(word_list), cword, cwd, dict(env or {}))

    @property
    def current(self) -> str:
        """Partial text of the word under the cursor."""
        return self.words[self.cword]

    def has_flag(self, flag: str) -> bool:
        """True when ``flag`` was typed anywhere other than under the cursor."""
        return any(
            word == flag
            for index, word in enumerate(self.words[1:], start=1)
            if index != self.cword
        )


@dataclass(frozen=True)
class FlagContext:
    """Cursor is on an option flag."""

    prefix: str


@dataclass(frozen=True)
class FilePathContext:
    """Cursor is on the database file argument."""

    prefix: str


@dataclass(frozen=True)
class ObjectNameContext:
    """Cursor is on the table/view argument of the database at ``database_path``."""

    database_path: Path
    prefix: str


@dataclass(frozen=True)
class NoContext:
    """Nothing can be completed at the cursor."""

    reason: str


CompletionContext = Union[FlagContext, FilePathContext, ObjectNameContext, NoContext]


def _positionals_before_cursor(state: CommandLineState) -> list[str] | None:
    """Positional words left of the cursor.

    Returns None when the cursor sits on the value of an option such as
    ``--where``, which is not a positional slot.
    """
    positionals: list[str] = []
    expect_value = False
    for word in state.words[1:state.cword]:
        if expect_value:
            expect_value = False
            continue
        if word.startswith("-"):
            expect_value = word in VALUE_FLAGS
            continue
        positionals.append(word)

    if expect_value:
        return None
    return positionals


def extract_context(state: CommandLineState) -> CompletionContext:
    """Classify the word under the cursor.

    Example:
        >>> state = CommandLineState.from_words(
        ...     ["sqlite-glance", "app.db", "us"], 2, Path("/data"))
        >>> extract_context(state)
        ObjectNameContext(database_path=PosixPath('/data/app.db'), prefix='us')
    """
    if state.cword == 0:
        return NoContext("program name")

    current = state.current
    if current.startswith("-"):
        return FlagContext(current)

    positionals = _positionals_before_cursor(state)
    if positionals is None:
        return NoContext("option value")

    if len(positionals) == _FILE_SLOT:
        return FilePathContext(current)

    if len(positionals) == _OBJECT_SLOT:
        database_path = resolve_user_path(positionals[_FILE_SLOT], state.cwd, state.env)
        return ObjectNameContext(database_path, current)

    return NoContext("too many positional arguments")


def wants_hidden(state: CommandLineState) -> bool:
    """True when the command being completed already carries ``--hidden``."""
    return state.has_flag(HIDDEN_FLAG)
