"""Shell dialects for sqlite-glance completion output.

Each dialect only translates: words coming from the shell are dequoted
where the shell does not do it itself, and candidates are rendered in the
form that shell's registration script reads. Resolution itself lives in
``sqlite_glance.helpers.autocompletions``.

Protocol with the registration scripts:
    - one candidate per line on stdout
    - exit code ``EXIT_USE_FILES`` asks the shell for native filename
      completion (the cursor is on the database file argument)
"""

from __future__ import annotations

import shlex
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from importlib import resources

from click.shell_completion import CompletionItem

from sqlite_glance.helpers.autocompletions.resolver import FILE_ITEM_TYPE

EXIT_OK = 0
EXIT_USE_FILES = 3

_TEMPLATE_PACKAGE = "sqlite_glance.templates.completions"

# Quote characters tried when a partial word has an unterminated quote
_CLOSING_QUOTES = ("", "'", '"')


# ---------------------------------------------------------------------------
# Input side
# ---------------------------------------------------------------------------


def dequote_word(word: str) -> str:
    """Remove shell quoting from a (possibly unfinished) word.

    ``"my db.sqlite"`` and ``my\\ db.sqlite`` both give ``my db.sqlite``;
    an unterminated ``'my ta`` gives ``my ta``. Words that do not dequote
    to exactly one token are returned unchanged.
    """
    for closing in _CLOSING_QUOTES:
        if closing and word.endswith("\\"):
            # The added quote would be escaped rather than close anything
            break
        try:
            tokens = shlex.split(word + closing, posix=True)
        except ValueError:
            continue
        if len(tokens) == 1:
            return tokens[0]
        break
    return word


def join_bash_assignments(words: list[str], cword: int) -> tuple[list[str], int]:
    """Undo bash's split of ``--opt=value`` on ``COMP_WORDBREAKS``.

    Bash hands ``--where="id=1"`` over as ``--where``, ``=``, ``"id=1"``.
    The three words are joined back into one and ``cword`` is moved to the
    joined word's index.
    """
    joined: list[str] = []
    joined_cword = cword
    take_value = False
    for index, word in enumerate(words):
        if take_value:
            joined[-1] += word
            take_value = False
        elif (
            word == "="
            and len(joined) > 1
            and joined[-1].startswith("-")
            and "=" not in joined[-1]
        ):
            joined[-1] += word
            take_value = True
        else:
            joined.append(word)
        if index == cword:
            joined_cword = len(joined) - 1
    if cword >= len(words):
        joined_cword = len(joined) + cword - len(words)
    return joined, joined_cword


# ---------------------------------------------------------------------------
# Output side
# ---------------------------------------------------------------------------


def _single_line(items: Iterable[CompletionItem]) -> list[CompletionItem]:
    """Drop candidates that cannot travel on one line."""
    return [c for c in items if "\n" not in c.value and "\r" not in c.value]


def format_bash(items: Iterable[CompletionItem]) -> list[str]:
    """One shell-quoted value per line, ready for ``COMPREPLY``."""
    return [shlex.quote(c.value) for c in _single_line(items)]


def _escape_describe(value: str) -> str:
    return value.replace("\\", "\\\\").replace(":", "\\:")


def format_zsh(items: Iterable[CompletionItem]) -> list[str]:
    """``value:description`` lines for ``_describe`` (which quotes on insert)."""
    lines: list[str] = []
    for c in _single_line(items):
        value = _escape_describe(c.value)
        lines.append(f"{value}:{c.help}" if c.help else value)
    return lines


def format_fish(items: Iterable[CompletionItem]) -> list[str]:
    """``value<TAB>description`` lines for ``complete -a``."""
    lines: list[str] = []
    for c in _single_line(items):
        if "\t" in c.value:
            continue
        lines.append(f"{c.value}\t{c.help}" if c.help else c.value)
    return lines


# ---------------------------------------------------------------------------
# Dialect registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShellDialect:
    """How one shell talks to ``sqlite-glance-complete``.

    Attributes:
        name: Shell name used on the command line.
        script: Registration script file name in the templates package.
        format: Renders candidates as output lines.
        dequote: Removes shell quoting from incoming words, if the shell
            passes them raw.
        dequote_current_only: Only the word under the cursor arrives raw;
            the shell has already unquoted the words before it.
        reassemble: Rejoins words the shell split apart, moving the cursor
            index along with them.
    """

    name: str
    script: str
    format: Callable[[Iterable[CompletionItem]], list[str]]
    dequote: Callable[[str], str] | None = None
    dequote_current_only: bool = False
    reassemble: Callable[[list[str], int], tuple[list[str], int]] | None = None

    def prepare_words(self, words: Iterable[str], cword: int) -> tuple[list[str], int]:
        """Words as the user meant them and the cursor index into them."""
        word_list = list(words)
        if self.reassemble is not None:
            word_list, cword = self.reassemble(word_list, cword)
        if self.dequote is None:
            return word_list, cword
        if not self.dequote_current_only:
            word_list = [self.dequote(word) for word in word_list]
        elif 0 <= cword < len(word_list):
            word_list[cword] = self.dequote(word_list[cword])
        return word_list, cword

    def render(self, items: list[CompletionItem]) -> tuple[list[str], int]:
        """Output lines and exit code for ``items``."""
        if any(item.type == FILE_ITEM_TYPE for item in items):
            return [], EXIT_USE_FILES
        return self.format(items), EXIT_OK

    def registration_script(self) -> str:
        """Text of the script that hooks ``sqlite-glance`` into this shell."""
        return resources.files(_TEMPLATE_PACKAGE).joinpath(self.script).read_text(
            encoding="utf-8",
        )


SHELL_DIALECTS: dict[str, ShellDialect] = {
    "bash": ShellDialect(
        name="bash",
        script="sqlite-glance.bash",
        format=format_bash,
        dequote=dequote_word,
        reassemble=join_bash_assignments,
    ),
    "zsh": ShellDialect(
        name="zsh",
        script="_sqlite-glance",
        format=format_zsh,
    ),
    "fish": ShellDialect(
        name="fish",
        script="sqlite-glance.fish",
        format=format_fish,
        dequote=dequote_word,
        dequote_current_only=True,
    ),
}
