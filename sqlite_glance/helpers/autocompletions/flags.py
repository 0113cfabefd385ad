"""Static option flags of the ``sqlite-glance`` command."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FlagSpec:
    """One option of ``sqlite-glance``.

    Attributes:
        names: Spellings of the option, short form first.
        help: One-line description shown by shells that support it.
        takes_value: Whether the option consumes the following word.
    """

    names: tuple[str, ...]
    help: str
    takes_value: bool = False


FLAG_SPECS: tuple[FlagSpec, ...] = (
    FlagSpec(("-h", "--help"), "Show help information"),
    FlagSpec(("-V", "--version"), "Show version number"),
    FlagSpec(("-w", "--where"), "WHERE clause to select rows in table view", takes_value=True),
    FlagSpec(("-n", "--limit"), "Maximum number of rows to show in table view", takes_value=True),
    FlagSpec(("--hidden",), "Show shadow tables, SQLite system tables & hidden columns"),
)

# Flat list in the order shells should present it
FLAGS: tuple[str, ...] = tuple(name for spec in FLAG_SPECS for name in spec.names)

FLAG_HELP: dict[str, str] = {
    name: spec.help for spec in FLAG_SPECS for name in spec.names
}

VALUE_FLAGS: frozenset[str] = frozenset(
    name for spec in FLAG_SPECS if spec.takes_value for name in spec.names
)

HIDDEN_FLAG = "--hidden"


def list_flags(prefix: str = "") -> list[str]:
    """List option flags starting with ``prefix`` (case-sensitive).

    Example:
        >>> list_flags("--h")
        ['--help', '--hidden']
    """
    return [flag for flag in FLAGS if flag.startswith(prefix)]
