#!/usr/bin/env python3
"""sqlite-glance completion CLI - Main Entry Point.

Called by the shell registration scripts on every <TAB>.

Usage:
    sqlite-glance-complete <shell> --cword N [--hidden] -- WORDS...
    sqlite-glance-complete script <shell>

Commands:
    bash      Print candidates for bash (one quoted value per line)
    zsh       Print candidates for zsh (_describe lines)
    fish      Print candidates for fish (value<TAB>description lines)
    script    Print the registration script for a shell
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from sqlite_glance.cli.completions import EXIT_OK, SHELL_DIALECTS, ShellDialect
from sqlite_glance.helpers.autocompletions.context import CommandLineState
from sqlite_glance.helpers.autocompletions.resolver import resolve
from sqlite_glance.helpers.helpers_logging import print_error

_PROG_NAME = "sqlite-glance-complete"

# Exit code when completion arguments themselves are unusable
_EXIT_USAGE = 2


@click.group(invoke_without_command=True)
@click.pass_context
def _click_cli(ctx: click.Context) -> int:
    """Shell completion for sqlite-glance."""
    if ctx.invoked_subcommand is not None:
        return EXIT_OK
    click.echo(ctx.get_help())
    return EXIT_OK


def run_completion(
    dialect: ShellDialect,
    words: list[str],
    cword: int,
    include_hidden: bool | None,
) -> int:
    """Resolve candidates for ``words`` and print them in ``dialect``'s format."""
    words, cword = dialect.prepare_words(words, cword)
    try:
        state = CommandLineState.from_words(
            words,
            cword,
            Path.cwd(),
            dict(os.environ),
        )
    except ValueError:
        # A cursor outside the words has nothing to complete
        return EXIT_OK

    lines, exit_code = dialect.render(resolve(state, include_hidden=include_hidden))
    for line in lines:
        click.echo(line)
    return exit_code


def _register_shell_command(dialect: ShellDialect) -> None:
    """Register ``sqlite-glance-complete <shell>`` for one dialect."""

    @click.command(
        name=dialect.name,
        help=f"Print completion candidates for {dialect.name}",
        context_settings={"ignore_unknown_options": True},
    )
    @click.option("--cword", type=int, required=True,
                  help="Index of the word under the cursor (0 = program name)")
    @click.option("--hidden/--no-hidden", "hidden", default=None,
                  help="Force shadow and sqlite_* tables on or off")
    @click.argument("words", nargs=-1, type=click.UNPROCESSED)
    def _cmd(cword: int, hidden: bool | None, words: tuple[str, ...]) -> int:
        return run_completion(dialect, list(words), cword, hidden)

    _click_cli.add_command(_cmd)


@click.command(name="script", help="Print the registration script for a shell")
@click.argument("shell", type=click.Choice(sorted(SHELL_DIALECTS)))
def _script_cmd(shell: str) -> int:
    click.echo(SHELL_DIALECTS[shell].registration_script(), nl=False)
    return EXIT_OK


def _register_commands() -> None:
    """Register one completion command per shell plus ``script``."""
    for dialect in SHELL_DIALECTS.values():
        _register_shell_command(dialect)
    _click_cli.add_command(_script_cmd)


_register_commands()


def main() -> int:
    """Main CLI entry point."""
    try:
        result = _click_cli.main(
            args=sys.argv[1:],
            prog_name=_PROG_NAME,
            standalone_mode=False,
        )
    except click.Abort:
        return 130
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except Exception as exc:
        # Never hand a traceback to the shell's line editor
        print_error(f"{_PROG_NAME}: {exc}", file=sys.stderr)
        return _EXIT_USAGE

    return EXIT_OK if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
