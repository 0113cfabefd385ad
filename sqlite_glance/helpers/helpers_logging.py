"""Simple logging helpers for sqlite-glance completions."""

import contextlib
from datetime import datetime
from pathlib import Path
from typing import TextIO


class Colors:
    """ANSI color codes for terminal output."""
    RED = '\033[91m'
    ENDC = '\033[0m'


def print_error(msg: str, file: TextIO | None = None) -> None:
    """Print an error message."""
    print(f"{Colors.RED}❌ {msg}{Colors.ENDC}", file=file)


def log_diagnostic(msg: str, log_file: Path | None) -> None:
    """Append a plain diagnostic line to the completion log file.

    Completion runs inside the shell's line editor, so diagnostics never go
    to stdout/stderr. Without a log file this is a no-op, and a log file that
    cannot be written is ignored.
    """
    if log_file is None:
        return

    stamp = datetime.now().isoformat(timespec="seconds")
    with contextlib.suppress(OSError), log_file.open("a", encoding="utf-8") as f:
        print(f"{stamp} {msg}", file=f)
