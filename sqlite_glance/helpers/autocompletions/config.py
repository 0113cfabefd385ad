#!/usr/bin/env python3
"""
Completion settings for sqlite-glance.

Settings come from the ``completion`` section of ``.sqlite-glance.yaml``
(searched upward from the shell's working directory), then from
``SQLITE_GLANCE_*`` environment variables. Both the directory and the
environment are passed in explicitly.

Example ``.sqlite-glance.yaml``::

    completion:
      hidden: false
      timeout_ms: 250
      log_file: ~/.cache/sqlite-glance-complete.log
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from sqlite_glance.helpers.autocompletions.catalog import DEFAULT_TIMEOUT
from sqlite_glance.helpers.autocompletions.utils import (
    find_file_upward,
    resolve_user_path,
)
from sqlite_glance.helpers.yaml_loader import load_yaml_file

CONFIG_FILENAME = ".sqlite-glance.yaml"

ENV_HIDDEN = "SQLITE_GLANCE_HIDDEN"
ENV_TIMEOUT_MS = "SQLITE_GLANCE_TIMEOUT_MS"
ENV_LOG_FILE = "SQLITE_GLANCE_COMPLETE_LOG"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})

# Completion must stay interactive
_MAX_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class CompletionConfig:
    """Resolved completion settings.

    Attributes:
        hidden: Offer ``sqlite_*`` and shadow tables.
        timeout_ms: Budget for opening the database and reading its catalog.
        log_file: Diagnostic log, or None to discard diagnostics.
    """

    hidden: bool = False
    timeout_ms: int = int(DEFAULT_TIMEOUT * 1000)
    log_file: Path | None = None

    @property
    def timeout(self) -> float:
        """Budget in seconds."""
        return self.timeout_ms / 1000


def _parse_bool(value: object) -> bool | None:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _parse_timeout_ms(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        timeout_ms = int(str(value).strip())
    except ValueError:
        return None
    if timeout_ms <= 0:
        return None
    return min(timeout_ms, _MAX_TIMEOUT_MS)


def _load_file_section(cwd: Path) -> dict[str, Any]:
    """Return the ``completion`` mapping of the nearest config file, or {}."""
    try:
        config_file = find_file_upward(CONFIG_FILENAME, cwd)
        if config_file is None:
            return {}
        data = load_yaml_file(config_file)
    except Exception:
        # Broken config must not break the shell
        return {}

    if not isinstance(data, dict):
        return {}
    section = data.get("completion")
    if not isinstance(section, dict):
        return {}
    return cast(dict[str, Any], section)


def load_completion_config(
    cwd: Path,
    env: Mapping[str, str],
) -> CompletionConfig:
    """Load completion settings for a shell running in ``cwd`` with ``env``.

    Environment variables override the config file; invalid values in
    either place are ignored and the default is kept.
    """
    defaults = CompletionConfig()
    section = _load_file_section(cwd)

    hidden = defaults.hidden
    timeout_ms = defaults.timeout_ms
    log_file = defaults.log_file

    if "hidden" in section:
        parsed_hidden = _parse_bool(section["hidden"])
        if parsed_hidden is not None:
            hidden = parsed_hidden
    if "timeout_ms" in section:
        parsed_timeout = _parse_timeout_ms(section["timeout_ms"])
        if parsed_timeout is not None:
            timeout_ms = parsed_timeout
    raw_log = section.get("log_file")
    if isinstance(raw_log, str) and raw_log.strip():
        log_file = resolve_user_path(raw_log.strip(), cwd, env)

    if ENV_HIDDEN in env:
        parsed_hidden = _parse_bool(env[ENV_HIDDEN])
        if parsed_hidden is not None:
            hidden = parsed_hidden
    if ENV_TIMEOUT_MS in env:
        parsed_timeout = _parse_timeout_ms(env[ENV_TIMEOUT_MS])
        if parsed_timeout is not None:
            timeout_ms = parsed_timeout
    env_log = env.get(ENV_LOG_FILE, "").strip()
    if env_log:
        log_file = resolve_user_path(env_log, cwd, env)

    return CompletionConfig(hidden=hidden, timeout_ms=timeout_ms, log_file=log_file)
