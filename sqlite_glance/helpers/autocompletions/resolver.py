"""Turn a completion context into candidates.

``complete()`` is the whole pipeline for one request: build the command
line state, classify the cursor word, resolve candidates. It never raises
and never writes to stdout/stderr; failures become an empty list and,
when a log file is configured, a diagnostic line.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from click.shell_completion import CompletionItem

from sqlite_glance.exceptions import CompletionError
from sqlite_glance.helpers.autocompletions.catalog import (
    HIDDEN_KINDS,
    VISIBLE_KINDS,
    CatalogFactory,
    SchemaObject,
    sqlite_catalog_factory,
)
from sqlite_glance.helpers.autocompletions.config import (
    CompletionConfig,
    load_completion_config,
)
from sqlite_glance.helpers.autocompletions.context import (
    CommandLineState,
    CompletionContext,
    FilePathContext,
    FlagContext,
    ObjectNameContext,
    extract_context,
    wants_hidden,
)
from sqlite_glance.helpers.autocompletions.flags import FLAG_HELP, list_flags
from sqlite_glance.helpers.autocompletions.utils import matches_prefix
from sqlite_glance.helpers.helpers_logging import log_diagnostic


# CompletionItem.type asking the shell to complete a filename itself
FILE_ITEM_TYPE = "file"


def item_values(items: Iterable[CompletionItem]) -> list[str]:
    """Values of the items the shell should offer as they are."""
    return [item.value for item in items if item.type != FILE_ITEM_TYPE]


def filter_objects(
    objects: Iterable[SchemaObject],
    prefix: str,
    include_hidden: bool = False,
) -> list[SchemaObject]:
    """Keep tables/views whose name starts with ``prefix`` (ASCII case-insensitive).

    Shadow tables and ``sqlite_*`` tables are kept only with ``include_hidden``.
    Other catalog kinds (indexes, triggers) are always dropped.
    """
    kept: list[SchemaObject] = []
    for obj in objects:
        if obj.kind not in VISIBLE_KINDS and obj.kind not in HIDDEN_KINDS:
            continue
        if obj.is_hidden and not include_hidden:
            continue
        if matches_prefix(obj.name, prefix):
            kept.append(obj)
    return kept


def _resolve_object_names(
    context: ObjectNameContext,
    catalog_factory: CatalogFactory,
    include_hidden: bool,
    log_file: Path | None,
) -> list[CompletionItem]:
    try:
        objects = catalog_factory(context.database_path).list_objects()
    except CompletionError as e:
        log_diagnostic(f"{type(e).__name__}: {e}", log_file)
        return []
    except Exception as e:
        # A completion must degrade to "no suggestions", whatever the cause
        log_diagnostic(f"unexpected {type(e).__name__}: {e}", log_file)
        return []

    return [
        CompletionItem(obj.name, help=obj.kind)
        for obj in filter_objects(objects, context.prefix, include_hidden)
    ]


def resolve_candidates(
    context: CompletionContext,
    catalog_factory: CatalogFactory | None = None,
    include_hidden: bool = False,
    log_file: Path | None = None,
) -> list[CompletionItem]:
    """Resolve candidates for an already classified context.

    File paths and uncompletable positions give no candidates; the shell
    handles file names natively.
    """
    if isinstance(context, FlagContext):
        return [
            CompletionItem(flag, help=FLAG_HELP[flag])
            for flag in list_flags(context.prefix)
        ]

    if isinstance(context, ObjectNameContext):
        factory = catalog_factory or sqlite_catalog_factory()
        return _resolve_object_names(context, factory, include_hidden, log_file)

    return []


def resolve(
    state: CommandLineState,
    *,
    include_hidden: bool | None = None,
    catalog_factory: CatalogFactory | None = None,
    config: CompletionConfig | None = None,
) -> list[CompletionItem]:
    """Classify the cursor word of ``state`` and resolve its candidates.

    Args:
        state: Command line being completed.
        include_hidden: Force hidden objects on/off. When None, they are
            shown if ``--hidden`` is on the command line or enabled in
            the configuration.
        catalog_factory: Opens the catalog of a database path. Defaults
            to read-only SQLite with the configured timeout.
        config: Settings; loaded from ``state.cwd``/``state.env`` when None.

    Returns:
        Candidates with their help text, or a single ``file`` item when the
        shell should complete the database filename natively.
    """
    if config is None:
        config = load_completion_config(state.cwd, state.env)
    if include_hidden is None:
        include_hidden = config.hidden or wants_hidden(state)
    if catalog_factory is None:
        catalog_factory = sqlite_catalog_factory(config.timeout)

    context = extract_context(state)
    if isinstance(context, FilePathContext):
        return [CompletionItem(context.prefix, type=FILE_ITEM_TYPE)]

    return resolve_candidates(context, catalog_factory, include_hidden, config.log_file)


def complete(
    words: Sequence[str],
    cword: int,
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    include_hidden: bool | None = None,
    catalog_factory: CatalogFactory | None = None,
) -> list[str]:
    """Completion candidates for ``words`` with the cursor on ``words[cword]``.

    Example:
        >>> complete(["sqlite-glance", "--li"], 1, cwd=Path.cwd())
        ['--limit']
    """
    try:
        state = CommandLineState.from_words(words, cword, cwd, env)
    except ValueError:
        return []

    items = resolve(state, include_hidden=include_hidden, catalog_factory=catalog_factory)
    return item_values(items)
