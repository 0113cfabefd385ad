"""Tests for candidate resolution against a fake catalog."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.shell_completion import CompletionItem

from sqlite_glance.exceptions import CatalogQueryFailed, UnreadableDatabase
from sqlite_glance.helpers.autocompletions.catalog import SchemaObject
from sqlite_glance.helpers.autocompletions.config import CompletionConfig
from sqlite_glance.helpers.autocompletions.context import (
    CommandLineState,
    FilePathContext,
    FlagContext,
    NoContext,
    ObjectNameContext,
)
from sqlite_glance.helpers.autocompletions.flags import FLAGS
from sqlite_glance.helpers.autocompletions.resolver import (
    FILE_ITEM_TYPE,
    complete,
    filter_objects,
    resolve,
    resolve_candidates,
)
from tests.fakes import FakeCatalogFactory

DB = Path("/data/app.db")


def _names(items: list[CompletionItem]) -> list[str]:
    return [item.value for item in items]


def _pairs(items: list[CompletionItem]) -> list[tuple[str, str | None]]:
    return [(item.value, item.help) for item in items]


class TestFilterObjects:
    """Prefix matching and hidden-object rules."""

    def test_case_insensitive_prefix_keeps_tables_and_views(self) -> None:
        objects = [
            SchemaObject("Users", "table"),
            SchemaObject("orders", "table"),
            SchemaObject("UserLog", "view"),
        ]

        result = filter_objects(objects, "user")

        assert [o.name for o in result] == ["Users", "UserLog"]

    @pytest.mark.parametrize("prefix", ["us", "US", "Us", "uS"])
    def test_every_case_variation_of_prefix_matches(self, prefix: str) -> None:
        result = filter_objects([SchemaObject("Users", "table")], prefix)

        assert [o.name for o in result] == ["Users"]

    def test_prefix_longer_than_name_does_not_match(self) -> None:
        assert filter_objects([SchemaObject("ab", "table")], "abc") == []

    def test_non_ascii_letters_are_not_folded(self) -> None:
        """Only A-Z/a-z fold; ``É`` and ``é`` stay different."""
        objects = [SchemaObject("Élèves", "table"), SchemaObject("élan", "table")]

        assert [o.name for o in filter_objects(objects, "é")] == ["élan"]

    def test_hidden_objects_excluded_by_default(self) -> None:
        objects = [
            SchemaObject("sqlite_sequence", "table"),
            SchemaObject("SQLITE_stat1", "table"),
            SchemaObject("docs_data", "shadow"),
            SchemaObject("docs", "virtual"),
        ]

        assert [o.name for o in filter_objects(objects, "")] == ["docs"]

    def test_hidden_objects_included_on_request(self) -> None:
        objects = [
            SchemaObject("sqlite_sequence", "table"),
            SchemaObject("docs_data", "shadow"),
        ]

        result = filter_objects(objects, "", include_hidden=True)

        assert [o.name for o in result] == ["sqlite_sequence", "docs_data"]

    def test_other_catalog_kinds_are_dropped(self) -> None:
        objects = [SchemaObject("ix_users", "index"), SchemaObject("trg", "trigger")]

        assert filter_objects(objects, "", include_hidden=True) == []


class TestResolveCandidates:
    """Tests for resolve_candidates() per context."""

    def test_flag_context_returns_static_flags(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        """Flags never touch the database."""
        factory = fake_factory(error=UnreadableDatabase(DB, "no such file"))

        result = resolve_candidates(FlagContext("-"), factory)

        assert _names(result) == list(FLAGS)
        assert factory.opened == []

    def test_flag_context_filters_by_prefix(self) -> None:
        result = resolve_candidates(FlagContext("--h"))

        assert _names(result) == ["--help", "--hidden"]

    def test_flag_candidates_carry_help_text(self) -> None:
        result = resolve_candidates(FlagContext("-V"))

        assert _pairs(result) == [("-V", "Show version number")]

    def test_file_path_context_has_no_candidates(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        factory = fake_factory()

        assert resolve_candidates(FilePathContext("da"), factory) == []
        assert factory.opened == []

    def test_no_context_has_no_candidates(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        assert resolve_candidates(NoContext("too many"), fake_factory()) == []

    def test_object_names_in_catalog_order_with_kind(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        factory = fake_factory()

        result = resolve_candidates(ObjectNameContext(DB, "user"), factory)

        assert _pairs(result) == [("Users", "table"), ("UserLog", "view")]
        assert factory.opened == [DB]

    def test_empty_prefix_is_idempotent(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        factory = fake_factory()
        context = ObjectNameContext(DB, "")

        first = resolve_candidates(context, factory)
        second = resolve_candidates(context, factory)

        assert _names(first) == ["Users", "orders", "UserLog", "docs"]
        assert _pairs(first) == _pairs(second)

    def test_catalog_is_read_on_every_request(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        """No caching across requests."""
        factory = fake_factory()
        context = ObjectNameContext(DB, "o")

        resolve_candidates(context, factory)
        factory.catalog.objects.append(SchemaObject("outbox", "table"))
        result = resolve_candidates(context, factory)

        assert _names(result) == ["orders", "outbox"]
        assert factory.catalog.calls == 2

    def test_hidden_flag_includes_system_and_shadow_tables(
        self, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        result = resolve_candidates(
            ObjectNameContext(DB, ""), fake_factory(), include_hidden=True,
        )

        assert "sqlite_sequence" in _names(result)
        assert "docs_data" in _names(result)

    @pytest.mark.parametrize(
        "error",
        [
            UnreadableDatabase(DB, "file is not a database"),
            CatalogQueryFailed(DB, "database is locked"),
            RuntimeError("driver bug"),
        ],
    )
    def test_failures_resolve_to_empty_list(
        self,
        error: Exception,
        fake_factory: Callable[..., FakeCatalogFactory],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        result = resolve_candidates(ObjectNameContext(DB, ""), fake_factory(error=error))

        assert result == []
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_failure_is_logged_to_diagnostic_file(
        self,
        tmp_path: Path,
        fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        log_file = tmp_path / "complete.log"
        factory = fake_factory(error=CatalogQueryFailed(DB, "database is locked"))

        resolve_candidates(ObjectNameContext(DB, ""), factory, log_file=log_file)

        log_text = log_file.read_text(encoding="utf-8")
        assert "CatalogQueryFailed" in log_text
        assert "database is locked" in log_text

    def test_unwritable_log_file_is_ignored(
        self,
        tmp_path: Path,
        fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        factory = fake_factory(error=CatalogQueryFailed(DB, "locked"))
        log_file = tmp_path / "missing-dir" / "complete.log"

        assert resolve_candidates(ObjectNameContext(DB, ""), factory, log_file=log_file) == []
        assert not log_file.exists()


class TestResolve:
    """Tests for the full resolve() pipeline on a command line."""

    def test_file_argument_asks_for_file_completion(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        state = CommandLineState.from_words(["sqlite-glance", "sa"], 1, tmp_path, {})

        result = resolve(state, catalog_factory=fake_factory(), config=CompletionConfig())

        assert [(item.type, item.value) for item in result] == [(FILE_ITEM_TYPE, "sa")]

    def test_hidden_on_command_line_enables_hidden_objects(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        state = CommandLineState.from_words(
            ["sqlite-glance", "--hidden", "app.db", "sq"], 3, tmp_path, {},
        )

        result = resolve(state, catalog_factory=fake_factory(), config=CompletionConfig())

        assert _names(result) == ["sqlite_sequence"]

    def test_explicit_include_hidden_false_wins(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        state = CommandLineState.from_words(
            ["sqlite-glance", "--hidden", "app.db", "sq"], 3, tmp_path, {},
        )

        result = resolve(
            state,
            include_hidden=False,
            catalog_factory=fake_factory(),
            config=CompletionConfig(hidden=True),
        )

        assert _names(result) == []

    def test_config_hidden_enables_hidden_objects(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        state = CommandLineState.from_words(["sqlite-glance", "app.db", "sq"], 2, tmp_path, {})

        result = resolve(
            state,
            catalog_factory=fake_factory(),
            config=CompletionConfig(hidden=True),
        )

        assert _names(result) == ["sqlite_sequence"]

    def test_relative_database_path_resolved_against_cwd(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        factory = fake_factory()
        state = CommandLineState.from_words(
            ["sqlite-glance", "sub/app.db", ""], 2, tmp_path, {},
        )

        resolve(state, catalog_factory=factory, config=CompletionConfig())

        assert factory.opened == [tmp_path / "sub" / "app.db"]


class TestComplete:
    """Tests for the complete() entry point."""

    def test_example_from_catalog(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        result = complete(
            ["sqlite-glance", "app.db", "user"], 2,
            cwd=tmp_path, env={}, catalog_factory=fake_factory(),
        )

        assert result == ["Users", "UserLog"]

    def test_flags_regardless_of_database(self, tmp_path: Path) -> None:
        result = complete(
            ["sqlite-glance", "missing.db", "-"], 2, cwd=tmp_path, env={},
        )

        assert result == list(FLAGS)

    def test_third_positional_is_empty(
        self, tmp_path: Path, fake_factory: Callable[..., FakeCatalogFactory],
    ) -> None:
        factory = fake_factory()

        result = complete(
            ["sqlite-glance", "app.db", "Users", ""], 3,
            cwd=tmp_path, env={}, catalog_factory=factory,
        )

        assert result == []
        assert factory.opened == []

    def test_cursor_out_of_range_is_empty(self, tmp_path: Path) -> None:
        assert complete(["sqlite-glance"], 7, cwd=tmp_path, env={}) == []

    def test_nonexistent_database_is_silent(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        result = complete(
            ["sqlite-glance", "nope.db", "us"], 2, cwd=tmp_path, env={},
        )

        assert result == []
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
