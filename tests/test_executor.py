"""Tests for ranking run orchestration."""

from __future__ import annotations

from typing import Any

import pytest

from field_ranker import ConfigurationMissingError, RankingExecutor, RankingJob
from field_ranker.storage import DuckDBTableStore, FieldInfo


_FIELDS = [
    FieldInfo(name="points", data_type="DOUBLE", is_numeric=True),
    FieldInfo(name="place", data_type="INTEGER", is_numeric=True),
    FieldInfo(name="league", data_type="VARCHAR", is_numeric=False),
    FieldInfo(name="bonus", data_type="DOUBLE[]", is_numeric=True, is_multiple=True),
    FieldInfo(name="formula", data_type="DOUBLE", is_numeric=True, is_computed=True),
]


class _FakeStore:
    def __init__(
        self,
        rows: list[dict[str, Any]],
        *,
        fail_batches: set[int] | None = None,
    ) -> None:
        self.rows = rows
        self.fail_batches = fail_batches or set()
        self.fetch_calls: list[tuple[int, int]] = []
        self.update_calls: list[list[tuple[str, int]]] = []
        self.written: dict[str, int] = {}

    def list_fields(self, table: str) -> list[FieldInfo]:  # noqa: ARG002
        return _FIELDS

    def fetch_page(self, table, *, fields, order_by, offset, limit, view=None):  # noqa: ARG002
        self.fetch_calls.append((offset, limit))
        return [dict(row) for row in self.rows[offset : offset + limit]]

    def update_records(self, table, *, target_field, updates):  # noqa: ARG002
        self.update_calls.append([(u.record_id, u.rank) for u in updates])
        if len(self.update_calls) in self.fail_batches:
            raise RuntimeError("batch rejected")
        for update in updates:
            self.written[update.record_id] = update.rank
        return len(updates)


def _rows(*values: object, groups: list[object] | None = None) -> list[dict[str, Any]]:
    rows = []
    for i, value in enumerate(values):
        row: dict[str, Any] = {"id": f"rec{i}", "points": value}
        if groups is not None:
            row["league"] = groups[i]
        rows.append(row)
    return rows


def _job(**overrides: Any) -> RankingJob:
    params: dict[str, Any] = {
        "table": "scores",
        "source_field": "points",
        "target_field": "place",
    }
    params.update(overrides)
    return RankingJob(**params)


def test_execute_ranks_and_writes_all_records() -> None:
    store = _FakeStore(_rows(5, 9, 9, 1))

    report = RankingExecutor(store, page_size=10, batch_size=10).execute(_job())

    assert report.status == "complete"
    assert report.fetched == 4
    assert report.succeeded == 4
    assert report.failed == 0
    assert store.written == {"rec1": 1, "rec2": 1, "rec0": 3, "rec3": 4}
    assert report.summary() == "Ranked 4 records"


def test_execute_fetches_every_page_until_a_short_page() -> None:
    store = _FakeStore(_rows(1, 2, 3, 4, 5))

    report = RankingExecutor(store, page_size=2, batch_size=100).execute(_job())

    assert store.fetch_calls == [(0, 2), (2, 2), (4, 2)]
    assert report.fetched == 5


def test_execute_stops_on_empty_page_when_rows_divide_evenly() -> None:
    store = _FakeStore(_rows(1, 2, 3, 4))

    RankingExecutor(store, page_size=2, batch_size=100).execute(_job())

    assert store.fetch_calls == [(0, 2), (2, 2), (4, 2)]


def test_execute_writes_in_batches() -> None:
    store = _FakeStore(_rows(1, 2, 3, 4, 5))

    RankingExecutor(store, page_size=100, batch_size=2).execute(_job())

    assert [len(call) for call in store.update_calls] == [2, 2, 1]


def test_execute_reports_partial_failure() -> None:
    store = _FakeStore(_rows(1, 2, 3, 4, 5), fail_batches={2})

    report = RankingExecutor(store, page_size=100, batch_size=2).execute(_job())

    assert report.status == "partial"
    assert report.succeeded == 3
    assert report.failed == 2
    assert len(store.written) == 3
    assert report.summary() == "Ranked 3 records, 2 records failed"


def test_execute_grouped_run_reports_group_count() -> None:
    store = _FakeStore(
        _rows(3, 8, 5, 0, groups=["north", "south", "north", "south"])
    )

    report = RankingExecutor(store, page_size=100, batch_size=100).execute(
        _job(group_field="league")
    )

    assert report.grouped is True
    assert report.group_count == 2
    assert store.written == {"rec2": 1, "rec0": 2, "rec1": 1}
    assert report.summary() == "Ranked 3 records across 2 groups"


def test_execute_with_empty_table_reports_no_valid_data() -> None:
    store = _FakeStore([])

    report = RankingExecutor(store, page_size=10, batch_size=10).execute(_job())

    assert report.status == "no_valid_data"
    assert report.fetched == 0
    assert store.update_calls == []


def test_execute_without_usable_values_reports_no_valid_data() -> None:
    store = _FakeStore(_rows(None, "n/a", 0))

    report = RankingExecutor(store, page_size=10, batch_size=10).execute(_job())

    assert report.status == "no_valid_data"
    assert report.fetched == 3
    assert store.update_calls == []
    assert "No valid data" in report.summary()


def test_execute_dry_run_writes_nothing() -> None:
    store = _FakeStore(_rows(1, 2))

    report = RankingExecutor(store, page_size=10, batch_size=10).execute(
        _job(), dry_run=True
    )

    assert report.dry_run is True
    assert report.succeeded == 2
    assert store.update_calls == []
    assert report.summary() == "Would rank 2 records"


def test_preview_returns_outcome_without_writing() -> None:
    store = _FakeStore(_rows(4, 4, 2))

    outcome = RankingExecutor(store, page_size=10, batch_size=10).preview(
        _job(ranking_method="dense")
    )

    assert outcome.rank_by_id() == {"rec0": 1, "rec1": 1, "rec2": 2}
    assert store.update_calls == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"source_field": "missing"},
        {"source_field": "league"},
        {"target_field": "missing"},
        {"target_field": "points"},
        {"target_field": "bonus"},
        {"target_field": "formula"},
        {"group_field": "missing"},
    ],
)
def test_execute_rejects_unresolvable_fields(overrides: dict[str, str]) -> None:
    store = _FakeStore(_rows(1, 2))

    with pytest.raises(ConfigurationMissingError):
        RankingExecutor(store, page_size=10, batch_size=10).execute(_job(**overrides))

    assert store.fetch_calls == []


def test_multi_value_source_field_is_accepted() -> None:
    store = _FakeStore(
        [
            {"id": "a", "bonus": [2.0, 10.0]},
            {"id": "b", "bonus": [5.0]},
            {"id": "c", "bonus": []},
        ]
    )

    report = RankingExecutor(store, page_size=10, batch_size=10).execute(
        _job(source_field="bonus")
    )

    assert report.succeeded == 2
    assert store.written == {"b": 1, "a": 2}


def test_execute_against_duckdb_store(scores_db: str, read_column) -> None:
    with DuckDBTableStore(scores_db) as store:
        report = RankingExecutor(store, page_size=2, batch_size=2).execute(
            _job(group_field="league")
        )

    assert report.status == "complete"
    assert report.fetched == 6
    assert report.group_count == 3
    assert read_column(scores_db, "place") == {
        "rec1": 1,
        "rec2": 1,
        "rec3": 1,
        "rec4": None,
        "rec5": None,
        "rec6": 1,
    }


def test_execute_ranks_only_records_in_view(scores_db: str, read_column) -> None:
    with DuckDBTableStore(scores_db) as store:
        report = RankingExecutor(store, page_size=10, batch_size=10).execute(
            _job(view="north_scores", sort_direction="asc")
        )

    assert report.fetched == 3
    place = read_column(scores_db, "place")
    assert place["rec1"] == 1
    assert place["rec3"] == 1
    assert place["rec2"] is None
    assert place["rec6"] is None
