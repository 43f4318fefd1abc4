from __future__ import annotations

from story_analyst.models import ColumnKind
from story_analyst.profile.columns import profile_column


def test_numeric_majority_reports_rounded_stats() -> None:
    col = profile_column("price", [1.234, 2.0, 3.5, "n/a"])
    assert col.kind == ColumnKind.NUMERIC
    assert col.stats.min == 1.23
    assert col.stats.max == 3.5
    assert col.stats.avg == 2.24
    assert col.stats.min <= col.stats.avg <= col.stats.max


def test_exactly_half_numeric_is_categorical() -> None:
    col = profile_column("mixed", [1, "a", 2, "b"])
    assert col.kind == ColumnKind.CATEGORICAL
    assert not hasattr(col, "stats")
    assert col.sample_values == [1, "a", 2, "b"]


def test_nulls_are_ignored_for_classification() -> None:
    col = profile_column("units", [None, 5, None, float("nan"), "x", 7])
    assert col.kind == ColumnKind.NUMERIC
    assert col.stats.min == 5
    assert col.stats.max == 7
    assert col.stats.avg == 6


def test_all_null_column_is_empty_categorical() -> None:
    col = profile_column("empty", [None, None])
    assert col.kind == ColumnKind.CATEGORICAL
    assert col.sample_values == []


def test_categorical_sample_dedupes_first_ten_and_keeps_five() -> None:
    values = ["a", "b", "a", "c", "d", "c", "e", "f", "g", "h", "z"]
    col = profile_column("letters", values)
    assert col.kind == ColumnKind.CATEGORICAL
    assert col.sample_values == ["a", "b", "c", "d", "e"]


def test_sample_only_considers_first_ten_observations() -> None:
    values = ["a"] * 10 + ["b", "c"]
    col = profile_column("repeated", values)
    assert col.sample_values == ["a"]


def test_booleans_are_not_numbers() -> None:
    col = profile_column("flag", [True, False, True, 1])
    assert col.kind == ColumnKind.CATEGORICAL
    # True and 1 stay distinct in the sample.
    assert col.sample_values == [True, False, 1]
