from __future__ import annotations

from story_analyst.models import ColumnKind, TabularInput
from story_analyst.profile import summarize_dataset, summarize_tabular


def test_revenue_region_scenario() -> None:
    profile = summarize_dataset(
        ["revenue", "region"],
        [{"revenue": 100, "region": "east"}, {"revenue": 200, "region": "west"}],
        2,
    )
    revenue, region = profile.columns
    assert revenue.kind == ColumnKind.NUMERIC
    assert (revenue.stats.min, revenue.stats.max, revenue.stats.avg) == (100, 200, 150.00)
    assert region.kind == ColumnKind.CATEGORICAL
    assert region.sample_values == ["east", "west"]
    assert profile.total_rows == 2


def test_sample_is_capped_at_fifty_rows_verbatim() -> None:
    rows = [{"n": i} for i in range(80)]
    profile = summarize_dataset(["n"], rows, 37_412)
    assert len(profile.sample) == 50
    assert profile.sample[0] == {"n": 0}
    assert profile.sample[-1] == {"n": 49}
    assert profile.total_rows == 37_412
    # Column stats use every supplied row, not just the sample.
    assert profile.columns[0].stats.max == 79


def test_sample_never_exceeds_rows_supplied() -> None:
    for n in (0, 1, 49, 50, 51, 100):
        rows = [{"a": i} for i in range(n)]
        profile = summarize_dataset(["a"], rows, n)
        assert len(profile.sample) <= min(50, n)


def test_empty_inputs_give_empty_profile() -> None:
    assert summarize_dataset([], [{"a": 1}], 1).columns == []
    empty_rows = summarize_dataset(["a"], [], 0)
    assert empty_rows.columns == []
    assert empty_rows.sample == []


def test_missing_keys_count_as_null() -> None:
    profile = summarize_dataset(["a", "b"], [{"a": 1}, {"a": 2, "b": "x"}], 2)
    assert profile.columns[1].kind == ColumnKind.CATEGORICAL
    assert profile.columns[1].sample_values == ["x"]


def test_declared_zero_total_falls_back_to_row_count() -> None:
    profile = summarize_dataset(["a"], [{"a": 1}, {"a": 2}], 0)
    assert profile.total_rows == 2


def test_tabular_input_caps_rows_at_one_hundred() -> None:
    tabular = TabularInput(headers=["a"], rows=[{"a": i} for i in range(150)], totalRows=150)
    assert len(tabular.rows) == 100
    profile = summarize_tabular(tabular)
    assert profile.total_rows == 150
    assert profile.columns[0].stats.max == 99


def test_short_declared_total_is_raised_to_supplied_rows() -> None:
    rows = [{"a": i} for i in range(3)]
    profile = summarize_dataset(["a"], rows, 1)
    assert profile.total_rows == 3
    assert len(profile.sample) <= min(50, profile.total_rows)
