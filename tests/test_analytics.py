from __future__ import annotations

import json
from pathlib import Path

import pytest

from story_analyst.analytics import load_metric_snapshot, snapshot_from_report
from story_analyst.errors import NoDataError
from story_analyst.models import MetricSnapshot
from story_analyst.synth import build_context


def test_report_shape_is_parsed(tmp_path: Path) -> None:
    p = tmp_path / "report.json"
    p.write_text(
        json.dumps(
            {
                "metrics": {"activeUsers": "1200", "bounceRate": 0.41, "sessions": "oops"},
                "property": "426071039",
                "dateRange": {"startDate": "30daysAgo", "endDate": "today"},
            }
        ),
        encoding="utf-8",
    )
    snap = load_metric_snapshot(p)
    assert snap.property_label == "426071039"
    assert snap.date_range.start == "30daysAgo"
    assert snap.date_range.end == "today"
    assert snap.metrics == {"activeUsers": 1200.0, "bounceRate": 0.41}


def test_flat_metric_payload_and_overrides() -> None:
    snap = snapshot_from_report(
        {"activeUsers": 5, "unrelated": "x"},
        property_label="Web (prod)",
        date_range={"start": "2024-01-01", "end": "2024-01-31"},
    )
    assert snap.metrics == {"activeUsers": 5.0}
    assert snap.property_label == "Web (prod)"
    assert snap.date_range.start == "2024-01-01"


def test_empty_report_has_no_metrics() -> None:
    snap = snapshot_from_report({"metrics": {}})
    assert snap.has_metrics() is False
    assert snap.date_range is None


def test_non_finite_metrics_are_dropped() -> None:
    snap = snapshot_from_report(
        {
            "metrics": {
                "averageSessionDuration": "NaN",
                "bounceRate": "Infinity",
                "sessions": float("-inf"),
                "activeUsers": 7,
            }
        }
    )
    assert snap.metrics == {"activeUsers": 7.0}
    text = build_context(analytics=snap)
    assert "- Avg Session Duration: N/A" in text
    assert "- Bounce Rate: N/A" in text


def test_non_finite_only_report_counts_as_no_data() -> None:
    snap = snapshot_from_report({"metrics": {"averageSessionDuration": "NaN"}})
    assert not snap.has_metrics()
    with pytest.raises(NoDataError):
        build_context(analytics=snap)


def test_snapshot_built_directly_renders_non_finite_as_missing() -> None:
    snap = MetricSnapshot(metrics={"averageSessionDuration": float("nan"), "activeUsers": 3.0})
    text = build_context(analytics=snap)
    assert "- Avg Session Duration: N/A" in text
    assert "- Active Users: 3" in text
