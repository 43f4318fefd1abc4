from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Mapping, Optional

from .models import DateRange, MetricSnapshot
from .utils import read_json

logger = logging.getLogger(__name__)

# Render order of the analytics section; (metric name, display label).
METRIC_LABELS: tuple[tuple[str, str], ...] = (
    ("activeUsers", "Active Users"),
    ("totalUsers", "Total Users"),
    ("sessions", "Sessions"),
    ("screenPageViews", "Page Views"),
    ("averageSessionDuration", "Avg Session Duration"),
    ("bounceRate", "Bounce Rate"),
    ("newUsers", "New Users"),
    ("engagedSessions", "Engaged Sessions"),
)
METRIC_NAMES: tuple[str, ...] = tuple(name for name, _ in METRIC_LABELS)


def _parse_metric(name: str, raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            logger.warning("Dropping unparseable value for metric '%s': %r", name, raw)
            return None
    if not math.isfinite(value):
        logger.warning("Dropping non-finite value for metric '%s': %r", name, raw)
        return None
    return value


def _parse_date_range(raw: Any) -> Optional[DateRange]:
    if not isinstance(raw, Mapping):
        return None
    start = raw.get("start") or raw.get("startDate")
    end = raw.get("end") or raw.get("endDate")
    if start is None and end is None:
        return None
    return DateRange(start=str(start) if start is not None else None, end=str(end) if end is not None else None)


def snapshot_from_report(
    payload: Mapping[str, Any],
    *,
    property_label: Optional[str] = None,
    date_range: Optional[Mapping[str, Any]] = None,
) -> MetricSnapshot:
    """Build a MetricSnapshot from an analytics report payload.

    Accepts the report route shape:
      {"metrics": {...}, "property": "123", "dateRange": {"startDate": ..., "endDate": ...}}
    as well as a serialized MetricSnapshot ("propertyLabel", {"start", "end"}).
    A payload without a "metrics" key is treated as the metrics mapping itself.
    Explicit keyword arguments win over the payload.
    """
    raw_metrics = payload.get("metrics") if isinstance(payload.get("metrics"), Mapping) else None
    if raw_metrics is None:
        raw_metrics = {k: v for k, v in payload.items() if k in METRIC_NAMES}

    metrics: dict[str, Optional[float]] = {}
    for name, raw in raw_metrics.items():
        value = _parse_metric(str(name), raw)
        if value is not None:
            metrics[str(name)] = value

    label = property_label or payload.get("propertyLabel") or payload.get("property")
    return MetricSnapshot(
        property_label=str(label) if label else None,
        date_range=_parse_date_range(date_range if date_range is not None else payload.get("dateRange")),
        metrics=metrics,
    )


def load_metric_snapshot(path: Path) -> MetricSnapshot:
    obj = read_json(path)
    if not isinstance(obj, Mapping):
        raise ValueError(f"Analytics report must be a JSON object: {path}")
    return snapshot_from_report(obj)
