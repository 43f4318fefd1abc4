from __future__ import annotations

import json
import logging
import math
from typing import Any, Optional, Sequence

from ..analytics import METRIC_LABELS
from ..errors import NoDataError
from ..models import MAX_SAMPLE_ROWS, ColumnKind, ColumnProfile, DatasetProfile, DocumentExcerpt, MetricSnapshot

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_LABEL = "Unknown"
DEFAULT_RANGE_START = "7daysAgo"
DEFAULT_RANGE_END = "today"
NOT_AVAILABLE = "N/A"


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_count(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _format_seconds(value: float) -> str:
    # Half rounds up, as a stopwatch would.
    return f"{int(math.floor(value + 0.5))} seconds"


def _format_percent(fraction: float) -> str:
    return f"{fraction * 100:.1f}%"


_METRIC_FORMATTERS = {
    "averageSessionDuration": _format_seconds,
    "bounceRate": _format_percent,
}


def _column_line(col: ColumnProfile) -> str:
    if col.kind == ColumnKind.NUMERIC:
        s = col.stats
        return f"{col.name}: numeric (min: {s.min:.2f}, max: {s.max:.2f}, avg: {s.avg:.2f})"
    examples = ", ".join(_format_scalar(v) for v in col.sample_values)
    return f"{col.name}: categorical (examples: {examples})"


def render_tabular_section(profile: Optional[DatasetProfile]) -> Optional[str]:
    if profile is None or not profile.columns or not profile.sample:
        return None

    names = ", ".join(c.name for c in profile.columns)
    column_lines = "\n".join(_column_line(c) for c in profile.columns)
    sample = json.dumps(profile.sample, indent=2, ensure_ascii=False, default=str)
    return (
        "## SPREADSHEET/CSV DATA\n"
        f"- Total rows: {_format_count(profile.total_rows)}\n"
        f"- Columns: {names}\n"
        "\n"
        "Column Analysis:\n"
        f"{column_lines}\n"
        "\n"
        f"Sample Data (first {MAX_SAMPLE_ROWS} rows):\n"
        f"{sample}"
    )


def render_analytics_section(snapshot: Optional[MetricSnapshot]) -> Optional[str]:
    if snapshot is None or not snapshot.has_metrics():
        return None

    rng = snapshot.date_range
    start = (rng.start if rng else None) or DEFAULT_RANGE_START
    end = (rng.end if rng else None) or DEFAULT_RANGE_END

    lines = [
        "## WEB ANALYTICS DATA",
        f"Property: {snapshot.property_label or DEFAULT_PROPERTY_LABEL}",
        f"Date Range: {start} to {end}",
        "",
        "Metrics:",
    ]
    for name, label in METRIC_LABELS:
        value = snapshot.metrics.get(name)
        if value is None or not math.isfinite(value):
            rendered = NOT_AVAILABLE
        else:
            rendered = _METRIC_FORMATTERS.get(name, _format_count)(value)
        lines.append(f"- {label}: {rendered}")
    return "\n".join(lines)


def render_documents_section(documents: Optional[Sequence[DocumentExcerpt]]) -> Optional[str]:
    if not documents:
        return None
    blocks = [f"### {doc.name} ({doc.mime_label})\n{doc.content}" for doc in documents]
    return "## UPLOADED DOCUMENTS\n\n" + "\n\n".join(blocks)


def build_context(
    dataset: Optional[DatasetProfile] = None,
    analytics: Optional[MetricSnapshot] = None,
    documents: Optional[Sequence[DocumentExcerpt]] = None,
) -> str:
    """Merge the available sources into one context block.

    Section order is fixed: tabular, analytics, documents. Sources that are
    absent or empty are skipped. Raises NoDataError when nothing qualifies so
    the model is never called with an empty prompt.
    """
    sections = [
        s
        for s in (
            render_tabular_section(dataset),
            render_analytics_section(analytics),
            render_documents_section(documents),
        )
        if s
    ]
    if not sections:
        raise NoDataError()

    context = "\n\n".join(sections)
    logger.debug("Built context with %d section(s), %d chars", len(sections), len(context))
    return context
