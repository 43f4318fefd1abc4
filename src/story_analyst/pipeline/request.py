from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..analytics import snapshot_from_report
from ..models import DocumentExcerpt, MetricSnapshot, TabularInput


@dataclass(frozen=True)
class AnalysisRequest:
    tabular: Optional[TabularInput] = None
    analytics: Optional[MetricSnapshot] = None
    documents: list[DocumentExcerpt] = field(default_factory=list)


def request_from_payload(payload: Mapping[str, Any]) -> AnalysisRequest:
    """Adapt an analyze request body to pipeline inputs.

    Accepted keys:
      headers, data (or csvData for single-source callers), totalRows,
      ga4Metrics, ga4Property, dateRange {start, end},
      uploadedDocuments [{name, type, content}]
    Missing keys simply leave that source out.
    """
    headers = payload.get("headers") or []
    rows = payload.get("data") or payload.get("csvData") or []
    tabular: Optional[TabularInput] = None
    if headers or rows:
        tabular = TabularInput(
            headers=[str(h) for h in headers],
            rows=[dict(r) for r in rows if isinstance(r, Mapping)],
            total_rows=int(payload.get("totalRows") or 0),
        )

    analytics: Optional[MetricSnapshot] = None
    metrics = payload.get("ga4Metrics")
    if isinstance(metrics, Mapping):
        analytics = snapshot_from_report(
            {"metrics": metrics},
            property_label=payload.get("ga4Property"),
            date_range=payload.get("dateRange"),
        )

    documents: list[DocumentExcerpt] = []
    for doc in payload.get("uploadedDocuments") or []:
        if not isinstance(doc, Mapping):
            continue
        documents.append(
            DocumentExcerpt(
                name=str(doc.get("name") or "document"),
                mime_label=str(doc.get("type") or doc.get("mimeLabel") or "unknown"),
                content=str(doc.get("content") or ""),
            )
        )

    return AnalysisRequest(tabular=tabular, analytics=analytics, documents=documents)
