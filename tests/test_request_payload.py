from __future__ import annotations

from story_analyst.pipeline import request_from_payload


def test_multi_source_payload() -> None:
    req = request_from_payload(
        {
            "headers": ["revenue"],
            "data": [{"revenue": i} for i in range(120)],
            "totalRows": 5000,
            "ga4Metrics": {"activeUsers": 10, "totalUsers": None},
            "ga4Property": "MyApp (Web)",
            "dateRange": {"start": "7daysAgo", "end": "today"},
            "uploadedDocuments": [{"name": "brief.docx", "type": "docx", "content": "c" * 6000}],
        }
    )
    assert req.tabular is not None
    assert len(req.tabular.rows) == 100
    assert req.tabular.total_rows == 5000
    assert req.analytics.property_label == "MyApp (Web)"
    assert req.analytics.metrics == {"activeUsers": 10.0}
    assert req.documents[0].mime_label == "docx"
    assert len(req.documents[0].content) == 5000


def test_single_source_csv_data_variant() -> None:
    req = request_from_payload({"headers": ["a"], "csvData": [{"a": 1}]})
    assert req.tabular.rows == [{"a": 1}]
    assert req.analytics is None
    assert req.documents == []


def test_empty_payload_has_no_sources() -> None:
    req = request_from_payload({})
    assert req.tabular is None
    assert req.analytics is None
    assert req.documents == []
