from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

from ..errors import InvalidJsonError, NoJsonFoundError, SchemaViolationError
from ..models import MAX_CHART_LABELS, AnalysisResult, ChartData, ChartDataset

logger = logging.getLogger(__name__)

# First "{" to last "}" in the text.
_GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _top_level_starts(text: str) -> list[int]:
    """Positions of "{" that open a brace group at nesting depth zero.

    Braces inside JSON strings are ignored once a group is open, so a broken
    outer object never yields its nested objects as candidates.
    """
    starts: list[int] = []
    depth = 0
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and depth > 0:
            in_string = True
        elif ch == "{":
            if depth == 0:
                starts.append(i)
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
    return starts


def _first_decodable_object(text: str) -> Optional[dict[str, Any]]:
    """Return the first top-level brace group that decodes to a JSON object."""
    decoder = json.JSONDecoder()
    for pos in _top_level_starts(text):
        try:
            obj, _ = decoder.raw_decode(text, pos)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            return obj
    return None


def find_json_object(text: str) -> dict[str, Any]:
    """Locate and parse the JSON object embedded in model text.

    The greedy span is tried first; it covers the usual single-object reply
    even when prose surrounds it. When that span does not parse (for example
    two objects, or trailing braces in prose) the first well-formed top-level
    object wins; objects nested in a broken outer object are never candidates.
    """
    match = _GREEDY_OBJECT_RE.search(text or "")
    if match is None:
        raise NoJsonFoundError("No JSON found in response")

    span = match.group(0)
    try:
        obj = json.loads(span)
        if isinstance(obj, dict):
            return obj
    except json.JSONDecodeError:
        pass

    obj = _first_decodable_object(span)
    if obj is None:
        raise InvalidJsonError("Model response contains a brace span that is not a valid JSON object")
    return obj


def _string_list(obj: Mapping[str, Any], field: str) -> list[str]:
    value = obj.get(field)
    if not isinstance(value, list):
        raise SchemaViolationError(f"'{field}' must be a list of strings.")
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise SchemaViolationError(f"{field}[{i}] must be a string.")
    return list(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_chart_data(raw: Any) -> Optional[ChartData]:
    """Validate chart series and cap them at MAX_CHART_LABELS aligned points.

    Over-long series are truncated rather than rejected; misaligned series are
    rejected.
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise SchemaViolationError("'chartData' must be an object.")

    labels = raw.get("labels", [])
    if not isinstance(labels, list):
        raise SchemaViolationError("chartData.labels must be a list.")
    for i, label in enumerate(labels):
        if isinstance(label, (dict, list)) or label is None:
            raise SchemaViolationError(f"chartData.labels[{i}] must be a scalar.")

    datasets = raw.get("datasets", [])
    if not isinstance(datasets, list):
        raise SchemaViolationError("chartData.datasets must be a list.")

    n = len(labels)
    out: list[ChartDataset] = []
    for i, ds in enumerate(datasets):
        if not isinstance(ds, Mapping):
            raise SchemaViolationError(f"chartData.datasets[{i}] must be an object.")
        label = ds.get("label")
        if not isinstance(label, str):
            raise SchemaViolationError(f"chartData.datasets[{i}].label must be a string.")
        data = ds.get("data")
        if not isinstance(data, list) or not all(_is_number(v) for v in data):
            raise SchemaViolationError(f"chartData.datasets[{i}].data must be a list of numbers.")
        if len(data) != n:
            raise SchemaViolationError(
                f"chartData.datasets[{i}].data has {len(data)} value(s) but there are {n} label(s)."
            )
        out.append(ChartDataset(label=label, data=data[:MAX_CHART_LABELS]))

    if n > MAX_CHART_LABELS:
        logger.info("Truncating chart series from %d to %d labels", n, MAX_CHART_LABELS)

    return ChartData(labels=[str(x) for x in labels[:MAX_CHART_LABELS]], datasets=out)


def validate_result_obj(obj: Any) -> AnalysisResult:
    """Validate a parsed reply against the result contract.

    Raises SchemaViolationError on violations. Narrative fields are returned
    unchanged; unknown keys are ignored.
    """
    if not isinstance(obj, Mapping):
        raise SchemaViolationError("Model response must be a JSON object.")

    story = obj.get("story")
    if not isinstance(story, str) or not story.strip():
        raise SchemaViolationError("'story' must be a non-empty string.")

    insights = _string_list(obj, "insights")
    recommendations = _string_list(obj, "recommendations")
    chart = validate_chart_data(obj.get("chartData"))

    return AnalysisResult(
        story=story,
        insights=insights,
        recommendations=recommendations,
        chart_data=chart,
    )


def extract_result(text: str) -> AnalysisResult:
    """Parse and validate the analysis result embedded in raw model text."""
    try:
        return validate_result_obj(find_json_object(text))
    except (NoJsonFoundError, InvalidJsonError, SchemaViolationError) as exc:
        logger.warning("Failed to parse AI response (%s): %s", exc, text)
        raise
