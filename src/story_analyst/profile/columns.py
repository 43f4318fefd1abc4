from __future__ import annotations

import math
from typing import Any, Iterable

from ..models import CategoricalColumn, ColumnProfile, NumericColumn, NumericStats

_SAMPLE_SCAN = 10
_SAMPLE_KEEP = 5


def is_null(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_number(value: Any) -> bool:
    # bool is an int subclass but is not a measurement.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _distinct_sample(values: list[Any]) -> list[Any]:
    """First-seen distinct values among the first observations.

    Keys include the type so that True and 1 stay distinct.
    """
    seen: set[tuple[str, Any]] = set()
    out: list[Any] = []
    for v in values[:_SAMPLE_SCAN]:
        try:
            key = (type(v).__name__, v)
            hash(key)
        except TypeError:
            key = (type(v).__name__, repr(v))
        if key in seen:
            continue
        seen.add(key)
        out.append(v)
    return out[:_SAMPLE_KEEP]


def profile_column(name: str, values: Iterable[Any]) -> ColumnProfile:
    """Classify one column and summarize it.

    A column is numeric when more than half of its non-null values are
    numbers; min/max/avg are then computed over the numeric subset only.
    All-null columns come back categorical with an empty sample.
    """
    observed = [v for v in values if not is_null(v)]
    numbers = [v for v in observed if is_number(v)]
    sample = _distinct_sample(observed)

    if numbers and len(numbers) > len(observed) / 2:
        stats = NumericStats(
            min=round(float(min(numbers)), 2),
            max=round(float(max(numbers)), 2),
            avg=round(sum(numbers) / len(numbers), 2),
        )
        return NumericColumn(name=name, stats=stats, sample_values=sample)

    return CategoricalColumn(name=name, sample_values=sample)
