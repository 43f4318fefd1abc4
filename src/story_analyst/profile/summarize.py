from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models import MAX_SAMPLE_ROWS, DatasetProfile, Row, TabularInput
from .columns import profile_column

logger = logging.getLogger(__name__)


def summarize_dataset(
    headers: Sequence[str],
    rows: Sequence[Row],
    total_rows: Optional[int] = None,
) -> DatasetProfile:
    """Profile every column and keep a verbatim sample of the leading rows.

    - Each column is profiled over all supplied rows; no second truncation.
    - `sample` holds the first MAX_SAMPLE_ROWS rows exactly as supplied.
    - `total_rows` is the caller's declared count, never less than len(rows)
      (a missing or short declaration is raised to the supplied count).

    Empty headers or rows yield an empty profile rather than an error; the
    context merge treats that as "no tabular section".
    """
    declared = max(total_rows or 0, len(rows))

    if not headers or not rows:
        return DatasetProfile(total_rows=declared, columns=[], sample=[])

    columns = [profile_column(h, (row.get(h) for row in rows)) for h in headers]
    sample = [dict(row) for row in rows[:MAX_SAMPLE_ROWS]]

    logger.debug("Profiled %d column(s) over %d row(s), sampled %d", len(columns), len(rows), len(sample))
    return DatasetProfile(total_rows=declared, columns=columns, sample=sample)


def summarize_tabular(tabular: TabularInput) -> DatasetProfile:
    return summarize_dataset(tabular.headers, tabular.rows, tabular.total_rows)
