from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
from pandas.api import types as ptypes

from .models import MAX_ROWS_ACCEPTED, Row, TabularInput


def _to_scalar(value: Any) -> Any:
    """
    Map a pandas cell to the scalar types the profiler understands.

    Missing -> None, numpy bool -> bool, numpy ints/floats -> int/float,
    anything else (dates, mixed objects) -> str.
    """
    if value is None:
        return None
    if not isinstance(value, (list, dict)) and pd.isna(value):
        return None
    if ptypes.is_bool(value):
        return bool(value)
    if ptypes.is_integer(value):
        return int(value)
    if ptypes.is_float(value):
        return float(value)
    if isinstance(value, str):
        return value
    return str(value)


def tabular_from_frame(df: pd.DataFrame, *, max_rows: int = MAX_ROWS_ACCEPTED) -> TabularInput:
    """Convert a DataFrame to the tabular source contract.

    Only the first `max_rows` rows are carried; totalRows is the full height.
    """
    headers = [str(c) for c in df.columns]
    head = df.head(max_rows)
    rows: list[Row] = []
    for record in head.itertuples(index=False, name=None):
        rows.append({h: _to_scalar(v) for h, v in zip(headers, record)})
    return TabularInput(headers=headers, rows=rows, total_rows=int(df.shape[0]))


def load_tabular_csv(path: Path, *, max_rows: int = MAX_ROWS_ACCEPTED) -> TabularInput:
    """
    Read a delimited file with pandas and hand over at most `max_rows` rows.

    Blank lines are skipped and a UTF-8 BOM is tolerated.
    """
    df = pd.read_csv(path, skip_blank_lines=True, encoding="utf-8-sig")
    return tabular_from_frame(df, max_rows=max_rows)
