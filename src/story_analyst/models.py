from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Hard ceilings that keep the outgoing token count bounded.
MAX_ROWS_ACCEPTED = 100
MAX_SAMPLE_ROWS = 50
MAX_DOCUMENT_CHARS = 5000
MAX_CHART_LABELS = 10

Row = dict[str, Any]


class ColumnKind(str, Enum):
    """Outcome of column classification.

    - NUMERIC: more than half of the non-null values are numbers
    - CATEGORICAL: everything else, including all-null columns
    """
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class NumericStats(BaseModel):
    min: float
    max: float
    avg: float


class NumericColumn(BaseModel):
    name: str
    kind: Literal[ColumnKind.NUMERIC] = ColumnKind.NUMERIC
    stats: NumericStats
    sample_values: list[Any] = Field(default_factory=list)


class CategoricalColumn(BaseModel):
    name: str
    kind: Literal[ColumnKind.CATEGORICAL] = ColumnKind.CATEGORICAL
    sample_values: list[Any] = Field(default_factory=list)


ColumnProfile = Annotated[Union[NumericColumn, CategoricalColumn], Field(discriminator="kind")]


class DatasetProfile(BaseModel):
    """
    Statistical profile of one tabular source.

    total_rows: row count declared by the caller (may exceed the rows supplied)
    columns: one profile per header, header order
    sample: first rows supplied, verbatim, at most MAX_SAMPLE_ROWS
    """
    total_rows: int = 0
    columns: list[ColumnProfile] = Field(default_factory=list)
    sample: list[Row] = Field(default_factory=list)


class TabularInput(BaseModel):
    """
    Already-parsed delimited data handed over by the tabular source.

    Only the first MAX_ROWS_ACCEPTED rows are kept; total_rows carries the
    size of the full file so the prompt can state it.
    """
    model_config = ConfigDict(populate_by_name=True)

    headers: list[str] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)
    total_rows: int = Field(default=0, alias="totalRows")

    @field_validator("rows")
    @classmethod
    def _cap_rows(cls, rows: list[Row]) -> list[Row]:
        return rows[:MAX_ROWS_ACCEPTED]


class DateRange(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class MetricSnapshot(BaseModel):
    """Analytics metrics for one property over one date range.

    Every metric is optional. A missing metric is rendered as N/A, never as 0.
    """

    model_config = ConfigDict(populate_by_name=True)

    property_label: Optional[str] = Field(default=None, alias="propertyLabel")
    date_range: Optional[DateRange] = Field(default=None, alias="dateRange")
    metrics: dict[str, Optional[float]] = Field(default_factory=dict)

    def has_metrics(self) -> bool:
        return any(v is not None for v in self.metrics.values())


class DocumentExcerpt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    mime_label: str = Field(default="text/plain", alias="mimeLabel")
    content: str = ""

    @field_validator("content")
    @classmethod
    def _cap_content(cls, content: str) -> str:
        return content[:MAX_DOCUMENT_CHARS]


class ChartDataset(BaseModel):
    label: str
    data: list[Union[int, float]]


class ChartData(BaseModel):
    labels: list[str] = Field(default_factory=list)
    datasets: list[ChartDataset] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """
    Validated model output.

    story: executive narrative
    insights: data-driven findings
    recommendations: actions derived from the findings
    chart_data: optional chart-ready series aligned to shared labels
    """
    model_config = ConfigDict(populate_by_name=True)

    story: str
    insights: list[str]
    recommendations: list[str]
    chart_data: Optional[ChartData] = Field(default=None, alias="chartData")

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using the external camelCase names."""
        return self.model_dump(by_alias=True, exclude_none=True)
