# DataLab Engine - Summary Statistics Engine
# Per-column descriptive statistics and dataset completeness

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import numpy as np

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.missing_values import upper_median
from datalab.ml.type_inference import Number, column_values, is_fully_numeric, js_string, to_number
from datalab.schemas.dataset import Dataset

logger = get_logger(__name__)


# ============================================================================
# Enums
# ============================================================================

class SummaryKind(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class ValueFrequency:
    """One entry of a categorical column's top values."""
    value: str
    count: int
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "count": self.count, "percentage": f"{self.percentage:.1f}"}


@dataclass
class ColumnSummary:
    """Descriptive statistics for a single column."""
    column: str
    kind: SummaryKind
    count: int
    missing: int
    unique_count: int
    min: Optional[Number] = None
    max: Optional[Number] = None
    mean: Optional[float] = None
    median: Optional[Number] = None
    top_values: list[ValueFrequency] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "count": self.count,
            "missing": self.missing,
            "uniqueCount": self.unique_count,
        }
        if self.kind == SummaryKind.NUMERIC:
            data.update(min=self.min, max=self.max, mean=self.mean, median=self.median)
        else:
            data["topValues"] = [tv.to_dict() for tv in self.top_values]
        return data


@dataclass
class SummaryAnalysis(BaseAnalysis):
    """Dataset summary result."""
    columns: list[ColumnSummary] = field(default_factory=list)
    rows: int = 0
    completeness: float = 100.0

    @property
    def total_missing(self) -> int:
        return sum(c.missing for c in self.columns)

    @property
    def completeness_label(self) -> str:
        return f"{self.completeness:.1f}%"

    def payload(self) -> dict[str, Any]:
        return {
            "summary": {c.column: c.to_dict() for c in self.columns},
            "completeness": self.completeness_label,
            "dataShape": {
                "rows": self.rows,
                "columns": len(self.columns),
                "completeness": self.completeness_label,
            },
        }


# ============================================================================
# Helpers
# ============================================================================

def _value_identity(value: Any) -> tuple[str, str]:
    # "1" and 1 are distinct values; 1 and 1.0 are the same
    if isinstance(value, bool):
        return "boolean", js_string(value)
    if isinstance(value, (int, float)):
        return "number", js_string(value)
    return "string", js_string(value)


def unique_count(values: list[Any]) -> int:
    return len({_value_identity(v) for v in values})


def top_values(values: list[Any], limit: int = 5) -> list[ValueFrequency]:
    """Most frequent string forms; ties keep first-seen order."""
    if not values:
        return []
    counts = Counter(js_string(v) for v in values)
    total = len(values)
    return [
        ValueFrequency(value=value, count=count, percentage=count / total * 100)
        for value, count in counts.most_common(limit)
    ]


def _mean(numbers: list[Number]) -> float:
    with np.errstate(invalid="ignore", over="ignore"):
        return float(np.mean(np.asarray(numbers, dtype=float)))


# ============================================================================
# Summary Statistics Engine
# ============================================================================

class SummaryStatisticsEngine:
    """
    Summarizes every column as numeric or categorical.

    A column is numeric when all of its non-missing values parse as
    numbers; everything else, including all-missing columns, is categorical.
    """

    name = AgentOperation.GENERATE_SUMMARY

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    def summarize_column(self, dataset: Dataset, column: str, settings: EngineSettings) -> ColumnSummary:
        values = column_values(dataset.rows, column)
        missing = dataset.row_count - len(values)
        if is_fully_numeric(values):
            numbers = [to_number(v) for v in values]
            return ColumnSummary(
                column=column,
                kind=SummaryKind.NUMERIC,
                count=len(values),
                missing=missing,
                unique_count=unique_count(values),
                min=min(numbers),
                max=max(numbers),
                mean=_mean(numbers),
                median=upper_median(numbers),
            )

        return ColumnSummary(
            column=column,
            kind=SummaryKind.CATEGORICAL,
            count=len(values),
            missing=missing,
            unique_count=unique_count(values),
            top_values=top_values(values, settings.top_values_limit),
        )

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=SummaryAnalysis(
                    reasoning="No data to summarize",
                    insights=["Upload data to generate a summary"],
                    agent_type=self.name.value,
                ),
            )

        analysis = SummaryAnalysis(rows=dataset.row_count, agent_type=self.name.value)
        analysis.columns = [
            self.summarize_column(dataset, col, settings) for col in dataset.columns
        ]

        total_cells = dataset.row_count * len(analysis.columns)
        if total_cells:
            analysis.completeness = (total_cells - analysis.total_missing) / total_cells * 100

        analysis.reasoning = self._reasoning(analysis)
        analysis.insights = self._insights(analysis)

        if self.verbose:
            logger.info(
                f"Summarized {len(analysis.columns)} columns",
                rows=analysis.rows,
                completeness=analysis.completeness_label,
            )

        return AgentResult(processed_data=dataset.copy_rows(), analysis=analysis)

    def _reasoning(self, analysis: SummaryAnalysis) -> str:
        numeric = sum(1 for c in analysis.columns if c.kind == SummaryKind.NUMERIC)
        return (
            f"Summarized {analysis.rows} rows across {len(analysis.columns)} columns "
            f"({numeric} numeric, {len(analysis.columns) - numeric} categorical). "
            f"{analysis.total_missing} cell(s) are missing."
        )

    def _insights(self, analysis: SummaryAnalysis) -> list[str]:
        numeric = sum(1 for c in analysis.columns if c.kind == SummaryKind.NUMERIC)
        categorical = len(analysis.columns) - numeric
        insights = [f"Data is {analysis.completeness_label} complete"]
        if numeric:
            insights.append(f"{numeric} numeric column(s) available for statistical analysis")
        if categorical:
            insights.append(f"{categorical} categorical column(s) available for grouping")
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def generate_summary(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Per-column summary statistics."""
    return SummaryStatisticsEngine(settings=settings, verbose=False).run(dataset)
