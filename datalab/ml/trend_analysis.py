# DataLab Engine - Trend Analysis Engine
# Half-over-half mean shift per numeric column, seasonality eligibility

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import numpy as np

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.type_inference import ColumnType, column_values, profile_values, to_finite_number
from datalab.schemas.dataset import Dataset

logger = get_logger(__name__)


# ============================================================================
# Enums
# ============================================================================

class TrendDirection(str, Enum):
    """Trend direction."""
    INCREASING = "increasing"
    DECREASING = "decreasing"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class HalfSplitTrend:
    """Mean of the first half versus the second half of a column."""
    column: str
    first_avg: float
    second_avg: float
    change_pct: float

    @property
    def direction(self) -> TrendDirection:
        return TrendDirection.INCREASING if self.change_pct > 0 else TrendDirection.DECREASING

    def describe(self) -> str:
        return (
            f"{self.column} shows an {self.direction.value} trend "
            f"({self.change_pct:+.1f}% from the first half to the second half)"
        )


@dataclass
class TrendAnalysis(BaseAnalysis):
    """Trend analysis result."""
    trends: list[str] = field(default_factory=list)
    date_columns: list[str] = field(default_factory=list)
    numeric_columns: list[str] = field(default_factory=list)
    changes: dict[str, float] = field(default_factory=dict)
    data_points: Optional[int] = None
    potential_seasonality: Optional[bool] = None

    @property
    def patterns(self) -> dict[str, Any]:
        patterns: dict[str, Any] = {}
        if self.data_points is not None:
            patterns["dataPoints"] = self.data_points
        if self.potential_seasonality is not None:
            patterns["potentialSeasonality"] = self.potential_seasonality
        return patterns

    def payload(self) -> dict[str, Any]:
        return {
            "trends": list(self.trends),
            "patterns": self.patterns,
            "dateColumns": list(self.date_columns),
            "numericColumns": list(self.numeric_columns),
            "changes": dict(self.changes),
        }


# ============================================================================
# Statistics
# ============================================================================

def half_split_change(values: list[float]) -> Optional[tuple[float, float, float]]:
    """
    ``(first_avg, second_avg, change_pct)`` for a split at ``n - floor(n/2)``.

    The first half takes the extra value when ``n`` is odd. Returns None when
    the first-half mean is zero, since a percent change is undefined there.
    """
    split = len(values) - len(values) // 2
    first_avg = float(np.mean(values[:split]))
    second_avg = float(np.mean(values[split:]))
    if first_avg == 0:
        return None
    change = (second_avg - first_avg) / first_avg * 100
    return first_avg, second_avg, change


# ============================================================================
# Trend Analysis Engine
# ============================================================================

class TrendAnalysisEngine:
    """
    Simple trend signals without a fitted model.

    Columns whose values read as dates mark the dataset as a time series; in
    that case no half-split trends are computed. Otherwise every numeric
    column with enough values is compared half against half.
    """

    name = AgentOperation.TREND_ANALYZER

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    @staticmethod
    def classify_columns(
        dataset: Dataset,
        settings: Optional[EngineSettings] = None,
    ) -> tuple[list[str], list[str]]:
        """Split columns into date-like and fully numeric lists."""
        date_columns: list[str] = []
        numeric_columns: list[str] = []
        for col in dataset.columns:
            values = column_values(dataset.rows, col)
            profile = profile_values(values, settings)
            if profile.column_type == ColumnType.EMPTY:
                continue
            if profile.column_type == ColumnType.NUMERIC:
                numeric_columns.append(col)
            elif profile.date_count:
                date_columns.append(col)
        return date_columns, numeric_columns

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=TrendAnalysis(
                    reasoning="No data to analyze for trends.",
                    insights=["Upload data to begin trend analysis"],
                    agent_type=self.name.value,
                ),
            )

        date_columns, numeric_columns = self.classify_columns(dataset, settings)
        analysis = TrendAnalysis(
            date_columns=date_columns,
            numeric_columns=numeric_columns,
            agent_type=self.name.value,
        )

        if date_columns:
            analysis.data_points = dataset.row_count
            analysis.trends.append(
                f"Time-based data detected in {', '.join(date_columns)} "
                f"with {dataset.row_count} data points"
            )
        else:
            for col in numeric_columns:
                values = [
                    n for n in (to_finite_number(row.get(col)) for row in dataset.rows)
                    if n is not None
                ]
                if len(values) < settings.min_trend_values:
                    continue
                split = half_split_change(values)
                if split is None:
                    logger.debug(f"Skipping trend for '{col}': first-half mean is zero")
                    continue
                first_avg, second_avg, change = split
                analysis.changes[col] = round(change, 1)
                if math.isfinite(change) and abs(change) > settings.trend_change_threshold_pct:
                    trend = HalfSplitTrend(col, first_avg, second_avg, change)
                    analysis.trends.append(trend.describe())

        if dataset.row_count >= settings.seasonality_min_rows:
            analysis.potential_seasonality = True

        analysis.reasoning = self._reasoning(analysis, settings)
        analysis.insights = self._insights(analysis)

        if self.verbose:
            logger.info(
                f"Found {len(analysis.trends)} trend signals",
                date_columns=len(date_columns),
                numeric_columns=len(numeric_columns),
            )

        return AgentResult(processed_data=dataset.copy_rows(), analysis=analysis)

    def _reasoning(self, analysis: TrendAnalysis, settings: EngineSettings) -> str:
        parts = []
        if analysis.date_columns:
            parts.append(
                f"Detected date column(s) {', '.join(analysis.date_columns)}; the data can be "
                f"treated as a time series of {analysis.data_points} points."
            )
        elif analysis.trends:
            parts.append(
                f"Compared first-half and second-half means for {len(analysis.changes)} "
                f"numeric column(s). Trends above {settings.trend_change_threshold_pct:g}%:"
            )
            parts.extend(f"- {t}" for t in analysis.trends)
        elif analysis.numeric_columns:
            parts.append(
                f"Compared first-half and second-half means for {len(analysis.changes)} "
                f"numeric column(s); no change exceeded {settings.trend_change_threshold_pct:g}%."
            )
        else:
            parts.append("No numeric or date columns found for trend analysis.")
        if analysis.potential_seasonality:
            parts.append(
                f"With at least {settings.seasonality_min_rows} rows, the dataset is "
                f"large enough to look for seasonal patterns."
            )
        return "\n".join(parts)

    def _insights(self, analysis: TrendAnalysis) -> list[str]:
        insights = [f"{len(analysis.trends)} trend signal(s) identified"]
        if analysis.date_columns:
            insights.append(f"Date columns: {', '.join(analysis.date_columns)}")
        if analysis.potential_seasonality:
            insights.append("Dataset is eligible for seasonal analysis")
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def analyze_trends(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Half-split trend signals."""
    return TrendAnalysisEngine(settings=settings, verbose=False).run(dataset)
