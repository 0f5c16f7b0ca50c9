# DataLab Engine - Outlier Detection Engine
# IQR fences per numeric column; read-only, rows are reported not modified

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.type_inference import Number, to_finite_number
from datalab.schemas.dataset import Dataset, Row

logger = get_logger(__name__)

IQR_METHOD = "IQR (Interquartile Range)"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class OutlierInfo:
    """A flagged cell."""
    row_index: int  # 1-based
    value: Number
    row: Row

    def to_dict(self) -> dict[str, Any]:
        return {"rowIndex": self.row_index, "value": self.value, "row": dict(self.row)}


@dataclass
class IQRBounds:
    """Quartiles and fences for one column."""
    q1: float
    q3: float
    iqr: float
    lower: float
    upper: float

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def to_dict(self) -> dict[str, float]:
        return {"q1": self.q1, "q3": self.q3, "iqr": self.iqr, "lower": self.lower, "upper": self.upper}


@dataclass
class OutlierAnalysis(BaseAnalysis):
    """Outlier detection result."""
    numeric_columns: list[str] = field(default_factory=list)
    outliers: dict[str, list[OutlierInfo]] = field(default_factory=dict)
    bounds: dict[str, IQRBounds] = field(default_factory=dict)
    skipped_columns: list[str] = field(default_factory=list)
    method: str = IQR_METHOD

    @property
    def total_outliers(self) -> int:
        return sum(len(items) for items in self.outliers.values())

    def payload(self) -> dict[str, Any]:
        return {
            "numericColumns": list(self.numeric_columns),
            "outliers": {
                col: [info.to_dict() for info in items]
                for col, items in self.outliers.items()
            },
            "totalOutliers": self.total_outliers,
            "method": self.method,
            "bounds": {col: b.to_dict() for col, b in self.bounds.items()},
            "skippedColumns": list(self.skipped_columns),
        }


# ============================================================================
# Statistics
# ============================================================================

def iqr_bounds(values: list[float], multiplier: float = 1.5) -> IQRBounds:
    """
    Quartiles taken at sorted positions ``floor(n*0.25)`` and ``floor(n*0.75)``.

    No interpolation: for 1..9 plus 100 this gives Q1=3, Q3=8 and fences
    at -4.5 and 15.5.
    """
    ordered = np.sort(np.asarray(values, dtype=float))
    n = len(ordered)
    q1 = float(ordered[int(np.floor(n * 0.25))])
    q3 = float(ordered[int(np.floor(n * 0.75))])
    iqr = q3 - q1
    return IQRBounds(
        q1=q1,
        q3=q3,
        iqr=iqr,
        lower=q1 - multiplier * iqr,
        upper=q3 + multiplier * iqr,
    )


# ============================================================================
# Outlier Detection Engine
# ============================================================================

class OutlierDetectionEngine:
    """
    Flags values outside ``[Q1 - k*IQR, Q3 + k*IQR]`` in every column that
    holds at least one number. Columns with too few numbers for quartiles
    are skipped silently and listed under ``skippedColumns``.
    """

    name = AgentOperation.DETECT_OUTLIERS

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=OutlierAnalysis(
                    reasoning="No data to analyze for outliers.",
                    insights=["Upload data to begin outlier detection"],
                    agent_type=self.name.value,
                ),
            )

        analysis = OutlierAnalysis(agent_type=self.name.value)

        for col in dataset.columns:
            readings = [to_finite_number(row.get(col)) for row in dataset.rows]
            numbers = [n for n in readings if n is not None]
            if not numbers:
                continue
            analysis.numeric_columns.append(col)

            if len(numbers) < settings.min_outlier_values:
                analysis.skipped_columns.append(col)
                logger.debug(
                    f"Skipping outlier check for '{col}'",
                    numeric_values=len(numbers),
                    required=settings.min_outlier_values,
                )
                continue

            bounds = iqr_bounds(numbers, settings.iqr_multiplier)
            analysis.bounds[col] = bounds

            flagged = [
                OutlierInfo(row_index=index + 1, value=number, row=dict(row))
                for index, (row, number) in enumerate(zip(dataset.rows, readings))
                if number is not None and not bounds.contains(number)
            ]
            if flagged:
                analysis.outliers[col] = flagged

        analysis.reasoning = self._reasoning(analysis, settings)
        analysis.insights = self._insights(analysis)

        if self.verbose:
            logger.info(
                f"Detected {analysis.total_outliers} outliers",
                columns=len(analysis.numeric_columns),
                skipped=len(analysis.skipped_columns),
            )

        return AgentResult(processed_data=dataset.copy_rows(), analysis=analysis)

    def _reasoning(self, analysis: OutlierAnalysis, settings: EngineSettings) -> str:
        if not analysis.numeric_columns:
            return "No numeric columns found, so no outlier analysis was performed."
        lines = [
            f"Checked {len(analysis.numeric_columns)} numeric column(s) using the "
            f"{analysis.method} method with fences at {settings.iqr_multiplier} x IQR "
            f"beyond the quartiles. Found {analysis.total_outliers} outlier(s)."
        ]
        for col, items in analysis.outliers.items():
            b = analysis.bounds[col]
            lines.append(
                f"- {col}: {len(items)} outlier(s) outside [{b.lower:g}, {b.upper:g}]"
            )
        return "\n".join(lines)

    def _insights(self, analysis: OutlierAnalysis) -> list[str]:
        insights = [f"{analysis.total_outliers} outlier value(s) detected"]
        if analysis.outliers:
            worst = max(analysis.outliers, key=lambda c: len(analysis.outliers[c]))
            insights.append(f"Most outliers in '{worst}' ({len(analysis.outliers[worst])})")
        if analysis.skipped_columns:
            insights.append(
                f"{len(analysis.skipped_columns)} column(s) had too few values for IQR analysis"
            )
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def detect_outliers(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Flag IQR outliers."""
    return OutlierDetectionEngine(settings=settings, verbose=False).run(dataset)
