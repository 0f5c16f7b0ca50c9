# DataLab Engine - Correlation Analysis Engine
# Pairwise Pearson correlation across fully numeric columns

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Optional

import numpy as np
from scipy import stats as scipy_stats

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.type_inference import column_values, is_fully_numeric, to_finite_number
from datalab.schemas.dataset import Dataset, Row

logger = get_logger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class CorrelationPair:
    """Correlation between two columns."""
    var1: str
    var2: str
    correlation: float
    n_pairs: int
    p_value: Optional[float] = None

    @property
    def key(self) -> str:
        return f"{self.var1}-{self.var2}"


@dataclass
class CorrelationAnalysis(BaseAnalysis):
    """Correlation analysis result."""
    numeric_columns: list[str] = field(default_factory=list)
    pairs: list[CorrelationPair] = field(default_factory=list)
    strong_relationships: list[str] = field(default_factory=list)

    @property
    def correlations(self) -> dict[str, float]:
        return {p.key: p.correlation for p in self.pairs}

    def payload(self) -> dict[str, Any]:
        return {
            "correlations": self.correlations,
            "strongRelationships": list(self.strong_relationships),
            "numericColumns": list(self.numeric_columns),
            "pValues": {p.key: p.p_value for p in self.pairs if p.p_value is not None},
        }


# ============================================================================
# Statistics
# ============================================================================

def paired_values(rows: list[Row], col_a: str, col_b: str) -> tuple[list[float], list[float]]:
    """Values of two columns in row order, keeping rows where both parse."""
    xs: list[float] = []
    ys: list[float] = []
    for row in rows:
        x = to_finite_number(row.get(col_a))
        y = to_finite_number(row.get(col_b))
        if x is None or y is None:
            continue
        xs.append(x)
        ys.append(y)
    return xs, ys


def pearson(xs: list[float], ys: list[float]) -> Optional[float]:
    """Pearson r, or None when either side has zero variance."""
    if not xs:
        return None
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    denom_x = math.sqrt(float(np.sum(dx * dx)))
    denom_y = math.sqrt(float(np.sum(dy * dy)))
    if denom_x == 0 or denom_y == 0:
        return None
    return float(np.sum(dx * dy)) / (denom_x * denom_y)


def pearson_p_value(xs: list[float], ys: list[float]) -> Optional[float]:
    """Two-sided p-value for r; needs at least three pairs."""
    if len(xs) < 3:
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        _, p_value = scipy_stats.pearsonr(xs, ys)
    p_value = float(p_value)
    return None if math.isnan(p_value) else round(p_value, 4)


# ============================================================================
# Correlation Analysis Engine
# ============================================================================

class CorrelationAnalysisEngine:
    """
    Pearson correlation for every pair of columns whose non-missing values
    are all numeric. Constant columns produce no entry for their pairs.
    """

    name = AgentOperation.CORRELATION_ANALYZER

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    @staticmethod
    def numeric_columns(dataset: Dataset) -> list[str]:
        out = []
        for col in dataset.columns:
            values = column_values(dataset.rows, col)
            if is_fully_numeric(values):
                out.append(col)
        return out

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=CorrelationAnalysis(
                    reasoning="No data to analyze for correlations.",
                    insights=["Upload data to begin correlation analysis"],
                    agent_type=self.name.value,
                ),
            )

        columns = self.numeric_columns(dataset)
        analysis = CorrelationAnalysis(numeric_columns=columns, agent_type=self.name.value)

        for col_a, col_b in combinations(columns, 2):
            xs, ys = paired_values(dataset.rows, col_a, col_b)
            r = pearson(xs, ys)
            if r is None:
                logger.debug(f"Skipping degenerate pair '{col_a}'/'{col_b}'", n_pairs=len(xs))
                continue

            pair = CorrelationPair(
                var1=col_a,
                var2=col_b,
                correlation=round(r, settings.correlation_decimals),
                n_pairs=len(xs),
                p_value=pearson_p_value(xs, ys),
            )
            analysis.pairs.append(pair)

            if abs(pair.correlation) > settings.strong_correlation_threshold:
                analysis.strong_relationships.append(
                    f"{col_a} and {col_b} (r={pair.correlation:.{settings.correlation_decimals}f})"
                )

        analysis.reasoning = self._reasoning(analysis)
        analysis.insights = self._insights(analysis)

        if self.verbose:
            logger.info(
                f"Computed {len(analysis.pairs)} correlations",
                numeric_columns=len(columns),
                strong=len(analysis.strong_relationships),
            )

        return AgentResult(processed_data=dataset.copy_rows(), analysis=analysis)

    def _reasoning(self, analysis: CorrelationAnalysis) -> str:
        if len(analysis.numeric_columns) < 2:
            return (
                f"Found {len(analysis.numeric_columns)} numeric column(s); at least two "
                f"are needed for correlation analysis."
            )
        reasoning = (
            f"Computed Pearson correlation for {len(analysis.pairs)} pair(s) across "
            f"{len(analysis.numeric_columns)} numeric columns."
        )
        if analysis.strong_relationships:
            reasoning += " Strong relationships: " + "; ".join(analysis.strong_relationships) + "."
        else:
            reasoning += " No strong relationships found."
        return reasoning

    def _insights(self, analysis: CorrelationAnalysis) -> list[str]:
        insights = [f"{len(analysis.strong_relationships)} strong relationship(s) found"]
        if analysis.pairs:
            top = max(analysis.pairs, key=lambda p: abs(p.correlation))
            direction = "positive" if top.correlation >= 0 else "negative"
            insights.append(
                f"Strongest: {top.var1} and {top.var2} ({direction}, r={top.correlation})"
            )
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def analyze_correlations(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Pairwise Pearson correlations."""
    return CorrelationAnalysisEngine(settings=settings, verbose=False).run(dataset)
