# DataLab Engine - Missing Value Engine
# Per-column completeness analysis and single-value imputation
# Handles: numeric (median), categorical (mode), all-missing (sentinel)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.type_inference import column_values, is_fully_numeric, is_missing, js_string, to_finite_number
from datalab.schemas.dataset import Dataset

logger = get_logger(__name__)


# ============================================================================
# Enums
# ============================================================================

class ImputationStrategy(str, Enum):
    """Fill strategy chosen per column."""
    MEDIAN = "median"
    MODE = "mode"
    DEFAULT = "default"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class ColumnImputation:
    """Imputation plan for a single column."""
    column: str
    strategy: ImputationStrategy
    fill_value: Any
    missing_count: int


@dataclass
class MissingValueAnalysis(BaseAnalysis):
    """Missing value handling result."""
    plans: list[ColumnImputation] = field(default_factory=list)

    @property
    def strategies(self) -> dict[str, str]:
        return {p.column: p.strategy.value for p in self.plans}

    @property
    def fill_values(self) -> dict[str, Any]:
        return {p.column: p.fill_value for p in self.plans}

    @property
    def total_filled(self) -> int:
        return sum(p.missing_count for p in self.plans)

    def payload(self) -> dict[str, Any]:
        return {
            "strategies": self.strategies,
            "fillValues": self.fill_values,
            "columnsProcessed": len(self.plans),
            "missingCounts": {p.column: p.missing_count for p in self.plans},
            "totalFilled": self.total_filled,
        }


# ============================================================================
# Statistics
# ============================================================================

def upper_median(numbers: list[float]) -> float:
    """
    Element at ``floor(n/2)`` of the sorted values.

    For even counts this is the upper of the two middle values, not their
    average: ``[1, 2, 3, 100]`` gives 3.
    """
    ordered = sorted(numbers)
    return ordered[len(ordered) // 2]


def mode_value(values: list[Any]) -> Any:
    """Most frequent value; ties go to the value seen first."""
    counts: dict[str, int] = {}
    first_seen: dict[str, Any] = {}
    for value in values:
        key = js_string(value)
        if key not in counts:
            counts[key] = 0
            first_seen[key] = value
        counts[key] += 1

    best_key = None
    best_count = 0
    for key, count in counts.items():
        if count > best_count:
            best_key, best_count = key, count
    return first_seen[best_key]


# ============================================================================
# Missing Value Engine
# ============================================================================

class MissingValueEngine:
    """
    Fills null, absent and empty-string cells column by column.

    Columns with no missing cells are left alone and get no strategy.
    """

    name = AgentOperation.HANDLE_MISSING

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    def plan_column(
        self,
        dataset: Dataset,
        column: str,
        settings: EngineSettings,
    ) -> Optional[ColumnImputation]:
        """Choose a strategy for one column, or None when nothing is missing."""
        missing_count = sum(1 for row in dataset.rows if is_missing(row.get(column)))
        if missing_count == 0:
            return None

        values = column_values(dataset.rows, column)
        if not values:
            return ColumnImputation(
                column=column,
                strategy=ImputationStrategy.DEFAULT,
                fill_value=settings.missing_fill_sentinel,
                missing_count=missing_count,
            )

        if is_fully_numeric(values, finite=True):
            numbers = [to_finite_number(v) for v in values]
            return ColumnImputation(
                column=column,
                strategy=ImputationStrategy.MEDIAN,
                fill_value=upper_median(numbers),
                missing_count=missing_count,
            )

        return ColumnImputation(
            column=column,
            strategy=ImputationStrategy.MODE,
            fill_value=mode_value(values),
            missing_count=missing_count,
        )

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=MissingValueAnalysis(
                    reasoning="No data to process for missing values.",
                    insights=["Upload data to begin missing value analysis"],
                    agent_type=self.name.value,
                ),
            )

        plans = []
        for column in dataset.columns:
            plan = self.plan_column(dataset, column, settings)
            if plan is not None:
                plans.append(plan)

        processed = dataset.copy_rows()
        for plan in plans:
            for row in processed:
                if is_missing(row.get(plan.column)):
                    row[plan.column] = plan.fill_value

        analysis = MissingValueAnalysis(plans=plans, agent_type=self.name.value)
        analysis.reasoning = self._reasoning(analysis, dataset)
        analysis.insights = self._insights(analysis, dataset)

        if self.verbose:
            logger.info(
                f"Filled {analysis.total_filled} missing cells in {len(plans)} columns",
                strategies=analysis.strategies,
            )

        return AgentResult(processed_data=processed, analysis=analysis)

    def _reasoning(self, analysis: MissingValueAnalysis, dataset: Dataset) -> str:
        if not analysis.plans:
            return f"No missing values found across {dataset.column_count} columns. Data left unchanged."
        lines = [
            f"Filled {analysis.total_filled} missing value(s) in {len(analysis.plans)} column(s):"
        ]
        for plan in analysis.plans:
            lines.append(
                f"- {plan.column}: {plan.missing_count} missing, filled with "
                f"{plan.strategy.value} ({js_string(plan.fill_value)})"
            )
        return "\n".join(lines)

    def _insights(self, analysis: MissingValueAnalysis, dataset: Dataset) -> list[str]:
        total_cells = dataset.row_count * dataset.column_count
        completeness = (total_cells - analysis.total_filled) / total_cells * 100 if total_cells else 100.0
        insights = [
            f"Columns with missing values: {len(analysis.plans)}",
            f"Data completeness before filling: {completeness:.1f}%",
        ]
        by_strategy: dict[str, int] = {}
        for plan in analysis.plans:
            by_strategy[plan.strategy.value] = by_strategy.get(plan.strategy.value, 0) + 1
        for strategy, count in by_strategy.items():
            insights.append(f"{count} column(s) filled using {strategy}")
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def handle_missing(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Fill missing values."""
    return MissingValueEngine(settings=settings, verbose=False).run(dataset)
