# DataLab Engine - Data Validation Engine
# Column type labelling, empty and mixed-type checks, row shape checks

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.type_inference import ColumnType, column_values, profile_values
from datalab.schemas.dataset import Dataset

logger = get_logger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class ColumnCheck:
    """Validation outcome for one column."""
    column: str
    data_type: ColumnType
    errors: list[str] = field(default_factory=list)


@dataclass
class ValidationAnalysis(BaseAnalysis):
    """Data validation result."""
    checks: list[ColumnCheck] = field(default_factory=list)
    row_shape_warnings: int = 0

    @property
    def validation_errors(self) -> list[str]:
        errors = [e for check in self.checks for e in check.errors]
        if self.row_shape_warnings:
            errors.append(
                f"{self.row_shape_warnings} row(s) have keys that differ from the column list"
            )
        return errors

    @property
    def data_types(self) -> dict[str, str]:
        return {c.column: c.data_type.value for c in self.checks}

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    def payload(self) -> dict[str, Any]:
        return {
            "validationErrors": self.validation_errors,
            "dataTypes": self.data_types,
            "isValid": self.is_valid,
            "rowShapeWarnings": self.row_shape_warnings,
        }


# ============================================================================
# Data Validation Engine
# ============================================================================

class DataValidationEngine:
    """
    Labels each column numeric, date, text or empty and reports problems.

    Type priority is numeric (every value a finite number), then date (more
    than the configured fraction parses as a date), then text. The mixed
    type check runs independently of the label.
    """

    name = AgentOperation.DATA_VALIDATOR

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    def check_column(self, dataset: Dataset, column: str, settings: EngineSettings) -> ColumnCheck:
        values = column_values(dataset.rows, column)
        if not values:
            return ColumnCheck(
                column=column,
                data_type=ColumnType.EMPTY,
                errors=[f"Column '{column}' contains only null/empty values"],
            )

        profile = profile_values(values, settings, finite=True)
        check = ColumnCheck(column=column, data_type=profile.column_type)
        numeric_count = profile.numeric_count
        if 0 < numeric_count < len(values) * settings.mixed_type_ratio:
            check.errors.append(
                f"Column '{column}' has mixed data types "
                f"({numeric_count} of {len(values)} values are numeric)"
            )
        return check

    @staticmethod
    def count_row_shape_warnings(dataset: Dataset) -> int:
        expected = set(dataset.columns)
        return sum(1 for row in dataset.rows if set(row) != expected)

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=ValidationAnalysis(
                    reasoning="No data to validate",
                    insights=["Upload data to begin validation"],
                    agent_type=self.name.value,
                ),
            )

        analysis = ValidationAnalysis(agent_type=self.name.value)
        analysis.checks = [self.check_column(dataset, col, settings) for col in dataset.columns]
        analysis.row_shape_warnings = self.count_row_shape_warnings(dataset)
        if analysis.row_shape_warnings:
            logger.debug("Rows with irregular key sets", count=analysis.row_shape_warnings)

        analysis.reasoning = self._reasoning(analysis)
        analysis.insights = self._insights(analysis)

        if self.verbose:
            logger.info(
                f"Validated {len(analysis.checks)} columns",
                errors=len(analysis.validation_errors),
                data_types=analysis.data_types,
            )

        return AgentResult(processed_data=dataset.copy_rows(), analysis=analysis)

    def _reasoning(self, analysis: ValidationAnalysis) -> str:
        errors = analysis.validation_errors
        if not errors:
            return f"Validated {len(analysis.checks)} column(s). No issues found."
        lines = [f"Validated {len(analysis.checks)} column(s) and found {len(errors)} issue(s):"]
        lines.extend(f"- {e}" for e in errors)
        return "\n".join(lines)

    def _insights(self, analysis: ValidationAnalysis) -> list[str]:
        counts: dict[str, int] = {}
        for data_type in analysis.data_types.values():
            counts[data_type] = counts.get(data_type, 0) + 1
        insights = [f"{count} {data_type} column(s)" for data_type, count in counts.items()]
        insights.append(
            "Data passed validation" if analysis.is_valid
            else f"{len(analysis.validation_errors)} validation issue(s) found"
        )
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def validate_data(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Column types and validation errors."""
    return DataValidationEngine(settings=settings, verbose=False).run(dataset)
