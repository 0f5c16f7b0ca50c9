# DataLab Engine - Duplicate Detection Engine
# Exact duplicate removal under a case/whitespace-insensitive row key

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from datalab.core.config import EngineSettings, get_settings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.ml.type_inference import js_string
from datalab.schemas.dataset import Dataset, Row

logger = get_logger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class DuplicateAnalysis(BaseAnalysis):
    """Duplicate removal result."""
    original_count: int = 0
    duplicates_found: int = 0
    final_count: int = 0
    duplicate_rows: list[int] = field(default_factory=list)  # 1-based, original order

    @property
    def duplicate_rate(self) -> float:
        if self.original_count == 0:
            return 0.0
        return self.duplicates_found / self.original_count * 100

    def payload(self) -> dict[str, Any]:
        return {
            "originalCount": self.original_count,
            "duplicatesFound": self.duplicates_found,
            "finalCount": self.final_count,
            "duplicateRows": list(self.duplicate_rows),
            "duplicateRate": round(self.duplicate_rate, 1),
        }


# ============================================================================
# Duplicate Detection Engine
# ============================================================================

class DuplicateDetectionEngine:
    """
    Removes rows that repeat an earlier row.

    Two rows are duplicates when every column value matches after string
    conversion, lower-casing and trimming. The first occurrence is kept and
    surviving rows keep their relative order.
    """

    name = AgentOperation.REMOVE_DUPLICATES

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    @staticmethod
    def row_key(row: Row, columns: list[str], delimiter: str) -> str:
        return delimiter.join(js_string(row.get(col)).lower().strip() for col in columns)

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        settings = settings or self.settings or get_settings()

        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=DuplicateAnalysis(
                    reasoning="No data to deduplicate.",
                    insights=["Upload data to begin duplicate detection"],
                    agent_type=self.name.value,
                ),
            )

        seen: set[str] = set()
        kept: list[Row] = []
        duplicate_rows: list[int] = []

        for index, row in enumerate(dataset.rows):
            key = self.row_key(row, dataset.columns, settings.key_delimiter)
            if key in seen:
                duplicate_rows.append(index + 1)
                continue
            seen.add(key)
            kept.append(dict(row))

        analysis = DuplicateAnalysis(
            original_count=dataset.row_count,
            duplicates_found=len(duplicate_rows),
            final_count=len(kept),
            duplicate_rows=duplicate_rows,
            agent_type=self.name.value,
        )
        analysis.reasoning = self._reasoning(analysis)
        analysis.insights = self._insights(analysis)

        if self.verbose:
            logger.info(
                f"Removed {analysis.duplicates_found} duplicate rows",
                original_count=analysis.original_count,
                final_count=analysis.final_count,
            )

        return AgentResult(processed_data=kept, analysis=analysis)

    def _reasoning(self, analysis: DuplicateAnalysis) -> str:
        if analysis.duplicates_found == 0:
            return (
                f"Checked {analysis.original_count} rows for exact duplicates "
                f"(ignoring case and surrounding whitespace). No duplicates found."
            )
        shown = ", ".join(str(i) for i in analysis.duplicate_rows[:10])
        more = "..." if len(analysis.duplicate_rows) > 10 else ""
        return (
            f"Found {analysis.duplicates_found} duplicate row(s) out of "
            f"{analysis.original_count} (ignoring case and surrounding whitespace). "
            f"Kept the first occurrence of each and removed rows {shown}{more}. "
            f"{analysis.final_count} rows remain."
        )

    def _insights(self, analysis: DuplicateAnalysis) -> list[str]:
        insights = [
            f"{analysis.duplicates_found} duplicate rows removed",
            f"Data uniqueness: {100 - analysis.duplicate_rate:.1f}%",
        ]
        if analysis.duplicates_found:
            insights.append("First occurrence of each duplicated row was kept")
        return insights


# ============================================================================
# Factory Functions
# ============================================================================

def remove_duplicates(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Remove duplicate rows."""
    return DuplicateDetectionEngine(settings=settings, verbose=False).run(dataset)
