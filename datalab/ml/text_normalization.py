# DataLab Engine - Text Normalization Engine
# Whitespace cleanup, case folding, and title-casing of name-like columns

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from datalab.core.config import EngineSettings
from datalab.core.logging import get_logger
from datalab.ml.base import AgentOperation, AgentResult, BaseAnalysis
from datalab.schemas.dataset import Dataset

logger = get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_START_RE = re.compile(r"\b\w", re.ASCII)
_TITLE_HINTS = ("name", "title")

TRANSFORMATIONS = [
    "Trimmed leading and trailing whitespace",
    "Collapsed repeated whitespace to a single space",
    "Converted text to lowercase",
    "Title-cased name and title columns",
]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class TextNormalizationAnalysis(BaseAnalysis):
    """Text normalization result."""
    text_columns: list[str] = field(default_factory=list)
    title_case_columns: list[str] = field(default_factory=list)
    values_changed: int = 0

    def payload(self) -> dict[str, Any]:
        return {
            "textColumns": list(self.text_columns),
            "transformations": list(TRANSFORMATIONS),
        }


# ============================================================================
# String Helpers
# ============================================================================

def normalize_string(value: str, title_case: bool = False) -> str:
    """Trim, collapse whitespace runs, lower-case; optionally title-case words."""
    text = _WHITESPACE_RE.sub(" ", value.strip()).lower()
    if title_case:
        text = _WORD_START_RE.sub(lambda m: m.group(0).upper(), text)
    return text


def is_title_column(column: str) -> bool:
    lowered = column.lower()
    return any(hint in lowered for hint in _TITLE_HINTS)


# ============================================================================
# Text Normalization Engine
# ============================================================================

class TextNormalizationEngine:
    """
    Normalizes string cells in every column holding at least one string.

    Mixed columns qualify; their non-string cells are left untouched.
    """

    name = AgentOperation.NORMALIZE_TEXT

    def __init__(self, settings: Optional[EngineSettings] = None, verbose: bool = True):
        self.settings = settings
        self.verbose = verbose

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
        if dataset.is_empty:
            return AgentResult(
                processed_data=[],
                analysis=TextNormalizationAnalysis(
                    reasoning="No data to normalize.",
                    insights=["Upload data to begin text normalization"],
                    agent_type=self.name.value,
                ),
            )

        text_columns = [
            col for col in dataset.columns
            if any(isinstance(row.get(col), str) for row in dataset.rows)
        ]
        title_columns = [col for col in text_columns if is_title_column(col)]

        processed = dataset.copy_rows()
        changed = 0
        for col in text_columns:
            title_case = col in title_columns
            for row in processed:
                value = row.get(col)
                if not isinstance(value, str):
                    continue
                normalized = normalize_string(value, title_case)
                if normalized != value:
                    changed += 1
                row[col] = normalized

        analysis = TextNormalizationAnalysis(
            text_columns=text_columns,
            title_case_columns=title_columns,
            values_changed=changed,
            agent_type=self.name.value,
        )
        analysis.reasoning = self._reasoning(analysis)
        analysis.insights = [
            f"{len(text_columns)} text column(s) normalized",
            f"{changed} value(s) changed",
        ]
        if title_columns:
            analysis.insights.append(f"Title case applied to: {', '.join(title_columns)}")

        if self.verbose:
            logger.info(f"Normalized {len(text_columns)} text columns", values_changed=changed)

        return AgentResult(processed_data=processed, analysis=analysis)

    def _reasoning(self, analysis: TextNormalizationAnalysis) -> str:
        if not analysis.text_columns:
            return "No text columns found. Data left unchanged."
        reasoning = (
            f"Normalized {len(analysis.text_columns)} text column(s) "
            f"({', '.join(analysis.text_columns)}): trimmed and collapsed whitespace "
            f"and converted to lowercase. {analysis.values_changed} value(s) changed."
        )
        if analysis.title_case_columns:
            reasoning += (
                f" Name/title columns ({', '.join(analysis.title_case_columns)}) "
                f"were converted to title case."
            )
        return reasoning


# ============================================================================
# Factory Functions
# ============================================================================

def normalize_text(dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult:
    """Normalize text columns."""
    return TextNormalizationEngine(settings=settings, verbose=False).run(dataset)
