# DataLab Engine - Agent Operation Base Types
# Operation identifiers and the shared result envelope

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from datalab.core.serialization import to_jsonable
from datalab.schemas.dataset import Row


class AgentOperation(str, Enum):
    """Agent operations the engine implements."""
    REMOVE_DUPLICATES = "remove-duplicates"
    HANDLE_MISSING = "handle-missing"
    NORMALIZE_TEXT = "normalize-text"
    DETECT_OUTLIERS = "detect-outliers"
    GENERATE_SUMMARY = "generate-summary"
    DATA_VALIDATOR = "data-validator"
    CORRELATION_ANALYZER = "correlation-analyzer"
    TREND_ANALYZER = "trend-analyzer"


@dataclass
class BaseAnalysis:
    """Fields every analysis record carries."""
    reasoning: str = ""
    insights: list[str] = field(default_factory=list)
    agent_type: str = ""
    provider: str = "local"

    def payload(self) -> dict[str, Any]:
        """Operation-specific fields, camelCase keyed."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "reasoning": self.reasoning,
            **self.payload(),
            "insights": list(self.insights),
            "agentType": self.agent_type,
            "provider": self.provider,
        }


@dataclass
class AgentResult:
    """Processed dataset paired with its analysis record."""
    processed_data: list[Row]
    analysis: BaseAnalysis

    def to_dict(self) -> dict[str, Any]:
        return {
            "processedData": to_jsonable(self.processed_data),
            "analysis": to_jsonable(self.analysis.to_dict()),
        }

