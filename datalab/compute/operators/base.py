# DataLab Engine - Operator Protocol
# What the registry stores, and the capability text advertised per operation

from __future__ import annotations

from typing import Optional, Protocol

from datalab.core.config import EngineSettings
from datalab.ml.base import AgentOperation, AgentResult
from datalab.schemas.dataset import Dataset


class Operator(Protocol):
    name: AgentOperation

    def run(self, dataset: Dataset, settings: Optional[EngineSettings] = None) -> AgentResult: ...


CAPABILITIES: dict[AgentOperation, list[str]] = {
    AgentOperation.REMOVE_DUPLICATES: [
        "Identify and remove duplicate records",
        "Preserve data integrity during deduplication",
        "Handle complex duplicate scenarios",
        "Provide deduplication reports",
    ],
    AgentOperation.HANDLE_MISSING: [
        "Detect missing value patterns",
        "Recommend imputation strategies",
        "Fill missing values intelligently",
        "Assess impact of missing data",
    ],
    AgentOperation.NORMALIZE_TEXT: [
        "Standardize text formatting",
        "Clean and normalize strings",
        "Handle case consistency",
    ],
    AgentOperation.DETECT_OUTLIERS: [
        "Identify statistical outliers",
        "Detect anomalous patterns",
        "Assess data quality issues",
        "Recommend outlier handling",
    ],
    AgentOperation.GENERATE_SUMMARY: [
        "Perform descriptive statistics",
        "Calculate statistical measures",
        "Measure data completeness",
        "Generate summary reports",
    ],
    AgentOperation.DATA_VALIDATOR: [
        "Validate data types and formats",
        "Identify data quality issues",
        "Generate validation reports",
    ],
    AgentOperation.CORRELATION_ANALYZER: [
        "Calculate correlations",
        "Highlight strong relationships",
        "Report statistical significance",
    ],
    AgentOperation.TREND_ANALYZER: [
        "Identify temporal patterns",
        "Analyze growth trends",
        "Detect seasonal variations",
    ],
}

GENERIC_CAPABILITIES = [
    "General data processing and analysis",
    "Data quality assessment",
    "Pattern recognition",
    "Insight generation",
]


def describe_operation(operation: str) -> list[str]:
    """Capability bullets for an operation; unknown identifiers get a generic list."""
    try:
        key = AgentOperation(operation)
    except ValueError:
        return list(GENERIC_CAPABILITIES)
    return list(CAPABILITIES.get(key, GENERIC_CAPABILITIES))
