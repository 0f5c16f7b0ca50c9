# DataLab Engine
"""
Local statistical engine behind the DataLab agent operations.

    from datalab import run_agent

    result = run_agent("remove-duplicates", rows)
    result.to_dict()  # {"processedData": [...], "analysis": {...}}
"""

from datalab.compute import describe_operation, list_operations, run_agent
from datalab.core.config import EngineSettings, get_settings
from datalab.core.exceptions import (
    DataProcessingException,
    UnknownOperationException,
    ValidationException,
)
from datalab.ml.base import AgentOperation, AgentResult
from datalab.schemas.dataset import Dataset

__version__ = "1.0.0"

__all__ = [
    "AgentOperation",
    "AgentResult",
    "DataProcessingException",
    "Dataset",
    "EngineSettings",
    "UnknownOperationException",
    "ValidationException",
    "describe_operation",
    "get_settings",
    "list_operations",
    "run_agent",
]
