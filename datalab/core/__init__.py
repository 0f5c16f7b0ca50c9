# DataLab Engine - Core Package
"""
Core package containing fundamental engine components:
- Configuration management
- Exception hierarchy
- Logging infrastructure
- JSON serialization
"""

from datalab.core.config import EngineSettings, get_settings
from datalab.core.exceptions import (
    BaseApplicationException,
    ValidationException,
    DataProcessingException,
    UnknownOperationException,
)
from datalab.core.logging import (
    get_logger,
    set_request_context,
    clear_request_context,
    log_execution_time,
)
from datalab.core.serialization import to_jsonable

__all__ = [
    # Config
    "EngineSettings",
    "get_settings",
    # Exceptions
    "BaseApplicationException",
    "ValidationException",
    "DataProcessingException",
    "UnknownOperationException",
    # Logging
    "get_logger",
    "set_request_context",
    "clear_request_context",
    "log_execution_time",
    # Serialization
    "to_jsonable",
]
