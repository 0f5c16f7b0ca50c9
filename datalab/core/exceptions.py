# DataLab Engine - Custom Exceptions
# Exception hierarchy with error codes, context, and recovery hints

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class ErrorCode(str, Enum):
    """Standardized error codes for callers and logging."""

    # General errors (1xxx)
    UNKNOWN_ERROR = "E1000"
    VALIDATION_ERROR = "E1001"

    # Data errors (3xxx)
    DATA_FORMAT_ERROR = "E3004"

    # Agent errors (8xxx)
    AGENT_UNKNOWN_OPERATION = "E8004"


@dataclass(frozen=True)
class ErrorContext:
    """Immutable context information for error tracking and debugging."""

    error_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    component: str = ""
    operation: str = ""
    request_id: Optional[str] = None
    additional_data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_id": str(self.error_id),
            "timestamp": self.timestamp.isoformat(),
            "component": self.component,
            "operation": self.operation,
            "request_id": self.request_id,
            "additional_data": self.additional_data,
        }


class BaseApplicationException(Exception):
    """
    Base exception class for all engine exceptions.

    Carries enough structure for the surrounding HTTP layer to render an
    error payload without knowing the concrete subclass.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        recovery_hint: Optional[str] = None,
        is_retryable: bool = False,
        http_status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.recovery_hint = recovery_hint
        self.is_retryable = is_retryable
        self.http_status_code = http_status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": True,
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recovery_hint": self.recovery_hint,
            "is_retryable": self.is_retryable,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code={self.error_code}, "
            f"error_id={self.context.error_id})"
        )


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationException(BaseApplicationException):
    """Exception for structurally invalid input."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[dict[str, list[str]]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            http_status_code=422,
            **kwargs,
        )
        self.field_errors = field_errors or {}

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field_errors"] = self.field_errors
        return result


# ============================================================================
# Data Exceptions
# ============================================================================

class DataException(BaseApplicationException):
    """Base exception for data-related errors."""
    pass


class DataProcessingException(DataException):
    """Exception for data processing errors."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.DATA_FORMAT_ERROR),
            http_status_code=500,
            **kwargs,
        )


# ============================================================================
# Agent Exceptions
# ============================================================================

class AgentException(BaseApplicationException):
    """Base exception for agent errors."""
    pass


class UnknownOperationException(AgentException):
    """Exception when the requested agent operation is not implemented."""

    def __init__(
        self,
        operation: str,
        supported_operations: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        supported = supported_operations or []
        super().__init__(
            message=f"Unknown agent operation '{operation}'",
            error_code=ErrorCode.AGENT_UNKNOWN_OPERATION,
            http_status_code=400,
            recovery_hint=f"Supported operations: {', '.join(supported)}" if supported else None,
            **kwargs,
        )
        self.operation = operation
        self.supported_operations = supported

