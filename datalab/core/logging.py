# DataLab Engine - Structured Logging
# Text/JSON logging with request-id propagation and execution timing

from __future__ import annotations

import json
import logging
import sys
import time
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Optional, ParamSpec, TypeVar

from pydantic import BaseModel

from datalab.core.config import LogFormat, get_settings

P = ParamSpec("P")
T = TypeVar("T")

# Set by the calling HTTP layer; the engine only reads it
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class LogContext(BaseModel):
    """Structured log context for correlation and debugging."""

    request_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    duration_ms: Optional[float] = None
    extra: dict[str, Any] = {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        return {k: v for k, v in self.model_dump().items() if v is not None and v != {}}


class JSONFormatter(logging.Formatter):
    """JSON log formatter for log aggregation pipelines."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id := request_id_ctx.get():
            log_data["request_id"] = request_id

        context = getattr(record, "context", None)
        if isinstance(context, LogContext):
            log_data["context"] = context.to_dict()

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_data["extra"] = extra_data

        if record.exc_info and record.exc_info[0]:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        context_parts = []
        if request_id := request_id_ctx.get():
            context_parts.append(f"req:{request_id[:8]}")
        context = getattr(record, "context", None)
        if isinstance(context, LogContext) and context.operation:
            context_parts.append(f"op:{context.operation}")
        context_str = f" [{' '.join(context_parts)}]" if context_parts else ""

        formatted = (
            f"{timestamp} | "
            f"{color}{record.levelname:8}{reset} | "
            f"{record.name}"
            f"{context_str} | "
            f"{record.getMessage()}"
        )

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            formatted += " | " + " ".join(f"{k}={v}" for k, v in extra_data.items())

        if record.exc_info:
            formatted += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return formatted


class StructuredLogger:
    """
    Structured logger facade with context support.

    Handlers are attached once per logger name, so repeated ``get_logger``
    calls for the same module do not duplicate output.
    """

    def __init__(
        self,
        name: str,
        level: int = logging.INFO,
        use_json: bool = False,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        if not any(getattr(h, "_datalab_handler", False) for h in self._logger.handlers):
            handler = logging.StreamHandler(sys.stdout)
            handler._datalab_handler = True
            self._logger.addHandler(handler)
            self._logger.propagate = False
        for handler in self._logger.handlers:
            if getattr(handler, "_datalab_handler", False):
                handler.setFormatter(JSONFormatter() if use_json else TextFormatter())

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[LogContext] = None,
        exc_info: bool = False,
        **extra: Any,
    ) -> None:
        """Internal logging method with context support."""
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"context": context, "extra_data": extra},
        )

    def debug(self, message: str, context: Optional[LogContext] = None, **extra: Any) -> None:
        self._log(logging.DEBUG, message, context, **extra)

    def info(self, message: str, context: Optional[LogContext] = None, **extra: Any) -> None:
        self._log(logging.INFO, message, context, **extra)

    def warning(self, message: str, context: Optional[LogContext] = None, **extra: Any) -> None:
        self._log(logging.WARNING, message, context, **extra)

    def error(
        self,
        message: str,
        context: Optional[LogContext] = None,
        exc_info: bool = False,
        **extra: Any,
    ) -> None:
        self._log(logging.ERROR, message, context, exc_info=exc_info, **extra)

    def exception(self, message: str, context: Optional[LogContext] = None, **extra: Any) -> None:
        """Log exception with full traceback."""
        self._log(logging.ERROR, message, context, exc_info=True, **extra)


def log_execution_time(
    logger: Optional[StructuredLogger] = None,
    operation_name: Optional[str] = None,
    warn_threshold_ms: Optional[float] = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for logging function execution time.

    Args:
        logger: Logger instance (uses the function's module logger if None)
        operation_name: Custom operation name (uses function name if None)
        warn_threshold_ms: Threshold in ms for warning log level
            (``slow_operation_ms`` from settings if None)
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        _operation = operation_name or func.__name__

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            _logger = logger or get_logger(func.__module__)
            if warn_threshold_ms is None:
                threshold = get_settings().slow_operation_ms
            else:
                threshold = warn_threshold_ms

            start_time = time.perf_counter()
            context = LogContext(operation=_operation, request_id=request_id_ctx.get())
            _logger.debug(f"Starting {_operation}", context=context)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                context.duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
                _logger.error(
                    f"Failed {_operation} after {context.duration_ms:.2f}ms: {e}",
                    context=context,
                    exc_info=True,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            context.duration_ms = round(duration_ms, 2)
            log_method = _logger.warning if duration_ms > threshold else _logger.info
            log_method(f"Completed {_operation} in {duration_ms:.2f}ms", context=context)
            return result

        return wrapper
    return decorator


def set_request_context(request_id: Optional[str] = None) -> None:
    """Set request context for all logs in the current context."""
    if request_id:
        request_id_ctx.set(request_id)


def clear_request_context() -> None:
    """Clear request context after request completion."""
    request_id_ctx.set(None)


def get_logger(
    name: str,
    use_json: Optional[bool] = None,
    level: Optional[int] = None,
) -> StructuredLogger:
    """
    Factory function for creating structured loggers.

    Format and level default to the engine settings (``DATALAB_LOG_FORMAT``,
    ``DATALAB_LOG_LEVEL``).
    """
    settings = get_settings()
    if use_json is None:
        use_json = settings.log_format == LogFormat.JSON
    if level is None:
        level = logging.getLevelName(settings.log_level.value)

    return StructuredLogger(name=name, level=level, use_json=use_json)
