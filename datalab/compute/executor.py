from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from datalab.compute.registry import OperatorRegistry, default_registry
from datalab.core.config import EngineSettings, get_settings
from datalab.core.exceptions import BaseApplicationException, DataProcessingException
from datalab.core.logging import LogContext, get_logger, log_execution_time
from datalab.ml.base import AgentOperation, AgentResult
from datalab.schemas.dataset import Dataset

logger = get_logger(__name__)


def _as_dataset(data: Union[Dataset, Any], columns: Optional[Sequence[str]]) -> Dataset:
    if isinstance(data, Dataset):
        if columns is None:
            return data
        return Dataset.from_rows(data.rows, columns)
    return Dataset.from_rows(data, columns)


@log_execution_time(logger=logger, operation_name="run_agent")
def run_agent(
    operation: Union[str, AgentOperation],
    data: Union[Dataset, Any],
    columns: Optional[Sequence[str]] = None,
    *,
    settings: Optional[EngineSettings] = None,
    registry: Optional[OperatorRegistry] = None,
) -> AgentResult:
    """
    Run one agent operation over a dataset.

    ``data`` is a :class:`Dataset` or a list of row mappings; with raw rows
    and no ``columns`` the column list is the first row's keys.

    Raises:
        UnknownOperationException: operation is not registered
        ValidationException: data is not a list of flat rows
        DataProcessingException: the operator failed unexpectedly
    """
    registry = registry or default_registry()
    settings = settings or get_settings()
    key = operation.value if isinstance(operation, AgentOperation) else str(operation)
    op = registry.get(key)
    dataset = _as_dataset(data, columns)

    context = LogContext(component="AgentRunner", operation=key)
    try:
        result = op.run(dataset, settings)
    except BaseApplicationException:
        raise
    except Exception as e:
        logger.error(
            "Operator failed",
            context=context,
            rows=dataset.row_count,
            columns=dataset.column_count,
            error=str(e),
        )
        raise DataProcessingException(f"Operator '{key}' failed: {e}", cause=e) from e

    logger.debug(
        "Operator executed",
        context=context,
        rows_in=dataset.row_count,
        rows_out=len(result.processed_data),
    )
    return result


def list_operations(registry: Optional[OperatorRegistry] = None) -> list[str]:
    """Registered operation identifiers, sorted."""
    return (registry or default_registry()).list()
