from datalab.compute.executor import list_operations, run_agent
from datalab.compute.operators.base import Operator, describe_operation
from datalab.compute.registry import OperatorRegistry, default_registry

__all__ = [
    "Operator",
    "OperatorRegistry",
    "default_registry",
    "describe_operation",
    "list_operations",
    "run_agent",
]
