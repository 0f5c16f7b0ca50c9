from __future__ import annotations

from typing import Optional, Union

from datalab.compute.operators import AGENT_OPERATORS
from datalab.compute.operators.base import Operator
from datalab.core.config import EngineSettings
from datalab.core.exceptions import UnknownOperationException
from datalab.ml.base import AgentOperation


class OperatorRegistry:
    def __init__(self) -> None:
        self._ops: dict[str, Operator] = {}

    def register(self, op: Operator) -> None:
        self._ops[AgentOperation(op.name).value] = op

    def get(self, name: Union[str, AgentOperation]) -> Operator:
        key = name.value if isinstance(name, AgentOperation) else str(name)
        if key not in self._ops:
            raise UnknownOperationException(key, supported_operations=self.list())
        return self._ops[key]

    def list(self) -> list[str]:
        return sorted(self._ops.keys())


def default_registry(settings: Optional[EngineSettings] = None) -> OperatorRegistry:
    reg = OperatorRegistry()
    for engine_cls in AGENT_OPERATORS:
        reg.register(engine_cls(settings=settings))
    return reg
