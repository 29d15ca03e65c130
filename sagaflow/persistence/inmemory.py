"""In-memory implementation of the execution store."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..contracts import WorkflowExecution
from .repository import ExecutionStore


class InMemoryExecutionStore(ExecutionStore):
    """Keep execution records in local memory.

    Records are held by reference, so a running execution is visible while
    the engine is still updating it. Nothing survives a process restart.
    """

    def __init__(self) -> None:
        self._executions: Dict[str, WorkflowExecution] = {}

    def add(self, execution: WorkflowExecution) -> None:
        self._executions[execution.id] = execution

    def get(self, execution_id: str) -> Optional[WorkflowExecution]:
        return self._executions.get(execution_id)

    def history(self, definition_id: str, limit: int = 100) -> List[WorkflowExecution]:
        matching = [
            e for e in self._executions.values() if e.definition_id == definition_id
        ]
        matching.sort(key=lambda e: e.start_time, reverse=True)
        return matching[: max(limit, 0)]

    def list_executions(self) -> List[WorkflowExecution]:
        return list(self._executions.values())

    def clear(self) -> None:
        self._executions.clear()

    def __len__(self) -> int:
        return len(self._executions)
