"""Store abstraction for workflow execution records."""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..contracts import WorkflowExecution


class ExecutionStore(Protocol):
    """Protocol for execution record storage."""

    def add(self, execution: WorkflowExecution) -> None:
        """Store a newly created execution."""

    def get(self, execution_id: str) -> Optional[WorkflowExecution]:
        """Retrieve the execution by id."""

    def history(self, definition_id: str, limit: int = 100) -> List[WorkflowExecution]:
        """Return executions of ``definition_id``, newest first."""

    def list_executions(self) -> List[WorkflowExecution]:
        """Return all stored executions."""
