"""Exception types raised by the workflow engine."""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for all engine errors."""


class WorkflowNotFoundError(WorkflowError, LookupError):
    """Raised when executing a workflow id that was never registered."""

    def __init__(self, definition_id: str) -> None:
        self.definition_id = definition_id
        super().__init__(f"Workflow definition not found: {definition_id}")


class ActionNotFoundError(WorkflowError, LookupError):
    """Raised when a step references an action with no registered handler."""

    def __init__(self, action_name: str) -> None:
        self.action_name = action_name
        super().__init__(f"Action not found: {action_name}")


class StepTimeoutError(WorkflowError, TimeoutError):
    """Raised when a step attempt does not settle within its timeout."""

    def __init__(self, step_id: str | None = None, timeout_ms: float | None = None) -> None:
        self.step_id = step_id
        self.timeout_ms = timeout_ms
        super().__init__("Step timeout")


class DefinitionLoadError(WorkflowError):
    """Raised when workflow definitions cannot be read or validated."""


def error_message(exc: BaseException) -> str:
    """Return the text recorded on execution records for ``exc``."""
    message = str(exc)
    return message or type(exc).__name__
