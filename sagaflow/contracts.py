"""Core data contracts for sagaflow workflows."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import EVENT_SOURCE, EVENT_VERSION


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    COMPENSATING = "compensating"
    COMPENSATED = "compensated"


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class CompensationStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset(
    {ExecutionStatus.COMPLETED, ExecutionStatus.FAILED, ExecutionStatus.COMPENSATED}
)


class WorkflowContext(BaseModel):
    """State shared by reference across every step of one run.

    ``data`` is the caller's input and is treated as read-only. ``outputs``
    is written only by the engine, one entry per completed step.
    """

    workflow_id: str
    correlation_id: str
    user_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    outputs: Dict[str, Any] = Field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = None


ActionHandler = Callable[[Dict[str, Any], WorkflowContext], Union[Awaitable[Any], Any]]
StepCondition = Callable[[WorkflowContext], bool]


class CompensationSpec(BaseModel):
    """Undo action invoked for a completed step during rollback."""

    action_name: str
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class RetryPolicy(BaseModel):
    """Definition-wide retry settings. Unset values fall back to engine defaults."""

    max_attempts: Optional[int] = Field(default=None, ge=1)
    delay_ms: Optional[float] = Field(default=None, ge=0)
    backoff_multiplier: Optional[float] = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True)


class WorkflowStep(BaseModel):
    """One step of a workflow definition."""

    id: str
    name: str
    action_name: str
    params: Dict[str, Any] = Field(default_factory=dict)
    retry_attempts: Optional[int] = Field(default=None, ge=1)
    timeout_ms: Optional[float] = Field(default=None, gt=0)
    condition: Optional[StepCondition] = Field(default=None, exclude=True)
    compensation: Optional[CompensationSpec] = None

    model_config = ConfigDict(frozen=True)


class WorkflowDefinition(BaseModel):
    """Immutable, reusable template of a saga."""

    id: str
    name: str
    version: str = "1.0.0"
    description: Optional[str] = None
    steps: List[WorkflowStep] = Field(default_factory=list)
    retry_policy: Optional[RetryPolicy] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def step(self, step_id: str) -> Optional[WorkflowStep]:
        """Return the step with ``step_id`` or ``None``."""
        return next((s for s in self.steps if s.id == step_id), None)


class StepExecution(BaseModel):
    step_id: str
    status: StepStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    attempts: int = 0
    result: Any = None
    error: Optional[str] = None


class CompensationExecution(BaseModel):
    step_id: str
    status: CompensationStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    result: Any = None
    error: Optional[str] = None


class WorkflowExecution(BaseModel):
    """Aggregate record of one run of a workflow definition."""

    id: str
    definition_id: str
    status: ExecutionStatus = ExecutionStatus.PENDING
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    context: WorkflowContext
    step_executions: List[StepExecution] = Field(default_factory=list)
    compensations: List[CompensationExecution] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def completed_steps(self) -> List[StepExecution]:
        """Return completed step records in execution order."""
        return [s for s in self.step_executions if s.status == StepStatus.COMPLETED]

    def failed_compensations(self) -> List[CompensationExecution]:
        """Return compensations that did not succeed (partial rollback)."""
        return [c for c in self.compensations if c.status == CompensationStatus.FAILED]


class Event(BaseModel):
    """Lifecycle notification published to the event bus."""

    id: str = Field(default_factory=lambda: f"evt_{uuid.uuid4().hex}")
    type: str
    timestamp: datetime = Field(default_factory=utcnow)
    source: str = EVENT_SOURCE
    version: int = EVENT_VERSION
    payload: Dict[str, Any] = Field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = None

    def to_json(self) -> str:
        """Serialize event to JSON."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "Event":
        """Deserialize event from JSON."""
        return cls.model_validate_json(data)
