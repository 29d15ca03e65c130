"""sagaflow: in-process saga orchestration with retries and compensation."""

from .compensation import CompensationCoordinator
from .config import EngineConfig, load_config
from .contracts import (
    CompensationExecution,
    CompensationSpec,
    CompensationStatus,
    Event,
    ExecutionStatus,
    RetryPolicy,
    StepExecution,
    StepStatus,
    WorkflowContext,
    WorkflowDefinition,
    WorkflowExecution,
    WorkflowStep,
)
from .definitions import load_workflow_definitions
from .engine import WorkflowEngine, create_workflow_engine
from .errors import (
    ActionNotFoundError,
    DefinitionLoadError,
    StepTimeoutError,
    WorkflowError,
    WorkflowNotFoundError,
)
from .events import EventBus, InMemoryEventBus, get_event_bus
from .executor import StepExecutor
from .notifier import EventNotifier
from .persistence import ExecutionStore, InMemoryExecutionStore
from .registry import ActionRegistry, WorkflowRegistry

__version__ = "0.1.0"
__all__ = [
    "ActionNotFoundError",
    "ActionRegistry",
    "CompensationCoordinator",
    "CompensationExecution",
    "CompensationSpec",
    "CompensationStatus",
    "DefinitionLoadError",
    "EngineConfig",
    "Event",
    "EventBus",
    "EventNotifier",
    "ExecutionStatus",
    "ExecutionStore",
    "InMemoryEventBus",
    "InMemoryExecutionStore",
    "RetryPolicy",
    "StepExecution",
    "StepExecutor",
    "StepStatus",
    "StepTimeoutError",
    "WorkflowContext",
    "WorkflowDefinition",
    "WorkflowEngine",
    "WorkflowError",
    "WorkflowExecution",
    "WorkflowNotFoundError",
    "WorkflowRegistry",
    "WorkflowStep",
    "create_workflow_engine",
    "get_event_bus",
    "load_config",
    "load_workflow_definitions",
]
