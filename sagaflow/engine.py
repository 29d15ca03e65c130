"""Workflow execution engine for sagaflow."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, List, Mapping, Optional

from .compensation import CompensationCoordinator
from .config import EngineConfig, load_config
from .contracts import (
    ActionHandler,
    ExecutionStatus,
    StepExecution,
    StepStatus,
    WorkflowContext,
    WorkflowDefinition,
    WorkflowExecution,
    WorkflowStep,
    utcnow,
)
from .errors import error_message
from .events import EventBus, get_event_bus
from .executor import StepExecutor
from .notifier import EventNotifier
from .persistence import ExecutionStore, InMemoryExecutionStore
from .registry import ActionRegistry, WorkflowRegistry

logger = logging.getLogger(__name__)


def _new_execution_id() -> str:
    return f"exec_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class WorkflowEngine:
    """Runs registered workflow definitions as in-process sagas.

    Steps run strictly in definition order. When a step fails after its
    retries, completed steps are compensated in reverse order and the run
    ends as ``compensated``. Business failures are reported through the
    returned execution record, never raised.

    Execution state lives in memory only. Register actions and workflows
    before the first call to :meth:`execute_workflow`.
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        *,
        actions: Optional[ActionRegistry] = None,
        workflows: Optional[WorkflowRegistry] = None,
        store: Optional[ExecutionStore] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.actions = actions if actions is not None else ActionRegistry()
        self.workflows = workflows if workflows is not None else WorkflowRegistry()
        self.store = store if store is not None else InMemoryExecutionStore()
        self._notifier = EventNotifier(event_bus)
        self._step_executor = StepExecutor(self.actions, self.config.defaults)
        self._compensator = CompensationCoordinator(self.actions)

    @property
    def event_bus(self) -> Optional[EventBus]:
        return self._notifier.event_bus

    @property
    def step_executor(self) -> StepExecutor:
        return self._step_executor

    # ------------------------------------------------------------------
    def register_workflow(self, definition: WorkflowDefinition) -> None:
        """Register ``definition``, replacing any definition with the same id."""
        self.workflows.register(definition)

    def register_action(self, name: str, handler: ActionHandler) -> None:
        """Register ``handler`` under ``name``, replacing any previous handler."""
        self.actions.register(name, handler)

    def get_execution(self, execution_id: str) -> Optional[WorkflowExecution]:
        return self.store.get(execution_id)

    def get_execution_history(
        self, definition_id: str, limit: Optional[int] = None
    ) -> List[WorkflowExecution]:
        """Executions of ``definition_id`` sorted by start time, newest first."""
        if limit is None:
            limit = self.config.history_limit
        return self.store.history(definition_id, limit)

    # ------------------------------------------------------------------
    async def execute_workflow(
        self, definition_id: str, context: Optional[Mapping[str, Any]] = None
    ) -> WorkflowExecution:
        """Run the workflow ``definition_id`` and return its finished record.

        Args:
            definition_id: Id of a registered workflow definition.
            context: Optional initial context with ``correlation_id``,
                ``user_id``, ``data`` and ``metadata`` keys.

        Returns:
            The execution record in status ``completed``, ``compensated`` (a
            step failed and completed steps were rolled back) or ``failed``
            (unexpected engine error, no rollback attempted).

        Raises:
            WorkflowNotFoundError: ``definition_id`` is not registered.
        """
        definition = self.workflows.get(definition_id)
        execution = self._create_execution(definition, context or {})
        self.store.add(execution)

        try:
            await self._notifier.workflow_started(execution)
            execution.status = ExecutionStatus.RUNNING
            logger.info(
                f"Started workflow {definition.id} execution={execution.id} "
                f"correlation_id={execution.context.correlation_id}"
            )

            for step in definition.steps:
                if step.condition is not None and not step.condition(execution.context):
                    self._record_skipped(execution, step)
                    continue

                start_time = utcnow()
                try:
                    result = await self._step_executor.execute(
                        step, execution.context, definition.retry_policy
                    )
                except Exception as e:
                    step_error = error_message(e)
                    execution.step_executions.append(
                        StepExecution(
                            step_id=step.id,
                            status=StepStatus.FAILED,
                            start_time=start_time,
                            end_time=utcnow(),
                            attempts=1,
                            error=step_error,
                        )
                    )
                    logger.error(
                        f"Step {step.id} of execution {execution.id} failed: {step_error}"
                    )
                    await self._compensator.compensate(execution, definition)
                    self._finish(
                        execution,
                        ExecutionStatus.COMPENSATED,
                        error=f"Step {step.id} failed: {step_error}",
                    )
                    await self._notifier.workflow_failed(execution)
                    return execution

                execution.step_executions.append(
                    StepExecution(
                        step_id=step.id,
                        status=StepStatus.COMPLETED,
                        start_time=start_time,
                        end_time=utcnow(),
                        attempts=1,
                        result=result,
                    )
                )
                execution.context.outputs[step.id] = result

            self._finish(execution, ExecutionStatus.COMPLETED)
            logger.info(f"Workflow {definition.id} execution={execution.id} completed")
            await self._notifier.workflow_completed(execution)
            return execution
        except Exception as e:
            # Unexpected engine errors end the run as ``failed`` without
            # compensating, unlike step failures above.
            logger.exception(f"Workflow execution {execution.id} failed unexpectedly")
            self._finish(execution, ExecutionStatus.FAILED, error=error_message(e))
            await self._notifier.workflow_failed(execution)
            return execution

    # ------------------------------------------------------------------
    def _create_execution(
        self, definition: WorkflowDefinition, initial: Mapping[str, Any]
    ) -> WorkflowExecution:
        data = initial.get("data")
        context = WorkflowContext(
            workflow_id=definition.id,
            correlation_id=initial.get("correlation_id") or str(uuid.uuid4()),
            user_id=initial.get("user_id"),
            data=data if data is not None else {},
            metadata=initial.get("metadata"),
        )
        return WorkflowExecution(
            id=_new_execution_id(),
            definition_id=definition.id,
            context=context,
        )

    def _record_skipped(self, execution: WorkflowExecution, step: WorkflowStep) -> None:
        now = utcnow()
        execution.step_executions.append(
            StepExecution(
                step_id=step.id,
                status=StepStatus.SKIPPED,
                start_time=now,
                end_time=now,
                attempts=0,
            )
        )
        logger.debug(f"Skipped step {step.id} of execution {execution.id}")

    def _finish(
        self,
        execution: WorkflowExecution,
        status: ExecutionStatus,
        error: Optional[str] = None,
    ) -> None:
        execution.status = status
        execution.error = error
        execution.end_time = utcnow()
        if status != ExecutionStatus.COMPLETED:
            logger.error(f"Workflow execution {execution.id} ended {status.value}: {error}")


def create_workflow_engine(
    event_bus: Optional[EventBus] = None, config: Optional[EngineConfig] = None
) -> WorkflowEngine:
    """Build an engine from configuration.

    When ``event_bus`` is not given, the bus configured in ``config`` (or
    the loaded configuration file) is used.
    """
    config = config or load_config()
    if event_bus is None:
        event_bus = get_event_bus(config=config)
    return WorkflowEngine(event_bus, config=config)
