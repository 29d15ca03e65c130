"""Saga rollback of completed steps."""

from __future__ import annotations

import inspect
import logging
from typing import List

from .contracts import (
    ActionHandler,
    CompensationExecution,
    CompensationStatus,
    ExecutionStatus,
    WorkflowDefinition,
    WorkflowExecution,
    WorkflowStep,
    utcnow,
)
from .errors import error_message
from .registry import ActionRegistry

logger = logging.getLogger(__name__)


class CompensationCoordinator:
    """Undo completed steps in reverse completion order.

    Each compensation runs once, without retry or timeout. A compensation
    whose action has no registered handler is skipped and leaves no record.
    Failures are recorded and the remaining compensations still run, so a
    rollback can be partial; inspect ``execution.compensations`` to find out.
    """

    def __init__(self, actions: ActionRegistry) -> None:
        self._actions = actions

    async def compensate(
        self, execution: WorkflowExecution, definition: WorkflowDefinition
    ) -> List[CompensationExecution]:
        execution.status = ExecutionStatus.COMPENSATING
        records: List[CompensationExecution] = []

        for step_execution in reversed(execution.completed_steps()):
            step = definition.step(step_execution.step_id)
            if step is None or step.compensation is None:
                continue
            handler = self._actions.find(step.compensation.action_name)
            if handler is None:
                logger.warning(
                    f"No handler for compensation {step.compensation.action_name} of step {step.id}; skipping"
                )
                continue
            record = await self._compensate_step(step, handler, execution)
            execution.compensations.append(record)
            records.append(record)

        failed = sum(1 for r in records if r.status == CompensationStatus.FAILED)
        logger.info(
            f"Compensated execution {execution.id}: {len(records) - failed} succeeded, {failed} failed"
        )
        return records

    async def _compensate_step(
        self, step: WorkflowStep, handler: ActionHandler, execution: WorkflowExecution
    ) -> CompensationExecution:
        compensation = step.compensation
        start_time = utcnow()
        try:
            result = handler(compensation.params, execution.context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error(
                f"Compensation {compensation.action_name} for step {step.id} failed: {e}"
            )
            return CompensationExecution(
                step_id=step.id,
                status=CompensationStatus.FAILED,
                start_time=start_time,
                end_time=utcnow(),
                error=error_message(e),
            )

        return CompensationExecution(
            step_id=step.id,
            status=CompensationStatus.COMPLETED,
            start_time=start_time,
            end_time=utcnow(),
            result=result,
        )
