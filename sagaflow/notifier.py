"""Lifecycle notifications for workflow executions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .contracts import Event, WorkflowExecution
from .events.base import EventBus

logger = logging.getLogger(__name__)

WORKFLOW_STARTED = "workflow.started"
WORKFLOW_COMPLETED = "workflow.completed"
WORKFLOW_FAILED = "workflow.failed"


class EventNotifier:
    """Publishes ``workflow.*`` events to an optional event bus.

    Without a bus every call is a no-op. Errors raised by the bus are logged
    and never reach the workflow.
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self.event_bus = event_bus

    async def workflow_started(self, execution: WorkflowExecution) -> Optional[Event]:
        return await self.publish(WORKFLOW_STARTED, execution)

    async def workflow_completed(self, execution: WorkflowExecution) -> Optional[Event]:
        return await self.publish(
            WORKFLOW_COMPLETED, execution, outputs=execution.context.outputs
        )

    async def workflow_failed(self, execution: WorkflowExecution) -> Optional[Event]:
        return await self.publish(WORKFLOW_FAILED, execution, error=execution.error)

    async def publish(
        self, event_type: str, execution: WorkflowExecution, **extra: Any
    ) -> Optional[Event]:
        if self.event_bus is None:
            return None

        payload: Dict[str, Any] = {
            "execution_id": execution.id,
            "workflow_id": execution.definition_id,
            **extra,
        }
        event = Event(
            type=event_type,
            payload=payload,
            metadata={
                "correlation_id": execution.context.correlation_id,
                "user_id": execution.context.user_id,
            },
        )
        try:
            await self.event_bus.publish(event)
        except Exception:
            logger.exception(
                f"Failed to publish {event_type} for execution {execution.id}"
            )
        return event
