"""Lifecycle notifier tests."""

import pytest

from sagaflow import (
    EventNotifier,
    ExecutionStatus,
    InMemoryEventBus,
    WorkflowContext,
    WorkflowDefinition,
    WorkflowEngine,
    WorkflowExecution,
    WorkflowStep,
)
from sagaflow.events.base import EventBus


def _execution():
    return WorkflowExecution(
        id="exec_1",
        definition_id="order",
        context=WorkflowContext(
            workflow_id="order", correlation_id="corr-7", user_id="u-1", outputs={"a": 1}
        ),
    )


class ExplodingBus(EventBus):
    async def publish(self, event):
        raise ConnectionError("bus offline")


@pytest.mark.asyncio
async def test_without_bus_publication_is_noop():
    notifier = EventNotifier()

    assert await notifier.workflow_started(_execution()) is None


@pytest.mark.asyncio
async def test_payloads_per_event_type():
    bus = InMemoryEventBus()
    notifier = EventNotifier(bus)
    execution = _execution()

    started = await notifier.workflow_started(execution)
    completed = await notifier.workflow_completed(execution)
    execution.status = ExecutionStatus.COMPENSATED
    execution.error = "Step a failed: boom"
    failed = await notifier.workflow_failed(execution)

    assert started.payload == {"execution_id": "exec_1", "workflow_id": "order"}
    assert completed.payload["outputs"] == {"a": 1}
    assert failed.payload["error"] == "Step a failed: boom"
    assert started.metadata == {"correlation_id": "corr-7", "user_id": "u-1"}
    assert [e.type for e in bus.get_history()] == [
        "workflow.failed",
        "workflow.completed",
        "workflow.started",
    ]


@pytest.mark.asyncio
async def test_bus_errors_are_not_propagated():
    notifier = EventNotifier(ExplodingBus())

    event = await notifier.workflow_started(_execution())

    assert event.type == "workflow.started"


@pytest.mark.asyncio
async def test_engine_completes_when_bus_is_down():
    engine = WorkflowEngine(ExplodingBus())
    engine.register_action("act", lambda params, ctx: "done")
    engine.register_workflow(
        WorkflowDefinition(
            id="wf", name="WF", steps=[WorkflowStep(id="s", name="S", action_name="act")]
        )
    )

    execution = await engine.execute_workflow("wf")

    assert execution.status == ExecutionStatus.COMPLETED
