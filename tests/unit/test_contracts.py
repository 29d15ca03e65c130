"""Contract model tests."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from sagaflow import (
    CompensationSpec,
    Event,
    ExecutionStatus,
    RetryPolicy,
    WorkflowContext,
    WorkflowDefinition,
    WorkflowExecution,
    WorkflowStep,
)


def test_step_is_immutable():
    step = WorkflowStep(id="s", name="S", action_name="act")

    with pytest.raises(ValidationError):
        step.action_name = "other"


def test_step_rejects_non_positive_attempts_and_timeout():
    with pytest.raises(ValidationError):
        WorkflowStep(id="s", name="S", action_name="act", retry_attempts=0)
    with pytest.raises(ValidationError):
        WorkflowStep(id="s", name="S", action_name="act", timeout_ms=0)


def test_condition_is_not_serialized():
    step = WorkflowStep(
        id="s",
        name="S",
        action_name="act",
        condition=lambda ctx: True,
        compensation=CompensationSpec(action_name="undo"),
    )

    dumped = step.model_dump()
    assert "condition" not in dumped
    assert dumped["compensation"] == {"action_name": "undo", "params": {}}
    assert step.condition(WorkflowContext(workflow_id="w", correlation_id="c"))


def test_definition_step_lookup():
    definition = WorkflowDefinition(
        id="wf",
        name="WF",
        steps=[
            WorkflowStep(id="a", name="A", action_name="x"),
            WorkflowStep(id="b", name="B", action_name="y"),
        ],
        retry_policy=RetryPolicy(max_attempts=3),
    )

    assert definition.step("b").action_name == "y"
    assert definition.step("zzz") is None
    assert definition.retry_policy.delay_ms is None


def test_new_execution_defaults():
    execution = WorkflowExecution(
        id="exec_1",
        definition_id="wf",
        context=WorkflowContext(workflow_id="wf", correlation_id="c"),
    )

    assert execution.status == ExecutionStatus.PENDING
    assert not execution.is_finished
    assert execution.end_time is None
    assert execution.start_time.tzinfo is not None
    assert execution.step_executions == []
    assert execution.compensations == []

    execution.status = ExecutionStatus.COMPENSATED
    assert execution.is_finished


def test_event_json_envelope():
    event = Event(
        type="workflow.started",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        payload={"execution_id": "exec_1"},
    )

    restored = Event.from_json(event.to_json())
    assert restored.model_dump() == event.model_dump()
    assert restored.source == "workflow-engine"
    assert restored.version == 1
    assert event.id.startswith("evt_")


def test_retry_policy_fields_default_to_unset():
    policy = RetryPolicy()

    assert policy.max_attempts is None
    assert policy.delay_ms is None
    assert policy.backoff_multiplier is None
