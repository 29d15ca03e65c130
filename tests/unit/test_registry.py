"""Action and workflow registry tests."""

import pytest

from sagaflow import (
    ActionNotFoundError,
    ActionRegistry,
    WorkflowDefinition,
    WorkflowNotFoundError,
    WorkflowRegistry,
)


async def _first(params, context):
    return 1


async def _second(params, context):
    return 2


def test_register_action_overwrites():
    registry = ActionRegistry()
    registry.register("act", _first)
    registry.register("act", _second)

    assert registry.get("act") is _second
    assert len(registry) == 1
    assert "act" in registry


def test_missing_action_raises_with_name():
    registry = ActionRegistry()

    with pytest.raises(ActionNotFoundError) as exc_info:
        registry.get("payments.charge")
    assert str(exc_info.value) == "Action not found: payments.charge"
    assert registry.find("payments.charge") is None


def test_action_decorator_uses_function_name():
    registry = ActionRegistry()

    @registry.action()
    async def reserve(params, context):
        return "ok"

    @registry.action("inventory.release")
    async def release(params, context):
        return "ok"

    assert sorted(registry.names()) == ["inventory.release", "reserve"]
    assert registry.get("reserve") is reserve


def test_register_non_callable_rejected():
    with pytest.raises(TypeError):
        ActionRegistry().register("bad", "not a function")


def test_register_workflow_last_write_wins():
    registry = WorkflowRegistry()
    registry.register(WorkflowDefinition(id="wf", name="old", version="1"))
    registry.register(WorkflowDefinition(id="wf", name="new", version="2"))

    assert registry.get("wf").name == "new"
    assert len(registry) == 1
    assert [d.version for d in registry.definitions()] == ["2"]


def test_missing_workflow_raises_with_id():
    registry = WorkflowRegistry()

    with pytest.raises(WorkflowNotFoundError, match="Workflow definition not found: ghost"):
        registry.get("ghost")
    assert registry.find("ghost") is None
    assert "ghost" not in registry


def test_registries_are_independent_per_instance():
    first, second = ActionRegistry(), ActionRegistry()
    first.register("act", _first)

    assert "act" in first
    assert "act" not in second
