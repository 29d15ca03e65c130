"""Shared fixtures for sagaflow tests."""

import pytest

from sagaflow import InMemoryEventBus, WorkflowContext, WorkflowEngine


@pytest.fixture
def event_bus():
    return InMemoryEventBus()


@pytest.fixture
def engine(event_bus):
    return WorkflowEngine(event_bus)


@pytest.fixture
def context():
    return WorkflowContext(workflow_id="wf", correlation_id="corr-1", data={"sku": "A1"})
