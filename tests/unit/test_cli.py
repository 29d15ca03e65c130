"""CLI command tests."""

import uuid

import pytest
from typer.testing import CliRunner

from sagaflow.cli import app

APP_SOURCE = '''
from sagaflow import CompensationSpec, WorkflowDefinition, WorkflowEngine, WorkflowStep


async def reserve(params, context):
    return {"sku": context.data.get("sku")}


async def release(params, context):
    return "released"


async def charge(params, context):
    if context.data.get("fail"):
        raise RuntimeError("card declined")
    return "charged"


def build_engine():
    engine = WorkflowEngine()
    engine.register_action("reserve", reserve)
    engine.register_action("release", release)
    engine.register_action("charge", charge)
    engine.register_workflow(
        WorkflowDefinition(
            id="order",
            name="Order",
            version="3",
            steps=[
                WorkflowStep(
                    id="reserve",
                    name="Reserve",
                    action_name="reserve",
                    compensation=CompensationSpec(action_name="release"),
                ),
                WorkflowStep(id="charge", name="Charge", action_name="charge"),
            ],
        )
    )
    return engine
'''

runner = CliRunner()


@pytest.fixture
def app_target(tmp_path, monkeypatch):
    module_name = f"saga_app_{uuid.uuid4().hex}"
    (tmp_path / f"{module_name}.py").write_text(APP_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return f"{module_name}:build_engine"


def test_workflow_run_completed(app_target):
    result = runner.invoke(
        app, ["workflow", "run", "order", "--app", app_target, "--data", '{"sku": "A1"}']
    )

    assert result.exit_code == 0, result.stdout
    assert ": completed" in result.stdout
    assert "- reserve: completed (attempts=1)" in result.stdout
    assert '"sku": "A1"' in result.stdout


def test_workflow_run_compensated_exits_nonzero(app_target):
    result = runner.invoke(
        app, ["workflow", "run", "order", "--app", app_target, "--data", '{"fail": true}']
    )

    assert result.exit_code == 1
    assert ": compensated" in result.stdout
    assert "compensated reserve: completed" in result.stdout
    assert "Error: Step charge failed: card declined" in result.stdout


def test_workflow_run_unknown_definition(app_target):
    result = runner.invoke(app, ["workflow", "run", "ghost", "--app", app_target])

    assert result.exit_code == 1
    assert "Workflow definition not found: ghost" in result.stdout


def test_workflow_run_rejects_bad_data(app_target):
    result = runner.invoke(
        app, ["workflow", "run", "order", "--app", app_target, "--data", "[1, 2]"]
    )

    assert result.exit_code == 1
    assert "Invalid --data" in result.stdout


def test_workflow_run_with_yaml_definitions(app_target, tmp_path):
    extra = tmp_path / "extra.yaml"
    extra.write_text("id: quick\nname: Quick\nsteps:\n  - {id: r, name: R, action_name: reserve}\n")

    result = runner.invoke(
        app, ["workflow", "run", "quick", "--app", app_target, "--definitions", str(extra)]
    )

    assert result.exit_code == 0, result.stdout
    assert "- r: completed" in result.stdout


def test_workflow_and_action_list(app_target):
    workflows = runner.invoke(app, ["workflow", "list", "--app", app_target])
    actions = runner.invoke(app, ["action", "list", "--app", app_target])

    assert workflows.exit_code == 0
    assert "order\t3\tOrder" in workflows.stdout
    assert actions.exit_code == 0
    names = [line for line in actions.stdout.splitlines() if line in {"charge", "release", "reserve"}]
    assert names == ["charge", "release", "reserve"]


def test_bad_app_target_reports_error():
    result = runner.invoke(app, ["workflow", "list", "--app", "no_colon_here"])

    assert result.exit_code == 1
    assert "Cannot load engine" in result.stdout


def test_workflow_validate(tmp_path):
    path = tmp_path / "workflows.yaml"
    path.write_text(
        "workflows:\n"
        "  - id: build\n    name: Build\n    version: '2.0'\n"
        "    steps:\n      - {id: a, name: A, action_name: x}\n"
    )
    bad = tmp_path / "bad.yaml"
    bad.write_text("workflows:\n  - name: no id\n")

    ok = runner.invoke(app, ["workflow", "validate", str(path)])
    failed = runner.invoke(app, ["workflow", "validate", str(bad)])

    assert ok.exit_code == 0
    assert "build v2.0 - Build (1 steps)" in ok.stdout
    assert failed.exit_code == 1
