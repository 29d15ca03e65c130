"""Command line interface for running sagaflow workflows."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from sagaflow.cli_utils.app import _load_engine, _parse_data
from sagaflow.config import load_config
from sagaflow.contracts import ExecutionStatus
from sagaflow.definitions import load_workflow_definitions
from sagaflow.engine import WorkflowEngine
from sagaflow.errors import DefinitionLoadError, WorkflowNotFoundError

app = typer.Typer(help="CLI for sagaflow workflows")

# Command groups
workflow_app = typer.Typer(help="Commands for managing workflows")
action_app = typer.Typer(help="Commands for inspecting actions")

app.add_typer(workflow_app, name="workflow")
app.add_typer(action_app, name="action")

APP_OPTION_HELP = "Engine to use, as 'module:attribute' (instance or factory)"


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Logging level override"),
) -> None:
    """sagaflow CLI entry point."""
    level = (log_level or load_config().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _engine_or_exit(target: str) -> WorkflowEngine:
    try:
        return _load_engine(target)
    except (ImportError, ValueError) as exc:
        typer.secho(f"Cannot load engine: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@workflow_app.command("validate")
def workflow_validate(path: Path) -> None:
    """
    Validate a YAML file of workflow definitions.

    Example:
        sagaflow workflow validate ./workflows.yaml
        # Output: order v1.0.0 - Place order (3 steps)
    """
    try:
        definitions = load_workflow_definitions(path)
    except DefinitionLoadError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if not definitions:
        typer.echo("No workflows defined.")
        return
    for definition in definitions:
        typer.echo(
            f"{definition.id} v{definition.version} - {definition.name} "
            f"({len(definition.steps)} steps)"
        )


@workflow_app.command("list")
def workflow_list(
    app_target: str = typer.Option(..., "--app", help=APP_OPTION_HELP),
) -> None:
    """List workflow definitions registered on the engine."""
    engine = _engine_or_exit(app_target)
    definitions = engine.workflows.definitions()
    if not definitions:
        typer.echo("No workflows registered")
        return
    for definition in definitions:
        typer.echo(f"{definition.id}\t{definition.version}\t{definition.name}")


@workflow_app.command("run")
def workflow_run(
    definition_id: str,
    app_target: str = typer.Option(..., "--app", help=APP_OPTION_HELP),
    definitions: Optional[Path] = typer.Option(
        None, help="YAML file with extra workflow definitions to register"
    ),
    data: Optional[str] = typer.Option(None, help="JSON object used as context data"),
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> None:
    """
    Execute a workflow and print its execution record.

    Exits with code 0 when the workflow completed and 1 when it was
    compensated or failed.

    Example:
        sagaflow workflow run order --app guides.order_saga:build_engine --data '{"sku": "A1"}'
        # Output: Execution exec_...: completed
        #         - reserve: completed (attempts=1)
    """
    engine = _engine_or_exit(app_target)

    if definitions is not None:
        try:
            for definition in load_workflow_definitions(definitions):
                engine.register_workflow(definition)
        except DefinitionLoadError as exc:
            typer.secho(str(exc), fg=typer.colors.RED)
            raise typer.Exit(code=1)

    try:
        context_data = _parse_data(data)
    except ValueError as exc:
        typer.secho(f"Invalid --data: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    context = {
        "data": context_data,
        "correlation_id": correlation_id,
        "user_id": user_id,
    }
    try:
        execution = asyncio.run(engine.execute_workflow(definition_id, context))
    except WorkflowNotFoundError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(f"Execution {execution.id}: {execution.status.value}")
    for step in execution.step_executions:
        line = f"- {step.step_id}: {step.status.value} (attempts={step.attempts})"
        if step.error:
            line += f" error={step.error}"
        typer.echo(line)
    for compensation in execution.compensations:
        line = f"  compensated {compensation.step_id}: {compensation.status.value}"
        if compensation.error:
            line += f" error={compensation.error}"
        typer.echo(line)
    if execution.context.outputs:
        typer.echo(f"Outputs: {json.dumps(execution.context.outputs, default=str)}")
    if execution.error:
        typer.echo(f"Error: {execution.error}")

    if execution.status != ExecutionStatus.COMPLETED:
        raise typer.Exit(code=1)


@action_app.command("list")
def action_list(
    app_target: str = typer.Option(..., "--app", help=APP_OPTION_HELP),
) -> None:
    """List action names registered on the engine."""
    engine = _engine_or_exit(app_target)
    names = engine.actions.names()
    if not names:
        typer.echo("No actions registered")
        return
    for name in sorted(names):
        typer.echo(name)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
