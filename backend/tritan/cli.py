#!/usr/bin/env python3
# tritan/cli.py

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from tritan.config import EditorConfig
from tritan.logging import configure_logging
from tritan.workflow.engine_client import EngineClient, EngineError
from tritan.workflow.graph_store import GraphStore
from tritan.workflow.guardian import WorkflowGuardian
from tritan.workflow.session import EditorSession
from tritan.workflow.workflow_executor import WorkflowExecutor
from tritan.workflow.workflow_model import ValidationResult
from tritan.workflow.workflow_store import export_workflow, import_workflow_file

app = typer.Typer(help="Tritan CLI - validate and run workflow documents against the engine")


def _config(api_url: Optional[str], verbose: bool) -> EditorConfig:
    config = EditorConfig.get_default_instance()
    if api_url:
        config.api_url = api_url
    configure_logging("DEBUG" if verbose else config.log_level)
    return config


def _load(path: Path) -> GraphStore:
    store = GraphStore()
    outcome = import_workflow_file(store, path)
    if not outcome.success:
        typer.echo(outcome.error, err=True)
        raise typer.Exit(code=2)
    return store


def _print_validation(result: ValidationResult) -> None:
    typer.echo(f"Valid: {result.valid}")
    for issue in result.errors:
        line = f"  error: {issue.message}"
        if issue.suggestion:
            line += f" (suggestion: {issue.suggestion})"
        typer.echo(line)
    for issue in result.warnings:
        typer.echo(f"  warning: {issue.message}")
    for s in result.suggestions:
        typer.echo(f"  suggestion: {s.message}")


@app.command()
def validate(
    input: Path = typer.Argument(..., exists=True, readable=True, help="Workflow JSON document"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Engine base URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug info"),
):
    """
    Validate a workflow document. Falls back to local checks when the engine is unreachable.
    """
    config = _config(api_url, verbose)
    store = _load(input)
    client = EngineClient(config.api_url, timeout=config.request_timeout)
    result = asyncio.run(WorkflowGuardian(store, client).validate())
    _print_validation(result)
    if not result.valid:
        raise typer.Exit(code=1)


@app.command()
def run(
    input: Path = typer.Argument(..., exists=True, readable=True, help="Workflow JSON document"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Engine base URL"),
    skip_validation: bool = typer.Option(False, "--skip-validation", help="Execute without validating first"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug info"),
):
    """
    Validate, then execute a workflow document on the engine.
    """
    config = _config(api_url, verbose)
    store = _load(input)
    client = EngineClient(config.api_url, timeout=config.request_timeout)

    if not skip_validation:
        validation = asyncio.run(WorkflowGuardian(store, client).validate())
        if not validation.valid:
            _print_validation(validation)
            raise typer.Exit(code=1)

    try:
        result = asyncio.run(WorkflowExecutor(store, client).execute())
    except EngineError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Status: {result.status_label}")
    if result.total_duration_ms is not None:
        typer.echo(f"Duration: {result.total_duration_ms:.0f}ms")
    for nr in result.node_results:
        line = f"  {nr.node_id}: {nr.status}"
        if nr.error:
            line += f" ({nr.error})"
        typer.echo(line)
    if result.error:
        typer.echo(f"Error: {result.error}", err=True)
    if result.failed:
        raise typer.Exit(code=1)


@app.command()
def health(
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Engine base URL"),
):
    """
    Ping the engine's health endpoint.
    """
    config = _config(api_url, False)
    client = EngineClient(config.api_url, timeout=config.request_timeout)
    try:
        body = asyncio.run(client.health())
    except EngineError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(body, indent=2))


@app.command()
def export(
    out: Path = typer.Option(Path("."), "--out", "-o", help="Directory for the exported document"),
):
    """
    Save the persisted editor session and export it as a JSON document.
    """
    with EditorSession(_config(None, False)) as session:
        path = export_workflow(session.store, out)
    typer.echo(str(path))


if __name__ == "__main__":
    app()
