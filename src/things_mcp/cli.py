"""Command line interface for things3-mcp."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from things_mcp.catalog.operations import OPERATIONS
from things_mcp.config import Settings, load_settings
from things_mcp.errors import ConfigurationError, ThingsMCPError
from things_mcp.execution.runner import OsascriptRunner
from things_mcp.mcp.server import ThingsMCPServer
from things_mcp.service import OperationService

# stdout carries the MCP stream, so diagnostics go to stderr.
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _load(
    config: str | None,
    timeout: float | None,
    osascript: str | None,
    log_level: str | None,
) -> Settings:
    try:
        return load_settings(
            config,
            timeout_seconds=timeout,
            osascript_path=osascript,
            log_level=log_level,
        )
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def _parse_args(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--args") from e
    if not isinstance(arguments, dict):
        raise click.BadParameter("Must be a JSON object", param_hint="--args")
    return arguments


def settings_options(func: Any) -> Any:
    """Attach the options shared by commands that talk to Things3."""
    options = [
        click.option(
            "--config",
            "config",
            type=click.Path(dir_okay=False),
            default=None,
            help="YAML settings file",
        ),
        click.option(
            "--timeout",
            type=float,
            default=None,
            help="Seconds to wait for each osascript call",
        ),
        click.option(
            "--osascript",
            default=None,
            help="Path to the osascript executable",
        ),
        click.option(
            "--log-level",
            type=click.Choice(
                ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
            ),
            default=None,
            help="Log level for stderr diagnostics",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="things3-mcp")
def cli() -> None:
    """Things 3 MCP server - task management tools over AppleScript."""
    pass


@cli.command()
@settings_options
def serve(
    config: str | None,
    timeout: float | None,
    osascript: str | None,
    log_level: str | None,
) -> None:
    """Run the MCP server on stdio."""
    settings = _load(config, timeout, osascript, log_level)
    configure_logging(settings.log_level)
    ThingsMCPServer(settings=settings).run()


@cli.command()
def tools() -> None:
    """List the available tools."""
    table = Table(title="Things 3 tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description")
    for operation in OPERATIONS.values():
        required = ", ".join(operation.input_schema().get("required", []))
        table.add_row(operation.name, required or "-", operation.description)
    Console().print(table)


@cli.command()
@click.argument("operation")
@click.option("--args", "raw_args", default=None, help="Tool arguments as JSON")
@click.option("--application", default=None, help="Target application name")
def render(operation: str, raw_args: str | None, application: str | None) -> None:
    """Print the AppleScript an operation would run, without running it."""
    settings = Settings() if application is None else Settings(application=application)
    service = OperationService(
        OsascriptRunner(settings), application=settings.application
    )
    try:
        program = service.render(operation, _parse_args(raw_args))
    except ThingsMCPError as e:
        raise click.ClickException(str(e)) from e
    click.echo(program.source, nl=False)


@cli.command()
@click.argument("operation")
@click.option("--args", "raw_args", default=None, help="Tool arguments as JSON")
@settings_options
def call(
    operation: str,
    raw_args: str | None,
    config: str | None,
    timeout: float | None,
    osascript: str | None,
    log_level: str | None,
) -> None:
    """Run one operation against Things 3 and print the result."""
    settings = _load(config, timeout, osascript, log_level)
    configure_logging(settings.log_level)
    service = OperationService(
        OsascriptRunner(settings), application=settings.application
    )
    result = asyncio.run(service.execute(operation, _parse_args(raw_args)))
    click.echo(result.text)
    if result.is_error:
        sys.exit(1)


if __name__ == "__main__":
    cli()
