"""Command line entry point.

    hubtools stdio                      # serve every toolset over stdio
    hubtools --toolsets repos,issues stdio
    hubtools --dynamic-toolsets stdio   # start small, let the agent enable toolsets
    hubtools tools                      # show the catalog

Settings come from .hubtools/config.yaml, HUBTOOLS_* environment
variables and these flags, flags winning.
"""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console
from rich.table import Table

from hubtools import __version__
from hubtools.config import HubToolsConfig, load_config
from hubtools.errors import ConfigurationError
from hubtools.formatting import mcp_json
from hubtools.github.catalog import init_toolsets
from hubtools.github.client import GitHubClient
from hubtools.logging import configure_logging
from hubtools.translations import TranslationHelper

logger = logging.getLogger(__name__)

# stdout carries the MCP transport
console = Console(stderr=True)


def _fail(ctx: click.Context, message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")
    ctx.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: .hubtools/config.yaml, then ~/.hubtools/config.yaml)",
)
@click.option("--toolsets", default=None, help="Comma separated list of toolsets to enable (default: all)")
@click.option(
    "--dynamic-toolsets/--no-dynamic-toolsets",
    default=None,
    help="Let the agent enable toolsets at runtime",
)
@click.option("--read-only/--no-read-only", default=None, help="Only expose read tools")
@click.option("--gh-host", "host", default=None, help="GitHub host, for GitHub Enterprise (e.g. https://ghe.example.com)")
@click.option("--log-file", default=None, type=click.Path(dir_okay=False), help="Also write logs to this file")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for stderr",
)
@click.version_option(version=__version__, prog_name="hubtools")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    toolsets: str | None,
    dynamic_toolsets: bool | None,
    read_only: bool | None,
    host: str | None,
    log_file: str | None,
    log_level: str | None,
) -> None:
    """hubtools - GitHub operations as MCP tools."""
    try:
        config = load_config(config_path).with_overrides(
            toolsets=toolsets,
            dynamic_toolsets=dynamic_toolsets,
            read_only=read_only,
            host=host,
            log_file=log_file,
            log_level=log_level,
        )
    except ConfigurationError as e:
        _fail(ctx, str(e))
        return
    ctx.obj = config


@main.command()
@click.option("--enable-command-logging", is_flag=True, default=None, help="Log every tool call and its result")
@click.option("--export-translations", is_flag=True, default=None, help="Write tool descriptions to hubtools.json")
@click.pass_context
def stdio(ctx: click.Context, enable_command_logging: bool | None, export_translations: bool | None) -> None:
    """Serve the configured toolsets over stdio."""
    from hubtools.server import create_server, run_stdio_server

    config: HubToolsConfig = ctx.obj.with_overrides(
        enable_command_logging=enable_command_logging or None,
        export_translations=export_translations or None,
    )
    if not config.token:
        _fail(ctx, "GITHUB_PERSONAL_ACCESS_TOKEN not set")
        return

    configure_logging(level=config.log_level, log_file=config.log_file)
    translator = TranslationHelper.from_file()

    try:
        hub = create_server(config, t=translator)
    except ConfigurationError as e:
        _fail(ctx, str(e))
        return

    if config.export_translations:
        path = translator.dump()
        console.print(f"[dim]Wrote translations to {path}[/dim]")

    console.print("hubtools MCP server running on stdio")
    try:
        asyncio.run(run_stdio_server(hub))
    except KeyboardInterrupt:
        pass  # Clean exit for MCP subprocess


@main.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def tools(ctx: click.Context, json_output: bool) -> None:
    """Show the toolset catalog and which toolsets start enabled."""
    config: HubToolsConfig = ctx.obj
    try:
        group = init_toolsets(GitHubClient(host=config.host), config.startup_toolsets(), read_only=config.read_only)
    except ConfigurationError as e:
        _fail(ctx, str(e))
        return

    rows = [
        {
            "toolset": ts.name,
            "tool": tool.name,
            "access": "read" if tool.read_only else "write",
            "enabled": ts.enabled,
        }
        for ts in group
        for tool in ts.get_available_tools()
    ]

    if json_output:
        click.echo(mcp_json(rows, pretty=True))
        return

    table = Table(title="Toolsets")
    table.add_column("Toolset", style="cyan")
    table.add_column("Tool")
    table.add_column("Access")
    table.add_column("Enabled")
    for row in rows:
        access_style = "green" if row["access"] == "read" else "yellow"
        table.add_row(
            row["toolset"],
            row["tool"],
            f"[{access_style}]{row['access']}[/{access_style}]",
            "yes" if row["enabled"] else "no",
        )
    Console().print(table)
