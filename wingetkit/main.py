"""
wingetkit — CLI entrypoint.

Usage:
    wingetkit --help
    wingetkit packages search vscode
    wingetkit packages install --id Microsoft.VisualStudioCode --exact
    wingetkit sources list
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import click

from wingetkit import __version__
from wingetkit.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from wingetkit.ui.cli.common import get_settings


@click.group()
@click.version_option(version=__version__, prog_name="wingetkit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (shows winget argv).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to wingetkit.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """wingetkit — drive winget from scripts and the terminal."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective settings."""
    settings = get_settings(ctx)

    if as_json:
        click.echo(json.dumps(settings.model_dump(), indent=2))
        return

    click.secho("⚙️  Settings:", fg="cyan", bold=True)
    for key, value in settings.model_dump().items():
        click.echo(f"   {key:<26} {value if value is not None else '-'}")
    click.echo()


# ── Register sub-command groups from wingetkit/ui/cli/ ────────────

from wingetkit.ui.cli.packages import packages  # noqa: E402
from wingetkit.ui.cli.sources import sources  # noqa: E402

cli.add_command(packages)
cli.add_command(sources)


if __name__ == "__main__":
    cli()
