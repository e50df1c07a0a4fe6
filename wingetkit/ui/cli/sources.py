"""
CLI commands for package sources.

Thin wrappers over ``wingetkit.core.services.winget_ops``.
"""

from __future__ import annotations

import json

import click

from wingetkit.ui.cli.common import fail_on_error, get_adapter


@click.group()
def sources() -> None:
    """Sources — configured package repositories."""


@sources.command("list")
@click.option("--table", is_flag=True, help="Parse 'source list' instead of 'source export'.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_sources(ctx: click.Context, table: bool, as_json: bool) -> None:
    """List configured sources."""
    from wingetkit.core.services.winget_ops import source_list

    result = source_list(adapter=get_adapter(ctx), structured=not table)
    fail_on_error(result, as_json)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    items = result.get("sources", [])
    if not items:
        click.secho("ℹ️  No sources configured", fg="yellow")
        return

    click.secho(f"🗂️  Sources ({result.get('count', len(items))}):", fg="cyan", bold=True)
    for s in items:
        click.echo(f"   {s.get('name') or '?':<20} {s.get('argument') or ''}")
        if s.get("type"):
            click.echo(f"      Type: {s['type']}")
    click.echo()
