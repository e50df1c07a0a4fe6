"""
CLI commands for packages — search, list, upgradable, install, uninstall, upgrade.

Thin wrappers over ``wingetkit.core.services.winget_ops`` and
``winget_actions``.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Callable

import click

from wingetkit.core.models.query import InstallOptions, PackageQuery
from wingetkit.ui.cli.common import fail_on_error, get_adapter, get_settings


# ── Shared options ──────────────────────────────────────────────


def _filter_options(func: Callable) -> Callable:
    """Package filter options shared by every command."""
    decorators = [
        click.argument("query", required=False),
        click.option("--id", "id_", default=None, help="Filter by package id."),
        click.option("--name", default=None, help="Filter by package name."),
        click.option("--moniker", default=None, help="Filter by moniker."),
        click.option("--tag", default=None, help="Filter by tag."),
        click.option("--command", "command_", default=None, help="Filter by command."),
        click.option("--source", "-s", default=None, help="Restrict to one source."),
        click.option("--exact", "-e", is_flag=True, help="Match exactly instead of by substring."),
        click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _act_options(func: Callable) -> Callable:
    """Switches for install / uninstall / upgrade."""
    decorators = [
        click.option("--manifest", "-m", default=None, type=click.Path(), help="Local manifest file."),
        click.option("--version", "version", default=None, help="Package version."),
        click.option("--scope", type=click.Choice(["user", "machine"]), default=None, help="Install scope."),
        click.option("--architecture", "-a", default=None, help="Installer architecture."),
        click.option("--locale", default=None, help="Installer locale (BCP47)."),
        click.option("--log", "-o", default=None, type=click.Path(), help="Installer log path."),
        click.option("--location", "-l", default=None, type=click.Path(), help="Install location."),
        click.option("--override", default=None, help="Replace the installer's arguments."),
        click.option("--custom", default=None, help="Append to the installer's arguments."),
        click.option("--interactive", "-i", is_flag=True, help="Interactive installer."),
        click.option("--silent", "-h", is_flag=True, help="Silent installer."),
        click.option("--force", is_flag=True, help="Override winget's safety checks."),
        click.option("--accept-package-agreements", is_flag=True, help="Accept package license agreements."),
        click.option("--accept-source-agreements", is_flag=True, help="Accept source agreements."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _build_query(ctx: click.Context, params: dict[str, Any], count: int | None = None) -> PackageQuery:
    settings = get_settings(ctx)
    return PackageQuery(
        query=params.get("query"),
        id=params.get("id_"),
        name=params.get("name"),
        moniker=params.get("moniker"),
        tag=params.get("tag"),
        command=params.get("command_"),
        source=params.get("source") or settings.default_source,
        exact=params.get("exact", False),
        count=count,
        manifest=params.get("manifest"),
    )


def _build_options(ctx: click.Context, params: dict[str, Any]) -> InstallOptions:
    settings = get_settings(ctx)
    return InstallOptions(
        version=params.get("version"),
        scope=params.get("scope"),
        architecture=params.get("architecture"),
        locale=params.get("locale"),
        log=params.get("log"),
        location=params.get("location"),
        override=params.get("override"),
        custom=params.get("custom"),
        interactive=params.get("interactive", False),
        silent=params.get("silent", False),
        force=params.get("force", False),
        include_unknown=params.get("include_unknown", False),
        all=params.get("all_", False),
        accept_package_agreements=params.get("accept_package_agreements", False),
        accept_source_agreements=(
            params.get("accept_source_agreements", False) or settings.accept_source_agreements
        ),
    )


def _print_packages(result: dict, title: str, show_available: bool = False) -> None:
    pkgs = result.get("packages", [])
    if not pkgs:
        click.secho("ℹ️  No packages found", fg="yellow")
        return

    click.secho(f"📦 {title} ({result.get('count', len(pkgs))}):", fg="cyan", bold=True)
    for p in pkgs:
        line = f"   {p.get('name') or '?':<35} {p.get('id') or '?':<40} {p.get('version') or '-':<14}"
        if show_available:
            line += f" → {p.get('available_version') or '-':<14}"
        if p.get("source"):
            line += f" [{p['source']}]"
        click.echo(line.rstrip())
    click.echo()


def _print_act_result(result: dict, verb: str) -> None:
    if "error" in result:
        click.secho(f"❌ {result['error']}", fg="red")
        for c in result.get("candidates", []):
            click.echo(f"   • {c.get('name') or '?':<35} {c.get('id') or '?'}")
        sys.exit(1)

    package = result.get("package")
    label = (package.get("id") or package.get("name")) if package else "manifest"
    click.secho(f"✅ {verb}: {label}", fg="green", bold=True)
    if result.get("output"):
        click.echo(result["output"])


# ── Observe ─────────────────────────────────────────────────────


@click.group()
def packages() -> None:
    """Packages — search, list, install, uninstall, upgrade."""


@packages.command()
@_filter_options
@click.option("--count", "-n", type=click.IntRange(min=1), default=None, help="Maximum results.")
@click.pass_context
def search(ctx: click.Context, as_json: bool, count: int | None, **params: Any) -> None:
    """Search the configured sources."""
    from wingetkit.core.services.winget_ops import package_search

    query = _build_query(ctx, params, count=count)
    options = _build_options(ctx, {})
    result = package_search(query, adapter=get_adapter(ctx), options=options)
    fail_on_error(result, as_json)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    _print_packages(result, "Found")


@packages.command("list")
@_filter_options
@click.option("--count", "-n", type=click.IntRange(min=1), default=None, help="Maximum results.")
@click.pass_context
def list_packages(ctx: click.Context, as_json: bool, count: int | None, **params: Any) -> None:
    """List installed packages."""
    from wingetkit.core.services.winget_ops import package_list

    query = _build_query(ctx, params, count=count)
    options = _build_options(ctx, {})
    result = package_list(query, adapter=get_adapter(ctx), options=options)
    fail_on_error(result, as_json)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    _print_packages(result, "Installed", show_available=True)


@packages.command()
@_filter_options
@click.option("--include-unknown", "-u", is_flag=True, help="Include packages with unknown versions.")
@click.pass_context
def upgradable(ctx: click.Context, as_json: bool, **params: Any) -> None:
    """List installed packages that have an upgrade available."""
    from wingetkit.core.services.winget_ops import package_upgradable

    query = _build_query(ctx, params)
    options = _build_options(ctx, params)
    result = package_upgradable(query, adapter=get_adapter(ctx), options=options)
    fail_on_error(result, as_json)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    _print_packages(result, "Upgradable", show_available=True)


# ── Act ─────────────────────────────────────────────────────────


@packages.command()
@_filter_options
@_act_options
@click.pass_context
def install(ctx: click.Context, as_json: bool, **params: Any) -> None:
    """Install exactly one package."""
    from wingetkit.core.services.winget_actions import package_install

    query = _build_query(ctx, params)
    if not as_json:
        click.secho(f"📦 Installing {query.describe()}...", fg="cyan")
    result = package_install(query, _build_options(ctx, params), adapter=get_adapter(ctx))

    if as_json:
        click.echo(json.dumps(result, indent=2))
        if "error" in result:
            sys.exit(1)
        return
    _print_act_result(result, "Installed")


@packages.command()
@_filter_options
@_act_options
@click.pass_context
def uninstall(ctx: click.Context, as_json: bool, **params: Any) -> None:
    """Uninstall exactly one installed package."""
    from wingetkit.core.services.winget_actions import package_uninstall

    query = _build_query(ctx, params)
    if not as_json:
        click.secho(f"📦 Uninstalling {query.describe()}...", fg="cyan")
    result = package_uninstall(query, _build_options(ctx, params), adapter=get_adapter(ctx))

    if as_json:
        click.echo(json.dumps(result, indent=2))
        if "error" in result:
            sys.exit(1)
        return
    _print_act_result(result, "Uninstalled")


@packages.command()
@_filter_options
@_act_options
@click.option("--all", "all_", is_flag=True, help="Upgrade every package with an upgrade available.")
@click.option("--include-unknown", "-u", is_flag=True, help="Include packages with unknown versions.")
@click.pass_context
def upgrade(ctx: click.Context, as_json: bool, **params: Any) -> None:
    """Upgrade exactly one installed package (or --all)."""
    from wingetkit.core.services.winget_actions import package_upgrade

    query = _build_query(ctx, params)
    target = "all packages" if params.get("all_") else query.describe()
    if not as_json:
        click.secho(f"📦 Upgrading {target}...", fg="cyan")
    result = package_upgrade(query, _build_options(ctx, params), adapter=get_adapter(ctx))

    if as_json:
        click.echo(json.dumps(result, indent=2))
        if "error" in result:
            sys.exit(1)
        return
    _print_act_result(result, "Upgraded")
