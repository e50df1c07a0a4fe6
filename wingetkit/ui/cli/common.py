"""
Shared CLI plumbing — settings, adapter, and result rendering.
"""

from __future__ import annotations

import json
import sys

import click

from wingetkit.adapters.base import Adapter
from wingetkit.core.models.settings import Settings


def get_settings(ctx: click.Context) -> Settings:
    """Settings for this invocation, loaded once per process."""
    from wingetkit.core.config.loader import ConfigError, load_settings

    obj = ctx.find_root().obj
    if obj.get("settings") is None:
        try:
            obj["settings"] = load_settings(obj.get("config_path"))
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
    return obj["settings"]


def get_adapter(ctx: click.Context) -> Adapter:
    """The winget adapter (tests inject a mock via ``obj={"adapter": ...}``)."""
    from wingetkit.core.services.winget_ops import get_adapter as _build

    obj = ctx.find_root().obj
    if obj.get("adapter") is None:
        obj["adapter"] = _build(get_settings(ctx))
    return obj["adapter"]


def fail_on_error(result: dict, as_json: bool) -> None:
    """Print an error result and exit 1; no-op for ok results."""
    if "error" not in result:
        return
    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        click.secho(f"❌ {result['error']}", fg="red")
    sys.exit(1)
