"""
Query and option models — the structured input of every operation.

A ``PackageQuery`` says *which* package(s); ``InstallOptions`` says *how*
a mutating operation should run. Both are translated into winget flags
by ``wingetkit.core.services.winget_args``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, PositiveInt


class PackageQuery(BaseModel):
    """Filter used to locate packages.

    Every field is optional. ``manifest`` points at a local manifest
    file and short-circuits the other filters for act operations.
    """

    model_config = ConfigDict(frozen=True)

    query: str | None = None          # free-text positional argument
    id: str | None = None
    name: str | None = None
    moniker: str | None = None
    tag: str | None = None
    command: str | None = None
    source: str | None = None
    exact: bool = False
    count: PositiveInt | None = None
    manifest: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when no filter narrows the result."""
        return not any(
            (self.query, self.id, self.name, self.moniker, self.tag, self.command)
        )

    def describe(self) -> str:
        """Short human-readable form for log and error messages."""
        if self.manifest:
            return f"manifest {self.manifest}"
        parts = [self.query] if self.query else []
        for field in ("id", "name", "moniker", "tag", "command", "source"):
            value = getattr(self, field)
            if value:
                parts.append(f"{field}={value}")
        return " ".join(parts) or "<all packages>"


class InstallOptions(BaseModel):
    """Switches for install, uninstall and upgrade."""

    model_config = ConfigDict(frozen=True)

    version: str | None = None
    scope: Literal["user", "machine"] | None = None
    architecture: str | None = None
    locale: str | None = None
    log: str | None = None
    location: str | None = None
    override: str | None = None
    custom: str | None = None
    interactive: bool = False
    silent: bool = False
    force: bool = False
    include_unknown: bool = False
    all: bool = False
    accept_package_agreements: bool = False
    accept_source_agreements: bool = False
