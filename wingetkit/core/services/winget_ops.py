"""
winget operations — observe side (search, list, upgradable, sources).

Query builder → adapter → table parser → records. The ``find_*`` /
``get_*`` / ``list_*`` functions raise ``WingetError`` subclasses; the
``package_*`` / ``source_*`` functions wrap them for channel use and
return ``{"ok": True, ...}`` or ``{"error": "..."}``, never raising.
"""

from __future__ import annotations

import json
import logging
import re

from wingetkit.adapters.base import Adapter, ExecutionContext
from wingetkit.adapters.winget import WingetAdapter
from wingetkit.core.errors import (
    ExternalToolError,
    UnrecognizedOutputError,
    WingetError,
)
from wingetkit.core.models.package import PackageRecord, SourceRecord
from wingetkit.core.models.query import InstallOptions, PackageQuery
from wingetkit.core.models.settings import Settings
from wingetkit.core.services import winget_args
from wingetkit.core.services.table_parser import normalize_line, parse_table

logger = logging.getLogger(__name__)


# Column titles per command. Order here does not matter to the parser;
# "Match" only bounds the Version column in search output.
SEARCH_TITLES = ("Name", "Id", "Version", "Match", "Source")
LIST_TITLES = ("Name", "Id", "Version", "Available", "Source")
SOURCE_LIST_TITLES = ("Name", "Argument")

# Summary sentences printed under the upgrade table, e.g.
# "3 upgrades available." or "1 package(s) have pins that prevent upgrade."
_UPGRADE_FOOTER = re.compile(
    r"^\s*\d+ (?:upgrades? available\.|package\(s\) have .+\.)\s*$"
)


def get_adapter(settings: Settings | None = None) -> WingetAdapter:
    """Build the real adapter from settings (defaults if None)."""
    settings = settings or Settings()
    return WingetAdapter(executable=settings.winget_path, timeout=settings.timeout)


# ═══════════════════════════════════════════════════════════════════
#  Invoker
# ═══════════════════════════════════════════════════════════════════


def _execute(args: list[str], adapter: Adapter, structured: bool = False) -> str:
    receipt = adapter.execute(ExecutionContext(args=args, structured=structured))
    if receipt.failed:
        raise ExternalToolError(
            receipt.error or f"winget {receipt.command} failed",
            return_code=receipt.return_code,
            stderr=receipt.error or "",
        )
    return receipt.output


def run_winget(args: list[str], adapter: Adapter) -> list[str]:
    """Run winget and return its stdout lines, truncation marker normalised.

    Raises:
        ExternalToolError: Binary missing or non-zero exit. Any output
            of the failed run is discarded.
    """
    output = _execute(args, adapter)
    return [normalize_line(line) for line in output.splitlines()]


def run_winget_structured(args: list[str], adapter: Adapter) -> list[dict]:
    """Run winget in a JSON-emitting mode, bypassing the table parser.

    Accepts either one JSON document (object or array) or one JSON
    object per line, which is what ``winget source export`` prints.

    Raises:
        ExternalToolError: Binary missing or non-zero exit.
        UnrecognizedOutputError: The output is not JSON.
    """
    output = normalize_line(_execute(args, adapter, structured=True)).strip()
    if not output:
        return []

    try:
        data = json.loads(output)
    except json.JSONDecodeError:
        data = None

    if data is None:
        data = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                data.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise UnrecognizedOutputError(
                    f"winget {args[0] if args else ''} returned non-JSON output: {line[:80]!r}"
                ) from e

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(d, dict) for d in data):
        return data
    raise UnrecognizedOutputError(
        f"Expected JSON objects from winget, got {type(data).__name__}"
    )


# ═══════════════════════════════════════════════════════════════════
#  Observe: packages
# ═══════════════════════════════════════════════════════════════════


def find_packages(
    query: PackageQuery,
    *,
    adapter: Adapter,
    options: InstallOptions | None = None,
) -> list[PackageRecord]:
    """Search the configured sources (``winget search``).

    Returns:
        Matching packages in winget's order; empty when nothing matched.

    Raises:
        ExternalToolError, UnrecognizedOutputError
    """
    lines = run_winget(winget_args.build_search_args(query, options), adapter)
    rows = parse_table(lines, SEARCH_TITLES)
    logger.debug("search %s → %d result(s)", query.describe(), len(rows))
    return [PackageRecord.from_row(row) for row in rows]


def get_packages(
    query: PackageQuery,
    *,
    adapter: Adapter,
    options: InstallOptions | None = None,
) -> list[PackageRecord]:
    """List installed packages (``winget list``).

    Raises:
        ExternalToolError, UnrecognizedOutputError
    """
    lines = run_winget(winget_args.build_list_args(query, options), adapter)
    rows = parse_table(lines, LIST_TITLES)
    logger.debug("list %s → %d result(s)", query.describe(), len(rows))
    return [PackageRecord.from_row(row) for row in rows]


def get_upgradable(
    query: PackageQuery,
    *,
    adapter: Adapter,
    options: InstallOptions | None = None,
) -> list[PackageRecord]:
    """Installed packages with a newer version available.

    Raises:
        ExternalToolError, UnrecognizedOutputError
    """
    lines = run_winget(winget_args.build_upgradable_args(query, options), adapter)
    lines = [line for line in lines if not _UPGRADE_FOOTER.match(line)]
    records = [PackageRecord.from_row(row) for row in parse_table(lines, LIST_TITLES)]
    logger.debug("upgradable %s → %d result(s)", query.describe(), len(records))
    return records


# ═══════════════════════════════════════════════════════════════════
#  Observe: sources
# ═══════════════════════════════════════════════════════════════════


def list_sources(*, adapter: Adapter) -> list[SourceRecord]:
    """Configured sources, from ``winget source export`` JSON.

    Raises:
        ExternalToolError, UnrecognizedOutputError
    """
    entries = run_winget_structured(winget_args.build_source_export_args(), adapter)
    return [SourceRecord.from_export(entry) for entry in entries]


def list_sources_table(*, adapter: Adapter) -> list[SourceRecord]:
    """Configured sources, parsed from the ``winget source list`` table.

    Only name and argument are available in this form.
    """
    lines = run_winget(winget_args.build_source_list_args(), adapter)
    return [SourceRecord.from_row(row) for row in parse_table(lines, SOURCE_LIST_TITLES)]


# ═══════════════════════════════════════════════════════════════════
#  Channel-facing wrappers
# ═══════════════════════════════════════════════════════════════════


def error_result(exc: WingetError) -> dict:
    """Convert a WingetError to the standard error dict."""
    return {"error": str(exc), "reason": exc.code}


def _packages_result(records: list[PackageRecord]) -> dict:
    return {
        "ok": True,
        "packages": [r.model_dump() for r in records],
        "count": len(records),
    }


def package_search(
    query: PackageQuery,
    *,
    adapter: Adapter,
    options: InstallOptions | None = None,
) -> dict:
    """Search for packages.

    Returns:
        {"ok": True, "packages": [...], "count": int} or {"error": "...", "reason": "..."}
    """
    try:
        return _packages_result(find_packages(query, adapter=adapter, options=options))
    except WingetError as e:
        logger.warning("search %s failed: %s", query.describe(), e)
        return error_result(e)


def package_list(
    query: PackageQuery,
    *,
    adapter: Adapter,
    options: InstallOptions | None = None,
) -> dict:
    """List installed packages.

    Returns:
        {"ok": True, "packages": [...], "count": int} or {"error": "...", "reason": "..."}
    """
    try:
        return _packages_result(get_packages(query, adapter=adapter, options=options))
    except WingetError as e:
        logger.warning("list %s failed: %s", query.describe(), e)
        return error_result(e)


def package_upgradable(
    query: PackageQuery,
    *,
    adapter: Adapter,
    options: InstallOptions | None = None,
) -> dict:
    """List packages with upgrades available.

    Returns:
        {"ok": True, "packages": [...], "count": int} or {"error": "...", "reason": "..."}
    """
    try:
        return _packages_result(get_upgradable(query, adapter=adapter, options=options))
    except WingetError as e:
        logger.warning("upgrade listing %s failed: %s", query.describe(), e)
        return error_result(e)


def source_list(*, adapter: Adapter, structured: bool = True) -> dict:
    """List configured sources.

    Args:
        structured: Use ``source export`` JSON (all fields). False parses
            the ``source list`` table (name and argument only).

    Returns:
        {"ok": True, "sources": [...], "count": int} or {"error": "...", "reason": "..."}
    """
    try:
        if structured:
            sources = list_sources(adapter=adapter)
        else:
            sources = list_sources_table(adapter=adapter)
    except WingetError as e:
        logger.warning("source listing failed: %s", e)
        return error_result(e)
    return {
        "ok": True,
        "sources": [s.model_dump() for s in sources],
        "count": len(sources),
    }
