"""
winget operations — act side (install, uninstall, upgrade).

winget filters by substring, so a filter can silently match several
packages. Before any mutating command runs, the filter is resolved and
must match exactly one package:

- zero matches → "not found", nothing is run
- several      → "ambiguous", nothing is run
- one          → the command runs with the same filter

An empty filter, or one using a flag the command does not accept, is
refused before the lookup.

A local manifest path skips resolution entirely.
"""

from __future__ import annotations

import logging
from typing import Callable

from wingetkit.adapters.base import Adapter
from wingetkit.core.errors import (
    AmbiguousPackageError,
    InvalidQueryError,
    PackageNotFoundError,
    WingetError,
)
from wingetkit.core.models.package import PackageRecord
from wingetkit.core.models.query import InstallOptions, PackageQuery
from wingetkit.core.services import winget_args
from wingetkit.core.services.winget_ops import (
    _execute,
    error_result,
    find_packages,
    get_packages,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Resolution
# ═══════════════════════════════════════════════════════════════════


def resolve_single(
    query: PackageQuery,
    *,
    adapter: Adapter,
    installed: bool = False,
    options: InstallOptions | None = None,
) -> PackageRecord:
    """Resolve a filter to exactly one package.

    Args:
        installed: Look among installed packages (``winget list``)
            instead of the sources (``winget search``).

    Raises:
        PackageNotFoundError: Nothing matched.
        AmbiguousPackageError: More than one package matched.
        ExternalToolError, UnrecognizedOutputError: From the lookup.
    """
    lookup = get_packages if installed else find_packages
    matches = lookup(query, adapter=adapter, options=options)
    where = "installed" if installed else "available"

    if not matches:
        raise PackageNotFoundError(f"No {where} package matches {query.describe()}")
    if len(matches) > 1:
        raise AmbiguousPackageError(
            f"{len(matches)} {where} packages match {query.describe()}; "
            "refine the filter (e.g. --id with --exact)",
            candidates=matches,
        )
    return matches[0]


def _check_query(
    operation: str,
    query: PackageQuery,
    text_filters: tuple[str, ...],
) -> PackageQuery:
    """Validate a filter for a mutating command and return the lookup query.

    The lookup must select the same packages the command will, so it
    never carries ``count``, which the mutating commands do not take.

    Raises:
        InvalidQueryError: The filter is empty, or uses a flag the
            command drops.
    """
    if query.is_empty:
        raise InvalidQueryError(
            f"{operation} needs a filter (query, --id, --name, ...) or --manifest"
        )
    dropped = [
        field for field in winget_args.TEXT_FILTERS
        if field not in text_filters and getattr(query, field)
    ]
    if dropped:
        flags = ", ".join(f"--{field}" for field in dropped)
        raise InvalidQueryError(f"winget {operation} does not accept {flags}")
    return query.model_copy(update={"count": None})


def _act(
    operation: str,
    query: PackageQuery,
    options: InstallOptions | None,
    *,
    adapter: Adapter,
    build: Callable[[PackageQuery, InstallOptions | None], list[str]],
    installed: bool,
    text_filters: tuple[str, ...] = winget_args.TEXT_FILTERS,
) -> dict:
    package: PackageRecord | None = None
    try:
        if not query.manifest:
            lookup = _check_query(operation, query, text_filters)
            package = resolve_single(
                lookup, adapter=adapter, installed=installed, options=options,
            )
        args = build(query, options)
        logger.info("%s %s", operation, package.id if package else query.describe())
        output = _execute(args, adapter)
    except AmbiguousPackageError as e:
        logger.warning("%s refused: %s", operation, e)
        result = error_result(e)
        result["candidates"] = [c.model_dump() for c in e.candidates]
        return result
    except (PackageNotFoundError, InvalidQueryError) as e:
        logger.warning("%s refused: %s", operation, e)
        return error_result(e)
    except WingetError as e:
        logger.error("%s failed: %s", operation, e)
        return error_result(e)

    return {
        "ok": True,
        "operation": operation,
        "package": package.model_dump() if package else None,
        "output": output.strip()[:2000],
    }


def package_install(
    query: PackageQuery,
    options: InstallOptions | None = None,
    *,
    adapter: Adapter,
) -> dict:
    """Install one package from the configured sources.

    Returns:
        {"ok": True, "package": {...}, "output": "..."} or
        {"error": "...", "reason": "not_found" | "ambiguous" | ...}
    """
    return _act(
        "install", query, options,
        adapter=adapter, build=winget_args.build_install_args, installed=False,
    )


def package_uninstall(
    query: PackageQuery,
    options: InstallOptions | None = None,
    *,
    adapter: Adapter,
) -> dict:
    """Uninstall one installed package.

    Returns:
        {"ok": True, "package": {...}, "output": "..."} or
        {"error": "...", "reason": "not_found" | "ambiguous" | ...}
    """
    return _act(
        "uninstall", query, options,
        adapter=adapter, build=winget_args.build_uninstall_args, installed=True,
        text_filters=winget_args.UNINSTALL_TEXT_FILTERS,
    )


def package_upgrade(
    query: PackageQuery,
    options: InstallOptions | None = None,
    *,
    adapter: Adapter,
) -> dict:
    """Upgrade one installed package, or every package with ``--all``.

    Returns:
        {"ok": True, "package": {...} | None, "output": "..."} or
        {"error": "...", "reason": "not_found" | "ambiguous" | ...}
    """
    if options is not None and options.all:
        try:
            output = _execute(winget_args.build_upgrade_args(query, options), adapter)
        except WingetError as e:
            logger.error("upgrade --all failed: %s", e)
            return error_result(e)
        return {"ok": True, "operation": "upgrade", "package": None, "output": output.strip()[:2000]}

    return _act(
        "upgrade", query, options,
        adapter=adapter, build=winget_args.build_upgrade_args, installed=True,
    )
