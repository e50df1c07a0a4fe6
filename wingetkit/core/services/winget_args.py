"""
winget argument builders — structured queries to argument lists.

Pure functions, no I/O. Each present field appends exactly one flag
(plus its value when the flag takes one), in a fixed order. Boolean
switches append only the flag token. Absent fields append nothing.

Values are passed through as-is; deeper validation is winget's job.
"""

from __future__ import annotations

from wingetkit.core.models.query import InstallOptions, PackageQuery
from wingetkit.core.services.table_parser import ELLIPSIS, MOJIBAKE_ELLIPSIS


def strip_ellipsis(value: str | None) -> str | None:
    """Drop winget's truncation marker from a free-text filter.

    Values copied out of a truncated table cell end in "…". winget
    filters by substring, so the untruncated prefix still matches.
    """
    if value is None:
        return None
    cleaned = value.replace(MOJIBAKE_ELLIPSIS, "").replace(ELLIPSIS, "").strip()
    return cleaned or None


# ── Filter flags ────────────────────────────────────────────────

# (query field, winget flag), in command-line order
_TEXT_FILTERS: tuple[tuple[str, str], ...] = (
    ("id", "--id"),
    ("name", "--name"),
    ("moniker", "--moniker"),
    ("tag", "--tag"),
    ("command", "--command"),
)

TEXT_FILTERS = tuple(field for field, _ in _TEXT_FILTERS)

# winget uninstall takes no --tag or --command
UNINSTALL_TEXT_FILTERS = ("id", "name", "moniker")


def _filter_args(
    query: PackageQuery,
    *,
    text_filters: tuple[str, ...] = TEXT_FILTERS,
    with_count: bool = True,
) -> list[str]:
    """Filter flags shared by every operation that selects packages."""
    args: list[str] = []

    free_text = strip_ellipsis(query.query)
    if free_text:
        args.append(free_text)

    for field, flag in _TEXT_FILTERS:
        if field not in text_filters:
            continue
        value = strip_ellipsis(getattr(query, field))
        if value:
            args.extend([flag, value])

    if query.source:
        args.extend(["--source", query.source])
    if with_count and query.count is not None:
        args.extend(["--count", str(query.count)])
    if query.exact:
        args.append("--exact")
    return args


# ── Option flags ────────────────────────────────────────────────

# (option field, winget flag, takes a value), in command-line order
_OPTION_FLAGS: tuple[tuple[str, str, bool], ...] = (
    ("version", "--version", True),
    ("scope", "--scope", True),
    ("architecture", "--architecture", True),
    ("locale", "--locale", True),
    ("log", "--log", True),
    ("location", "--location", True),
    ("override", "--override", True),
    ("custom", "--custom", True),
    ("interactive", "--interactive", False),
    ("silent", "--silent", False),
    ("force", "--force", False),
    ("include_unknown", "--include-unknown", False),
    ("all", "--all", False),
    ("accept_package_agreements", "--accept-package-agreements", False),
    ("accept_source_agreements", "--accept-source-agreements", False),
)

# Which option flags each act command accepts
_INSTALL_OPTIONS = frozenset({
    "version", "scope", "architecture", "locale", "log", "location",
    "override", "custom", "interactive", "silent", "force",
    "accept_package_agreements", "accept_source_agreements",
})
_UNINSTALL_OPTIONS = frozenset({
    "version", "scope", "log", "interactive", "silent", "force",
    "accept_source_agreements",
})
_UPGRADE_OPTIONS = frozenset({
    "version", "scope", "architecture", "locale", "log", "location",
    "override", "custom", "interactive", "silent", "force",
    "include_unknown", "all",
    "accept_package_agreements", "accept_source_agreements",
})


def _option_args(options: InstallOptions | None, allowed: frozenset[str]) -> list[str]:
    if options is None:
        return []
    args: list[str] = []
    for field, flag, takes_value in _OPTION_FLAGS:
        if field not in allowed:
            continue
        value = getattr(options, field)
        if takes_value:
            if value:
                args.extend([flag, str(value)])
        elif value:
            args.append(flag)
    return args


def _target_args(query: PackageQuery, **filter_kwargs) -> list[str]:
    """Either the local manifest or the package filters."""
    if query.manifest:
        return ["--manifest", query.manifest]
    return _filter_args(query, **filter_kwargs)


# ═══════════════════════════════════════════════════════════════════
#  Observe
# ═══════════════════════════════════════════════════════════════════


def build_search_args(
    query: PackageQuery,
    options: InstallOptions | None = None,
) -> list[str]:
    """``winget search`` arguments."""
    args = ["search", *_filter_args(query)]
    if options and options.accept_source_agreements:
        args.append("--accept-source-agreements")
    return args


def build_list_args(
    query: PackageQuery,
    options: InstallOptions | None = None,
) -> list[str]:
    """``winget list`` (installed packages) arguments."""
    args = ["list", *_filter_args(query)]
    if options and options.accept_source_agreements:
        args.append("--accept-source-agreements")
    return args


def build_upgradable_args(
    query: PackageQuery,
    options: InstallOptions | None = None,
) -> list[str]:
    """``winget upgrade`` with no target — lists available upgrades."""
    args = ["upgrade", *_filter_args(query)]
    if options:
        if options.include_unknown:
            args.append("--include-unknown")
        if options.accept_source_agreements:
            args.append("--accept-source-agreements")
    return args


def build_source_list_args() -> list[str]:
    """``winget source list`` arguments."""
    return ["source", "list"]


def build_source_export_args() -> list[str]:
    """``winget source export`` — sources as JSON, one object per line."""
    return ["source", "export"]


# ═══════════════════════════════════════════════════════════════════
#  Act
# ═══════════════════════════════════════════════════════════════════


def build_install_args(
    query: PackageQuery,
    options: InstallOptions | None = None,
) -> list[str]:
    """``winget install`` arguments."""
    return [
        "install",
        *_target_args(query, with_count=False),
        *_option_args(options, _INSTALL_OPTIONS),
    ]


def build_uninstall_args(
    query: PackageQuery,
    options: InstallOptions | None = None,
) -> list[str]:
    """``winget uninstall`` arguments."""
    return [
        "uninstall",
        *_target_args(query, text_filters=UNINSTALL_TEXT_FILTERS, with_count=False),
        *_option_args(options, _UNINSTALL_OPTIONS),
    ]


def build_upgrade_args(
    query: PackageQuery,
    options: InstallOptions | None = None,
) -> list[str]:
    """``winget upgrade`` arguments for upgrading a package (or ``--all``)."""
    return [
        "upgrade",
        *_target_args(query, with_count=False),
        *_option_args(options, _UPGRADE_OPTIONS),
    ]
