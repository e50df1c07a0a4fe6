"""
Fixed-width table parser — turns winget's human-formatted output into rows.

winget has no machine-readable mode for search/list/upgrade, so its
tables are parsed positionally:

    Name            Id                   Version   Source
    ---------------------------------------------------------
    Visual Studio…  Microsoft.VisualStu… 17.9.2    winget

The header row tells us where each column starts. Every data row is
sliced at the same character offsets. Columns are padded with spaces,
never delimited, so a value may itself contain spaces.

Known limitation: offsets are counted in characters, not terminal
cells. Double-width glyphs in an earlier column shift the later ones.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from wingetkit.core.errors import ColumnLayoutError, UnrecognizedOutputError

logger = logging.getLogger(__name__)


# Lines winget prints instead of a table when nothing matches. search
# uses the first; list and upgrade use the installed variant; upgrade of
# a single package reports the last two.
NO_RESULTS_MESSAGE = "No package found matching input criteria."
NO_RESULTS_MESSAGES = (
    NO_RESULTS_MESSAGE,
    "No installed package found matching input criteria.",
    "No applicable upgrade found.",
    "No available upgrade found.",
)

# winget truncates long values with "…". When its UTF-8 output is decoded
# as cp1252 that single character becomes three, which shifts every
# offset to its right. Both the header and the rows get the short form.
ELLIPSIS = "…"
MOJIBAKE_ELLIPSIS = "â€¦"


@dataclass(frozen=True)
class ColumnSpec:
    """Where one column sits in the header line.

    ``length`` is None for the last column, which runs to end of line.
    """

    title: str
    start: int
    length: int | None = None

    def extract(self, line: str) -> str | None:
        """Slice this column out of a row; blank becomes None."""
        if self.length is None:
            value = line[self.start:]
        else:
            value = line[self.start:self.start + self.length]
        value = value.rstrip()
        return value or None


def normalize_line(line: str) -> str:
    """Replace the mis-decoded truncation marker with the real one."""
    return line.replace(MOJIBAKE_ELLIPSIS, ELLIPSIS)


# ═══════════════════════════════════════════════════════════════════
#  Header & columns
# ═══════════════════════════════════════════════════════════════════


def _header_pattern(titles: Sequence[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(t) for t in titles)
    return re.compile(rf"^\s*(?:{alternation})(?:\s|$)")


def find_header(lines: Sequence[str], titles: Sequence[str]) -> int | None:
    """Index of the header row, or None if the tool reported no results.

    The header is the first line whose leading token is one of
    ``titles``. A no-results line seen before any header ends the
    search.

    Raises:
        UnrecognizedOutputError: Neither a header nor the no-results
            line is present.
    """
    pattern = _header_pattern(titles)
    for index, line in enumerate(lines):
        if line.strip() in NO_RESULTS_MESSAGES:
            return None
        if pattern.match(line):
            return index

    logger.debug("No header among %d lines (titles=%s)", len(lines), list(titles))
    raise UnrecognizedOutputError(
        f"Could not find a header row with any of: {', '.join(titles)}"
    )


def column_specs(header: str, titles: Sequence[str]) -> list[ColumnSpec]:
    """Infer column boundaries from the header line.

    Titles missing from the header are dropped. The result is sorted by
    offset, which is the real left-to-right order regardless of the
    order ``titles`` was given in.

    Raises:
        ColumnLayoutError: Two titles overlap in the header, e.g. one is
            a substring of another.
    """
    found: list[tuple[int, str]] = []
    for title in dict.fromkeys(titles):
        offset = header.find(title)
        if offset == -1:
            continue
        found.append((offset, title))
    found.sort()

    specs: list[ColumnSpec] = []
    for i, (start, title) in enumerate(found):
        if i + 1 < len(found):
            next_start, next_title = found[i + 1]
            if next_start < start + len(title):
                raise ColumnLayoutError(
                    f"Columns {title!r} and {next_title!r} overlap in header {header!r}"
                )
            specs.append(ColumnSpec(title=title, start=start, length=next_start - start))
        else:
            specs.append(ColumnSpec(title=title, start=start))
    return specs


# ═══════════════════════════════════════════════════════════════════
#  Rows
# ═══════════════════════════════════════════════════════════════════


def parse_table(
    lines: Iterable[str],
    titles: Sequence[str],
) -> list[dict[str, str | None]]:
    """Parse winget table output into one dict per data row.

    Args:
        lines: Captured stdout lines, in order.
        titles: Column titles to look for. Only titles present in the
            header become keys.

    Returns:
        Rows in output order, keyed by column title. An empty list when
        the tool reported no results or the table has no body.

    Raises:
        UnrecognizedOutputError: No header row could be located.
    """
    rows = [normalize_line(line) for line in lines]
    header_index = find_header(rows, titles)
    if header_index is None:
        return []

    header = rows[header_index]
    columns = column_specs(header, titles)
    logger.debug(
        "Header at line %d: %s",
        header_index,
        ", ".join(f"{c.title}@{c.start}" for c in columns),
    )

    records: list[dict[str, str | None]] = []
    # header_index + 1 is the dash separator
    for line in rows[header_index + 2:]:
        if not line.strip():
            continue
        if line == header or line.strip() in NO_RESULTS_MESSAGES:
            continue
        records.append({c.title: c.extract(line) for c in columns})

    return records


def render_row(record: Mapping[str, str | None], columns: Sequence[ColumnSpec]) -> str:
    """Lay a parsed row back out on the same column offsets.

    ``parse_table`` on a header plus rendered rows returns the original
    records, as long as no value is wider than its column.
    """
    line = ""
    for column in columns:
        line = line.ljust(column.start) + (record.get(column.title) or "")
    return line.rstrip()
