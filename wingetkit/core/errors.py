"""
Error taxonomy for winget operations.

Parse errors are raised to whoever called the parser. The dict-returning
service functions convert every ``WingetError`` into ``{"error": ...}``
so scripted callers can check results instead of catching exceptions.

An empty result set is never an error, just an empty list.
"""

from __future__ import annotations

from typing import Any


class WingetError(Exception):
    """Base class for every failure raised by wingetkit."""

    code: str = "winget_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnrecognizedOutputError(WingetError):
    """The tool's output did not contain a recognisable table header."""

    code = "unrecognized_output"


class ColumnLayoutError(UnrecognizedOutputError):
    """Two column titles overlap in the header line.

    Happens when one title is a substring of another, or the header
    is laid out differently than expected. Offsets would be ambiguous.
    """

    code = "column_layout"


class ExternalToolError(WingetError):
    """The external tool could not be run or exited non-zero."""

    code = "tool_failed"

    def __init__(
        self,
        message: str,
        return_code: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.return_code = return_code
        self.stderr = stderr


class InvalidQueryError(WingetError):
    """A filter cannot be used for the requested operation.

    Raised before winget runs, e.g. for an empty filter or a flag the
    mutating command does not accept.
    """

    code = "invalid_query"


class PackageNotFoundError(WingetError):
    """A mutating operation's filter matched no package."""

    code = "not_found"


class AmbiguousPackageError(WingetError):
    """A mutating operation's filter matched more than one package."""

    code = "ambiguous"

    def __init__(self, message: str, candidates: list[Any] | None = None) -> None:
        super().__init__(message)
        self.candidates = candidates or []
