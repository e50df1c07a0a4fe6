"""
Package and source records — what the parser hands back to callers.

Every field is a display string taken verbatim from the tool's output.
None of them is validated; a name is not guaranteed to be unique and an
id may be truncated by the tool when the column is too narrow.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator


class PackageRecord(BaseModel):
    """One row of ``winget search`` / ``list`` / ``upgrade`` output."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    id: str | None = None
    version: str | None = None
    available_version: str | None = None
    source: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_row(cls, row: Mapping[str, str | None]) -> PackageRecord:
        """Build from a parsed table row keyed by column title."""
        return cls(
            name=row.get("Name"),
            id=row.get("Id"),
            version=row.get("Version"),
            available_version=row.get("Available"),
            source=row.get("Source"),
        )


class SourceRecord(BaseModel):
    """A configured package source (repository)."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    argument: str | None = None
    data: str | None = None
    identifier: str | None = None
    type: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_export(cls, entry: Mapping[str, Any]) -> SourceRecord:
        """Build from one object of ``winget source export`` JSON."""
        return cls(
            name=entry.get("Name"),
            argument=entry.get("Arg"),
            data=entry.get("Data"),
            identifier=entry.get("Identifier"),
            type=entry.get("Type"),
        )

    @classmethod
    def from_row(cls, row: Mapping[str, str | None]) -> SourceRecord:
        """Build from a parsed ``winget source list`` table row."""
        return cls(
            name=row.get("Name"),
            argument=row.get("Argument"),
        )
