"""
Settings model — process-wide configuration read from wingetkit.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, PositiveInt


class Settings(BaseModel):
    """Where the tool lives and how it is invoked."""

    winget_path: str = "winget"
    timeout: PositiveInt | None = None          # seconds, None = wait
    accept_source_agreements: bool = True
    default_source: str | None = None
