"""Adapters — bindings for the external winget tool.

Public re-exports for convenient access.
"""

from wingetkit.adapters.base import Adapter, ExecutionContext
from wingetkit.adapters.mock import MockAdapter
from wingetkit.adapters.winget import WingetAdapter

__all__ = [
    "Adapter",
    "ExecutionContext",
    "MockAdapter",
    "WingetAdapter",
]
