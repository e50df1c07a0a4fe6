"""
Domain models — Pydantic types for wingetkit.

All models are re-exported here for convenient access:

    from wingetkit.core.models import PackageRecord, PackageQuery, Receipt
"""

from wingetkit.core.models.package import PackageRecord, SourceRecord
from wingetkit.core.models.query import InstallOptions, PackageQuery
from wingetkit.core.models.receipt import Receipt
from wingetkit.core.models.settings import Settings

__all__ = [
    "InstallOptions",
    "PackageQuery",
    "PackageRecord",
    "Receipt",
    "Settings",
    "SourceRecord",
]
