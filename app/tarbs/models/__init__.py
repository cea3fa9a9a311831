"""Data models for tarbs.

This module exports the core data structures used throughout the application.
"""

from tarbs.models.config import ProvisioningConfig
from tarbs.models.record import PackageRecord, PackageTag
from tarbs.models.result import RecordResult, StepResult

__all__ = [
    "PackageRecord",
    "PackageTag",
    "ProvisioningConfig",
    "RecordResult",
    "StepResult",
]
