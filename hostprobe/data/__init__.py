"""Data layer - transient models for probe results."""

from .models import (
    NodeRole,
    FilesystemHealthStatus,
    StatusErrorKind,
    ServiceState,
    FilesystemFree,
    StatusResult,
    SelfServiceReport,
)

__all__ = [
    "NodeRole",
    "FilesystemHealthStatus",
    "StatusErrorKind",
    "ServiceState",
    "FilesystemFree",
    "StatusResult",
    "SelfServiceReport",
]
