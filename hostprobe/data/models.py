"""Data models for host probe results.

Everything here is transient: values are sampled at call time, handed to the
fact layer and discarded. Nothing is cached or persisted.

1. NORMALIZED STATUS VALUES
   - Role: primary, replica, compiler, legacy_compiler, postgres, unknown
   - Filesystem: healthy, warning, critical (by percent free)
   - Status API failure: http, connection, ssl, general, parse

2. EXPLICIT UNITS
   - Free space is an integer percentage (0-100), floored
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


# =============================================================================
# Enumerations
# =============================================================================


class NodeRole(str, Enum):
    """Deployment tier of a PE node, inferred from marker files."""

    PRIMARY = "primary"
    REPLICA = "replica"
    COMPILER = "compiler"
    LEGACY_COMPILER = "legacy_compiler"
    POSTGRES = "postgres"
    UNKNOWN = "unknown"


class FilesystemHealthStatus(str, Enum):
    """Health of a filesystem by remaining free space."""

    HEALTHY = "healthy"  # More than 20% free
    WARNING = "warning"  # 20% free or less
    CRITICAL = "critical"  # 5% free or less


class StatusErrorKind(str, Enum):
    """Failure class of a status API call."""

    HTTP = "http"  # Non-2xx response
    CONNECTION = "connection"  # Refused, unreachable or timed out
    SSL = "ssl"  # TLS handshake or verification failure
    GENERAL = "general"  # Any other HTTP client error
    PARSE = "parse"  # Body was not valid JSON


# =============================================================================
# Probe results
# =============================================================================


@dataclass
class ServiceState:
    """Run/enable state of a single service."""

    name: str
    running: bool
    enabled: bool

    @property
    def healthy(self) -> bool:
        return self.running and self.enabled

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "running": self.running,
            "enabled": self.enabled,
            "healthy": self.healthy,
        }


@dataclass
class FilesystemFree:
    """Free space on the filesystem backing a path."""

    path: str
    percent_free: Optional[int] = None
    error: Optional[str] = None

    @property
    def status(self) -> Optional[FilesystemHealthStatus]:
        if self.percent_free is None:
            return None
        if self.percent_free <= 5:
            return FilesystemHealthStatus.CRITICAL
        elif self.percent_free <= 20:
            return FilesystemHealthStatus.WARNING
        return FilesystemHealthStatus.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        status = self.status
        return {
            "path": self.path,
            "percent_free": self.percent_free,
            "status": status.value if status else None,
            "error": self.error,
        }


@dataclass
class StatusResult:
    """Outcome of one status API call.

    A failed result means the status is unknown, not that the service is
    unhealthy. ``data`` holds the decoded JSON body on success.
    """

    port: int
    endpoint: str
    url: str
    data: Any = None
    error_kind: Optional[StatusErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @property
    def value(self) -> Any:
        """Decoded body, or None when the call failed."""
        return self.data if self.ok else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "port": self.port,
            "endpoint": self.endpoint,
            "url": self.url,
            "ok": self.ok,
            "data": self.value,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
        }


@dataclass
class SelfServiceReport:
    """Everything the self service collector gathered in one pass."""

    certname: str
    role: NodeRole
    generated_at: str
    services: Dict[str, ServiceState] = field(default_factory=dict)
    filesystems: Dict[str, FilesystemFree] = field(default_factory=dict)
    status: Dict[str, StatusResult] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": {
                "certname": self.certname,
                "generated_at": self.generated_at,
                "collector": "self_service",
            },
            "role": self.role.value,
            "services": {name: state.to_dict() for name, state in self.services.items()},
            "filesystems": {path: fs.to_dict() for path, fs in self.filesystems.items()},
            "status": {endpoint: result.to_dict() for endpoint, result in self.status.items()},
        }
