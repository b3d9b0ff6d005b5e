"""Host probes - service state, role markers, status API, filesystem and logs."""

from .base import BaseCollector, CollectorError
from .services import (
    Resource,
    ResourceLookup,
    StaticResourceLookup,
    SystemdResourceLookup,
    get_resource,
    service_running,
    service_enabled,
    service_running_enabled,
)
from .roles import (
    service_file_exist,
    is_primary,
    is_replica,
    is_compiler,
    is_legacy_compiler,
    is_postgres,
    classify_role,
    pe_postgres_service_name,
)
from .status_api import StatusApiClient, status_check
from .filesystem import filesystem_free, filesystem_status, get_filesystem_warnings
from .logs import SearchStrategy, read_file, search_strategy
from .self_service import SelfServiceCollector

__all__ = [
    "BaseCollector",
    "CollectorError",
    "Resource",
    "ResourceLookup",
    "StaticResourceLookup",
    "SystemdResourceLookup",
    "get_resource",
    "service_running",
    "service_enabled",
    "service_running_enabled",
    "service_file_exist",
    "is_primary",
    "is_replica",
    "is_compiler",
    "is_legacy_compiler",
    "is_postgres",
    "classify_role",
    "pe_postgres_service_name",
    "StatusApiClient",
    "status_check",
    "filesystem_free",
    "filesystem_status",
    "get_filesystem_warnings",
    "SearchStrategy",
    "read_file",
    "search_strategy",
    "SelfServiceCollector",
]
