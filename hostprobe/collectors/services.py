"""Service state probes.

Service state is read through a resource lookup that answers references of
the form ``type/title`` (e.g. ``service/pe-puppetserver.service``). The
default lookup asks systemd; tests and fact frameworks can inject their own.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

LOG = logging.getLogger(__name__)

# systemctl is-enabled states -> Puppet `enable` values
ENABLED_STATES = ("enabled", "enabled-runtime", "static", "indirect", "alias")
MASKED_STATES = ("masked", "masked-runtime")


class Resource:
    """A looked-up OS resource with attribute access by key.

    Unknown attributes read as None.
    """

    def __init__(self, resource_type: str, title: str, attributes: Optional[Mapping[str, Any]] = None):
        self.type = resource_type
        self.title = title
        self.attributes: Dict[str, Any] = dict(attributes or {})

    def __getitem__(self, key: str) -> Any:
        return self.attributes.get(key)

    def __repr__(self) -> str:
        return f"Resource({self.type}/{self.title} {self.attributes!r})"


class ResourceLookup(ABC):
    """Finds the current state of a resource by ``type/title`` reference."""

    @abstractmethod
    def find(self, reference: str) -> Optional[Resource]:
        pass


class StaticResourceLookup(ResourceLookup):
    """In-memory lookup keyed by reference."""

    def __init__(self, resources: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self.resources = dict(resources or {})

    def find(self, reference: str) -> Optional[Resource]:
        attributes = self.resources.get(reference)
        if attributes is None:
            return None
        resource_type, _, title = reference.partition("/")
        return Resource(resource_type, title, attributes)


class SystemdResourceLookup(ResourceLookup):
    """Resolves service resources with ``systemctl show``."""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    def find(self, reference: str) -> Optional[Resource]:
        resource_type, _, title = reference.partition("/")
        if resource_type != "service" or not title:
            LOG.debug("[services] Unsupported resource reference %r", reference)
            return None

        properties = self._show(title)
        if properties is None or properties.get("LoadState") == "not-found":
            return None

        return Resource("service", title, {
            "ensure": "running" if properties.get("ActiveState") == "active" else "stopped",
            "enable": self._enable_value(properties.get("UnitFileState", "")),
        })

    def _show(self, unit: str) -> Optional[Dict[str, str]]:
        """Run systemctl show and parse its key=value output."""
        try:
            result = subprocess.run(
                ["systemctl", "show", unit, "--property=LoadState,ActiveState,UnitFileState"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            LOG.debug("[services] Timeout querying %s", unit)
            return None
        except OSError as e:
            LOG.debug("[services] Unable to run systemctl for %s: %s", unit, e)
            return None

        if result.returncode != 0:
            LOG.debug("[services] systemctl show %s exited %s: %s", unit, result.returncode, result.stderr.strip())
            return None

        properties = {}
        for line in result.stdout.splitlines():
            key, sep, value = line.partition("=")
            if sep:
                properties[key.strip()] = value.strip()
        return properties

    def _enable_value(self, unit_file_state: str) -> str:
        if unit_file_state in ENABLED_STATES:
            return "true"
        if unit_file_state in MASKED_STATES:
            return "mask"
        return "false"


def get_resource(resource_type: str, name: str, lookup: Optional[ResourceLookup] = None) -> Optional[Resource]:
    """Get a resource by type and name.

    Service names without a dot get the ``.service`` unit suffix.

    Args:
        resource_type: The resource type, e.g. 'service'
        name: The resource name
        lookup: Resource lookup to query (defaults to systemd)

    Returns:
        The resource, or None if it was not found.
    """
    if resource_type == "service" and "." not in name:
        name += ".service"
    lookup = lookup or SystemdResourceLookup()
    return lookup.find(f"{resource_type}/{name}")


def service_running(name: str, service: Optional[Resource] = None, lookup: Optional[ResourceLookup] = None) -> bool:
    """True if the service is running."""
    service = service or get_resource("service", name, lookup)
    if service is None:
        return False
    return service["ensure"] == "running"


def service_enabled(name: str, service: Optional[Resource] = None, lookup: Optional[ResourceLookup] = None) -> bool:
    """True if the service's ``enable`` attribute reads 'true' in any case."""
    service = service or get_resource("service", name, lookup)
    if service is None:
        return False
    return str(service["enable"]).lower() == "true"


def service_running_enabled(
    name: str,
    service: Optional[Resource] = None,
    lookup: Optional[ResourceLookup] = None,
) -> bool:
    """True if the service is both running and enabled.

    The resource is looked up once and shared by both checks.
    """
    service = service or get_resource("service", name, lookup)
    if service is None:
        return False
    return service_running(name, service) and service_enabled(name, service)
