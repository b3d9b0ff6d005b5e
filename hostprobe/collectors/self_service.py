"""Self service collector.

Composes the individual probes into the report the PE self service facts
publish: node role, state of the role's services, free space on the
configured filesystems and the status API responses.
"""

from __future__ import annotations

import datetime as dt
import logging
import platform
import shutil
from typing import Any, Dict, Optional

from .base import BaseCollector
from .filesystem import filesystem_status, get_filesystem_warnings
from .roles import classify_role, role_services
from .services import ResourceLookup, SystemdResourceLookup, get_resource, service_enabled, service_running
from .status_api import StatusApiClient
from ..config import Config
from ..data.models import NodeRole, SelfServiceReport, ServiceState
from ..facts import FactProvider, SystemFacts

LOG = logging.getLogger(__name__)


class SelfServiceCollector(BaseCollector):
    """Collector for the PE self service report."""

    def __init__(
        self,
        config: Optional[Config] = None,
        facts: Optional[FactProvider] = None,
        lookup: Optional[ResourceLookup] = None,
        client: Optional[StatusApiClient] = None,
    ):
        self.config = config or Config()
        self.facts = facts or SystemFacts(self.config.facts, root=self.config.root)
        self.lookup = lookup or SystemdResourceLookup(timeout=self.config.systemctl_timeout)
        self._client = client

    @property
    def name(self) -> str:
        return "self_service"

    @property
    def display_name(self) -> str:
        return "PE Self Service"

    def is_available(self) -> bool:
        """Available on Linux hosts managed by systemd."""
        return platform.system() == "Linux" and shutil.which("systemctl") is not None

    @property
    def client(self) -> StatusApiClient:
        if self._client is None:
            self._client = StatusApiClient.from_config(self.config)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def service_state(self, name: str) -> ServiceState:
        service = get_resource("service", name, self.lookup)
        return ServiceState(
            name=name,
            running=service_running(name, service, self.lookup),
            enabled=service_enabled(name, service, self.lookup),
        )

    def build_report(self) -> SelfServiceReport:
        role = classify_role(self.facts, self.config.root)
        LOG.debug("[%s] Classified node as %s", self.name, role.value)

        report = SelfServiceReport(
            certname=self.client.certname,
            role=role,
            generated_at=dt.datetime.utcnow().replace(microsecond=0).isoformat() + "Z",
        )

        names = role_services(role, self.facts)
        names += [name for name in self.config.services if name not in names]
        for name in names:
            report.services[name] = self.service_state(name)

        for path in self.config.filesystems:
            report.filesystems[path] = filesystem_status(path)

        if role != NodeRole.UNKNOWN:
            for endpoint, port in self.config.status_checks.items():
                report.status[endpoint] = self.client.check(port, endpoint)

        return report

    def collect(self) -> Dict[str, Any]:
        report = self.build_report()
        data = report.to_dict()
        data["warnings"] = get_filesystem_warnings(list(report.filesystems.values()))
        return data
