"""Configuration management for host probes.

Supports YAML-based configuration. Values that the fact layer would otherwise
read from process-wide settings (certname, TLS material, OS facts) are passed
in explicitly from here.
"""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

PUPPET_SSL_DIR = "/etc/puppetlabs/puppet/ssl"

DEFAULT_STATUS_CHECKS = {
    "pe-master": 8140,
    "puppetdb-status": 8081,
    "orchestrator-service": 8143,
    "rbac-service": 4433,
}


@dataclass
class StatusApiConfig:
    """Status API client configuration."""

    certname: Optional[str] = None
    timeout: Optional[float] = 30  # seconds, None waits forever
    verify: bool = True
    ca_bundle: Optional[str] = None
    ssl_cert: Optional[str] = None
    ssl_key: Optional[str] = None

    def resolved_certname(self) -> str:
        """Configured certname, or the host FQDN lowercased as Puppet does."""
        return self.certname or socket.getfqdn().lower()

    def resolved_ca_bundle(self) -> Optional[str]:
        if self.ca_bundle:
            return self.ca_bundle
        path = Path(PUPPET_SSL_DIR) / "certs" / "ca.pem"
        return str(path) if path.exists() else None

    def resolved_client_cert(self) -> Optional[tuple]:
        """(cert, key) pair for the node's TLS identity, if both exist."""
        certname = self.resolved_certname()
        cert = self.ssl_cert or str(Path(PUPPET_SSL_DIR) / "certs" / f"{certname}.pem")
        key = self.ssl_key or str(Path(PUPPET_SSL_DIR) / "private_keys" / f"{certname}.pem")
        if Path(cert).exists() and Path(key).exists():
            return cert, key
        return None


@dataclass
class Config:
    """Main configuration container."""

    root: str = "/"  # Prefix for marker file and fact lookups
    systemctl_timeout: int = 10

    status_api: StatusApiConfig = field(default_factory=StatusApiConfig)

    # Fact overrides, e.g. {"os": {"family": "RedHat"}}
    facts: Dict[str, Any] = field(default_factory=dict)

    # Report contents
    services: List[str] = field(default_factory=list)
    filesystems: List[str] = field(default_factory=lambda: ["/", "/opt/puppetlabs"])
    status_checks: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_STATUS_CHECKS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        api_data = data.get("status_api", {}) or {}
        status_api = StatusApiConfig(
            certname=api_data.get("certname"),
            timeout=api_data.get("timeout", 30),
            verify=api_data.get("verify", True),
            ca_bundle=api_data.get("ca_bundle"),
            ssl_cert=api_data.get("ssl_cert"),
            ssl_key=api_data.get("ssl_key"),
        )

        status_checks = data.get("status_checks")
        if status_checks is None:
            status_checks = dict(DEFAULT_STATUS_CHECKS)

        return cls(
            root=data.get("root", "/"),
            systemctl_timeout=data.get("systemctl_timeout", 10),
            status_api=status_api,
            facts=data.get("facts", {}) or {},
            services=list(data.get("services", []) or []),
            filesystems=list(data.get("filesystems", ["/", "/opt/puppetlabs"]) or []),
            status_checks={str(k): int(v) for k, v in status_checks.items()},
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load config from YAML file."""
        if not path.exists():
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Load config from path or defaults.

        Checks in order:
        1. Provided path
        2. HOSTPROBE_CONFIG env var
        3. ./configs/config.yaml
        4. ./config.yaml
        5. ~/.hostprobe/config.yaml
        6. Default config
        """
        paths_to_try = []

        if config_path:
            paths_to_try.append(Path(config_path))

        if env_path := os.environ.get("HOSTPROBE_CONFIG"):
            paths_to_try.append(Path(env_path))

        paths_to_try.extend([
            Path("./configs/config.yaml"),
            Path("./config.yaml"),
            Path.home() / ".hostprobe" / "config.yaml",
        ])

        for path in paths_to_try:
            if path.exists():
                return cls.from_yaml(path)

        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "root": self.root,
            "systemctl_timeout": self.systemctl_timeout,
            "status_api": {
                "certname": self.status_api.certname,
                "timeout": self.status_api.timeout,
                "verify": self.status_api.verify,
                "ca_bundle": self.status_api.ca_bundle,
                "ssl_cert": self.status_api.ssl_cert,
                "ssl_key": self.status_api.ssl_key,
            },
            "facts": self.facts,
            "services": list(self.services),
            "filesystems": list(self.filesystems),
            "status_checks": dict(self.status_checks),
        }
