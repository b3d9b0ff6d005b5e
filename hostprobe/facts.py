"""Fact providers.

The probes only need two facts, ``os.family`` and
``pe_postgresql_info.installed_server_version``. Callers inside a fact
framework pass its values through ``StaticFacts``; standalone use gets
``SystemFacts``, which derives them from the host.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

LOG = logging.getLogger(__name__)

PE_POSTGRESQL_APPS_DIR = "opt/puppetlabs/server/apps/postgresql"

# os-release ID / ID_LIKE tokens -> Facter os.family
OS_FAMILY_IDS = {
    "rhel": "RedHat",
    "centos": "RedHat",
    "fedora": "RedHat",
    "rocky": "RedHat",
    "almalinux": "RedHat",
    "ol": "RedHat",
    "amzn": "RedHat",
    "debian": "Debian",
    "ubuntu": "Debian",
    "suse": "Suse",
    "sles": "Suse",
    "opensuse": "Suse",
    "opensuse-leap": "Suse",
}


def _dig(data: Mapping[str, Any], name: str) -> Any:
    """Resolve a dotted fact name against nested mappings."""
    value: Any = data
    for part in name.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value


def _merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class FactProvider(ABC):
    """Read-only fact lookup by dotted name."""

    @abstractmethod
    def value(self, name: str) -> Any:
        pass

    @property
    def os_family(self) -> Optional[str]:
        return self.value("os.family")


class StaticFacts(FactProvider):
    """Facts supplied up front, e.g. by the calling fact framework."""

    def __init__(self, facts: Optional[Mapping[str, Any]] = None):
        self._facts: Dict[str, Any] = dict(facts or {})

    def value(self, name: str) -> Any:
        return _dig(self._facts, name)


class SystemFacts(FactProvider):
    """Facts derived from the running host, with optional overrides.

    Detection is done lazily and once per instance.
    """

    def __init__(self, overrides: Optional[Mapping[str, Any]] = None, root: str = "/"):
        self.overrides = dict(overrides or {})
        self.root = Path(root)
        self._detected: Optional[Dict[str, Any]] = None

    def value(self, name: str) -> Any:
        if self._detected is None:
            self._detected = self._detect()
        return _dig(_merge(self._detected, self.overrides), name)

    def _detect(self) -> Dict[str, Any]:
        facts: Dict[str, Any] = {"os": {"family": self._detect_os_family()}}
        version = self._detect_pe_postgresql_version()
        if version:
            facts["pe_postgresql_info"] = {"installed_server_version": version}
        return facts

    def _read_os_release(self) -> Dict[str, str]:
        os_release: Dict[str, str] = {}
        path = self.root / "etc" / "os-release"
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if "=" in line and not line.startswith("#"):
                        key, _, value = line.partition("=")
                        os_release[key] = value.strip().strip('"').strip("'")
        except OSError as e:
            LOG.debug("[facts] Unable to read %s: %s", path, e)
        return os_release

    def _detect_os_family(self) -> Optional[str]:
        os_release = self._read_os_release()
        candidates = [os_release.get("ID", "")] + os_release.get("ID_LIKE", "").split()
        for token in candidates:
            family = OS_FAMILY_IDS.get(token.lower())
            if family:
                return family
        return None

    def _detect_pe_postgresql_version(self) -> Optional[str]:
        """Highest numeric version directory of the PE PostgreSQL install."""
        apps_dir = self.root / PE_POSTGRESQL_APPS_DIR
        if not apps_dir.is_dir():
            return None
        versions = []
        for entry in apps_dir.iterdir():
            if entry.is_dir():
                try:
                    versions.append((float(entry.name), entry.name))
                except ValueError:
                    continue
        if not versions:
            return None
        return max(versions)[1]
