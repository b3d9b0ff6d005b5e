"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from hostprobe.collectors.services import StaticResourceLookup
from hostprobe.facts import StaticFacts


@pytest.fixture
def redhat_facts():
    return StaticFacts({"os": {"family": "RedHat"}})


@pytest.fixture
def debian_facts():
    return StaticFacts({
        "os": {"family": "Debian"},
        "pe_postgresql_info": {"installed_server_version": "14"},
    })


@pytest.fixture
def marker_root(tmp_path):
    """Fake filesystem root; call with marker names to create them."""

    def make(*markers, config_dir="etc/sysconfig"):
        for marker in markers:
            path = tmp_path / config_dir / marker
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        return str(tmp_path)

    return make


@pytest.fixture
def resource_lookup():
    return StaticResourceLookup({
        "service/pe-puppetserver.service": {"ensure": "running", "enable": "true"},
        "service/pe-puppetdb.service": {"ensure": "running", "enable": "false"},
        "service/pe-console-services.service": {"ensure": "stopped", "enable": "true"},
        "service/pe-postgresql.service": {"ensure": "running", "enable": "true"},
        "service/pe-postgresql14.service": {"ensure": "running", "enable": "true"},
        "service/pe-orchestration-services.service": {"ensure": "running", "enable": "True"},
    })


@pytest.fixture
def sample_status_body():
    """Sample status API response for pe-master."""
    return {
        "service_version": "7.9.2",
        "service_status_version": 1,
        "detail_level": "info",
        "state": "running",
        "status": {},
        "active_alerts": [],
    }


@pytest.fixture
def systemctl_show_output():
    return "LoadState=loaded\nActiveState=active\nUnitFileState=enabled\n"


@pytest.fixture
def sample_log(tmp_path) -> Path:
    log = tmp_path / "puppetserver.log"
    log.write_text(
        "2026-10-18T01:00:00 INFO  starting\n"
        "2026-10-18T01:00:05 WARN  slow catalog\n"
        "2026-10-18T01:00:09 ERROR errorX\n"
    )
    return log
