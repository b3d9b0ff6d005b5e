"""Node role classification from PE marker files.

Each PE component drops a service config file into the OS config directory
(/etc/sysconfig on RedHat and Suse, /etc/default elsewhere). Which of those
files exist tells us what tier of the deployment this node is.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from ..data.models import NodeRole
from ..facts import FactProvider

PUPPETSERVER = "pe-puppetserver"
ORCHESTRATION = "pe-orchestration-services"
CONSOLE = "pe-console-services"
PUPPETDB = "pe-puppetdb"
PGSQL = "pe-pgsql/pe-postgresql"

SYSCONFIG_FAMILIES = ("RedHat", "Suse")

# Placeholder resolved via pe_postgres_service_name()
POSTGRES_SERVICE = "pe-postgresql"

ROLE_SERVICES: Dict[NodeRole, List[str]] = {
    NodeRole.PRIMARY: [PUPPETSERVER, ORCHESTRATION, CONSOLE, PUPPETDB, POSTGRES_SERVICE],
    NodeRole.REPLICA: [PUPPETSERVER, CONSOLE, PUPPETDB, POSTGRES_SERVICE],
    NodeRole.COMPILER: [PUPPETSERVER, PUPPETDB],
    NodeRole.LEGACY_COMPILER: [PUPPETSERVER],
    NodeRole.POSTGRES: [POSTGRES_SERVICE],
    NodeRole.UNKNOWN: [],
}


def config_dir(facts: FactProvider) -> str:
    """OS config directory holding service environment files."""
    if facts.value("os.family") in SYSCONFIG_FAMILIES:
        return "/etc/sysconfig"
    return "/etc/default"


def service_file_exist(config_file_name: str, facts: FactProvider, root: str = "/") -> bool:
    """Check whether a service config file exists in the OS config directory."""
    return (Path(root) / config_dir(facts).lstrip("/") / config_file_name).exists()


def is_primary(facts: FactProvider, root: str = "/") -> bool:
    return (
        service_file_exist(PUPPETSERVER, facts, root)
        and service_file_exist(ORCHESTRATION, facts, root)
        and service_file_exist(CONSOLE, facts, root)
        and service_file_exist(PUPPETDB, facts, root)
    )


def is_replica(facts: FactProvider, root: str = "/") -> bool:
    return (
        service_file_exist(PUPPETSERVER, facts, root)
        and not service_file_exist(ORCHESTRATION, facts, root)
        and service_file_exist(CONSOLE, facts, root)
        and service_file_exist(PUPPETDB, facts, root)
    )


def is_compiler(facts: FactProvider, root: str = "/") -> bool:
    return (
        service_file_exist(PUPPETSERVER, facts, root)
        and not service_file_exist(ORCHESTRATION, facts, root)
        and not service_file_exist(CONSOLE, facts, root)
        and service_file_exist(PUPPETDB, facts, root)
    )


def is_legacy_compiler(facts: FactProvider, root: str = "/") -> bool:
    return (
        service_file_exist(PUPPETSERVER, facts, root)
        and not service_file_exist(ORCHESTRATION, facts, root)
        and not service_file_exist(CONSOLE, facts, root)
        and not service_file_exist(PUPPETDB, facts, root)
    )


def is_postgres(facts: FactProvider, root: str = "/") -> bool:
    """Standalone PE PostgreSQL node: no PE service markers, only pgsql's."""
    return (
        not service_file_exist(PUPPETSERVER, facts, root)
        and not service_file_exist(ORCHESTRATION, facts, root)
        and not service_file_exist(CONSOLE, facts, root)
        and not service_file_exist(PUPPETDB, facts, root)
        and service_file_exist(PGSQL, facts, root)
    )


def classify_role(facts: FactProvider, root: str = "/") -> NodeRole:
    """Classify the node from its marker files.

    The four server tiers are mutually exclusive. The postgres check is made
    on its own since it depends on a fifth marker.
    """
    checks = (
        (NodeRole.PRIMARY, is_primary),
        (NodeRole.REPLICA, is_replica),
        (NodeRole.COMPILER, is_compiler),
        (NodeRole.LEGACY_COMPILER, is_legacy_compiler),
    )
    for role, check in checks:
        if check(facts, root):
            return role
    if is_postgres(facts, root):
        return NodeRole.POSTGRES
    return NodeRole.UNKNOWN


def pe_postgres_service_name(facts: FactProvider) -> str:
    """Name of the pe-postgresql service for the current OS.

    Debian packages carry the server major version in the unit name.
    """
    if facts.value("os.family") == "Debian":
        version = facts.value("pe_postgresql_info.installed_server_version")
        return f"pe-postgresql{version if version is not None else ''}"
    return "pe-postgresql"


def role_services(role: NodeRole, facts: FactProvider) -> List[str]:
    """Service names expected on a node of the given role."""
    postgres = pe_postgres_service_name(facts)
    return [postgres if name == POSTGRES_SERVICE else name for name in ROLE_SERVICES[role]]
