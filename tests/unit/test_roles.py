"""Tests for role classification."""

import itertools

import pytest

from hostprobe.collectors.roles import (
    CONSOLE,
    ORCHESTRATION,
    PGSQL,
    PUPPETDB,
    PUPPETSERVER,
    classify_role,
    config_dir,
    is_compiler,
    is_legacy_compiler,
    is_postgres,
    is_primary,
    is_replica,
    pe_postgres_service_name,
    role_services,
    service_file_exist,
)
from hostprobe.data.models import NodeRole
from hostprobe.facts import StaticFacts

TIER_MARKERS = (PUPPETSERVER, ORCHESTRATION, CONSOLE, PUPPETDB)


class TestConfigDir:
    @pytest.mark.parametrize("family", ["RedHat", "Suse"])
    def test_sysconfig(self, family):
        assert config_dir(StaticFacts({"os": {"family": family}})) == "/etc/sysconfig"

    @pytest.mark.parametrize("family", ["Debian", "Archlinux", None])
    def test_default(self, family):
        assert config_dir(StaticFacts({"os": {"family": family}})) == "/etc/default"


class TestServiceFileExist:
    def test_redhat(self, marker_root, redhat_facts):
        root = marker_root(PUPPETSERVER)
        assert service_file_exist(PUPPETSERVER, redhat_facts, root) is True
        assert service_file_exist(PUPPETDB, redhat_facts, root) is False

    def test_debian_uses_etc_default(self, marker_root, debian_facts):
        root = marker_root(PUPPETSERVER)
        assert service_file_exist(PUPPETSERVER, debian_facts, root) is False

        root = marker_root(PUPPETSERVER, config_dir="etc/default")
        assert service_file_exist(PUPPETSERVER, debian_facts, root) is True

    def test_nested_marker(self, marker_root, redhat_facts):
        root = marker_root(PGSQL)
        assert service_file_exist(PGSQL, redhat_facts, root) is True


class TestRolePredicates:
    def test_primary(self, marker_root, redhat_facts):
        root = marker_root(*TIER_MARKERS)
        assert is_primary(redhat_facts, root) is True
        assert classify_role(redhat_facts, root) == NodeRole.PRIMARY

    def test_replica(self, marker_root, redhat_facts):
        root = marker_root(PUPPETSERVER, CONSOLE, PUPPETDB)
        assert is_replica(redhat_facts, root) is True
        assert classify_role(redhat_facts, root) == NodeRole.REPLICA

    def test_compiler(self, marker_root, redhat_facts):
        root = marker_root(PUPPETSERVER, PUPPETDB)
        assert is_compiler(redhat_facts, root) is True
        assert classify_role(redhat_facts, root) == NodeRole.COMPILER

    def test_legacy_compiler(self, marker_root, redhat_facts):
        root = marker_root(PUPPETSERVER)
        assert is_legacy_compiler(redhat_facts, root) is True
        assert classify_role(redhat_facts, root) == NodeRole.LEGACY_COMPILER

    def test_postgres(self, marker_root, redhat_facts):
        root = marker_root(PGSQL)
        assert is_postgres(redhat_facts, root) is True
        assert classify_role(redhat_facts, root) == NodeRole.POSTGRES

    def test_postgres_needs_pgsql_marker(self, marker_root, redhat_facts):
        root = marker_root()
        assert is_postgres(redhat_facts, root) is False
        assert classify_role(redhat_facts, root) == NodeRole.UNKNOWN

    def test_pgsql_marker_does_not_change_primary(self, marker_root, redhat_facts):
        root = marker_root(*TIER_MARKERS, PGSQL)
        assert is_postgres(redhat_facts, root) is False
        assert classify_role(redhat_facts, root) == NodeRole.PRIMARY

    def test_tier_roles_mutually_exclusive(self, tmp_path, redhat_facts):
        predicates = (is_primary, is_replica, is_compiler, is_legacy_compiler)
        for i, combo in enumerate(itertools.product([False, True], repeat=4)):
            root = tmp_path / f"combo{i}"
            sysconfig = root / "etc" / "sysconfig"
            sysconfig.mkdir(parents=True)
            for marker, present in zip(TIER_MARKERS, combo):
                if present:
                    (sysconfig / marker).write_text("")

            matches = [p for p in predicates if p(redhat_facts, str(root))]
            assert len(matches) <= 1, combo
            if combo[0]:
                expected_match = combo in (
                    (True, True, True, True),
                    (True, False, True, True),
                    (True, False, False, True),
                    (True, False, False, False),
                )
                assert bool(matches) == expected_match, combo
            else:
                assert matches == [], combo


class TestPostgresServiceName:
    def test_debian(self):
        facts = StaticFacts({
            "os": {"family": "Debian"},
            "pe_postgresql_info": {"installed_server_version": "9"},
        })
        assert pe_postgres_service_name(facts) == "pe-postgresql9"

    def test_debian_without_version(self):
        facts = StaticFacts({"os": {"family": "Debian"}})
        assert pe_postgres_service_name(facts) == "pe-postgresql"

    @pytest.mark.parametrize("family", ["RedHat", "Suse", None])
    def test_non_debian(self, family):
        facts = StaticFacts({
            "os": {"family": family},
            "pe_postgresql_info": {"installed_server_version": "14"},
        })
        assert pe_postgres_service_name(facts) == "pe-postgresql"


class TestRoleServices:
    def test_primary_on_debian(self, debian_facts):
        services = role_services(NodeRole.PRIMARY, debian_facts)
        assert services == [PUPPETSERVER, ORCHESTRATION, CONSOLE, PUPPETDB, "pe-postgresql14"]

    def test_compiler(self, redhat_facts):
        assert role_services(NodeRole.COMPILER, redhat_facts) == [PUPPETSERVER, PUPPETDB]

    def test_unknown(self, redhat_facts):
        assert role_services(NodeRole.UNKNOWN, redhat_facts) == []
