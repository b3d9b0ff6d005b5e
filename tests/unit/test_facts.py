"""Tests for fact providers."""

import pytest

from hostprobe.facts import FactProvider, StaticFacts, SystemFacts


class TestStaticFacts:
    def test_provider_interface_is_abstract(self):
        with pytest.raises(TypeError):
            FactProvider()

    def test_dotted_lookup(self):
        facts = StaticFacts({"os": {"family": "RedHat"}})
        assert facts.value("os.family") == "RedHat"
        assert facts.os_family == "RedHat"

    def test_missing(self):
        facts = StaticFacts({"os": {"family": "RedHat"}})
        assert facts.value("os.release") is None
        assert facts.value("pe_postgresql_info.installed_server_version") is None
        assert facts.value("os.family.major") is None


class TestSystemFacts:
    def _os_release(self, root, text):
        etc = root / "etc"
        etc.mkdir(parents=True, exist_ok=True)
        (etc / "os-release").write_text(text)

    @pytest.mark.parametrize("text,family", [
        ('ID="rhel"\nID_LIKE="fedora"\n', "RedHat"),
        ('ID=rocky\nID_LIKE="rhel centos fedora"\n', "RedHat"),
        ("ID=ubuntu\nID_LIKE=debian\n", "Debian"),
        ("ID=debian\n", "Debian"),
        ('ID="sles"\n', "Suse"),
        ('ID="opensuse-leap"\nID_LIKE="suse opensuse"\n', "Suse"),
        ("ID=linuxmint\nID_LIKE=ubuntu\n", "Debian"),
        ("ID=arch\n", None),
    ])
    def test_os_family(self, tmp_path, text, family):
        self._os_release(tmp_path, text)
        assert SystemFacts(root=str(tmp_path)).value("os.family") == family

    def test_missing_os_release(self, tmp_path):
        assert SystemFacts(root=str(tmp_path)).value("os.family") is None

    def test_postgresql_version(self, tmp_path):
        apps = tmp_path / "opt" / "puppetlabs" / "server" / "apps" / "postgresql"
        for version in ("11", "14", "9.6", "share"):
            (apps / version).mkdir(parents=True)
        facts = SystemFacts(root=str(tmp_path))
        assert facts.value("pe_postgresql_info.installed_server_version") == "14"

    def test_no_postgresql(self, tmp_path):
        facts = SystemFacts(root=str(tmp_path))
        assert facts.value("pe_postgresql_info.installed_server_version") is None

    def test_overrides(self, tmp_path):
        self._os_release(tmp_path, "ID=ubuntu\n")
        facts = SystemFacts({"os": {"family": "RedHat"}}, root=str(tmp_path))
        assert facts.value("os.family") == "RedHat"

    def test_partial_override_keeps_detected(self, tmp_path):
        self._os_release(tmp_path, "ID=ubuntu\n")
        facts = SystemFacts({"pe_postgresql_info": {"installed_server_version": "13"}}, root=str(tmp_path))
        assert facts.value("os.family") == "Debian"
        assert facts.value("pe_postgresql_info.installed_server_version") == "13"
