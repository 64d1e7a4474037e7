#!/usr/bin/env python3
"""Unit tests for the static override table and hosts file loading"""

from dns_overlay.hosts_file import load_hosts_file, parse_hosts
from dns_overlay.static_table import StaticOverrideTable

HOSTS_CONTENT = b"""\
# comment line
127.0.0.1   localhost localhost.localdomain
::1         localhost ip6-localhost
10.0.0.5    Build.Internal   # trailing comment
not-an-ip   broken.example
fe80::1%eth0  scoped.example

192.168.1.10 nas
"""


class TestStaticOverrideTable:
    def test_lookup(self):
        table = StaticOverrideTable([("a.com", "127.0.0.1")])
        assert table.lookup("a.com") == "127.0.0.1"
        assert table.lookup("b.com") is None
        assert "a.com" in table

    def test_keys_are_normalized(self):
        table = StaticOverrideTable([("A.Com", "127.0.0.1")])
        assert table.lookup("a.com") == "127.0.0.1"

    def test_items_keep_insertion_order(self):
        table = StaticOverrideTable([("b.com", "10.0.0.2"), ("a.com", "10.0.0.1")])
        assert list(table.items()) == [("b.com", "10.0.0.2"), ("a.com", "10.0.0.1")]

    def test_merged_prefers_own_entries(self):
        configured = StaticOverrideTable([("a.com", "10.0.0.1")])
        hosts_file = StaticOverrideTable([("a.com", "10.9.9.9"), ("b.com", "10.0.0.2")])
        merged = configured.merged(hosts_file)
        assert merged.lookup("a.com") == "10.0.0.1"
        assert merged.lookup("b.com") == "10.0.0.2"
        assert len(configured) == 1


class TestHostsFile:
    def test_parse_hosts(self):
        entries = parse_hosts(HOSTS_CONTENT)
        assert entries == [
            ("localhost", "127.0.0.1"),
            ("localhost.localdomain", "127.0.0.1"),
            ("ip6-localhost", "::1"),
            ("build.internal", "10.0.0.5"),
            ("nas", "192.168.1.10"),
        ]

    def test_first_entry_wins(self):
        entries = dict(parse_hosts(HOSTS_CONTENT))
        assert entries["localhost"] == "127.0.0.1"

    def test_load_hosts_file(self, tmp_path):
        hosts_path = tmp_path / "hosts"
        hosts_path.write_bytes(HOSTS_CONTENT)
        table = load_hosts_file(str(hosts_path))
        assert table.lookup("nas") == "192.168.1.10"
        assert table.lookup("broken.example") is None

    def test_missing_hosts_file(self, tmp_path):
        table = load_hosts_file(str(tmp_path / "missing"))
        assert len(table) == 0
