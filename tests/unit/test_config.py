#!/usr/bin/env python3
"""Unit tests for configuration loading"""

import pytest

from dns_overlay.config import DNSOverlayConfig

CONFIG_CONTENT = """\
[dns-overlay]
hosts-file = none

[resolver]
mode = forward
server-addresses = 1.1.1.1, 8.8.8.8:5353, [2606:4700:4700::1111], [2001:4860:4860::8888]:54, 9.9.9.9:abc
timeout = 2.5

[overrides]
WWW.Example.com = 127.0.0.1
api.example.com = ::1

[log-file]
debug-level = DEBUG
"""


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "dns-overlay.cfg"
    path.write_text(CONFIG_CONTENT)
    return DNSOverlayConfig(str(path))


class TestDNSOverlayConfig:
    def test_defaults_when_file_missing(self, tmp_path, capsys):
        config = DNSOverlayConfig(str(tmp_path / "missing.cfg"))
        assert config.get("resolver", "mode") == "system"
        assert config.get_hosts_file() == "/etc/hosts"
        assert config.get_overrides() == []
        assert config.get_upstream_servers() == [("8.8.8.8", 53)]
        assert "not found" in capsys.readouterr().err

    def test_values_from_file(self, config):
        assert config.get("resolver", "mode") == "forward"
        assert config.getfloat("resolver", "timeout") == 2.5
        assert config.get("log-file", "debug-level") == "DEBUG"
        assert config.get_hosts_file() is None

    def test_fallbacks(self, config):
        assert config.get("resolver", "missing", "x") == "x"
        assert config.getint("missing", "option", 7) == 7
        assert config.getboolean("log-file", "syslog") is False

    def test_overrides_keep_file_order(self, config):
        assert config.get_overrides() == [
            ("www.example.com", "127.0.0.1"),
            ("api.example.com", "::1"),
        ]

    def test_unbalanced_bracket_uses_default_port(self, tmp_path):
        path = tmp_path / "brackets.cfg"
        path.write_text("[resolver]\nserver-addresses = [::1, 1.1.1.1:5353\nserver-port = 5300\n")
        assert DNSOverlayConfig(str(path)).get_upstream_servers() == [("::1", 5300), ("1.1.1.1", 5353)]

    def test_upstream_servers(self, config):
        assert config.get_upstream_servers() == [
            ("1.1.1.1", 53),
            ("8.8.8.8", 5353),
            ("2606:4700:4700::1111", 53),
            ("2001:4860:4860::8888", 54),
            ("9.9.9.9", 53),
        ]
