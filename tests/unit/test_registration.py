#!/usr/bin/env python3
"""Unit tests for installing the overlay as the process resolver"""

import socket

import pytest

from dns_overlay import overrides, registration
from dns_overlay.builder import hosts, new_builder, to
from dns_overlay.name_service import OverlayNameService
from fakes import FakeResolver


@pytest.fixture
def service():
    table = (
        new_builder()
        .map(hosts("db.internal"), to("10.1.2.3"))
        .map(hosts("v6.internal"), to("2001:db8::7"))
        .build()
        .table
    )
    return OverlayNameService(static_table=table, resolver=FakeResolver())


class TestRegistration:
    def test_install_and_uninstall(self, service):
        registration.install(service)
        assert registration.installed_service() is service
        assert socket.getaddrinfo is registration.overlay_getaddrinfo
        assert socket.gethostbyname is registration.overlay_gethostbyname

        registration.uninstall()
        assert registration.installed_service() is None
        assert socket.getaddrinfo is registration.system_getaddrinfo
        assert socket.gethostbyname is registration.system_gethostbyname

    def test_getaddrinfo_uses_overlay(self, service):
        registration.install(service)
        infos = socket.getaddrinfo("DB.internal", 5432, type=socket.SOCK_STREAM)
        assert {info[4][0] for info in infos} == {"10.1.2.3"}
        assert all(info[4][1] == 5432 for info in infos)

    def test_getaddrinfo_filters_family(self, service):
        registration.install(service)
        infos = socket.getaddrinfo("v6.internal", 443, socket.AF_INET6, socket.SOCK_STREAM)
        assert infos[0][4][0] == "2001:db8::7"

        with pytest.raises(socket.gaierror):
            socket.getaddrinfo("v6.internal", 443, socket.AF_INET, socket.SOCK_STREAM)

    def test_scoped_override_reaches_socket_module(self, service):
        registration.install(service)
        overrides.set_override("api.example.com", "127.0.0.42")
        assert socket.gethostbyname("api.example.com") == "127.0.0.42"

    def test_numeric_hosts_pass_through(self, service):
        registration.install(service)
        infos = socket.getaddrinfo("127.0.0.1", 80, socket.AF_INET, socket.SOCK_STREAM)
        assert infos[0][4] == ("127.0.0.1", 80)
        assert socket.gethostbyname("127.0.0.1") == "127.0.0.1"

    def test_unknown_host_is_gaierror(self, service):
        registration.install(service)
        with pytest.raises(socket.gaierror) as excinfo:
            socket.getaddrinfo("missing.internal", 80)
        assert excinfo.value.errno == socket.EAI_NONAME

    def test_gethostbyname_without_ipv4(self, service):
        registration.install(service)
        with pytest.raises(socket.gaierror):
            socket.gethostbyname("v6.internal")
