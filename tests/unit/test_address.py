#!/usr/bin/env python3
"""Unit tests for the address codec"""

import ipaddress

import pytest

from dns_overlay.address import (
    is_local,
    is_numeric_address,
    normalize_hostname,
    parse_numeric_address,
    to_address_set,
)
from dns_overlay.errors import InvalidAddressFormat, InvalidArgument


class TestParseNumericAddress:
    """Test numeric address parsing"""

    def test_ipv4(self):
        assert parse_numeric_address("127.0.0.1") == b"\x7f\x00\x00\x01"

    def test_ipv6(self):
        assert parse_numeric_address("::1") == b"\x00" * 15 + b"\x01"

    @pytest.mark.parametrize(
        "text", ["", "localhost", "www.example.com", "256.1.1.1", "1.2.3", "::g", "fe80::1%eth0", None, 42]
    )
    def test_rejects_non_numeric(self, text):
        with pytest.raises(InvalidAddressFormat):
            parse_numeric_address(text)

    def test_invalid_address_is_value_error(self):
        """Test configuration errors can be caught as ValueError"""
        with pytest.raises(ValueError):
            parse_numeric_address("not-an-ip")


class TestAddressSet:
    def test_single_element(self):
        addresses = to_address_set(parse_numeric_address("10.0.0.1"))
        assert addresses == (ipaddress.ip_address("10.0.0.1"),)
        assert addresses[0].packed == b"\x0a\x00\x00\x01"

    def test_ipv6_element(self):
        addresses = to_address_set(parse_numeric_address("2001:db8::1"))
        assert addresses == (ipaddress.IPv6Address("2001:db8::1"),)

    @pytest.mark.parametrize("raw", [b"", b"\x7f\x00\x01", b"\x00" * 5])
    def test_rejects_bad_packed_length(self, raw):
        with pytest.raises(InvalidAddressFormat):
            to_address_set(raw)


class TestHelpers:
    def test_is_numeric_address(self):
        assert is_numeric_address("192.168.1.1")
        assert is_numeric_address("::1")
        assert not is_numeric_address("example.com")
        assert not is_numeric_address("")
        assert not is_numeric_address(None)

    @pytest.mark.parametrize(
        "address", ["127.0.0.1", "::1", "169.254.10.1", "fe80::1", "10.1.2.3", "172.20.0.1", "192.168.1.1", "fec0::1"]
    )
    def test_is_local(self, address):
        assert is_local(address)
        assert is_local(ipaddress.ip_address(address))

    @pytest.mark.parametrize("address", ["8.8.8.8", "172.32.0.1", "2001:4860:4860::8888"])
    def test_is_not_local(self, address):
        assert not is_local(address)

    def test_is_local_rejects_hostnames(self):
        with pytest.raises(InvalidAddressFormat):
            is_local("localhost")

    def test_normalize_hostname(self):
        assert normalize_hostname("WWW.Example.COM") == "www.example.com"

    @pytest.mark.parametrize("hostname", [None, "", b"example.com"])
    def test_normalize_rejects_blank(self, hostname):
        with pytest.raises(InvalidArgument):
            normalize_hostname(hostname)
