# dns_overlay/address.py
# Version: 1.0.0
# Numeric address codec and hostname normalization

import ipaddress
import socket
from typing import Tuple, Union

from twisted.internet.abstract import isIPAddress, isIPv6Address

from dns_overlay.constants import IPV4_ADDRESS_LENGTH, IPV6_ADDRESS_LENGTH
from dns_overlay.errors import InvalidAddressFormat, InvalidArgument

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
AddressSet = Tuple[IPAddress, ...]

_SITE_LOCAL_V4 = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
)


def is_numeric_address(text) -> bool:
    """Check whether text is an IPv4 or IPv6 literal (scope ids allowed)"""
    if not isinstance(text, str) or not text:
        return False
    return isIPAddress(text) or isIPv6Address(text)


def parse_numeric_address(text) -> bytes:
    """
    Convert a textual IPv4/IPv6 literal to its packed form

    Never performs name resolution: anything that is not a numeric literal
    is rejected.

    Args:
        text: Address such as "127.0.0.1" or "::1"

    Returns:
        4 or 16 bytes in network order

    Raises:
        InvalidAddressFormat: If text is not a valid numeric address
    """
    if not isinstance(text, str):
        raise InvalidAddressFormat(text)

    text = text.strip()
    if isIPAddress(text):
        family = socket.AF_INET
    elif isIPv6Address(text):
        family = socket.AF_INET6
    else:
        raise InvalidAddressFormat(text)

    try:
        return socket.inet_pton(family, text)
    except (OSError, ValueError):
        # Scoped IPv6 literals pass isIPv6Address but have no packed form
        raise InvalidAddressFormat(text)


def to_address_set(raw: bytes) -> AddressSet:
    """Wrap packed address bytes as a single-element address set"""
    if len(raw) not in (IPV4_ADDRESS_LENGTH, IPV6_ADDRESS_LENGTH):
        raise InvalidAddressFormat(raw)
    return (ipaddress.ip_address(raw),)


def is_local(address) -> bool:
    """Check for a loopback, link-local or site-local (private network) address"""
    if not isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        address = ipaddress.ip_address(parse_numeric_address(address))
    if address.is_loopback or address.is_link_local:
        return True
    if address.version == 6:
        return address.is_site_local
    return any(address in network for network in _SITE_LOCAL_V4)


def normalize_hostname(hostname) -> str:
    """Lower-case a hostname for use as a lookup key (DNS is case insensitive)"""
    if hostname is None or not isinstance(hostname, str) or not hostname:
        raise InvalidArgument(f"Invalid lookup of null or blank hostname: {hostname!r}")
    return hostname.lower()
