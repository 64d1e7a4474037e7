# dns_overlay/registration.py
# Version: 1.0.0
# Install a name service as the process' socket resolver

"""
Process Registration

install() replaces socket.getaddrinfo and socket.gethostbyname so that
every library using the socket module resolves names through the overlay.
Numeric hosts, None and AI_NUMERICHOST lookups are passed straight to the
original functions, which are kept here for the system resolver to use.
"""

import logging
import socket
import threading

from dns_overlay.address import is_numeric_address
from dns_overlay.errors import ResolutionFailed

logger = logging.getLogger(__name__)

system_getaddrinfo = socket.getaddrinfo
system_gethostbyname = socket.gethostbyname

_installed_service = None
_lock = threading.Lock()


def _passes_through(host, flags: int) -> bool:
    if not host:
        return True
    if flags & socket.AI_NUMERICHOST:
        return True
    return is_numeric_address(host)


def _lookup(service, host: str):
    try:
        return service.lookup_all_host_addr(host)
    except ResolutionFailed as e:
        raise socket.gaierror(socket.EAI_NONAME, f"Name or service not known: {host}") from e


def overlay_getaddrinfo(host, port, family=0, type=0, proto=0, flags=0):
    """getaddrinfo() replacement answering names from the installed service"""
    if isinstance(host, (bytes, bytearray)):
        host = bytes(host).decode("idna")

    service = _installed_service
    if service is None or _passes_through(host, flags):
        return system_getaddrinfo(host, port, family, type, proto, flags)

    results = []
    for address in _lookup(service, host):
        address_family = socket.AF_INET6 if address.version == 6 else socket.AF_INET
        if family not in (socket.AF_UNSPEC, address_family):
            continue
        results.extend(
            system_getaddrinfo(
                str(address), port, address_family, type, proto, flags | socket.AI_NUMERICHOST
            )
        )

    if not results:
        raise socket.gaierror(socket.EAI_NONAME, f"No suitable address for {host}")
    return results


def overlay_gethostbyname(hostname):
    """gethostbyname() replacement returning the first IPv4 address"""
    service = _installed_service
    if service is None or _passes_through(hostname, 0):
        return system_gethostbyname(hostname)

    for address in _lookup(service, hostname):
        if address.version == 4:
            return str(address)
    raise socket.gaierror(socket.EAI_NONAME, f"No IPv4 address for {hostname}")


def install(service):
    """Make service the active resolver for the socket module"""
    global _installed_service
    with _lock:
        _installed_service = service
        socket.getaddrinfo = overlay_getaddrinfo
        socket.gethostbyname = overlay_gethostbyname
    logger.info(f"Installed {type(service).__name__} as the process resolver")


def uninstall():
    """Restore the original socket resolver functions"""
    global _installed_service
    with _lock:
        _installed_service = None
        socket.getaddrinfo = system_getaddrinfo
        socket.gethostbyname = system_gethostbyname
    logger.info("Restored the system resolver")


def installed_service():
    return _installed_service
