# dns_overlay/dns_resolver.py
# Version: 1.0.0
# Real resolvers and the process-wide shared resolution cache

import ipaddress
import logging
import socket
import threading
from typing import Iterable, List, Tuple

from twisted.internet import defer, threads
from twisted.internet.defer import Deferred
from twisted.names import client, dns

from dns_overlay import registration
from dns_overlay.address import AddressSet, parse_numeric_address
from dns_overlay.cache import SingleFlightCache
from dns_overlay.constants import DNS_QUERY_TIMEOUT, LOG_LOOKUP_DETAILS, REACTOR_THREAD_NAME
from dns_overlay.errors import UnknownHost

logger = logging.getLogger(__name__)


class SystemResolver:
    """Resolve through the platform resolver (getaddrinfo)

    Uses the original socket.getaddrinfo even while the overlay is installed
    as the process resolver.
    """

    def __init__(self, getaddrinfo=None):
        self._getaddrinfo = getaddrinfo

    def resolve(self, hostname: str) -> AddressSet:
        getaddrinfo = self._getaddrinfo or registration.system_getaddrinfo
        try:
            infos = getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as e:
            raise UnknownHost(hostname, e) from e

        addresses = []
        for family, _socktype, _proto, _canonname, sockaddr in infos:
            if family not in (socket.AF_INET, socket.AF_INET6):
                continue
            # Drop IPv6 zone ids ("fe80::1%eth0")
            ip = sockaddr[0].split("%", 1)[0]
            address = ipaddress.ip_address(parse_numeric_address(ip))
            if address not in addresses:
                addresses.append(address)

        if not addresses:
            raise UnknownHost(hostname, "no address records")
        return tuple(addresses)


_reactor_thread = None
_reactor_lock = threading.Lock()


def _ensure_reactor_running(reactor):
    """Run the reactor in a daemon thread unless something already runs it"""
    global _reactor_thread
    with _reactor_lock:
        if reactor.running:
            return
        if _reactor_thread is not None and _reactor_thread.is_alive():
            return
        _reactor_thread = threading.Thread(
            target=reactor.run,
            kwargs={"installSignalHandlers": False},
            name=REACTOR_THREAD_NAME,
            daemon=True,
        )
        _reactor_thread.start()
        logger.info("Started reactor thread for upstream DNS queries")


class ForwardingResolver:
    """Resolve by querying upstream DNS servers directly"""

    def __init__(
        self,
        servers: Iterable[Tuple[str, int]],
        timeout: float = DNS_QUERY_TIMEOUT,
        reactor=None,
        upstream_resolver=None,
    ):
        if reactor is None:
            from twisted.internet import reactor
        self.reactor = reactor
        self.servers = list(servers)
        self.upstream_resolver = upstream_resolver or client.Resolver(
            servers=self.servers, timeout=(timeout,), reactor=reactor
        )

    def lookup(self, hostname: str) -> Deferred:
        """Query A and AAAA records in parallel; runs in the reactor thread"""
        d = defer.DeferredList(
            [
                self.upstream_resolver.lookupAddress(hostname),
                self.upstream_resolver.lookupIPV6Address(hostname),
            ],
            consumeErrors=True,
        )
        d.addCallback(self._collect_addresses, hostname)
        return d

    def _collect_addresses(self, results, hostname: str) -> AddressSet:
        addresses: List = []
        errors = []

        for success, result in results:
            if not success:
                errors.append(result.getErrorMessage())
                continue
            answers, _authority, _additional = result
            for rr in answers:
                if rr.type in (dns.A, dns.AAAA):
                    address = ipaddress.ip_address(rr.payload.address)
                    if address not in addresses:
                        addresses.append(address)

        if not addresses:
            raise UnknownHost(hostname, "; ".join(errors) or "no address records")

        if LOG_LOOKUP_DETAILS:
            logger.debug(f"Upstream answer for {hostname}: {', '.join(map(str, addresses))}")
        return tuple(addresses)

    def resolve(self, hostname: str) -> AddressSet:
        """Blocking lookup; must not be called from the reactor thread"""
        _ensure_reactor_running(self.reactor)
        return threads.blockingCallFromThread(self.reactor, self.lookup, hostname)


class SharedResolutionCache:
    """One cache for all scopes, backed by the real resolver on a miss"""

    def __init__(self, resolver=None):
        self.resolver = resolver if resolver is not None else SystemResolver()
        self._cache = SingleFlightCache("shared")

    def resolve(self, hostname: str) -> AddressSet:
        return self._cache.get_or_compute(hostname, self._load)

    def _load(self, hostname: str) -> AddressSet:
        logger.debug(f"Resolving {hostname} with {type(self.resolver).__name__}")
        addresses = tuple(self.resolver.resolve(hostname))
        if not addresses:
            raise UnknownHost(hostname, "resolver returned no addresses")
        return addresses

    def clear(self):
        self._cache.clear()

    def stats(self):
        return self._cache.stats()

    def __len__(self) -> int:
        return len(self._cache)
