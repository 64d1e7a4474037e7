# dns_overlay/builder.py
# Version: 1.0.0
# Declarative builder for static override configurations

"""
Override Configuration Builder

Usage::

    from dns_overlay.builder import hosts, new_builder, to

    configuration = (
        new_builder()
        .map(hosts("www.example.com", "example.com"), to("127.0.0.1"))
        .map(hosts("api.example.com"), to("::1"))
        .build()
    )
    service = OverlayNameService(static_table=configuration.table)

The builder is immutable: every map() returns a new builder, so a partially
built configuration can be reused as a base. All validation happens in
build().
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from dns_overlay.address import normalize_hostname, parse_numeric_address
from dns_overlay.errors import DuplicateHostMapping, InvalidArgument
from dns_overlay.static_table import StaticOverrideTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostNames:
    """One or more hostnames on the left hand side of a mapping"""

    names: Tuple[str, ...]


@dataclass(frozen=True)
class TargetAddress:
    """The address on the right hand side of a mapping"""

    address: str


@dataclass(frozen=True)
class HostMapping:
    """An address and the hostnames mapped to it, as declared"""

    address: str
    hostnames: Tuple[str, ...]


def hosts(*names: str) -> HostNames:
    return HostNames(tuple(names))


def to(address: str) -> TargetAddress:
    return TargetAddress(address)


class OverlayConfiguration:
    """Result of a build: the override table plus its declared mappings"""

    def __init__(self, mappings: List[HostMapping], table: StaticOverrideTable):
        self._mappings = list(mappings)
        self.table = table

    def get_mappings(self) -> List[HostMapping]:
        """Mappings (address -> hostnames) in declaration order"""
        return list(self._mappings)

    def __repr__(self) -> str:
        return f"OverlayConfiguration({self._mappings!r})"


@dataclass(frozen=True)
class ConfigurationBuilder:
    """Immutable list of pending (hostnames, address) pairs"""

    pending: Tuple[Tuple[HostNames, TargetAddress], ...] = ()

    def map(self, names: HostNames, target: TargetAddress) -> "ConfigurationBuilder":
        return ConfigurationBuilder(self.pending + ((names, target),))

    def build(self) -> OverlayConfiguration:
        """
        Validate the pending pairs and produce a configuration

        Raises:
            InvalidArgument: If a mapping has no hostnames or a blank hostname
            InvalidAddressFormat: If an address is not a numeric literal
            DuplicateHostMapping: If a hostname is mapped more than once
        """
        seen: Dict[str, str] = {}
        mappings = []
        entries = []

        for names, target in self.pending:
            if not names.names:
                raise InvalidArgument(f"No hostnames given for {target.address}")
            parse_numeric_address(target.address)

            hostnames = []
            for name in names.names:
                hostname = normalize_hostname(name)
                if hostname in seen:
                    raise DuplicateHostMapping(hostname, seen[hostname], target.address)
                seen[hostname] = target.address
                hostnames.append(hostname)
                entries.append((hostname, target.address))

            mappings.append(HostMapping(target.address, tuple(hostnames)))

        logger.debug(f"Built override configuration with {len(entries)} hosts")
        return OverlayConfiguration(mappings, StaticOverrideTable(entries))


def new_builder() -> ConfigurationBuilder:
    return ConfigurationBuilder()
