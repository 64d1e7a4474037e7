# dns_overlay/static_table.py
# Version: 1.0.0
# Immutable hostname -> address override table

from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple

from dns_overlay.address import normalize_hostname


class StaticOverrideTable:
    """Read-only hosts-file style overrides, built once and shared by all scopes"""

    def __init__(self, entries: Iterable[Tuple[str, str]] = ()):
        table = {}
        for hostname, address in entries:
            table[normalize_hostname(hostname)] = address
        self._entries = MappingProxyType(table)

    def lookup(self, hostname: str) -> Optional[str]:
        """Get the configured address for a normalized hostname, or None"""
        return self._entries.get(hostname)

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate (hostname, address) pairs in insertion order"""
        return iter(self._entries.items())

    def merged(self, other: "StaticOverrideTable") -> "StaticOverrideTable":
        """New table with other's entries added where this table has none"""
        entries = list(self._entries.items())
        entries.extend(
            (hostname, address)
            for hostname, address in other.items()
            if hostname not in self._entries
        )
        return StaticOverrideTable(entries)

    def __contains__(self, hostname) -> bool:
        return hostname in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StaticOverrideTable({dict(self._entries)!r})"
