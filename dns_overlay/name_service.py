# dns_overlay/name_service.py
# Version: 1.0.0
# Scoped resolution cache and the public name service facade

"""
Overlay Name Service

Name service that uses both scoped and process-wide representations of
DNS lookups. Order of resolution:

1. the current scope's overrides
2. the static override table (hosts file and configured overrides)
3. the shared cache, which falls back to the real resolver

Whatever answers is cached in the current scope. Entries do not expire and
failures are never cached.
"""

import logging
from typing import Optional

from dns_overlay.address import (
    AddressSet,
    normalize_hostname,
    parse_numeric_address,
    to_address_set,
)
from dns_overlay.cache import SingleFlightCache
from dns_overlay.constants import LOG_LOOKUP_DETAILS
from dns_overlay.dns_resolver import SharedResolutionCache
from dns_overlay.errors import ResolutionFailed
from dns_overlay.registry import OverrideRegistry
from dns_overlay.scope import ExecutionScope, current_scope
from dns_overlay.static_table import StaticOverrideTable

logger = logging.getLogger(__name__)


class ScopedResolutionCache:
    """Per-scope cache consulting overrides, the static table, then the shared cache"""

    def __init__(
        self,
        overrides: OverrideRegistry,
        static_table: StaticOverrideTable,
        shared_cache: SharedResolutionCache,
    ):
        self.overrides = overrides
        self.static_table = static_table
        self.shared_cache = shared_cache
        self._cache = SingleFlightCache("scoped")

    def resolve(self, hostname: str) -> AddressSet:
        """Resolve an already normalized, non-empty hostname"""
        return self._cache.get_or_compute(hostname, self._load)

    def _load(self, hostname: str) -> AddressSet:
        logger.debug(f"Looking up {hostname}")

        address = self.overrides.get_override(hostname)
        if address is not None:
            if LOG_LOOKUP_DETAILS:
                logger.debug(f"Found scoped override for {hostname} of {address}")
            return to_address_set(parse_numeric_address(address))

        address = self.static_table.lookup(hostname)
        if address is not None:
            if LOG_LOOKUP_DETAILS:
                logger.debug(f"Found hosts entry for {hostname} of {address}")
            return to_address_set(parse_numeric_address(address))

        if LOG_LOOKUP_DETAILS:
            logger.debug(f"No override found for {hostname}, looking up from shared cache")
        return self.shared_cache.resolve(hostname)

    def invalidate(self):
        self._cache.clear()

    def stats(self):
        return self._cache.stats()

    def __contains__(self, hostname: str) -> bool:
        return hostname in self._cache


class OverlayNameService:
    """Public entry point for hostname lookups"""

    def __init__(
        self,
        static_table: Optional[StaticOverrideTable] = None,
        resolver=None,
        shared_cache: Optional[SharedResolutionCache] = None,
    ):
        self.static_table = static_table if static_table is not None else StaticOverrideTable()
        self.shared_cache = shared_cache or SharedResolutionCache(resolver)
        logger.info(
            f"DNS overlay name service loaded ({len(self.static_table)} static overrides)"
        )

    def _create_scoped_cache(self, scope: ExecutionScope) -> ScopedResolutionCache:
        return ScopedResolutionCache(scope.overrides, self.static_table, self.shared_cache)

    def scoped_cache(self) -> ScopedResolutionCache:
        """This service's cache for the current execution scope"""
        return current_scope().cache_for(self, self._create_scoped_cache)

    def invalidate(self):
        """Forget everything this service cached for the current scope"""
        self.scoped_cache().invalidate()

    def lookup_all_host_addr(self, hostname) -> AddressSet:
        """
        Resolve hostname to its addresses

        Raises:
            InvalidArgument: If hostname is None, empty or not a string
            ResolutionFailed: For any failure while resolving, with the
                original error in ``cause``
        """
        # lower case the hostname since DNS is case insensitive
        key = normalize_hostname(hostname)
        try:
            return self.scoped_cache().resolve(key)
        except ResolutionFailed:
            raise
        except Exception as e:
            logger.debug(f"Lookup of {key} failed: {e}")
            raise ResolutionFailed(key, e) from e
