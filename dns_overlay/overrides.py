# dns_overlay/overrides.py
# Version: 1.0.0
# Override helpers acting on the calling context's scope

"""
Scoped Overrides

Functions here act on the current execution scope only, so a test case or
request handler can redirect hostnames without affecting other contexts::

    from dns_overlay import overrides

    overrides.set_override("api.example.com", "127.0.0.1")

Setting an override does not touch results already cached in the scope.
Use override_hosts() (or invalidate the scope) to make a change visible to
hostnames that were looked up before.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Optional

from dns_overlay.address import normalize_hostname
from dns_overlay.scope import current_scope

logger = logging.getLogger(__name__)


def has_override(hostname: str) -> bool:
    return current_scope().overrides.has_override(hostname)


def get_override(hostname: str) -> Optional[str]:
    return current_scope().overrides.get_override(hostname)


def set_override(hostname: str, address: str):
    logger.debug(f"Setting scoped override {hostname} -> {address}")
    current_scope().overrides.set_override(hostname, address)


def clear_override(hostname: str):
    current_scope().overrides.clear_override(hostname)


def clear_all():
    current_scope().overrides.clear_all()


@contextmanager
def override_hosts(mapping: Dict[str, str]):
    """
    Apply overrides for the duration of a block

    The scope's cached results are invalidated on entry and on exit, so
    lookups inside the block see the new addresses and lookups after it see
    the previous state again.
    """
    scope = current_scope()
    registry = scope.overrides
    normalized = {normalize_hostname(hostname): address for hostname, address in mapping.items()}
    previous = {hostname: registry.get_override(hostname) for hostname in normalized}

    for hostname, address in normalized.items():
        registry.set_override(hostname, address)
    scope.invalidate()

    try:
        yield registry
    finally:
        for hostname, address in previous.items():
            if address is None:
                registry.clear_override(hostname)
            else:
                registry.set_override(hostname, address)
        scope.invalidate()
