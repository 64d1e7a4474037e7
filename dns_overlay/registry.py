# dns_overlay/registry.py
# Version: 1.0.0
# Per-scope hostname -> address overrides

import threading
from collections import OrderedDict
from typing import List, Optional, Tuple

from dns_overlay.address import normalize_hostname


class OverrideRegistry:
    """Thread-safe override set owned by one execution scope

    Scopes that inherit with the shared policy hold the same instance, so
    every method takes the lock. Addresses are stored as given and validated
    when a lookup uses them.
    """

    def __init__(self, entries=()):
        self._overrides: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()
        for hostname, address in entries:
            self._overrides[normalize_hostname(hostname)] = address

    def has_override(self, hostname: str) -> bool:
        with self._lock:
            return normalize_hostname(hostname) in self._overrides

    def get_override(self, hostname: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            return self._overrides.get(normalize_hostname(hostname), default)

    def set_override(self, hostname: str, address: str):
        with self._lock:
            self._overrides[normalize_hostname(hostname)] = address

    def clear_override(self, hostname: str):
        with self._lock:
            self._overrides.pop(normalize_hostname(hostname), None)

    def clear_all(self):
        with self._lock:
            self._overrides.clear()

    def entries(self) -> List[Tuple[str, str]]:
        """(hostname, address) pairs in the order they were first set"""
        with self._lock:
            return list(self._overrides.items())

    def copy(self) -> "OverrideRegistry":
        return OverrideRegistry(self.entries())

    def __len__(self) -> int:
        with self._lock:
            return len(self._overrides)
