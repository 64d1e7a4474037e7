# dns_overlay/cache.py
# Version: 1.0.0
# Non-expiring cache with single-flight loading

import logging
import threading
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class _Flight:
    """A computation in progress for one key"""

    def __init__(self, generation: int):
        self.generation = generation
        self.done = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None


class SingleFlightCache:
    """Thread-safe cache whose entries never expire

    get_or_compute() runs the loader at most once per key at a time.
    Concurrent callers for a key that is being computed wait for that
    computation and share its result or its exception. Results are kept
    until clear(); failures are never stored.

    clear() starts a new generation: callers after it never join a
    computation started before it, and such a computation does not store
    its result.
    """

    def __init__(self, name: str = "cache"):
        self.name = name
        self._cache: Dict[str, Any] = {}
        self._flights: Dict[str, _Flight] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "waits": 0, "failures": 0}

    def get(self, key: str) -> Optional[Any]:
        """Get a cached value without computing it"""
        with self._lock:
            return self._cache.get(key)

    def get_or_compute(self, key: str, loader: Callable[[str], Any]) -> Any:
        """Get the cached value for key, running loader(key) on a miss"""
        with self._lock:
            if key in self._cache:
                self._stats["hits"] += 1
                return self._cache[key]

            flight = self._flights.get(key)
            owner = flight is None
            if owner:
                flight = _Flight(self._generation)
                self._flights[key] = flight
                self._stats["misses"] += 1
            else:
                self._stats["waits"] += 1

        if not owner:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            value = loader(key)
        except BaseException as e:
            flight.error = e
            with self._lock:
                self._end_flight(key, flight)
                self._stats["failures"] += 1
            logger.debug(f"{self.name}: computing {key} failed: {e}")
            raise
        else:
            flight.value = value
            with self._lock:
                if flight.generation == self._generation:
                    self._cache[key] = value
                self._end_flight(key, flight)
            return value
        finally:
            flight.done.set()

    def _end_flight(self, key: str, flight: _Flight):
        if self._flights.get(key) is flight:
            del self._flights[key]

    def clear(self):
        """Clear all cached entries

        Computations in progress still finish for the callers already
        waiting on them, but their results are discarded.
        """
        with self._lock:
            self._generation += 1
            self._cache.clear()
            self._flights.clear()

    def stats(self) -> Dict[str, int]:
        """Get cache statistics"""
        with self._lock:
            return {"size": len(self._cache), "in_flight": len(self._flights), **self._stats}

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        """Get current cache size"""
        with self._lock:
            return len(self._cache)
