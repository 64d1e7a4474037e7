# dns_overlay/scope.py
# Version: 1.0.0
# Execution scopes: per-context override and cache state with inheritance

"""
Execution Scopes

An execution scope is the unit that owns override state and scoped caches.
The calling context's scope lives in a ContextVar and is created on first
use, so every plain thread starts with its own empty scope and sees normal
resolution.

Children inherit through ScopedThread or bind():

- InheritancePolicy.SHARED: the child uses the parent's scope object.
  Overrides and cached results set later by either side are seen by both.
- InheritancePolicy.SNAPSHOT: the child gets a copy of the parent's
  overrides at spawn time and empty caches.

asyncio tasks copy their creator's context, so they share its scope once
the creator has one.
"""

import contextvars
import functools
import logging
import threading
import weakref
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Optional

from dns_overlay.registry import OverrideRegistry

logger = logging.getLogger(__name__)


class InheritancePolicy(Enum):
    """How a child context inherits its parent's scope"""

    SHARED = "shared"
    SNAPSHOT = "snapshot"


class ExecutionScope:
    """Override registry plus one scoped cache per name service"""

    def __init__(self, overrides: Optional[OverrideRegistry] = None):
        self.overrides = overrides if overrides is not None else OverrideRegistry()
        self._caches = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def cache_for(self, owner, factory: Callable):
        """Get this scope's cache for owner, creating it with factory(self)"""
        with self._lock:
            cache = self._caches.get(owner)
            if cache is None:
                cache = factory(self)
                self._caches[owner] = cache
            return cache

    def invalidate(self):
        """Drop every cached result held by this scope"""
        with self._lock:
            caches = list(self._caches.values())
        for cache in caches:
            cache.invalidate()

    def child(self, policy: InheritancePolicy = InheritancePolicy.SHARED) -> "ExecutionScope":
        if policy is InheritancePolicy.SHARED:
            return self
        return ExecutionScope(self.overrides.copy())


_current_scope: "contextvars.ContextVar[ExecutionScope]" = contextvars.ContextVar(
    "dns_overlay_scope"
)


def current_scope() -> ExecutionScope:
    """Get the calling context's scope, creating it on first use"""
    scope = _current_scope.get(None)
    if scope is None:
        scope = ExecutionScope()
        _current_scope.set(scope)
        logger.debug(f"Created execution scope for {threading.current_thread().name}")
    return scope


@contextmanager
def isolated():
    """Run a block in a brand-new scope, restoring the previous one afterwards"""
    scope = ExecutionScope()
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)


def bind(fn: Callable, inheritance: InheritancePolicy = InheritancePolicy.SHARED) -> Callable:
    """
    Wrap fn so it runs in a child of the caller's current scope

    Useful for executor submissions, where the worker thread would otherwise
    get a fresh scope.
    """
    scope = current_scope().child(inheritance)

    @functools.wraps(fn)
    def run_in_scope(*args, **kwargs):
        token = _current_scope.set(scope)
        try:
            return fn(*args, **kwargs)
        finally:
            _current_scope.reset(token)

    return run_in_scope


class ScopedThread(threading.Thread):
    """Thread that inherits the creating context's scope"""

    def __init__(self, *args, inheritance: InheritancePolicy = InheritancePolicy.SHARED, **kwargs):
        super().__init__(*args, **kwargs)
        self.inheritance = inheritance
        self.scope = current_scope().child(inheritance)

    def run(self):
        _current_scope.set(self.scope)
        super().run()
