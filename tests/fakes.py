"""Fake real resolvers for dns-overlay tests"""

import ipaddress
import threading
from collections import Counter

from dns_overlay.errors import UnknownHost


class FakeResolver:
    """Answers from a dict and counts calls per hostname"""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.calls = Counter()
        self._lock = threading.Lock()

    def resolve(self, hostname):
        with self._lock:
            self.calls[hostname] += 1
        if hostname not in self.answers:
            raise UnknownHost(hostname, "not in fake zone")
        return tuple(ipaddress.ip_address(a) for a in self.answers[hostname])


class BlockingResolver(FakeResolver):
    """FakeResolver that holds every call until release is set"""

    def __init__(self, answers=None):
        super().__init__(answers)
        self.started = threading.Event()
        self.release = threading.Event()

    def resolve(self, hostname):
        self.started.set()
        assert self.release.wait(5), "resolver was never released"
        return super().resolve(hostname)
