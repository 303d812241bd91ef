"""Deterministic id generation for records created without an id."""

import threading
from collections import defaultdict


class IdGenerator:
    """Produces ids of the form ``<prefix>_<type>_<n>``.

    Counters start at 1 and advance independently per resource type.
    They only go back to zero on reset().
    """

    def __init__(self, prefix: str = "test"):
        if not prefix:
            raise ValueError("prefix must be a non-empty string")
        self.prefix = prefix
        self._counters: defaultdict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def next(self, resource_type: str) -> str:
        """Return the next id for a resource type."""
        with self._lock:
            self._counters[resource_type] += 1
            n = self._counters[resource_type]
        return f"{self.prefix}_{resource_type}_{n}"

    def peek(self, resource_type: str) -> int:
        """Return how many ids have been issued for a type."""
        return self._counters.get(resource_type, 0)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
