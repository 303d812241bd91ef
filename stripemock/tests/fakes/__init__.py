"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic and adapters
to be tested in isolation:

- FakeRecordStorePort: Dict-backed record store that records every call
- FakeResourcePort: Captured resource requests with canned responses
"""

from .resources import FakeResourcePort
from .store import FakeRecordStorePort

__all__ = [
    "FakeRecordStorePort",
    "FakeResourcePort",
]
