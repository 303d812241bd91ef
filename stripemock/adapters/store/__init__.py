"""Record store adapters.

Implementations:
- InMemoryRecordStore (process-local, insertion ordered)
"""

from .memory import InMemoryRecordStore

__all__ = ["InMemoryRecordStore"]
