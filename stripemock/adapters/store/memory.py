"""In-memory record store.

Keeps one insertion-ordered dict per resource type. Records are deep
copied on the way in and on the way out, so nothing a caller holds can
alias stored state.
"""

import copy
import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import ExitStack
from types import MappingProxyType

from stripemock.core.models import Record
from stripemock.core.ports import RecordStorePort

logger = logging.getLogger(__name__)


class _RecordView(Iterable[Record]):
    """Lazy, restartable iteration over one resource type's records."""

    def __init__(self, store: "InMemoryRecordStore", resource_type: str):
        self._store = store
        self._resource_type = resource_type

    def __iter__(self) -> Iterator[Record]:
        with self._store.lock(self._resource_type):
            records = list(self._store._table(self._resource_type).values())
        for record in records:
            yield copy.deepcopy(record)

    def __len__(self) -> int:
        return self._store.count(self._resource_type)


class InMemoryRecordStore(RecordStorePort):
    """Process-local RecordStorePort.

    Each resource type gets its own re-entrant lock, created on first use.
    reset() takes every lock, in sorted type-name order, before clearing so
    it cannot interleave with a handler that is mid-way through validate +
    mutate.
    """

    def __init__(self) -> None:
        """Initialize with no records."""
        self._tables: dict[str, dict[str, Record]] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _table(self, resource_type: str) -> dict[str, Record]:
        table = self._tables.get(resource_type)
        if table is None:
            table = self._tables.setdefault(resource_type, {})
        return table

    def lock(self, resource_type: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(resource_type)
            if lock is None:
                lock = threading.RLock()
                self._locks[resource_type] = lock
            return lock

    def put(self, resource_type: str, resource_id: str, record: Record) -> None:
        with self.lock(resource_type):
            self._table(resource_type)[resource_id] = copy.deepcopy(record)

    def get(self, resource_type: str, resource_id: str) -> Record | None:
        with self.lock(resource_type):
            record = self._table(resource_type).get(resource_id)
            return copy.deepcopy(record) if record is not None else None

    def exists(self, resource_type: str, resource_id: str) -> bool:
        with self.lock(resource_type):
            return resource_id in self._table(resource_type)

    def delete(self, resource_type: str, resource_id: str) -> bool:
        with self.lock(resource_type):
            return self._table(resource_type).pop(resource_id, None) is not None

    def list(self, resource_type: str) -> Iterable[Record]:
        return _RecordView(self, resource_type)

    def count(self, resource_type: str) -> int:
        with self.lock(resource_type):
            return len(self._table(resource_type))

    def data(self, resource_type: str) -> Mapping[str, Record]:
        with self.lock(resource_type):
            snapshot = {
                rid: copy.deepcopy(record)
                for rid, record in self._table(resource_type).items()
            }
        return MappingProxyType(snapshot)

    def reset(self) -> None:
        with self._registry_lock:
            locks = [self._locks[name] for name in sorted(self._locks)]
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            tables = list(self._tables.values())
            cleared = sum(len(table) for table in tables)
            for table in tables:
                table.clear()
        logger.debug("Record store reset", extra={"records_cleared": cleared})
