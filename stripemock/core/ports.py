"""Port interfaces for the stripemock core.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - RecordStorePort: Keep records per resource type, in insertion order

2. **Driving Ports** (adapters/external systems call into core)
   - ResourcePort: create / retrieve / update / delete / list requests
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from contextlib import AbstractContextManager
from typing import Any

from .models import DeletedRecord, ListResult, Record


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class RecordStorePort(ABC):
    """Port for the process-wide record store.

    Maps resource type -> ordered mapping of id -> attribute record.

    Implementations must handle:
    - Preserving insertion order per resource type
    - Returning detached copies so callers cannot corrupt stored records
    - A per-type exclusive lock so validate + mutate can run atomically
    """

    @abstractmethod
    def put(self, resource_type: str, resource_id: str, record: Record) -> None:
        """Insert or replace a record.

        Replacing keeps the record's original position in insertion order.

        Args:
            resource_type: Resource type, e.g. "plan".
            resource_id: Record id.
            record: Attributes to store. The store keeps its own copy.
        """

    @abstractmethod
    def get(self, resource_type: str, resource_id: str) -> Record | None:
        """Return a copy of a record, or None if it is not stored."""

    @abstractmethod
    def exists(self, resource_type: str, resource_id: str) -> bool:
        """Return True if a record with this id is stored."""

    @abstractmethod
    def delete(self, resource_type: str, resource_id: str) -> bool:
        """Remove a record.

        Returns:
            True if the record was removed, False if it was not stored.
        """

    @abstractmethod
    def list(self, resource_type: str) -> Iterable[Record]:
        """Return the records of a type in insertion order.

        The result is lazy and restartable: each iteration yields fresh
        copies of the records stored at that moment.
        """

    @abstractmethod
    def count(self, resource_type: str) -> int:
        """Return the number of records stored for a type."""

    @abstractmethod
    def data(self, resource_type: str) -> Mapping[str, Record]:
        """Return a read-only snapshot of the id -> record mapping.

        Records are copies taken at call time; changing them does not
        touch the store. Intended for test assertions on what was persisted.
        """

    @abstractmethod
    def lock(self, resource_type: str) -> AbstractContextManager[Any]:
        """Return the exclusive lock for one resource type.

        Handlers hold it across validation and mutation.
        """

    @abstractmethod
    def reset(self) -> None:
        """Remove every record of every type atomically."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class ResourcePort(ABC):
    """Port for resource lifecycle requests.

    Driving port: the request dispatcher, the test helper and the CLI
    invoke these methods. The implementation lives in the core
    (resource_service.py).

    Every failure raises InvalidRequestError (or its ResourceNotFoundError
    subclass) before any mutation occurs.
    """

    @abstractmethod
    def create(self, resource_type: str, params: Mapping[str, Any]) -> Record:
        """Validate and store a new record.

        Args:
            resource_type: Resource type, e.g. "plan".
            params: Attributes. An absent or empty "id" gets a generated one.

        Returns:
            Snapshot of the stored record.

        Raises:
            InvalidRequestError: If validation fails.
        """

    @abstractmethod
    def retrieve(self, resource_type: str, resource_id: str) -> Record:
        """Return a snapshot of a stored record.

        Raises:
            ResourceNotFoundError: If no record has this id.
        """

    @abstractmethod
    def update(
        self, resource_type: str, resource_id: str, params: Mapping[str, Any]
    ) -> Record:
        """Overwrite the given attributes of a stored record.

        Returns:
            Snapshot of the merged record.

        Raises:
            ResourceNotFoundError: If no record has this id.
            InvalidRequestError: If a supplied value has the wrong type or
                falls outside its allowed set.
        """

    @abstractmethod
    def delete(self, resource_type: str, resource_id: str) -> DeletedRecord:
        """Remove a stored record.

        Raises:
            ResourceNotFoundError: If no record has this id.
        """

    @abstractmethod
    def list(self, resource_type: str, limit: Any = None) -> ListResult:
        """Return records in insertion order, at most `limit` of them.

        Raises:
            InvalidRequestError: If limit is not a positive integer.
        """

    @abstractmethod
    def reset(self) -> None:
        """Clear every record and id counter, for isolation between tests."""
