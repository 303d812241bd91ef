"""Resource service: implements ResourcePort for every registered type.

This is the core service behind the fake API. Each handler runs the
Validator, mutates the record store only when validation passes, and
hands back a detached snapshot. Validation and mutation happen while the
resource type's lock is held, so two concurrent creates cannot both pass
the uniqueness check for the same id. A create also holds the locks of
the types its foreign keys point at. Whenever more than one lock is
needed they are taken in sorted type-name order.
"""

import copy
import logging
from collections.abc import Mapping
from contextlib import ExitStack
from typing import Any

from . import errors
from .errors import raise_for
from .id_generator import IdGenerator
from .models import DeletedRecord, ListResult, Record
from .ports import RecordStorePort, ResourcePort
from .schema import SchemaRegistry
from .validator import Validator, as_integer, is_blank_id

logger = logging.getLogger(__name__)

# Keys the service owns; callers cannot set them through update.
_RESERVED_KEYS = frozenset({"id", "object"})


class ResourceService(ResourcePort):
    """Core implementation of ResourcePort.

    Coordinates the validator, the id generator and the record store.
    Successful mutations are logged at INFO, rejected requests at INFO
    with the offending param.
    """

    def __init__(
        self,
        store: RecordStorePort,
        registry: SchemaRegistry,
        id_generator: IdGenerator | None = None,
        validator: Validator | None = None,
    ):
        """Initialize the resource service.

        Args:
            store: RecordStorePort implementation holding every record.
            registry: SchemaRegistry with the rules per resource type.
            id_generator: Generator for ids omitted by callers
                (default: prefix "test").
            validator: Validator to use (default: one built on registry).
        """
        self.store = store
        self.registry = registry
        self.id_generator = id_generator or IdGenerator()
        self.validator = validator or Validator(registry)

    def create(self, resource_type: str, params: Mapping[str, Any]) -> Record:
        """Validate and store a new record.

        Raises:
            InvalidRequestError: If validation fails. Nothing is stored.
        """
        schema = self.registry.get(resource_type)
        with self._locked(resource_type, *schema.foreign_keys.values()):
            self._reject_if(
                "create",
                resource_type,
                self.validator.validate(resource_type, params, self.store),
            )
            attributes = self.validator.normalize(resource_type, params)
            resource_id = attributes.get("id")
            if is_blank_id(resource_id):
                resource_id = self._generate_id(resource_type)
            resource_id = str(resource_id)

            record = self._shape(schema.name, resource_id, attributes)
            self.store.put(resource_type, resource_id, record)

        logger.info(
            f"Created {resource_type} {resource_id}",
            extra={"resource_type": resource_type, "resource_id": resource_id},
        )
        return self._snapshot(record)

    def retrieve(self, resource_type: str, resource_id: str) -> Record:
        """Return a snapshot of a stored record.

        Raises:
            ResourceNotFoundError: If no record has this id.
        """
        self.registry.get(resource_type)
        record = self.store.get(resource_type, resource_id)
        if record is None:
            self._reject_if(
                "retrieve", resource_type, errors.not_found(resource_type, resource_id)
            )
        logger.debug(
            f"Retrieved {resource_type} {resource_id}",
            extra={"resource_type": resource_type, "resource_id": resource_id},
        )
        return record

    def update(
        self, resource_type: str, resource_id: str, params: Mapping[str, Any]
    ) -> Record:
        """Overwrite the supplied attributes of a stored record.

        Only the type and inclusion checks run, over the supplied fields.
        A None value removes an optional attribute.

        Raises:
            ResourceNotFoundError: If no record has this id.
            InvalidRequestError: If a supplied value is rejected.
        """
        schema = self.registry.get(resource_type)
        with self.store.lock(resource_type):
            record = self.store.get(resource_type, resource_id)
            if record is None:
                self._reject_if(
                    "update", resource_type, errors.not_found(resource_type, resource_id)
                )
            self._reject_if(
                "update",
                resource_type,
                self.validator.validate_update(resource_type, params),
            )
            changes = self.validator.normalize(resource_type, params)
            for key, value in changes.items():
                if key in _RESERVED_KEYS:
                    continue
                if value is None:
                    record.pop(key, None)
                else:
                    record[key] = value
            self.store.put(resource_type, resource_id, record)

        logger.info(
            f"Updated {resource_type} {resource_id}",
            extra={
                "resource_type": schema.name,
                "resource_id": resource_id,
                "fields": sorted(k for k in changes if k not in _RESERVED_KEYS),
            },
        )
        return self._snapshot(record)

    def delete(self, resource_type: str, resource_id: str) -> DeletedRecord:
        """Remove a stored record.

        Raises:
            ResourceNotFoundError: If no record has this id.
        """
        schema = self.registry.get(resource_type)
        with self.store.lock(resource_type):
            if not self.store.delete(resource_type, resource_id):
                self._reject_if(
                    "delete", resource_type, errors.not_found(resource_type, resource_id)
                )

        logger.info(
            f"Deleted {resource_type} {resource_id}",
            extra={"resource_type": resource_type, "resource_id": resource_id},
        )
        return DeletedRecord(id=resource_id, object=schema.name)

    def list(self, resource_type: str, limit: Any = None) -> ListResult:
        """Return records earliest-inserted first, at most `limit` of them.

        Raises:
            InvalidRequestError: If limit is not a positive integer.
        """
        schema = self.registry.get(resource_type)
        count: int | None = None
        if limit is not None:
            count = as_integer(limit)
            if count is None:
                self._reject_if(
                    "list", resource_type, errors.invalid_integer("limit", limit)
                )
            if count < 1:
                self._reject_if(
                    "list", resource_type, errors.below_minimum("limit", 1)
                )

        with self.store.lock(resource_type):
            data: list[Record] = []
            total = 0
            for record in self.store.list(resource_type):
                total += 1
                if count is None or len(data) < count:
                    data.append(record)

        logger.debug(
            f"Listed {len(data)} of {total} {schema.plural}",
            extra={"resource_type": resource_type, "limit": count},
        )
        return ListResult(
            data=tuple(data),
            has_more=total > len(data),
            url=f"/v1/{schema.plural}",
        )

    def reset(self) -> None:
        """Clear every record and id counter as one step."""
        with self._locked(*self.registry.names()):
            self.store.reset()
            self.id_generator.reset()
        logger.info("Resource service reset")

    def data(self, resource_type: str) -> Mapping[str, Record]:
        """Snapshot of the stored records for a type, for test assertions."""
        self.registry.get(resource_type)
        return self.store.data(resource_type)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locked(self, *resource_types: str) -> ExitStack:
        """Hold the locks of several types, always taken in sorted name order."""
        with ExitStack() as stack:
            for name in sorted(set(resource_types)):
                stack.enter_context(self.store.lock(name))
            return stack.pop_all()

    def _generate_id(self, resource_type: str) -> str:
        while True:
            candidate = self.id_generator.next(resource_type)
            if not self.store.exists(resource_type, candidate):
                return candidate

    @staticmethod
    def _shape(object_name: str, resource_id: str, attributes: Mapping[str, Any]) -> Record:
        record: Record = {"id": resource_id, "object": object_name}
        for key, value in attributes.items():
            if key not in _RESERVED_KEYS:
                record[key] = value
        return record

    @staticmethod
    def _snapshot(record: Record) -> Record:
        return copy.deepcopy(record)

    @staticmethod
    def _reject_if(
        operation: str, resource_type: str, violation: errors.Violation | None
    ) -> None:
        if violation is None:
            return
        logger.info(
            f"Rejected {operation} {resource_type}: {violation.message}",
            extra={
                "resource_type": resource_type,
                "param": violation.param,
                "http_status": violation.http_status,
            },
        )
        raise_for(violation)


__all__ = ["ResourceService"]
