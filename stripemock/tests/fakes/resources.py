"""Fake ResourcePort implementation for testing."""

from collections.abc import Mapping
from typing import Any

from stripemock.core.errors import InvalidRequestError
from stripemock.core.models import DeletedRecord, ListResult, Record
from stripemock.core.ports import ResourcePort


class FakeResourcePort(ResourcePort):
    """Captures resource requests for test assertions.

    Returns simple canned records. Set `error` to make every call raise it.
    """

    def __init__(self) -> None:
        """Initialize with empty call tracking."""
        self.calls: list[tuple[Any, ...]] = []
        self.error: InvalidRequestError | None = None
        self.reset_call_count = 0

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    def create(self, resource_type: str, params: Mapping[str, Any]) -> Record:
        self.calls.append(("create", resource_type, dict(params)))
        self._maybe_fail()
        record: Record = {"id": params.get("id") or f"fake_{resource_type}", "object": resource_type}
        record.update({k: v for k, v in params.items() if k != "id"})
        return record

    def retrieve(self, resource_type: str, resource_id: str) -> Record:
        self.calls.append(("retrieve", resource_type, resource_id))
        self._maybe_fail()
        return {"id": resource_id, "object": resource_type}

    def update(
        self, resource_type: str, resource_id: str, params: Mapping[str, Any]
    ) -> Record:
        self.calls.append(("update", resource_type, resource_id, dict(params)))
        self._maybe_fail()
        return {"id": resource_id, "object": resource_type, **params}

    def delete(self, resource_type: str, resource_id: str) -> DeletedRecord:
        self.calls.append(("delete", resource_type, resource_id))
        self._maybe_fail()
        return DeletedRecord(id=resource_id, object=resource_type)

    def list(self, resource_type: str, limit: Any = None) -> ListResult:
        self.calls.append(("list", resource_type, limit))
        self._maybe_fail()
        return ListResult(data=(), has_more=False, url=f"/v1/{resource_type}s")

    def reset(self) -> None:
        self.reset_call_count += 1
