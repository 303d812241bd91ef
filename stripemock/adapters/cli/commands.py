"""CLI command implementations for poking at the fake API.

Maps interactive commands (create, retrieve, update, delete, list, reset)
onto ResourcePort operations. Core errors come back as
{"status": "error", ...} dictionaries carrying the same message, param and
status code a client would receive.
"""

import logging
from collections.abc import Mapping
from typing import Any

from stripemock.core.errors import InvalidRequestError
from stripemock.core.ports import ResourcePort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to ResourcePort."""

    def __init__(self, resources: ResourcePort):
        """Initialize the CLI command handler.

        Args:
            resources: ResourcePort implementation to execute commands.
        """
        self.resources = resources

    def create(self, resource_type: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """Create a record via CLI."""
        try:
            record = self.resources.create(resource_type, params)
        except InvalidRequestError as e:
            return self._error("create", resource_type, e)
        return {"status": "success", "operation": "create", "data": record}

    def retrieve(self, resource_type: str, resource_id: str) -> dict[str, Any]:
        try:
            record = self.resources.retrieve(resource_type, resource_id)
        except InvalidRequestError as e:
            return self._error("retrieve", resource_type, e)
        return {"status": "success", "operation": "retrieve", "data": record}

    def update(
        self, resource_type: str, resource_id: str, params: Mapping[str, Any]
    ) -> dict[str, Any]:
        try:
            record = self.resources.update(resource_type, resource_id, params)
        except InvalidRequestError as e:
            return self._error("update", resource_type, e)
        return {"status": "success", "operation": "update", "data": record}

    def delete(self, resource_type: str, resource_id: str) -> dict[str, Any]:
        try:
            deleted = self.resources.delete(resource_type, resource_id)
        except InvalidRequestError as e:
            return self._error("delete", resource_type, e)
        return {"status": "success", "operation": "delete", "data": deleted.to_dict()}

    def list(self, resource_type: str, limit: Any = None) -> dict[str, Any]:
        """List records via CLI.

        Args:
            resource_type: Resource type to list.
            limit: Optional maximum number of records.

        Returns:
            Dictionary with the list body, or status/message on error.
        """
        try:
            page = self.resources.list(resource_type, limit)
        except InvalidRequestError as e:
            return self._error("list", resource_type, e)
        return {
            "status": "success",
            "operation": "list",
            "count": len(page),
            "data": page.to_dict(),
        }

    def reset(self) -> dict[str, Any]:
        self.resources.reset()
        return {"status": "success", "operation": "reset", "message": "All records cleared"}

    @staticmethod
    def _error(
        operation: str, resource_type: str, error: InvalidRequestError
    ) -> dict[str, Any]:
        logger.error(f"Failed to {operation} {resource_type}: {error.message}")
        return {
            "status": "error",
            "operation": operation,
            "resource_type": resource_type,
            "message": error.message,
            "param": error.param,
            "http_status": error.http_status,
        }


__all__ = ["CLICommandHandler"]
