"""Request dispatch: method + path + params -> status + JSON body.

Maps the real API's REST routes onto ResourcePort calls:

    GET    /v1/<plural>          list
    POST   /v1/<plural>          create
    GET    /v1/<plural>/<id>     retrieve
    POST   /v1/<plural>/<id>     update
    DELETE /v1/<plural>/<id>     delete

Errors raised by the core are rendered as the real API's error body
with the matching status code. Nothing here touches the network.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote, urlsplit

from stripemock.core import errors
from stripemock.core.errors import InvalidRequestError
from stripemock.core.ports import ResourcePort
from stripemock.core.schema import SchemaRegistry

logger = logging.getLogger(__name__)

API_PREFIX = "v1"


@dataclass(frozen=True)
class DispatchResponse:
    """Status code and JSON-serialisable body of a dispatched request."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RequestDispatcher:
    """Routes API-shaped requests to the resource service."""

    def __init__(self, resources: ResourcePort, registry: SchemaRegistry):
        """Initialize the dispatcher.

        Args:
            resources: ResourcePort implementation handling the requests.
            registry: SchemaRegistry used to resolve URL collection names.
        """
        self.resources = resources
        self.registry = registry

    def dispatch(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> DispatchResponse:
        """Handle one request.

        Args:
            method: HTTP method, any case.
            path: Request path, e.g. "/v1/plans/gold". A query string or
                full URL is accepted; only the path is routed.
            params: Decoded request parameters.

        Returns:
            DispatchResponse with 200 and the resource body, or the
            error status and error body.
        """
        method = method.upper()
        params = dict(params or {})
        route_path = urlsplit(path).path
        logger.debug(
            f"Dispatching {method} {route_path}",
            extra={"method": method, "path": route_path},
        )
        try:
            body = self._route(method, route_path, params)
        except InvalidRequestError as e:
            logger.info(
                f"{method} {route_path} -> {e.http_status}: {e.message}",
                extra={"method": method, "path": route_path, "param": e.param},
            )
            return DispatchResponse(status=e.http_status, body=e.to_dict())
        return DispatchResponse(status=200, body=body)

    def _route(
        self, method: str, path: str, params: dict[str, Any]
    ) -> dict[str, Any]:
        segments = [unquote(s) for s in path.strip("/").split("/") if s]
        if len(segments) not in (2, 3) or segments[0] != API_PREFIX:
            raise errors.unrecognized_url(method, path)

        schema = self.registry.by_plural(segments[1])
        if schema is None:
            raise errors.unrecognized_url(method, path)
        resource_type = schema.name

        if len(segments) == 2:
            if method == "GET":
                return self.resources.list(resource_type, params.get("limit")).to_dict()
            if method == "POST":
                return self.resources.create(resource_type, params)
            raise errors.unrecognized_url(method, path)

        resource_id = segments[2]
        if method == "GET":
            return self.resources.retrieve(resource_type, resource_id)
        if method == "POST":
            return self.resources.update(resource_type, resource_id, params)
        if method == "DELETE":
            return self.resources.delete(resource_type, resource_id).to_dict()
        raise errors.unrecognized_url(method, path)


__all__ = ["API_PREFIX", "DispatchResponse", "RequestDispatcher"]
