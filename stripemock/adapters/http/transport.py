"""httpx transport that answers API calls from the in-process fake.

Mount it on an httpx.Client or httpx.AsyncClient and every request is
decoded and handed to a RequestDispatcher instead of going out over the
network:

    transport = StripeMockTransport(dispatcher)
    client = httpx.Client(base_url="https://api.stripe.com", transport=transport)
    client.post("/v1/plans", data={"amount": 9900, ...})

Request bodies use the real API's form encoding, including the bracket
syntax for nested values (metadata[key]=value, items[0][price]=...).
"""

import json
import logging
import re
from collections.abc import Iterable
from typing import Any
from urllib.parse import parse_qsl

import httpx

from stripemock.core import errors
from stripemock.core.errors import InvalidRequestError

from .dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

_KEY_PART = re.compile(r"\[([^\]]*)\]")


def _split_key(key: str) -> list[str]:
    """Split 'metadata[a][b]' into ['metadata', 'a', 'b']."""
    head, _, rest = key.partition("[")
    if not rest:
        return [key]
    return [head] + _KEY_PART.findall("[" + rest)


def _listify(node: Any) -> Any:
    """Turn dicts keyed by consecutive integers ('0', '1', ...) into lists."""
    if isinstance(node, dict):
        node = {k: _listify(v) for k, v in node.items()}
        keys = list(node)
        if keys and all(k.isdigit() for k in keys):
            ordered = sorted(keys, key=int)
            if [int(k) for k in ordered] == list(range(len(ordered))):
                return [node[k] for k in ordered]
    return node


def decode_form(pairs: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Decode form pairs into nested params.

    An empty value means null, as it does for the real API.
    'key[]' appends to a list.

    Raises:
        InvalidRequestError: If one key is used both as a scalar and as a
            nested object or list, e.g. metadata[a]=1&metadata[]=2.
    """
    params: dict[str, Any] = {}
    for raw_key, raw_value in pairs:
        value: Any = raw_value if raw_value != "" else None
        parts = _split_key(raw_key)
        field = parts[0]
        node = params
        for i, part in enumerate(parts):
            last = i == len(parts) - 1
            if last:
                if part == "":
                    continue
                existing = node.get(part)
                if value is not None and isinstance(existing, list):
                    raise errors.invalid_array(field).to_error()
                if value is not None and isinstance(existing, dict):
                    raise errors.invalid_object(field).to_error()
                node[part] = value
                break
            if parts[i + 1] == "":
                items = node.get(part)
                if items is None:
                    items = node[part] = []
                elif not isinstance(items, list):
                    raise errors.invalid_array(field).to_error()
                items.append(value)
                break
            child = node.get(part)
            if child is None:
                child = node[part] = {}
            elif not isinstance(child, dict):
                raise errors.invalid_object(field).to_error()
            node = child
    return _listify(params)


def decode_request(request: httpx.Request) -> dict[str, Any]:
    """Collect params from the query string and the body.

    Raises:
        InvalidRequestError: If the body cannot be decoded or mixes shapes
            for one key.
    """
    pairs = list(request.url.params.multi_items())
    body = request.content
    if body:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                decoded = json.loads(body)
            except ValueError:
                raise errors.unparseable_body("application/json") from None
            params = decode_form(pairs)
            if isinstance(decoded, dict):
                params.update(decoded)
            return params
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            raise errors.unparseable_body("application/x-www-form-urlencoded") from None
        pairs.extend(parse_qsl(text, keep_blank_values=True))
    return decode_form(pairs)


class StripeMockTransport(httpx.MockTransport):
    """httpx.MockTransport backed by a RequestDispatcher.

    Works for both sync and async clients. Every request is recorded in
    `requests` for assertions.
    """

    def __init__(self, dispatcher: RequestDispatcher):
        """Initialize the transport.

        Args:
            dispatcher: RequestDispatcher answering the requests.
        """
        self.dispatcher = dispatcher
        self.requests: list[httpx.Request] = []
        super().__init__(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Answer one request through the dispatcher."""
        self.requests.append(request)
        try:
            params = decode_request(request)
        except InvalidRequestError as e:
            logger.info(
                f"{request.method} {request.url.path} -> {e.http_status}: {e.message}",
                extra={"method": request.method, "param": e.param},
            )
            return httpx.Response(e.http_status, json=e.to_dict())
        path = request.url.raw_path.decode("ascii")
        response = self.dispatcher.dispatch(request.method, path, params)
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status}",
            extra={"status": response.status},
        )
        return httpx.Response(response.status, json=response.body)


__all__ = ["StripeMockTransport", "decode_form", "decode_request"]
