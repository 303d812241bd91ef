"""HTTP-shaped adapters.

- RequestDispatcher: routes method + path + params to the resource service
- StripeMockTransport: httpx transport answering client calls in-process
"""

from .dispatcher import DispatchResponse, RequestDispatcher
from .transport import StripeMockTransport, decode_form

__all__ = [
    "DispatchResponse",
    "RequestDispatcher",
    "StripeMockTransport",
    "decode_form",
]
