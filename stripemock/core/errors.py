"""Error shaping for the stripemock core.

Every failure the fake service reports to callers is an InvalidRequestError
carrying the same three fields the real payment API returns: a message,
the offending parameter, and an HTTP status. Validation failures use 400;
lookups of absent records use 404.

The functions in this module are the only place message templates live,
so the exact wording stays identical across handlers and adapters.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

BAD_REQUEST = 400
NOT_FOUND = 404


@dataclass(frozen=True)
class Violation:
    """A single rejected request, as a value.

    The validator returns these instead of raising so callers can match on
    them; handlers turn them into InvalidRequestError via raise_for().
    """

    message: str
    param: str | None
    http_status: int = BAD_REQUEST

    def to_error(self) -> "InvalidRequestError":
        """Build the exception matching this violation."""
        if self.http_status == NOT_FOUND:
            return ResourceNotFoundError(self.message, self.param)
        return InvalidRequestError(self.message, self.param, self.http_status)


class InvalidRequestError(Exception):
    """A request the real service would reject."""

    def __init__(
        self,
        message: str,
        param: str | None = None,
        http_status: int = BAD_REQUEST,
    ):
        super().__init__(message)
        self.message = message
        self.param = param
        self.http_status = http_status

    def to_dict(self) -> dict[str, Any]:
        """Render the error body the way the real API serialises it."""
        body: dict[str, Any] = {
            "type": "invalid_request_error",
            "message": self.message,
        }
        if self.param is not None:
            body["param"] = self.param
        return {"error": body}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"param={self.param!r}, http_status={self.http_status})"
        )


class ResourceNotFoundError(InvalidRequestError):
    """Retrieve, update or delete of an id that is not in the store."""

    def __init__(self, message: str, param: str | None = None):
        super().__init__(message, param, NOT_FOUND)


class UnknownResourceTypeError(KeyError):
    """Raised for a resource type that has no registered schema.

    This is a wiring mistake, not part of the runtime error contract.
    """


def raise_for(violation: Violation | None) -> None:
    """Raise the error for a violation, or return when there is none."""
    if violation is not None:
        raise violation.to_error()


def _title(resource_type: str) -> str:
    return resource_type[:1].upper() + resource_type[1:]


def _format_value(value: Any) -> str:
    return str(value)


def missing_param(field: str) -> Violation:
    return Violation(f"Missing required param: {field}.", field)


def missing_amount(resource_type: str) -> Violation:
    return Violation(
        f"{_title(resource_type)}s require an `amount` parameter to be set.",
        "amount",
    )


def no_such(resource_type: str, resource_id: Any, param: str) -> Violation:
    """A reference to a record that does not exist."""
    return Violation(f"No such {resource_type}: {_format_value(resource_id)}", param)


def not_found(resource_type: str, resource_id: Any) -> Violation:
    """Lookup of an absent id; the resource type is the offending param."""
    return Violation(
        f"No such {resource_type}: {_format_value(resource_id)}",
        resource_type,
        NOT_FOUND,
    )


def invalid_integer(field: str, value: Any) -> Violation:
    return Violation(f"Invalid integer: {_format_value(value)}", field)


def below_minimum(field: str, minimum: int = 0) -> Violation:
    return Violation(f"This value must be greater than or equal to {minimum}.", field)


def invalid_object(field: str) -> Violation:
    return Violation("Invalid object", field)


def invalid_array(field: str) -> Violation:
    return Violation("Invalid array", field)


def _join_choices(choices: Iterable[str]) -> str:
    items = list(choices)
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + ", or " + items[-1]


def invalid_choice(field: str, value: Any, allowed: Iterable[str]) -> Violation:
    """A value outside a closed set.

    Currencies get the real service's longer wording, which echoes the value
    and lists what is supported; other fields name the allowed domain.
    """
    allowed = list(allowed)
    if field == "currency":
        return Violation(
            f"Invalid currency: {_format_value(value)}. Stripe currently "
            f"supports these currencies: {', '.join(allowed)}",
            field,
        )
    return Violation(
        f"Invalid {field}: must be one of {_join_choices(allowed)}", field
    )


def already_exists(resource_type: str) -> Violation:
    return Violation(f"{_title(resource_type)} already exists.", "id")


def unparseable_body(content_type: str) -> InvalidRequestError:
    """Error for a request body that cannot be decoded at all."""
    return InvalidRequestError(
        f"Invalid request body: could not decode it as {content_type}."
    )


def unrecognized_url(method: str, path: str) -> InvalidRequestError:
    """Error for a request no route handles."""
    return InvalidRequestError(
        f"Unrecognized request URL ({method.upper()}: {path})",
        None,
        NOT_FOUND,
    )


__all__ = [
    "BAD_REQUEST",
    "NOT_FOUND",
    "InvalidRequestError",
    "ResourceNotFoundError",
    "UnknownResourceTypeError",
    "Violation",
    "already_exists",
    "below_minimum",
    "invalid_array",
    "invalid_choice",
    "invalid_integer",
    "invalid_object",
    "missing_amount",
    "missing_param",
    "no_such",
    "not_found",
    "raise_for",
    "unparseable_body",
    "unrecognized_url",
]
