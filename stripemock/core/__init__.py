"""Core domain logic for the stripemock fake payment API.

This package contains zero external dependencies and represents
the validation, persistence and error-shaping rules of the fake.
All adapters and external integrations are handled by the adapters
package.
"""

from .errors import (
    InvalidRequestError,
    ResourceNotFoundError,
    UnknownResourceTypeError,
    Violation,
)
from .id_generator import IdGenerator
from .models import (
    INTERVALS,
    SUPPORTED_CURRENCIES,
    DeletedRecord,
    Interval,
    ListResult,
    Record,
    ResourceSchema,
)
from .resource_service import ResourceService
from .schema import SchemaRegistry, default_registry
from .validator import Validator

__all__ = [
    "DeletedRecord",
    "INTERVALS",
    "IdGenerator",
    "Interval",
    "InvalidRequestError",
    "ListResult",
    "Record",
    "ResourceNotFoundError",
    "ResourceSchema",
    "ResourceService",
    "SUPPORTED_CURRENCIES",
    "SchemaRegistry",
    "UnknownResourceTypeError",
    "Validator",
    "Violation",
    "default_registry",
]
