"""Validator: checks request params against a resource schema.

One generic implementation interprets the ResourceSchema table; there
are no per-resource validator classes. Checks run in a fixed order and
the first failure wins:

1. Presence of required fields
2. Referential integrity of foreign keys
3. Type and numeric constraints
4. Inclusion in closed value sets
5. Uniqueness of the id (create only)

Failures are returned as Violation values rather than raised, so callers
decide how to surface them.
"""

import math
import numbers
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from . import errors
from .errors import Violation
from .models import ResourceSchema
from .ports import RecordStorePort
from .schema import SchemaRegistry

_INTEGER_STRING = re.compile(r"^[+-]?\d+$")


def as_integer(value: Any) -> int | None:
    """Return value as an int if it is a whole number, otherwise None.

    Accepts ints, whole-valued floats and decimals, and integer strings
    (form-encoded bodies carry every value as a string). Booleans are
    not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_STRING.match(text):
            return int(text)
        return None
    if isinstance(value, (numbers.Real, Decimal)):
        if not math.isfinite(value):
            return None
        whole = int(value)
        if whole == value:
            return whole
    return None


def is_blank_id(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class Validator:
    """Checks params against the schema registered for a resource type."""

    def __init__(self, registry: SchemaRegistry):
        """Initialize the validator.

        Args:
            registry: SchemaRegistry supplying the rules per resource type.
        """
        self.registry = registry

    def validate(
        self,
        resource_type: str,
        params: Mapping[str, Any],
        store: RecordStorePort,
    ) -> Violation | None:
        """Run every create-time check.

        Args:
            resource_type: Resource type being created.
            params: Candidate attributes.
            store: Record store consulted for references and uniqueness.

        Returns:
            The first Violation found, or None if the params are acceptable.

        Raises:
            UnknownResourceTypeError: If the type has no schema.
        """
        schema = self.registry.get(resource_type)
        return (
            self._check_presence(schema, params)
            or self._check_references(schema, params, store)
            or self._check_types(schema, params)
            or self._check_choices(schema, params)
            or self._check_unique(schema, params, store)
        )

    def validate_update(
        self, resource_type: str, params: Mapping[str, Any]
    ) -> Violation | None:
        """Run the type and inclusion checks over the supplied fields only.

        Required fields may not be cleared with None. References and
        uniqueness are not re-checked on update.
        """
        schema = self.registry.get(resource_type)
        for field_name in schema.required:
            if field_name in params and params[field_name] is None:
                return self._missing(schema, field_name)
        supplied = {k: v for k, v in params.items() if v is not None}
        return self._check_types(schema, supplied) or self._check_choices(
            schema, supplied
        )

    def normalize(
        self, resource_type: str, params: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Return a copy of validated params with integer fields as ints."""
        schema = self.registry.get(resource_type)
        normalized = dict(params)
        for field_name in schema.integer_fields:
            value = normalized.get(field_name)
            if value is not None:
                coerced = as_integer(value)
                if coerced is not None:
                    normalized[field_name] = coerced
        return normalized

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    def _missing(self, schema: ResourceSchema, field_name: str) -> Violation:
        if field_name == "amount":
            return errors.missing_amount(schema.name)
        return errors.missing_param(field_name)

    def _check_presence(
        self, schema: ResourceSchema, params: Mapping[str, Any]
    ) -> Violation | None:
        for field_name in schema.required:
            if params.get(field_name) is None:
                return self._missing(schema, field_name)
        return None

    def _check_references(
        self,
        schema: ResourceSchema,
        params: Mapping[str, Any],
        store: RecordStorePort,
    ) -> Violation | None:
        for field_name, target_type in schema.foreign_keys.items():
            value = params.get(field_name)
            if value is None:
                continue
            if not store.exists(target_type, str(value)):
                return errors.no_such(target_type, value, field_name)
        return None

    def _check_types(
        self, schema: ResourceSchema, params: Mapping[str, Any]
    ) -> Violation | None:
        for field_name in schema.integer_fields:
            value = params.get(field_name)
            if value is None:
                continue
            whole = as_integer(value)
            if whole is None:
                return errors.invalid_integer(field_name, value)
            if field_name in schema.non_negative_fields and whole < 0:
                return errors.below_minimum(field_name)

        for field_name in schema.non_negative_fields:
            if field_name in schema.integer_fields:
                continue
            value = params.get(field_name)
            if isinstance(value, numbers.Real) and value < 0:
                return errors.below_minimum(field_name)

        for field_name in schema.mapping_fields:
            value = params.get(field_name)
            if value is not None and not isinstance(value, Mapping):
                return errors.invalid_object(field_name)
        return None

    def _check_choices(
        self, schema: ResourceSchema, params: Mapping[str, Any]
    ) -> Violation | None:
        for field_name, allowed in schema.choices.items():
            value = params.get(field_name)
            if value is None:
                continue
            candidate = value
            if field_name in schema.case_insensitive_choices and isinstance(value, str):
                candidate = value.lower()
            if not isinstance(candidate, str) or candidate not in allowed:
                return errors.invalid_choice(field_name, value, allowed)
        return None

    def _check_unique(
        self,
        schema: ResourceSchema,
        params: Mapping[str, Any],
        store: RecordStorePort,
    ) -> Violation | None:
        resource_id = params.get("id")
        if is_blank_id(resource_id):
            return None
        if store.exists(schema.name, str(resource_id)):
            return errors.already_exists(schema.name)
        return None


__all__ = ["Validator", "as_integer", "is_blank_id"]
