"""Schema registry: resource type -> validation rules.

The registry is plain data consumed by the Validator and the handlers.
Adding a resource type means registering a ResourceSchema, not writing
a new validator.
"""

from collections.abc import Iterable, Iterator

from .errors import UnknownResourceTypeError
from .models import INTERVALS, SUPPORTED_CURRENCIES, ResourceSchema

PRODUCT_SCHEMA = ResourceSchema(
    name="product",
    plural="products",
    required=("name",),
    mapping_fields=("metadata",),
)

PLAN_SCHEMA = ResourceSchema(
    name="plan",
    plural="plans",
    required=("amount", "currency", "interval", "product"),
    foreign_keys={"product": "product"},
    integer_fields=("amount", "trial_period_days"),
    non_negative_fields=("amount", "trial_period_days"),
    mapping_fields=("metadata",),
    choices={"interval": INTERVALS, "currency": SUPPORTED_CURRENCIES},
    case_insensitive_choices=frozenset({"currency"}),
)


class SchemaRegistry:
    """Lookup table of ResourceSchema by resource type and by plural name."""

    def __init__(self, schemas: Iterable[ResourceSchema] = ()):
        self._by_name: dict[str, ResourceSchema] = {}
        self._by_plural: dict[str, ResourceSchema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: ResourceSchema) -> None:
        """Add or replace the schema for a resource type."""
        previous = self._by_name.get(schema.name)
        if previous is not None:
            self._by_plural.pop(previous.plural, None)
        self._by_name[schema.name] = schema
        self._by_plural[schema.plural] = schema

    def get(self, resource_type: str) -> ResourceSchema:
        """Return the schema for a resource type.

        Raises:
            UnknownResourceTypeError: If nothing is registered under that name.
        """
        try:
            return self._by_name[resource_type]
        except KeyError:
            raise UnknownResourceTypeError(resource_type) from None

    def by_plural(self, plural: str) -> ResourceSchema | None:
        return self._by_plural.get(plural)

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._by_name

    def __iter__(self) -> Iterator[ResourceSchema]:
        return iter(self._by_name.values())

    def names(self) -> list[str]:
        return list(self._by_name)

    def validate_references(self) -> None:
        """Check every foreign key points at a registered type.

        Raises:
            ValueError: On a dangling reference.
        """
        for schema in self:
            for field_name, target in schema.foreign_keys.items():
                if target not in self._by_name:
                    raise ValueError(
                        f"{schema.name}.{field_name} references unknown resource type {target!r}"
                    )


def default_registry() -> SchemaRegistry:
    """Registry with the built-in plan and product schemas."""
    return SchemaRegistry([PRODUCT_SCHEMA, PLAN_SCHEMA])


__all__ = [
    "PLAN_SCHEMA",
    "PRODUCT_SCHEMA",
    "SchemaRegistry",
    "default_registry",
]
