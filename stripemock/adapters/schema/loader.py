"""Load resource schemas from a JSON file.

The file holds a list of resources, each shaped like ResourceSchema:

    {
      "resources": [
        {
          "name": "coupon",
          "plural": "coupons",
          "required": ["duration"],
          "integer_fields": ["percent_off"],
          "choices": {"duration": ["once", "repeating", "forever"]}
        }
      ]
    }

Entries are validated with pydantic and registered over the built-in
plan and product schemas, so a file may also replace those.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stripemock.core.models import ResourceSchema
from stripemock.core.schema import SchemaRegistry, default_registry

logger = logging.getLogger(__name__)


class SchemaEntry(BaseModel):
    """One resource type's rules as written in a schema file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    plural: str = Field(min_length=1)
    required: list[str] = Field(default_factory=list)
    foreign_keys: dict[str, str] = Field(default_factory=dict)
    integer_fields: list[str] = Field(default_factory=list)
    non_negative_fields: list[str] = Field(default_factory=list)
    mapping_fields: list[str] = Field(default_factory=list)
    choices: dict[str, list[str]] = Field(default_factory=dict)
    case_insensitive_choices: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_case_insensitive_fields(self) -> "SchemaEntry":
        """Case-insensitive fields must also declare choices."""
        unknown = set(self.case_insensitive_choices) - set(self.choices)
        if unknown:
            raise ValueError(
                f"case_insensitive_choices names fields without choices: {sorted(unknown)}"
            )
        return self

    def to_schema(self) -> ResourceSchema:
        return ResourceSchema(
            name=self.name,
            plural=self.plural,
            required=tuple(self.required),
            foreign_keys=dict(self.foreign_keys),
            integer_fields=tuple(self.integer_fields),
            non_negative_fields=tuple(self.non_negative_fields),
            mapping_fields=tuple(self.mapping_fields),
            choices={k: tuple(v) for k, v in self.choices.items()},
            case_insensitive_choices=frozenset(self.case_insensitive_choices),
        )


class SchemaFile(BaseModel):
    """Top-level document of a schema file."""

    model_config = ConfigDict(extra="forbid")

    resources: list[SchemaEntry]


def load_schema_file(path: str | Path) -> list[ResourceSchema]:
    """Parse and validate a schema file.

    Args:
        path: Path to the JSON file.

    Returns:
        The ResourceSchema entries, in file order.

    Raises:
        OSError: If the file cannot be read.
        pydantic.ValidationError: If the document is malformed.
    """
    raw = Path(path).read_text(encoding="utf-8")
    document = SchemaFile.model_validate_json(raw)
    return [entry.to_schema() for entry in document.resources]


def load_registry(path: str | Path | None = None) -> SchemaRegistry:
    """Build the schema registry, optionally merging a schema file.

    Args:
        path: Optional schema file. Empty or None means built-ins only.

    Returns:
        Registry with the built-in schemas plus those in the file.

    Raises:
        ValueError: If a foreign key references an unregistered type.
    """
    registry = default_registry()
    if not path:
        return registry

    schemas = load_schema_file(path)
    for schema in schemas:
        registry.register(schema)
    registry.validate_references()

    logger.info(
        f"Loaded {len(schemas)} resource schemas from {path}",
        extra={"schema_path": str(path), "resource_types": [s.name for s in schemas]},
    )
    return registry


__all__ = ["SchemaEntry", "SchemaFile", "load_registry", "load_schema_file"]
