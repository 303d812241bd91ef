"""Schema table loading.

- JSON files validated with pydantic, merged over the built-in registry
"""

from .loader import SchemaFile, load_registry, load_schema_file

__all__ = ["SchemaFile", "load_registry", "load_schema_file"]
