"""
Relationship schema and table map.

Both are built once at startup and shared read-only by every request.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .exceptions import SchemaError, UnknownRelationship

BELONGS_TO = "belongsTo"
HAS_MANY = "hasMany"

# camelCase keys accepted in schema files, mapped to descriptor fields
KEY_ALIASES = {
    "targetType": "target_type",
    "foreignKey": "foreign_key",
    "idKey": "id_key",
}


@dataclass(frozen=True)
class RelationshipDescriptor:
    """Shape of one relationship of a resource type."""

    name: str
    target_type: str
    kind: str
    foreign_key: str | None = None
    id_key: str | None = None

    @classmethod
    def from_dict(cls, name: str, raw: Mapping[str, Any]) -> "RelationshipDescriptor":
        values = {KEY_ALIASES.get(key, key): value for key, value in raw.items()}
        missing = [key for key in ("target_type", "kind") if not values.get(key)]
        if missing:
            raise SchemaError(f"relationship '{name}' is missing {', '.join(missing)}")
        unknown = set(values) - {"target_type", "kind", "foreign_key", "id_key"}
        if unknown:
            raise SchemaError(f"relationship '{name}' has unknown keys: {', '.join(sorted(unknown))}")
        return cls(name=name, **values)


@dataclass(frozen=True)
class Schema:
    relationships: Mapping[str, Mapping[str, RelationshipDescriptor]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    tables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Schema":
        """
        Build a schema from its parsed form.

        Args:
            raw: mapping with an optional "tables" section (type -> table name)
                and an optional "relationships" section
                (type -> relationship name -> descriptor fields)

        Returns:
            An immutable Schema
        """
        relationships = {}
        for resource_type, rels in raw.get("relationships", {}).items():
            relationships[resource_type] = MappingProxyType(
                {name: RelationshipDescriptor.from_dict(name, desc) for name, desc in rels.items()}
            )
        tables = {str(k): str(v) for k, v in raw.get("tables", {}).items()}
        return cls(relationships=MappingProxyType(relationships), tables=MappingProxyType(tables))

    def table_for(self, resource_type: str) -> str:
        return self.tables.get(resource_type, resource_type)

    def relationship(self, resource_type: str, name: str) -> RelationshipDescriptor:
        try:
            return self.relationships[resource_type][name]
        except KeyError:
            raise UnknownRelationship(resource_type, name) from None


def load_schema(path: str | Path) -> Schema:
    with open(path, "rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise SchemaError(f"invalid schema file {path}: {e}")
    return Schema.from_dict(raw)
