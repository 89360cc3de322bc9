"""
Entity model consumed by the schema-evolution engine.

Entities are immutable pydantic models. They are produced by an external
spec loader (or ``load_entities`` for plain JSON files) and passed by value
into the differ, the SQL generator and the migration manager.

Example::

    from specgraph.entities import Entity

    user = Entity.model_validate(
        {
            "name": "User",
            "fields": [
                {"name": "id", "type": "uuid", "primary": True},
                {"name": "email", "type": "string", "unique": True},
            ],
        }
    )
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .exceptions import EntityLoadError
from .types import FieldType, RelationType


class Field(BaseModel):
    """
    A single typed field of an entity.

    Attributes:
        name: Field name in camelCase (e.g., ``userId``)
        type: Field type
        description: Human-readable description
        primary: Whether the field is the primary key
        unique: Whether values must be unique
        nullable: Whether NULL values are allowed (default: False)
        default: Default value; only meaningful when explicitly set
        values: Allowed values for ``enum`` fields
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    type: FieldType
    description: str | None = None
    primary: bool = False
    unique: bool = False
    nullable: bool = False
    default: Any = None
    values: tuple[str, ...] | None = None

    @property
    def has_default(self) -> bool:
        """True when a default was provided, including an explicit ``None``."""
        return "default" in self.model_fields_set


class Relation(BaseModel):
    """
    A relation from one entity to another.

    Attributes:
        name: Relation name used in code (e.g., ``posts``)
        entity: Target entity name
        type: Relation kind
        foreign_key: Foreign key column name, if declared
        through: Join table for ``many_to_many`` relations
        description: Human-readable description
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    entity: str
    type: RelationType
    foreign_key: str | None = None
    through: str | None = None
    description: str | None = None


class Entity(BaseModel):
    """
    An entity definition: a PascalCase name, ordered fields and relations.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: str | None = None
    fields: tuple[Field, ...] = ()
    relations: tuple[Relation, ...] = ()

    def get_field(self, name: str) -> Field | None:
        """Get a field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


_ENTITY_LIST = TypeAdapter(list[Entity])


def parse_entities(data: Iterable[Entity | Mapping[str, Any]]) -> list[Entity]:
    """
    Validate raw entity data into ``Entity`` models.

    Already-built ``Entity`` instances are passed through unchanged.

    Raises:
        pydantic.ValidationError: If any item is not a valid entity
    """
    return _ENTITY_LIST.validate_python(list(data))


def dump_entities(entities: Iterable[Entity]) -> list[dict[str, Any]]:
    """
    Serialise entities to JSON-compatible dicts.

    Unset attributes are omitted so that a field without a default stays
    distinguishable from a field whose default is ``null``.
    """
    return [entity.model_dump(mode="json", exclude_unset=True) for entity in entities]


def load_entities(path: Path | str) -> list[Entity]:
    """
    Load entities from a JSON file.

    The file holds either a list of entity objects or an object with an
    ``entities`` key.

    Args:
        path: Path to the JSON file

    Returns:
        List of validated entities

    Raises:
        EntityLoadError: If the file cannot be read, decoded or validated
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise EntityLoadError(f"Cannot read entity file {path}: {e}", path) from e
    except json.JSONDecodeError as e:
        raise EntityLoadError(f"Invalid JSON in {path}: {e}", path) from e

    if isinstance(raw, dict):
        raw = raw.get("entities", [])
    if not isinstance(raw, list):
        raise EntityLoadError(f"Expected a list of entities in {path}", path)

    try:
        return parse_entities(raw)
    except ValidationError as e:
        raise EntityLoadError(f"Invalid entity definition in {path}: {e}", path) from e


__all__ = ["Field", "Relation", "Entity", "parse_entities", "dump_entities", "load_entities"]
