"""
Type definitions for specgraph.

This module contains the enums used throughout the engine for field types,
relation kinds, change classification, SQL dialects and migration direction.
"""

from enum import StrEnum


class FieldType(StrEnum):
    """
    Field types supported in an entity specification.

    Each type maps to a concrete column type per SQL dialect
    (see ``specgraph.migrations.dialects``).

    Identifier Types:
        - UUID: Universally unique identifier

    Text Types:
        - STRING: Bounded-length text
        - TEXT: Unbounded text
        - ENUM: One of a fixed set of string values (stored as bounded text)

    Numeric Types:
        - INTEGER: Whole number
        - DECIMAL: Fixed-precision number

    Other Types:
        - BOOLEAN: True/false flag
        - TIMESTAMP: Date and time with zone
        - DATE: Calendar date
        - JSON: Structured document
    """

    UUID = "uuid"
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    DATE = "date"
    JSON = "json"
    ENUM = "enum"


class RelationType(StrEnum):
    """Kinds of relation an entity can declare to another entity."""

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    MANY_TO_MANY = "many_to_many"


class ChangeType(StrEnum):
    """
    Classification of a single difference between two entity specs.

    The value names are used verbatim in summaries: any value containing
    ``added`` counts as an addition, ``removed`` as a removal and
    ``changed`` as a modification.
    """

    ENTITY_ADDED = "entity_added"
    ENTITY_REMOVED = "entity_removed"
    FIELD_ADDED = "field_added"
    FIELD_REMOVED = "field_removed"
    FIELD_TYPE_CHANGED = "field_type_changed"
    FIELD_NULLABLE_CHANGED = "field_nullable_changed"
    FIELD_DEFAULT_CHANGED = "field_default_changed"
    RELATION_ADDED = "relation_added"
    RELATION_REMOVED = "relation_removed"


class SqlDialect(StrEnum):
    """
    Target SQL dialects.

    - POSTGRESQL: Full in-place column alteration support
    - MYSQL: Type alteration through MODIFY COLUMN, no standalone nullability toggle
    - SQLITE: File-based, no in-place column alteration
    """

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class MigrationDirection(StrEnum):
    """Direction in which a migration was applied."""

    UP = "up"
    DOWN = "down"


class CorruptStatePolicy(StrEnum):
    """
    What the migration manager does with a state file it cannot read.

    - RESET: Log a warning and continue from an empty state
    - RAISE: Raise ``StateCorruptError`` and let the caller decide
    """

    RESET = "reset"
    RAISE = "raise"


DEFAULT_DIALECT = SqlDialect.POSTGRESQL
