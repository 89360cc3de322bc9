from .config import MigrationConfig
from .entities import Entity, Field, Relation, load_entities
from .exceptions import MigrationError, SpecGraphError, StateCorruptError, UnknownDialectError
from .migrations import (
    DiffResult,
    GeneratedMigration,
    MigrationManager,
    MigrationOutput,
    SpecChange,
    diff_entities,
    generate_migration_sql,
)
from .types import ChangeType, FieldType, RelationType, SqlDialect

__all__ = [
    "Entity",
    "Field",
    "Relation",
    "load_entities",
    "FieldType",
    "RelationType",
    "ChangeType",
    "SqlDialect",
    "MigrationConfig",
    "diff_entities",
    "generate_migration_sql",
    "DiffResult",
    "SpecChange",
    "MigrationOutput",
    "GeneratedMigration",
    "MigrationManager",
    "SpecGraphError",
    "MigrationError",
    "StateCorruptError",
    "UnknownDialectError",
]
