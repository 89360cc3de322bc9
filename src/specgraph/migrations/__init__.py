"""
specgraph migration engine.

This module turns changes in an entity specification into SQL migrations:
- Structural diff with breaking-change classification
- Dialect-specific up/down SQL for PostgreSQL, MySQL and SQLite
- Durable snapshot and history state with migration file lifecycle

Usage:
    # Compare two entity lists
    result = diff_entities(old_entities, new_entities)

    # Render SQL for a dialect
    output = generate_migration_sql(result, new_entities, "mysql")

    # Manage migrations in a graph directory
    manager = MigrationManager(".graph")
    migration = manager.generate_migration(new_entities, name="add_email")
"""

from .dialects import DIALECTS, MYSQL, POSTGRESQL, SQLITE, Dialect, get_dialect
from .differ import (
    DEFAULT_COMPATIBLE_TYPE_CHANGES,
    UNSET,
    DiffResult,
    EntityDiffer,
    SpecChange,
    diff_entities,
)
from .generator import MigrationGenerator
from .manager import MigrationManager, MigrationStatus
from .migration import GeneratedMigration, format_migration_file, parse_migration_name
from .operations import (
    AddColumn,
    AlterColumnDefault,
    AlterColumnNullable,
    AlterColumnType,
    CreateTable,
    DropColumn,
    DropTable,
    Operation,
)
from .sql_generator import MigrationOutput, SQLGenerator, generate_migration_sql
from .state import MigrationRecord, MigrationState, StateLoadResult, StateLoadStatus, StateStore

__all__ = [
    # Diff
    "DEFAULT_COMPATIBLE_TYPE_CHANGES",
    "UNSET",
    "SpecChange",
    "DiffResult",
    "EntityDiffer",
    "diff_entities",
    # SQL
    "Dialect",
    "DIALECTS",
    "POSTGRESQL",
    "MYSQL",
    "SQLITE",
    "get_dialect",
    "MigrationOutput",
    "SQLGenerator",
    "generate_migration_sql",
    "Operation",
    "CreateTable",
    "DropTable",
    "AddColumn",
    "DropColumn",
    "AlterColumnType",
    "AlterColumnNullable",
    "AlterColumnDefault",
    # Lifecycle
    "GeneratedMigration",
    "format_migration_file",
    "parse_migration_name",
    "MigrationGenerator",
    "MigrationManager",
    "MigrationStatus",
    "MigrationRecord",
    "MigrationState",
    "StateLoadResult",
    "StateLoadStatus",
    "StateStore",
]
