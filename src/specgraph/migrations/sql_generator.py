"""
SQL generation from a diff result.

The generator turns each ``SpecChange`` into a migration ``Operation`` and
renders the operations for one dialect into up/down statement lists plus
user-facing warnings. It is pure: the same diff, entities and dialect always
produce the same output.

Relation changes produce no SQL: relations are resolved above the raw table
layer and foreign-key DDL is not generated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..entities import Entity, Field
from ..types import DEFAULT_DIALECT, ChangeType, SqlDialect
from .dialects import Dialect, get_dialect
from .differ import UNSET, DiffResult, SpecChange
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


@dataclass(frozen=True)
class MigrationOutput:
    """
    SQL rendered for a diff.

    Attributes:
        up: Statements applying the changes
        down: Statements reverting the changes (comments where irreversible)
        description: Summary of the diff, or "No changes"
        has_destructive_changes: Whether the diff contains breaking changes
        warnings: Messages for the user (data loss, unsupported alterations)
        reversible: False when an operation (dropped table or column) cannot be
            rolled back
    """

    up: tuple[str, ...] = field(default_factory=tuple)
    down: tuple[str, ...] = field(default_factory=tuple)
    description: str = "No changes"
    has_destructive_changes: bool = False
    warnings: tuple[str, ...] = field(default_factory=tuple)
    reversible: bool = True


class SQLGenerator:
    """
    Renders diff results as SQL for a single dialect.

    Example:
        generator = SQLGenerator("mysql")
        output = generator.generate(diff_entities(old, new), new)
        print("\\n".join(output.up))
    """

    def __init__(self, dialect: Dialect | SqlDialect | str = DEFAULT_DIALECT):
        self.dialect = get_dialect(dialect)

    def build_operations(self, diff: DiffResult, entities: Sequence[Entity]) -> list[Operation]:
        """
        Map the changes of ``diff`` to migration operations.

        Args:
            diff: Diff between the previous and current entity lists
            entities: Current entity list (source of full table definitions)

        Returns:
            Operations in change order
        """
        entity_map = {e.name: e for e in entities}
        created = {c.entity for c in diff.changes if c.type == ChangeType.ENTITY_ADDED}
        operations: list[Operation] = []

        for change in diff.changes:
            op = self._operation_for(change, entity_map, created)
            if op is not None:
                operations.append(op)

        return operations

    def generate(self, diff: DiffResult, entities: Sequence[Entity]) -> MigrationOutput:
        """
        Generate up/down SQL for a diff.

        Down statements are emitted in reverse order so that rolling back
        undoes the most recent change first.

        Args:
            diff: Diff between the previous and current entity lists
            entities: Current entity list

        Returns:
            MigrationOutput
        """
        operations = self.build_operations(diff, entities)

        up = [op.forwards(self.dialect) for op in operations]
        down = [op.backwards(self.dialect) for op in reversed(operations)]
        warnings: list[str] = []
        for op in operations:
            warnings.extend(op.warnings(self.dialect))

        return MigrationOutput(
            up=tuple(up),
            down=tuple(down),
            description=", ".join(diff.summary) or "No changes",
            has_destructive_changes=diff.has_breaking_changes,
            warnings=tuple(warnings),
            reversible=all(op.reversible for op in operations),
        )

    def _operation_for(
        self,
        change: SpecChange,
        entity_map: dict[str, Entity],
        created: set[str],
    ) -> Operation | None:
        match change.type:
            case ChangeType.ENTITY_ADDED:
                entity = entity_map.get(change.entity)
                if entity is None:
                    return None
                return CreateTable(entity=entity)

            case ChangeType.ENTITY_REMOVED:
                return DropTable(entity_name=change.entity)

            case ChangeType.FIELD_ADDED:
                # Columns of a new table are already part of CREATE TABLE
                if change.entity in created or not isinstance(change.new_value, Field):
                    return None
                return AddColumn(entity_name=change.entity, field=change.new_value, breaking=change.breaking)

            case ChangeType.FIELD_REMOVED:
                return DropColumn(entity_name=change.entity, field_name=change.field or "")

            case ChangeType.FIELD_TYPE_CHANGED:
                entity = entity_map.get(change.entity)
                return AlterColumnType(
                    entity_name=change.entity,
                    field_name=change.field or "",
                    field_type=change.new_value,
                    previous_type=change.old_value,
                    breaking=change.breaking,
                    field=entity.get_field(change.field or "") if entity is not None else None,
                )

            case ChangeType.FIELD_NULLABLE_CHANGED:
                return AlterColumnNullable(
                    entity_name=change.entity,
                    field_name=change.field or "",
                    nullable=bool(change.new_value),
                    previous_nullable=bool(change.old_value),
                    breaking=change.breaking,
                )

            case ChangeType.FIELD_DEFAULT_CHANGED:
                entity = entity_map.get(change.entity)
                current = entity.get_field(change.field or "") if entity is not None else None
                if current is None:
                    return None
                return AlterColumnDefault(
                    entity_name=change.entity,
                    field_name=current.name,
                    default=None if change.new_value is UNSET else change.new_value,
                    previous_default=None if change.old_value is UNSET else change.old_value,
                    has_default=change.new_value is not UNSET,
                    had_default=change.old_value is not UNSET,
                )

            case ChangeType.RELATION_ADDED | ChangeType.RELATION_REMOVED:
                return None

        return None


def generate_migration_sql(
    diff: DiffResult,
    entities: Sequence[Entity],
    dialect: Dialect | SqlDialect | str = DEFAULT_DIALECT,
) -> MigrationOutput:
    """
    Generate migration SQL from a diff result.

    Args:
        diff: Diff between the previous and current entity lists
        entities: Current entity list
        dialect: Target dialect name or ``Dialect`` (default: postgresql)

    Returns:
        MigrationOutput
    """
    return SQLGenerator(dialect).generate(diff, entities)


__all__ = ["MigrationOutput", "SQLGenerator", "generate_migration_sql"]
