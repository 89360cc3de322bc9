"""
Migration operations for relational schema changes.

Each operation represents a single schema modification that can be
rendered forwards (apply) or backwards (revert) for a given SQL dialect.
Operations that cannot be reverted render a SQL comment as their backwards
statement, and capability gaps in a dialect are rendered as comments plus
a warning rather than raised.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..entities import Entity, Field
from ..types import FieldType
from ..utils import entity_to_table_name, field_to_column_name
from .dialects import Dialect


def column_definition(f: Field, dialect: Dialect) -> str:
    """
    Render the column clause for a field (without leading indentation).

    Example:
        column_definition(Field(name="email", type="string", unique=True), POSTGRESQL)
        # "email VARCHAR(255) NOT NULL UNIQUE"
    """
    parts = [field_to_column_name(f.name), dialect.sql_type(f.type)]

    if f.primary:
        parts.append("PRIMARY KEY")
    if not f.nullable and not f.primary:
        parts.append("NOT NULL")
    if f.unique and not f.primary:
        parts.append("UNIQUE")
    if f.has_default:
        parts.append(f"DEFAULT {dialect.format_literal(f.default)}")

    return " ".join(parts)


@dataclass
class Operation(ABC):
    """
    Base class for all migration operations.

    Operations must implement forwards() and backwards() methods
    that return a SQL statement (or a SQL comment when the dialect
    cannot express the change).
    """

    reversible: bool = field(default=True, init=False)

    @abstractmethod
    def forwards(self, dialect: Dialect) -> str:
        """Generate forward SQL statement."""
        ...

    @abstractmethod
    def backwards(self, dialect: Dialect) -> str:
        """Generate rollback SQL statement."""
        ...

    def warnings(self, dialect: Dialect) -> list[str]:
        """Warnings to surface to the user when applying this operation."""
        return []


@dataclass
class CreateTable(Operation):
    """
    Create a table for an entity, including the audit timestamp columns.

    Example:
        CreateTable(entity=Entity(name="User", fields=[...]))

    Generates:
        CREATE TABLE users (
          id UUID PRIMARY KEY,
          ...
          created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
          updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        );
    """

    entity: Entity

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity.name)

    def forwards(self, dialect: Dialect) -> str:
        columns = [column_definition(f, dialect) for f in self.entity.fields]
        columns.append(dialect.created_at_column)
        columns.append(dialect.updated_at_column)
        body = ",\n".join(f"  {column}" for column in columns)
        return f"CREATE TABLE {self.table} (\n{body}\n);"

    def backwards(self, dialect: Dialect) -> str:
        return f"DROP TABLE IF EXISTS {self.table};"


@dataclass
class DropTable(Operation):
    """
    Drop the table of a removed entity.

    Example:
        DropTable(entity_name="User")

    Generates:
        DROP TABLE IF EXISTS users;
    """

    entity_name: str

    def __post_init__(self) -> None:
        self.reversible = False

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity_name)

    def forwards(self, dialect: Dialect) -> str:
        return f"DROP TABLE IF EXISTS {self.table};"

    def backwards(self, dialect: Dialect) -> str:
        # Cannot reverse without knowing the original schema
        return f"-- Cannot recreate dropped table {self.table}"

    def warnings(self, dialect: Dialect) -> list[str]:
        return [f"Dropping table {self.table} - this will DELETE ALL DATA!"]


@dataclass
class AddColumn(Operation):
    """
    Add a column to an existing table.

    Example:
        AddColumn(entity_name="User", field=Field(name="role", type="string", default="user"))

    Generates:
        ALTER TABLE users ADD COLUMN role VARCHAR(255) NOT NULL DEFAULT 'user';
    """

    entity_name: str
    field: Field
    breaking: bool = False

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity_name)

    @property
    def column(self) -> str:
        return field_to_column_name(self.field.name)

    def forwards(self, dialect: Dialect) -> str:
        return f"ALTER TABLE {self.table} ADD COLUMN {column_definition(self.field, dialect)};"

    def backwards(self, dialect: Dialect) -> str:
        return f"ALTER TABLE {self.table} DROP COLUMN {self.column};"

    def warnings(self, dialect: Dialect) -> list[str]:
        if not self.breaking:
            return []
        return [
            f"Adding non-nullable column {self.entity_name}.{self.field.name} without default "
            "may fail if table has data"
        ]


@dataclass
class DropColumn(Operation):
    """
    Remove a column from a table.

    Example:
        DropColumn(entity_name="User", field_name="legacyId")

    Generates:
        ALTER TABLE users DROP COLUMN legacy_id;
    """

    entity_name: str
    field_name: str

    def __post_init__(self) -> None:
        self.reversible = False

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity_name)

    @property
    def column(self) -> str:
        return field_to_column_name(self.field_name)

    def forwards(self, dialect: Dialect) -> str:
        return f"ALTER TABLE {self.table} DROP COLUMN {self.column};"

    def backwards(self, dialect: Dialect) -> str:
        # Cannot reverse without knowing the original field definition
        return f"-- Cannot recreate dropped column {self.entity_name}.{self.field_name}"

    def warnings(self, dialect: Dialect) -> list[str]:
        return [f"Dropping column {self.entity_name}.{self.field_name} - this will DELETE COLUMN DATA!"]


@dataclass
class AlterColumnType(Operation):
    """
    Change the type of a column.

    ``field`` is the current definition of the column. Dialects whose type
    change restates the whole column (MySQL ``MODIFY COLUMN``) use it to keep
    ``NOT NULL`` and ``DEFAULT`` in both directions.

    Example:
        AlterColumnType(entity_name="User", field_name="bio", field_type="text", previous_type="string")

    Generates (PostgreSQL):
        ALTER TABLE users ALTER COLUMN bio TYPE TEXT;

    Generates (MySQL, with a non-nullable field):
        ALTER TABLE users MODIFY COLUMN bio TEXT NOT NULL;
    """

    entity_name: str
    field_name: str
    field_type: FieldType
    previous_type: FieldType
    breaking: bool = False
    field: Field | None = None

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity_name)

    @property
    def column(self) -> str:
        return field_to_column_name(self.field_name)

    def _render(self, field_type: FieldType, dialect: Dialect) -> str:
        sql_type = dialect.sql_type(field_type)
        if dialect.alter_type_template is None:
            return (
                f"-- {dialect.name} cannot change column type in place: "
                f"recreate table {self.table} to set {self.column} to {sql_type}"
            )
        return dialect.alter_type_template.format(
            table=self.table,
            column=self.column,
            sql_type=sql_type,
            constraints=self._constraints(dialect),
        )

    def _constraints(self, dialect: Dialect) -> str:
        if self.field is None:
            return ""
        parts = []
        if not self.field.nullable and not self.field.primary:
            parts.append(" NOT NULL")
        if self.field.has_default:
            parts.append(f" DEFAULT {dialect.format_literal(self.field.default)}")
        return "".join(parts)

    def forwards(self, dialect: Dialect) -> str:
        return self._render(self.field_type, dialect)

    def backwards(self, dialect: Dialect) -> str:
        return self._render(self.previous_type, dialect)

    def warnings(self, dialect: Dialect) -> list[str]:
        messages = []
        if self.breaking:
            messages.append(
                f"Type change {self.entity_name}.{self.field_name}: "
                f"{self.previous_type} -> {self.field_type} may cause data loss"
            )
        if not dialect.supports_alter_type:
            messages.append(
                f"{dialect.name} cannot alter column {self.table}.{self.column} in place; "
                "the type change must be applied by recreating the table"
            )
        return messages


@dataclass
class AlterColumnNullable(Operation):
    """
    Toggle the NOT NULL constraint of a column.

    Example:
        AlterColumnNullable(entity_name="User", field_name="email", nullable=False, previous_nullable=True)

    Generates (PostgreSQL):
        ALTER TABLE users ALTER COLUMN email SET NOT NULL;
    """

    entity_name: str
    field_name: str
    nullable: bool
    previous_nullable: bool
    breaking: bool = False

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity_name)

    @property
    def column(self) -> str:
        return field_to_column_name(self.field_name)

    def _render(self, nullable: bool, dialect: Dialect) -> str:
        if not dialect.supports_alter_nullable:
            return (
                f"-- {dialect.name} cannot toggle NOT NULL in place: "
                f"set {self.table}.{self.column} nullable={str(nullable).lower()} manually"
            )
        action = "DROP NOT NULL" if nullable else "SET NOT NULL"
        return f"ALTER TABLE {self.table} ALTER COLUMN {self.column} {action};"

    def forwards(self, dialect: Dialect) -> str:
        return self._render(self.nullable, dialect)

    def backwards(self, dialect: Dialect) -> str:
        return self._render(self.previous_nullable, dialect)

    def warnings(self, dialect: Dialect) -> list[str]:
        messages = []
        if self.breaking:
            messages.append(
                f"Making {self.entity_name}.{self.field_name} non-nullable may fail if NULL values exist"
            )
        if not dialect.supports_alter_nullable:
            messages.append(
                f"{dialect.name} cannot change nullability of {self.table}.{self.column} in place; "
                "apply the change manually"
            )
        return messages


@dataclass
class AlterColumnDefault(Operation):
    """
    Set or drop the default value of a column.

    ``has_default=False`` (or ``had_default=False`` for the rollback side)
    renders as ``DROP DEFAULT``.

    Example:
        AlterColumnDefault(entity_name="User", field_name="role", default="member", previous_default="user")

    Generates (PostgreSQL):
        ALTER TABLE users ALTER COLUMN role SET DEFAULT 'member';
    """

    entity_name: str
    field_name: str
    default: Any
    previous_default: Any
    has_default: bool = True
    had_default: bool = True

    @property
    def table(self) -> str:
        return entity_to_table_name(self.entity_name)

    @property
    def column(self) -> str:
        return field_to_column_name(self.field_name)

    def _render(self, value: Any, present: bool, dialect: Dialect) -> str:
        if not present:
            if dialect.supports_drop_default:
                return f"ALTER TABLE {self.table} ALTER COLUMN {self.column} DROP DEFAULT;"
            return f"-- {dialect.name} cannot drop the default of {self.table}.{self.column} in place"

        literal = dialect.format_literal(value)
        if dialect.supports_set_default:
            return f"ALTER TABLE {self.table} ALTER COLUMN {self.column} SET DEFAULT {literal};"
        return f"-- {dialect.name} cannot set the default of {self.table}.{self.column} to {literal} in place"

    def forwards(self, dialect: Dialect) -> str:
        return self._render(self.default, self.has_default, dialect)

    def backwards(self, dialect: Dialect) -> str:
        return self._render(self.previous_default, self.had_default, dialect)

    def warnings(self, dialect: Dialect) -> list[str]:
        supported = dialect.supports_set_default if self.has_default else dialect.supports_drop_default
        if supported:
            return []
        return [
            f"{dialect.name} cannot change the default of {self.table}.{self.column} in place; "
            "apply the change manually"
        ]


__all__ = [
    "column_definition",
    "Operation",
    "CreateTable",
    "DropTable",
    "AddColumn",
    "DropColumn",
    "AlterColumnType",
    "AlterColumnNullable",
    "AlterColumnDefault",
]
