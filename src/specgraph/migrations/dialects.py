"""
SQL dialect configuration.

A ``Dialect`` bundles everything that varies between target databases:
the column type for each field type, boolean literals, audit column
definitions and which in-place column alterations are supported. Dialects
are immutable; a custom one can be built and handed to ``SQLGenerator``
without touching the generator itself.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..exceptions import UnknownDialectError
from ..types import FieldType, SqlDialect
from ..utils import escape_single_quotes


@dataclass(frozen=True)
class Dialect:
    """
    Immutable description of a SQL dialect.

    Attributes:
        name: Dialect identifier
        type_map: Column type for every ``FieldType``
        true_literal: Literal used for boolean true
        false_literal: Literal used for boolean false
        created_at_column: Column clause for the implicit ``created_at`` column
        updated_at_column: Column clause for the implicit ``updated_at`` column
        alter_type_template: Template for an in-place type change, or None
            when the dialect cannot change a column type in place.
            Placeholders: ``{table}``, ``{column}``, ``{sql_type}`` and
            ``{constraints}`` (the column's NOT NULL and DEFAULT clauses, for
            dialects that restate the whole column).
        supports_alter_nullable: Whether ``SET/DROP NOT NULL`` is available
        supports_set_default: Whether ``ALTER COLUMN ... SET DEFAULT`` is available
        supports_drop_default: Whether ``ALTER COLUMN ... DROP DEFAULT`` is available
    """

    name: str
    type_map: Mapping[FieldType, str]
    true_literal: str = "TRUE"
    false_literal: str = "FALSE"
    created_at_column: str = "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"
    updated_at_column: str = "updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"
    alter_type_template: str | None = None
    supports_alter_nullable: bool = False
    supports_set_default: bool = False
    supports_drop_default: bool = False

    def __post_init__(self) -> None:
        missing = [t.value for t in FieldType if t not in self.type_map]
        if missing:
            raise ValueError(f"Dialect {self.name!r} has no SQL type for: {', '.join(missing)}")
        object.__setattr__(self, "type_map", MappingProxyType(dict(self.type_map)))

    @property
    def supports_alter_type(self) -> bool:
        return self.alter_type_template is not None

    def sql_type(self, field_type: FieldType | str) -> str:
        """Resolve the column type for a field type."""
        return self.type_map[FieldType(field_type)]

    def format_literal(self, value: Any) -> str:
        """
        Format a Python value as a SQL literal for this dialect.

        - ``None`` → ``NULL``
        - ``bool`` → the dialect's true/false literal
        - ``int``/``float`` → decimal literal
        - ``str`` → single-quoted, internal quotes doubled
        - anything else (JSON objects, arrays) → compact JSON, quoted as a string
        """
        if value is None:
            return "NULL"
        # bool is a subclass of int, test it first
        if isinstance(value, bool):
            return self.true_literal if value else self.false_literal
        if isinstance(value, (int, float)):
            return repr(value)
        if isinstance(value, str):
            return f"'{escape_single_quotes(value)}'"
        encoded = json.dumps(value, separators=(",", ":"), default=str)
        return f"'{escape_single_quotes(encoded)}'"


POSTGRESQL = Dialect(
    name=SqlDialect.POSTGRESQL.value,
    type_map={
        FieldType.UUID: "UUID",
        FieldType.STRING: "VARCHAR(255)",
        FieldType.TEXT: "TEXT",
        FieldType.INTEGER: "INTEGER",
        FieldType.DECIMAL: "DECIMAL(10,2)",
        FieldType.BOOLEAN: "BOOLEAN",
        FieldType.TIMESTAMP: "TIMESTAMP WITH TIME ZONE",
        FieldType.DATE: "DATE",
        FieldType.JSON: "JSONB",
        FieldType.ENUM: "VARCHAR(50)",
    },
    true_literal="TRUE",
    false_literal="FALSE",
    created_at_column="created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP",
    updated_at_column="updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP",
    alter_type_template="ALTER TABLE {table} ALTER COLUMN {column} TYPE {sql_type};",
    supports_alter_nullable=True,
    supports_set_default=True,
    supports_drop_default=True,
)

MYSQL = Dialect(
    name=SqlDialect.MYSQL.value,
    type_map={
        FieldType.UUID: "CHAR(36)",
        FieldType.STRING: "VARCHAR(255)",
        FieldType.TEXT: "TEXT",
        FieldType.INTEGER: "INT",
        FieldType.DECIMAL: "DECIMAL(10,2)",
        FieldType.BOOLEAN: "TINYINT(1)",
        FieldType.TIMESTAMP: "DATETIME",
        FieldType.DATE: "DATE",
        FieldType.JSON: "JSON",
        FieldType.ENUM: "VARCHAR(50)",
    },
    true_literal="1",
    false_literal="0",
    created_at_column="created_at DATETIME DEFAULT CURRENT_TIMESTAMP",
    updated_at_column="updated_at DATETIME DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
    # MODIFY COLUMN replaces the whole definition, so constraints are restated
    alter_type_template="ALTER TABLE {table} MODIFY COLUMN {column} {sql_type}{constraints};",
    # Toggling NULL requires restating the full column definition
    supports_alter_nullable=False,
    supports_set_default=True,
    supports_drop_default=True,
)

SQLITE = Dialect(
    name=SqlDialect.SQLITE.value,
    type_map={
        FieldType.UUID: "TEXT",
        FieldType.STRING: "TEXT",
        FieldType.TEXT: "TEXT",
        FieldType.INTEGER: "INTEGER",
        FieldType.DECIMAL: "REAL",
        FieldType.BOOLEAN: "INTEGER",
        FieldType.TIMESTAMP: "TEXT",
        FieldType.DATE: "TEXT",
        FieldType.JSON: "TEXT",
        FieldType.ENUM: "TEXT",
    },
    true_literal="1",
    false_literal="0",
    created_at_column="created_at TEXT DEFAULT CURRENT_TIMESTAMP",
    updated_at_column="updated_at TEXT DEFAULT CURRENT_TIMESTAMP",
    alter_type_template=None,
    supports_alter_nullable=False,
    supports_set_default=False,
    supports_drop_default=False,
)

DIALECTS: Mapping[str, Dialect] = MappingProxyType(
    {
        SqlDialect.POSTGRESQL.value: POSTGRESQL,
        SqlDialect.MYSQL.value: MYSQL,
        SqlDialect.SQLITE.value: SQLITE,
    }
)


def get_dialect(dialect: Dialect | SqlDialect | str) -> Dialect:
    """
    Resolve a dialect name (or pass through a ``Dialect``).

    Raises:
        UnknownDialectError: If the name is not registered
    """
    if isinstance(dialect, Dialect):
        return dialect
    try:
        return DIALECTS[str(dialect)]
    except KeyError:
        raise UnknownDialectError(str(dialect), list(DIALECTS)) from None


__all__ = ["Dialect", "POSTGRESQL", "MYSQL", "SQLITE", "DIALECTS", "get_dialect"]
