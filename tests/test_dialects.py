"""
Unit tests for SQL dialect configuration.
"""

import dataclasses

import pytest

from src.specgraph.exceptions import UnknownDialectError
from src.specgraph.migrations.dialects import DIALECTS, MYSQL, POSTGRESQL, SQLITE, Dialect, get_dialect
from src.specgraph.types import FieldType, SqlDialect


class TestTypeMaps:
    """Tests for the per-dialect column types."""

    @pytest.mark.parametrize(
        "field_type,postgresql,mysql,sqlite",
        [
            ("uuid", "UUID", "CHAR(36)", "TEXT"),
            ("string", "VARCHAR(255)", "VARCHAR(255)", "TEXT"),
            ("text", "TEXT", "TEXT", "TEXT"),
            ("integer", "INTEGER", "INT", "INTEGER"),
            ("decimal", "DECIMAL(10,2)", "DECIMAL(10,2)", "REAL"),
            ("boolean", "BOOLEAN", "TINYINT(1)", "INTEGER"),
            ("timestamp", "TIMESTAMP WITH TIME ZONE", "DATETIME", "TEXT"),
            ("date", "DATE", "DATE", "TEXT"),
            ("json", "JSONB", "JSON", "TEXT"),
            ("enum", "VARCHAR(50)", "VARCHAR(50)", "TEXT"),
        ],
    )
    def test_sql_type(self, field_type: str, postgresql: str, mysql: str, sqlite: str) -> None:
        """Test the column type of every field type."""
        assert POSTGRESQL.sql_type(field_type) == postgresql
        assert MYSQL.sql_type(field_type) == mysql
        assert SQLITE.sql_type(field_type) == sqlite

    def test_type_map_is_read_only(self) -> None:
        """Test that a dialect's type map cannot be mutated."""
        with pytest.raises(TypeError):
            POSTGRESQL.type_map[FieldType.UUID] = "TEXT"  # type: ignore[index]

    def test_incomplete_type_map_rejected(self) -> None:
        """Test that a dialect must map every field type."""
        with pytest.raises(ValueError, match="has no SQL type"):
            Dialect(name="partial", type_map={FieldType.UUID: "UUID"})


class TestFormatLiteral:
    """Tests for Dialect.format_literal()."""

    def test_none(self) -> None:
        assert POSTGRESQL.format_literal(None) == "NULL"

    def test_booleans(self) -> None:
        """Test dialect-specific boolean literals."""
        assert POSTGRESQL.format_literal(True) == "TRUE"
        assert POSTGRESQL.format_literal(False) == "FALSE"
        assert MYSQL.format_literal(True) == "1"
        assert SQLITE.format_literal(False) == "0"

    def test_numbers(self) -> None:
        assert POSTGRESQL.format_literal(42) == "42"
        assert POSTGRESQL.format_literal(1.5) == "1.5"

    def test_strings(self) -> None:
        """Test quoting and escaping."""
        assert POSTGRESQL.format_literal("hello") == "'hello'"
        assert POSTGRESQL.format_literal("it's") == "'it''s'"

    def test_json(self) -> None:
        """Test that objects and arrays are stored as compact JSON strings."""
        assert POSTGRESQL.format_literal({"a": [1, 2]}) == "'{\"a\":[1,2]}'"
        assert POSTGRESQL.format_literal([]) == "'[]'"


class TestCapabilities:
    """Tests for in-place alteration support."""

    def test_postgresql(self) -> None:
        assert POSTGRESQL.supports_alter_type is True
        assert POSTGRESQL.supports_alter_nullable is True

    def test_mysql(self) -> None:
        assert MYSQL.supports_alter_type is True
        assert MYSQL.supports_alter_nullable is False

    def test_sqlite(self) -> None:
        assert SQLITE.supports_alter_type is False
        assert SQLITE.supports_set_default is False


class TestRegistry:
    """Tests for dialect lookup."""

    def test_registered_dialects(self) -> None:
        """Test that every SqlDialect has a registered dialect."""
        assert set(DIALECTS) == {d.value for d in SqlDialect}

    def test_get_by_name(self) -> None:
        assert get_dialect("mysql") is MYSQL
        assert get_dialect(SqlDialect.SQLITE) is SQLITE

    def test_passthrough(self) -> None:
        """Test that a custom dialect is passed through."""
        custom = dataclasses.replace(POSTGRESQL, name="cockroach")
        assert get_dialect(custom) is custom

    def test_unknown(self) -> None:
        """Test the error for an unknown dialect."""
        with pytest.raises(UnknownDialectError) as exc_info:
            get_dialect("oracle")
        assert exc_info.value.dialect == "oracle"
        assert "postgresql" in str(exc_info.value)

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DIALECTS["oracle"] = POSTGRESQL  # type: ignore[index]

    def test_dialect_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            POSTGRESQL.name = "other"  # type: ignore[misc]
