"""
Unit tests for specgraph type definitions.
"""

import pytest

from src.specgraph.types import (
    DEFAULT_DIALECT,
    ChangeType,
    CorruptStatePolicy,
    FieldType,
    MigrationDirection,
    RelationType,
    SqlDialect,
)


class TestFieldType:
    """Tests for FieldType enum."""

    def test_all_field_types(self) -> None:
        """Test the complete set of field types."""
        assert {t.value for t in FieldType} == {
            "uuid",
            "string",
            "text",
            "integer",
            "decimal",
            "boolean",
            "timestamp",
            "date",
            "json",
            "enum",
        }

    def test_string_comparison(self) -> None:
        """Test that field types compare equal to their string values."""
        assert FieldType.UUID == "uuid"
        assert f"{FieldType.JSON}" == "json"

    def test_invalid_value(self) -> None:
        with pytest.raises(ValueError):
            FieldType("blob")


class TestChangeType:
    """Tests for ChangeType enum."""

    def test_change_types(self) -> None:
        assert len(ChangeType) == 9

    @pytest.mark.parametrize(
        "change_type,keyword",
        [
            (ChangeType.ENTITY_ADDED, "added"),
            (ChangeType.FIELD_ADDED, "added"),
            (ChangeType.RELATION_ADDED, "added"),
            (ChangeType.ENTITY_REMOVED, "removed"),
            (ChangeType.FIELD_REMOVED, "removed"),
            (ChangeType.RELATION_REMOVED, "removed"),
            (ChangeType.FIELD_TYPE_CHANGED, "changed"),
            (ChangeType.FIELD_NULLABLE_CHANGED, "changed"),
            (ChangeType.FIELD_DEFAULT_CHANGED, "changed"),
        ],
    )
    def test_summary_keywords(self, change_type: ChangeType, keyword: str) -> None:
        """Test that each change type carries the keyword it is tallied under."""
        assert keyword in change_type


class TestOtherEnums:
    """Tests for the remaining enums."""

    def test_relation_types(self) -> None:
        assert RelationType("many_to_many") == RelationType.MANY_TO_MANY
        assert len(RelationType) == 4

    def test_dialects(self) -> None:
        assert [d.value for d in SqlDialect] == ["postgresql", "mysql", "sqlite"]
        assert DEFAULT_DIALECT == SqlDialect.POSTGRESQL

    def test_direction(self) -> None:
        assert MigrationDirection("down") == MigrationDirection.DOWN

    def test_corrupt_policy(self) -> None:
        assert CorruptStatePolicy("raise") == CorruptStatePolicy.RAISE
