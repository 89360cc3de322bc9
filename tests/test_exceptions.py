"""
Unit tests for the specgraph exception hierarchy.
"""

from pathlib import Path

from src.specgraph.exceptions import (
    EntityLoadError,
    MigrationError,
    SpecGraphError,
    StateCorruptError,
    UnknownDialectError,
)


class TestExceptions:
    """Tests for exception classes."""

    def test_base_error(self) -> None:
        error = SpecGraphError("boom", code=3)
        assert error.message == "boom"
        assert error.code == 3
        assert str(error) == "boom"

    def test_state_corrupt_error(self) -> None:
        """Test message and attributes."""
        cause = ValueError("bad json")
        error = StateCorruptError("/tmp/migrations.json", cause)
        assert isinstance(error, MigrationError)
        assert error.path == Path("/tmp/migrations.json")
        assert error.cause is cause
        assert str(error) == "Migration state file /tmp/migrations.json is unreadable: bad json"

    def test_unknown_dialect_error(self) -> None:
        """Test that the error lists known dialects and is a ValueError."""
        error = UnknownDialectError("oracle", ["postgresql", "mysql"])
        assert isinstance(error, SpecGraphError)
        assert isinstance(error, ValueError)
        assert str(error) == "Unknown SQL dialect: 'oracle' (expected one of: postgresql, mysql)"

    def test_entity_load_error(self) -> None:
        error = EntityLoadError("bad file", "entities.json")
        assert error.path == Path("entities.json")
        assert EntityLoadError("bad").path is None
