"""
Unit tests for migration state persistence.
"""

import json
from pathlib import Path

from src.specgraph.migrations.state import (
    STATE_VERSION,
    MigrationRecord,
    MigrationState,
    StateLoadStatus,
    StateStore,
)
from src.specgraph.types import MigrationDirection

from tests.conftest import make_entity


class TestMigrationRecord:
    """Tests for MigrationRecord."""

    def test_create(self) -> None:
        """Test that create() stamps a UTC time."""
        record = MigrationRecord.create("add_email", "0000abcd", "up")
        assert record.name == "add_email"
        assert record.hash == "0000abcd"
        assert record.direction == MigrationDirection.UP
        assert record.applied_at.endswith("+00:00")

    def test_camel_case_aliases(self) -> None:
        """Test that records serialise with camelCase keys."""
        record = MigrationRecord(name="m", applied_at="2024-01-01T00:00:00+00:00", hash="x", direction="down")
        data = record.model_dump(mode="json", by_alias=True)
        assert data == {
            "name": "m",
            "appliedAt": "2024-01-01T00:00:00+00:00",
            "hash": "x",
            "direction": "down",
        }

    def test_parse_from_alias(self) -> None:
        record = MigrationRecord.model_validate(
            {"name": "m", "appliedAt": "2024-01-01T00:00:00+00:00", "hash": "x", "direction": "up"}
        )
        assert record.applied_at == "2024-01-01T00:00:00+00:00"


class TestMigrationState:
    """Tests for MigrationState."""

    def test_empty_state(self) -> None:
        state = MigrationState()
        assert state.version == STATE_VERSION
        assert state.last_snapshot == []
        assert state.history == []

    def test_states_do_not_share_lists(self) -> None:
        """Test that default lists are not shared between instances."""
        first = MigrationState()
        first.history.append(MigrationRecord.create("a", "1", "up"))
        assert MigrationState().history == []

    def test_to_json_dict(self) -> None:
        """Test camelCase keys and sparse entity serialisation."""
        state = MigrationState(last_snapshot=[make_entity("User", {"name": "id", "type": "uuid"})])
        data = state.to_json_dict()
        assert data["version"] == 1
        assert data["lastSnapshot"] == [{"name": "User", "fields": [{"name": "id", "type": "uuid"}]}]
        assert data["history"] == []

    def test_applied_names(self) -> None:
        """Test that only up records count as applied."""
        state = MigrationState(
            history=[
                MigrationRecord.create("a", "1", "up"),
                MigrationRecord.create("b", "2", "down"),
            ]
        )
        assert state.applied_names() == {"a"}


class TestStateStore:
    """Tests for StateStore."""

    def test_load_absent(self, temp_graph_dir: Path) -> None:
        """Test that a missing file yields an empty state without writing."""
        store = StateStore(temp_graph_dir / "migrations.json")
        result = store.load()
        assert result.status == StateLoadStatus.ABSENT
        assert result.absent
        assert result.state.history == []
        assert not store.path.exists()

    def test_save_and_load(self, temp_graph_dir: Path) -> None:
        """Test that saved state loads back equal."""
        store = StateStore(temp_graph_dir / "nested" / "migrations.json")
        entity = make_entity(
            "User",
            {"name": "id", "type": "uuid", "primary": True},
            {"name": "note", "type": "text", "default": None},
        )
        state = MigrationState(last_snapshot=[entity], history=[MigrationRecord.create("baseline", "1", "up")])
        store.save(state)

        result = store.load()
        assert result.ok
        assert result.state.last_snapshot == [entity]
        assert result.state.history == state.history
        # Explicit null default survives the round trip
        assert result.state.last_snapshot[0].get_field("note").has_default

    def test_saved_file_format(self, temp_graph_dir: Path) -> None:
        """Test the on-disk JSON layout."""
        store = StateStore(temp_graph_dir / "migrations.json")
        store.save(MigrationState(history=[MigrationRecord.create("baseline", "1", "up")]))

        text = store.path.read_text()
        data = json.loads(text)
        assert set(data) == {"version", "lastSnapshot", "history"}
        assert set(data["history"][0]) == {"name", "appliedAt", "hash", "direction"}
        assert text.startswith('{\n  "version": 1')

    def test_save_leaves_no_temp_files(self, temp_graph_dir: Path) -> None:
        store = StateStore(temp_graph_dir / "migrations.json")
        store.save(MigrationState())
        store.save(MigrationState())
        assert [p.name for p in temp_graph_dir.iterdir()] == ["migrations.json"]

    def test_invalid_json_is_corrupt(self, temp_graph_dir: Path) -> None:
        """Test that malformed JSON is reported as corrupt."""
        path = temp_graph_dir / "migrations.json"
        path.write_text("{not json")
        result = StateStore(path).load()
        assert result.corrupt
        assert result.error is not None
        assert result.state.last_snapshot == []

    def test_invalid_shape_is_corrupt(self, temp_graph_dir: Path) -> None:
        """Test that valid JSON with the wrong shape is corrupt."""
        path = temp_graph_dir / "migrations.json"
        path.write_text(json.dumps({"version": 1, "history": [{"name": "x"}]}))
        assert StateStore(path).load().corrupt

    def test_non_utf8_is_corrupt(self, temp_graph_dir: Path) -> None:
        path = temp_graph_dir / "migrations.json"
        path.write_bytes(b"\xff\xfe\x00")
        assert StateStore(path).load().corrupt

    def test_unknown_version_is_corrupt(self, temp_graph_dir: Path) -> None:
        """Test that an unsupported version is not silently accepted."""
        path = temp_graph_dir / "migrations.json"
        path.write_text(json.dumps({"version": 2, "lastSnapshot": [], "history": []}))
        result = StateStore(path).load()
        assert result.corrupt
        assert "version 2" in str(result.error)
