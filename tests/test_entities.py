"""
Unit tests for the entity model and entity file loading.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.specgraph.entities import Entity, Field, Relation, dump_entities, load_entities, parse_entities
from src.specgraph.exceptions import EntityLoadError
from src.specgraph.types import FieldType, RelationType


class TestField:
    """Tests for the Field model."""

    def test_defaults(self) -> None:
        """Test default attribute values."""
        field = Field(name="email", type="string")
        assert field.type == FieldType.STRING
        assert field.nullable is False
        assert field.primary is False
        assert field.unique is False
        assert field.has_default is False

    def test_explicit_null_default(self) -> None:
        """Test that an explicit null default is distinguishable from no default."""
        assert Field(name="note", type="text", default=None).has_default is True
        assert Field.model_validate({"name": "note", "type": "text", "default": None}).has_default is True
        assert Field.model_validate({"name": "note", "type": "text"}).has_default is False

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Field(name="blob", type="binary")

    def test_unknown_keys_ignored(self) -> None:
        """Test that extra keys from richer spec formats are ignored."""
        field = Field.model_validate({"name": "id", "type": "uuid", "indexed": True})
        assert field.name == "id"

    def test_enum_values(self) -> None:
        field = Field.model_validate({"name": "role", "type": "enum", "values": ["admin", "user"]})
        assert field.values == ("admin", "user")

    def test_frozen(self) -> None:
        field = Field(name="email", type="string")
        with pytest.raises(ValidationError):
            field.nullable = True  # type: ignore[misc]


class TestEntity:
    """Tests for the Entity model."""

    def test_from_dict(self) -> None:
        """Test building an entity with fields and relations."""
        entity = Entity.model_validate(
            {
                "name": "Post",
                "fields": [{"name": "id", "type": "uuid", "primary": True}],
                "relations": [{"name": "author", "entity": "User", "type": "belongs_to", "foreign_key": "authorId"}],
            }
        )
        assert entity.fields[0].primary is True
        assert entity.relations[0] == Relation(
            name="author", entity="User", type=RelationType.BELONGS_TO, foreign_key="authorId"
        )

    def test_get_field(self) -> None:
        entity = Entity(name="User", fields=(Field(name="id", type="uuid"),))
        assert entity.get_field("id") is entity.fields[0]
        assert entity.get_field("missing") is None

    def test_equality(self) -> None:
        """Test that entities compare by value."""
        first = Entity(name="User", fields=(Field(name="id", type="uuid"),))
        second = Entity.model_validate({"name": "User", "fields": [{"name": "id", "type": "uuid"}]})
        assert first == second


class TestSerialization:
    """Tests for parse/dump helpers."""

    def test_parse_passes_entities_through(self) -> None:
        entity = Entity(name="User")
        parsed = parse_entities([entity, {"name": "Post"}])
        assert parsed[0] == entity
        assert parsed[1].name == "Post"

    def test_dump_is_sparse(self) -> None:
        """Test that unset attributes are omitted from dumps."""
        entity = Entity.model_validate(
            {"name": "User", "fields": [{"name": "bio", "type": "text", "nullable": True, "default": None}]}
        )
        assert dump_entities([entity]) == [
            {"name": "User", "fields": [{"name": "bio", "type": "text", "nullable": True, "default": None}]}
        ]

    def test_dump_and_parse_keep_defaults(self) -> None:
        """Test that default presence survives serialisation."""
        entity = Entity.model_validate(
            {"name": "User", "fields": [{"name": "a", "type": "json", "default": {"x": 1}}, {"name": "b", "type": "text"}]}
        )
        restored = parse_entities(dump_entities([entity]))[0]
        assert restored.fields[0].has_default is True
        assert restored.fields[0].default == {"x": 1}
        assert restored.fields[1].has_default is False


class TestLoadEntities:
    """Tests for load_entities()."""

    def test_load_list(self, temp_graph_dir: Path) -> None:
        path = temp_graph_dir / "entities.json"
        path.write_text(json.dumps([{"name": "User"}]))
        assert [e.name for e in load_entities(path)] == ["User"]

    def test_load_wrapped(self, temp_graph_dir: Path) -> None:
        """Test the {"entities": [...]} form."""
        path = temp_graph_dir / "entities.json"
        path.write_text(json.dumps({"entities": [{"name": "User"}, {"name": "Post"}]}))
        assert [e.name for e in load_entities(path)] == ["User", "Post"]

    def test_missing_file(self, temp_graph_dir: Path) -> None:
        with pytest.raises(EntityLoadError) as exc_info:
            load_entities(temp_graph_dir / "missing.json")
        assert exc_info.value.path == temp_graph_dir / "missing.json"

    def test_invalid_json(self, temp_graph_dir: Path) -> None:
        path = temp_graph_dir / "entities.json"
        path.write_text("[{")
        with pytest.raises(EntityLoadError, match="Invalid JSON"):
            load_entities(path)

    def test_wrong_shape(self, temp_graph_dir: Path) -> None:
        path = temp_graph_dir / "entities.json"
        path.write_text('"User"')
        with pytest.raises(EntityLoadError, match="Expected a list"):
            load_entities(path)

    def test_invalid_entity(self, temp_graph_dir: Path) -> None:
        path = temp_graph_dir / "entities.json"
        path.write_text(json.dumps([{"fields": []}]))
        with pytest.raises(EntityLoadError, match="Invalid entity definition"):
            load_entities(path)
