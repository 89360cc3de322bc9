"""
Pytest configuration for specgraph tests.

Shared fixtures build temporary graph directories and the entity lists
that most migration tests start from.
"""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from src.specgraph.entities import Entity


def make_entity(name: str, *fields: dict[str, Any], relations: list[dict[str, Any]] | None = None) -> Entity:
    """Build an entity from field dicts (only the keys given are marked as set)."""
    data: dict[str, Any] = {"name": name, "fields": list(fields)}
    if relations is not None:
        data["relations"] = relations
    return Entity.model_validate(data)


@pytest.fixture
def temp_graph_dir() -> Generator[Path, None, None]:
    """Create a temporary graph directory."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def user_v1() -> list[Entity]:
    """A single User entity with only a primary key."""
    return [make_entity("User", {"name": "id", "type": "uuid", "primary": True})]


@pytest.fixture
def user_v2() -> list[Entity]:
    """User with an additional nullable email field."""
    return [
        make_entity(
            "User",
            {"name": "id", "type": "uuid", "primary": True},
            {"name": "email", "type": "string", "nullable": True},
        )
    ]
