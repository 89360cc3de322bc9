"""
Persisted migration state.

The state file records the last entity snapshot the engine has seen and
the append-only history of applied migrations. It is a single JSON
document, rewritten wholesale (through an atomic rename) on every change.

Loading distinguishes three outcomes so callers can decide how to proceed:
the file is absent, the file was read, or the file exists but is corrupt.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ..entities import Entity, dump_entities
from ..types import MigrationDirection
from ..utils import atomic_write_text

logger = logging.getLogger(__name__)

STATE_VERSION = 1


class MigrationRecord(BaseModel):
    """
    One entry of the migration history.

    Attributes:
        name: Migration name (``baseline`` for the initial snapshot)
        applied_at: ISO-8601 UTC timestamp
        hash: Content fingerprint for drift detection
        direction: Whether the migration was applied up or down
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    applied_at: str
    hash: str
    direction: MigrationDirection

    @classmethod
    def create(cls, name: str, content_hash: str, direction: MigrationDirection | str) -> MigrationRecord:
        """Create a record stamped with the current UTC time."""
        return cls(
            name=name,
            applied_at=datetime.now(timezone.utc).isoformat(),
            hash=content_hash,
            direction=MigrationDirection(direction),
        )


class MigrationState(BaseModel):
    """
    Complete persisted state.

    Attributes:
        version: State format version
        last_snapshot: Entities as of the last baseline or saved migration
        history: Applied migration records, oldest first
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: int = STATE_VERSION
    last_snapshot: list[Entity] = []
    history: list[MigrationRecord] = []

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise with camelCase keys, keeping snapshot entities sparse."""
        return {
            "version": self.version,
            "lastSnapshot": dump_entities(self.last_snapshot),
            "history": [record.model_dump(mode="json", by_alias=True) for record in self.history],
        }

    def applied_names(self) -> set[str]:
        """Names of migrations recorded with direction ``up``."""
        return {r.name for r in self.history if r.direction == MigrationDirection.UP}

    def __repr__(self) -> str:
        return f"MigrationState(entities={len(self.last_snapshot)}, history={len(self.history)})"


class StateLoadStatus(StrEnum):
    """Outcome of reading the state file."""

    OK = "ok"
    ABSENT = "absent"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class StateLoadResult:
    """
    Tagged result of ``StateStore.load()``.

    Attributes:
        status: Which outcome occurred
        state: Loaded state for ``OK``, a fresh empty state otherwise
        error: The parse/validation error for ``CORRUPT``
    """

    status: StateLoadStatus
    state: MigrationState
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status == StateLoadStatus.OK

    @property
    def absent(self) -> bool:
        return self.status == StateLoadStatus.ABSENT

    @property
    def corrupt(self) -> bool:
        return self.status == StateLoadStatus.CORRUPT


class StateStore:
    """
    Reads and writes the migration state file.

    Not safe for concurrent writers: callers must serialise access to one
    state file.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> StateLoadResult:
        """
        Read the state file.

        Returns:
            StateLoadResult tagged ``ok``, ``absent`` or ``corrupt``

        Raises:
            OSError: If the file exists but cannot be opened
        """
        if not self.exists():
            return StateLoadResult(StateLoadStatus.ABSENT, MigrationState())

        raw = self.path.read_bytes()
        try:
            data = json.loads(raw.decode("utf-8"))
            state = MigrationState.model_validate(data)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.debug(f"State file {self.path} failed to parse: {e}")
            return StateLoadResult(StateLoadStatus.CORRUPT, MigrationState(), e)

        if state.version != STATE_VERSION:
            error = ValueError(f"Unsupported state version {state.version} (expected {STATE_VERSION})")
            return StateLoadResult(StateLoadStatus.CORRUPT, MigrationState(), error)

        return StateLoadResult(StateLoadStatus.OK, state)

    def save(self, state: MigrationState) -> None:
        """
        Write the state file, creating its directory if needed.

        Raises:
            OSError: If the directory or file cannot be written
        """
        content = json.dumps(state.to_json_dict(), indent=2)
        atomic_write_text(self.path, content)
        logger.debug(f"Saved migration state to {self.path}")


__all__ = [
    "STATE_VERSION",
    "MigrationRecord",
    "MigrationState",
    "StateLoadStatus",
    "StateLoadResult",
    "StateStore",
]
