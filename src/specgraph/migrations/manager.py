"""
Migration manager.

Orchestrates the migration lifecycle over a graph directory:

- ``baseline()`` records the current entities as the starting snapshot
- ``generate_migration()`` previews the SQL needed since the last snapshot
- ``save_migration()`` writes the migration file and advances the snapshot
- ``record_applied()`` appends an entry to the applied history

Usage:
    manager = MigrationManager(".graph", dialect="postgresql")
    manager.baseline(entities)

    migration = manager.generate_migration(new_entities, name="add_email")
    if migration is not None:
        path = manager.save_migration(migration, new_entities)

All operations perform blocking file I/O; callers must not run two managers
against the same graph directory at once.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..config import MigrationConfig
from ..entities import Entity, dump_entities
from ..exceptions import StateCorruptError
from ..types import DEFAULT_DIALECT, CorruptStatePolicy, MigrationDirection, SqlDialect
from ..utils import content_hash
from .dialects import Dialect, get_dialect
from .differ import EntityDiffer
from .generator import MigrationGenerator
from .migration import GeneratedMigration, format_migration_file, generate_timestamp, validate_migration_name
from .sql_generator import SQLGenerator
from .state import MigrationRecord, MigrationState, StateStore

logger = logging.getLogger(__name__)

STATE_FILENAME = "migrations.json"
MIGRATIONS_DIRNAME = "migrations"
BASELINE_NAME = "baseline"


@dataclass(frozen=True)
class MigrationStatus:
    """
    Read-only summary of the migration state.

    Attributes:
        has_snapshot: Whether a non-empty snapshot has been recorded
        last_snapshot_entities: Number of entities in the snapshot
        applied_count: Number of history entries with direction ``up``
        pending_count: Number of migration files not yet applied
        last_applied: Most recent history record, if any
    """

    has_snapshot: bool
    last_snapshot_entities: int
    applied_count: int
    pending_count: int
    last_applied: MigrationRecord | None


class MigrationManager:
    """
    Manages migration state and generation for one graph directory.

    Args:
        graph_dir: Directory holding ``migrations.json`` and ``migrations/``
        dialect: Target SQL dialect (default: postgresql)
        on_corrupt: Policy for an unreadable state file. ``reset`` logs a
            warning and continues from an empty state; ``raise`` raises
            ``StateCorruptError``.
        differ: Differ to use (e.g., with a custom type-widening whitelist)
    """

    def __init__(
        self,
        graph_dir: Path | str,
        dialect: Dialect | SqlDialect | str = DEFAULT_DIALECT,
        on_corrupt: CorruptStatePolicy | str = CorruptStatePolicy.RESET,
        differ: EntityDiffer | None = None,
        *,
        state_filename: str = STATE_FILENAME,
        migrations_dirname: str = MIGRATIONS_DIRNAME,
    ):
        self.graph_dir = Path(graph_dir)
        self.store = StateStore(self.graph_dir / state_filename)
        self.generator = MigrationGenerator(self.graph_dir / migrations_dirname)
        self.on_corrupt = CorruptStatePolicy(on_corrupt)
        self.differ = differ or EntityDiffer()
        self._sql = SQLGenerator(dialect)

    @classmethod
    def from_config(cls, config: MigrationConfig, differ: EntityDiffer | None = None) -> MigrationManager:
        """Create a manager from a ``MigrationConfig``."""
        return cls(
            config.graph_dir,
            dialect=config.dialect,
            on_corrupt=config.on_corrupt,
            differ=differ,
            state_filename=config.state_filename,
            migrations_dirname=config.migrations_dirname,
        )

    # ── Dialect ──────────────────────────────────────────────────────────

    @property
    def dialect(self) -> str:
        """Name of the target SQL dialect."""
        return self._sql.dialect.name

    @dialect.setter
    def dialect(self, dialect: Dialect | SqlDialect | str) -> None:
        self._sql = SQLGenerator(get_dialect(dialect))

    @property
    def state_file(self) -> Path:
        return self.store.path

    @property
    def migrations_dir(self) -> Path:
        return self.generator.migrations_dir

    # ── State ────────────────────────────────────────────────────────────

    def load_state(self) -> MigrationState:
        """
        Load migration state from disk.

        A missing file yields a fresh empty state and nothing is written.

        Raises:
            StateCorruptError: If the file is unreadable and the policy is ``raise``
            OSError: If the file exists but cannot be opened
        """
        result = self.store.load()
        if result.corrupt:
            if self.on_corrupt == CorruptStatePolicy.RAISE:
                raise StateCorruptError(self.store.path, result.error)
            logger.warning(f"Ignoring unreadable migration state {self.store.path}: {result.error}")
        return result.state

    def save_state(self, state: MigrationState) -> None:
        """Write migration state to disk."""
        self.store.save(state)

    def baseline(self, entities: Sequence[Entity]) -> None:
        """
        Record ``entities`` as the starting snapshot.

        Appends a ``baseline`` history entry with direction ``up``.
        """
        state = self.load_state()
        state.last_snapshot = list(entities)
        serialized = json.dumps(dump_entities(entities), separators=(",", ":"))
        state.history.append(MigrationRecord.create(BASELINE_NAME, content_hash(serialized), MigrationDirection.UP))
        self.save_state(state)
        logger.info(f"Baselined {len(state.last_snapshot)} entities")

    # ── Generation ───────────────────────────────────────────────────────

    def generate_migration(
        self,
        current_entities: Sequence[Entity],
        name: str | None = None,
    ) -> GeneratedMigration | None:
        """
        Generate a migration from the current entities versus the last snapshot.

        Does not write anything: the result is a preview until passed to
        ``save_migration()``.

        Args:
            current_entities: Current entity list
            name: Migration name (default: ``migration_<timestamp>``)

        Returns:
            GeneratedMigration, or None when nothing changed

        Raises:
            MigrationError: If ``name`` contains a path separator or is empty
        """
        if name is not None:
            validate_migration_name(name)
        state = self.load_state()
        diff = self.differ.diff(state.last_snapshot, current_entities)

        if not diff.has_changes:
            logger.debug("No changes since last snapshot")
            return None

        now = datetime.now(timezone.utc)
        timestamp = generate_timestamp(now)
        migration_name = name or f"migration_{timestamp}"
        output = self._sql.generate(diff, current_entities)
        content = format_migration_file(output, migration_name, generated_at=now)

        logger.debug(f"Generated migration {migration_name} with {len(diff.changes)} changes")
        return GeneratedMigration(
            name=migration_name,
            timestamp=timestamp,
            diff=diff,
            output=output,
            content=content,
        )

    def save_migration(self, migration: GeneratedMigration, current_entities: Sequence[Entity]) -> Path:
        """
        Write a generated migration to disk and advance the snapshot.

        Args:
            migration: Migration returned by ``generate_migration()``
            current_entities: Entities the migration was generated for

        Returns:
            Path to the written migration file

        Raises:
            MigrationError: If the migration file already exists
            StateCorruptError: If the state is unreadable and the policy is
                ``raise``; no file is written in that case
        """
        state = self.load_state()
        filepath = self.generator.write(migration)

        state.last_snapshot = list(current_entities)
        self.save_state(state)

        logger.info(f"Saved migration {migration.name} to {filepath}")
        return filepath

    # ── History ──────────────────────────────────────────────────────────

    def record_applied(self, name: str, direction: MigrationDirection | str, content: str) -> MigrationRecord:
        """
        Record that a migration was applied by an external runner.

        Args:
            name: Migration name
            direction: ``up`` or ``down``
            content: Migration content used for the fingerprint

        Returns:
            The appended record
        """
        state = self.load_state()
        record = MigrationRecord.create(name, content_hash(content), direction)
        state.history.append(record)
        self.save_state(state)
        logger.info(f"Recorded {record.direction} migration: {name}")
        return record

    def get_pending_migrations(self) -> list[str]:
        """
        List migrations generated on disk but not recorded as applied (up).

        Returns:
            Sorted logical migration names
        """
        names = self.generator.list_names()
        if not names:
            return []

        applied = self.load_state().applied_names()
        return sorted(name for name in names if name not in applied)

    def get_status(self) -> MigrationStatus:
        """Summarise the current migration state without modifying it."""
        state = self.load_state()
        pending = self.get_pending_migrations()

        return MigrationStatus(
            has_snapshot=len(state.last_snapshot) > 0,
            last_snapshot_entities=len(state.last_snapshot),
            applied_count=sum(1 for h in state.history if h.direction == MigrationDirection.UP),
            pending_count=len(pending),
            last_applied=state.history[-1] if state.history else None,
        )

    def __repr__(self) -> str:
        return f"MigrationManager(graph_dir={str(self.graph_dir)!r}, dialect={self.dialect!r})"


__all__ = ["MigrationManager", "MigrationStatus", "BASELINE_NAME"]
