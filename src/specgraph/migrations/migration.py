"""
Generated migrations and migration file naming/formatting.

A ``GeneratedMigration`` is an in-memory preview: it holds the diff, the
rendered SQL and the formatted file content, but nothing is written until
``MigrationManager.save_migration()`` is called.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from ..exceptions import MigrationError
from .differ import DiffResult
from .sql_generator import MigrationOutput

MIGRATION_SUFFIX = ".sql"

# e.g. "2024-01-31T09-15-00_"
TIMESTAMP_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}_")


@dataclass(frozen=True)
class GeneratedMigration:
    """
    A migration produced from a diff, not yet persisted.

    Attributes:
        name: Logical migration name
        timestamp: Filesystem-safe UTC timestamp used to order files
        diff: The diff this migration was generated from
        output: Rendered SQL
        content: Formatted migration file content

    Example:
        migration = manager.generate_migration(entities, name="add_email")
        print(migration.content)
        manager.save_migration(migration, entities)
    """

    name: str
    timestamp: str
    diff: DiffResult
    output: MigrationOutput
    content: str

    @property
    def filename(self) -> str:
        return migration_filename(self.timestamp, self.name)

    @property
    def is_reversible(self) -> bool:
        """False if any operation (a dropped table or column) cannot be rolled back."""
        return self.output.reversible

    def describe(self) -> str:
        """
        Get a human-readable description of this migration.

        Returns:
            Multi-line string listing every change
        """
        lines = [f"Migration: {self.name}"]
        lines.append(f"Changes ({len(self.diff.changes)}):")
        for i, change in enumerate(self.diff.changes, 1):
            lines.append(f"  {i}. {change.description}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"GeneratedMigration(name={self.name!r}, changes={len(self.diff.changes)})"


def generate_timestamp(now: datetime | None = None) -> str:
    """
    Generate a filesystem-safe timestamp (``YYYY-MM-DDTHH-MM-SS``, UTC).
    """
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")


def validate_migration_name(name: str) -> str:
    """
    Check that ``name`` can be used as part of a migration filename.

    The name must stay inside the migrations directory: path separators and
    a leading dot are rejected.

    Raises:
        MigrationError: If the name is empty or not a plain file name component
    """
    if not name or not name.strip():
        raise MigrationError("Migration name must not be empty")
    if "/" in name or "\\" in name or "\x00" in name or name.startswith("."):
        raise MigrationError(f"Invalid migration name {name!r}: path separators and leading dots are not allowed")
    return name


def migration_filename(timestamp: str, name: str) -> str:
    """
    Build a migration filename from its timestamp and name.

    Example:
        migration_filename("2024-01-31T09-15-00", "add_email")
        # "2024-01-31T09-15-00_add_email.sql"
    """
    return f"{timestamp}_{name}{MIGRATION_SUFFIX}"


def parse_migration_name(filename: str) -> str:
    """
    Recover the logical migration name from a filename.

    The timestamp prefix and ``.sql`` extension are stripped; a filename
    without a timestamp prefix keeps its stem.
    """
    if filename.endswith(MIGRATION_SUFFIX):
        filename = filename[: -len(MIGRATION_SUFFIX)]
    return TIMESTAMP_PREFIX_RE.sub("", filename, count=1)


def format_migration_file(output: MigrationOutput, name: str, generated_at: datetime | None = None) -> str:
    """
    Format migration output as SQL file content.

    Args:
        output: Rendered SQL
        name: Migration name for the header
        generated_at: Generation time (default: now, UTC)

    Returns:
        File content with header, optional warnings, and Up/Down sections
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        f"-- Migration: {name}",
        f"-- Description: {output.description}",
        f"-- Generated: {generated_at.isoformat()}",
        "",
    ]

    if output.warnings:
        lines.append("-- WARNINGS:")
        for warning in output.warnings:
            lines.append(f"-- {warning}")
        lines.append("")

    lines.append("-- Up Migration")
    if output.up:
        lines.extend(output.up)
    else:
        lines.append("-- No changes")

    lines.append("")
    lines.append("-- Down Migration (rollback)")
    if output.down:
        lines.extend(output.down)
    else:
        lines.append("-- No changes")

    return "\n".join(lines)


def split_migration_file(content: str) -> tuple[str, str]:
    """
    Split formatted migration content into its Up and Down sections.

    Returns:
        Tuple of (up_sql, down_sql); comment placeholders are kept
    """
    up_marker = "-- Up Migration"
    down_marker = "-- Down Migration (rollback)"
    _, _, rest = content.partition(up_marker)
    up, _, down = rest.partition(down_marker)
    return up.strip(), down.strip()


__all__ = [
    "GeneratedMigration",
    "generate_timestamp",
    "validate_migration_name",
    "migration_filename",
    "parse_migration_name",
    "format_migration_file",
    "split_migration_file",
]
