"""
Migration file writer.

This module writes generated migrations as timestamp-prefixed ``.sql``
files and lists the migration files already on disk. The files are plain
text meant to be reviewed before an external runner applies them.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import MigrationError
from ..utils import atomic_write_text
from .migration import MIGRATION_SUFFIX, parse_migration_name, validate_migration_name

if TYPE_CHECKING:
    from .migration import GeneratedMigration

logger = logging.getLogger(__name__)


class MigrationGenerator:
    """
    Writes and lists migration files in a migrations directory.
    """

    def __init__(self, migrations_dir: Path | str):
        """
        Initialize the generator with a migrations directory.

        Args:
            migrations_dir: Path to the migrations directory
        """
        self.migrations_dir = Path(migrations_dir)

    def ensure_directory(self) -> None:
        """Create the migrations directory if it doesn't exist."""
        self.migrations_dir.mkdir(parents=True, exist_ok=True)

    def write(self, migration: "GeneratedMigration") -> Path:
        """
        Write a migration file.

        An existing file is never replaced.

        Args:
            migration: Generated migration to persist

        Returns:
            Path to the written migration file

        Raises:
            MigrationError: If the name is invalid or the file already exists
        """
        validate_migration_name(migration.name)
        self.ensure_directory()
        filepath = self.migrations_dir / migration.filename
        try:
            atomic_write_text(filepath, migration.content, overwrite=False)
        except FileExistsError:
            raise MigrationError(f"Migration file already exists: {filepath}") from None
        logger.info(f"Wrote migration file: {filepath}")
        return filepath

    def list_files(self) -> list[Path]:
        """
        List migration files, oldest first.

        Returns:
            Sorted list of ``.sql`` files (empty if the directory is missing)
        """
        if not self.migrations_dir.is_dir():
            return []
        return sorted(p for p in self.migrations_dir.iterdir() if p.is_file() and p.suffix == MIGRATION_SUFFIX)

    def list_names(self) -> list[str]:
        """List logical migration names (timestamp prefix and extension stripped)."""
        return [parse_migration_name(p.name) for p in self.list_files()]

    def find(self, name: str) -> Path | None:
        """
        Find the file of a migration by logical name or filename.

        When several files share a logical name, the newest one wins.
        """
        found: Path | None = None
        for filepath in self.list_files():
            if filepath.name == name or filepath.stem == name or parse_migration_name(filepath.name) == name:
                found = filepath
        return found

    def read(self, name: str) -> str:
        """
        Read a migration file's content.

        Raises:
            FileNotFoundError: If no migration matches ``name``
        """
        filepath = self.find(name)
        if filepath is None:
            raise FileNotFoundError(f"Migration not found: {name}")
        return filepath.read_text(encoding="utf-8")
