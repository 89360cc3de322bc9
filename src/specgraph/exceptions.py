"""
specgraph Exceptions.

Custom exception hierarchy for the schema-evolution engine.
"""

from pathlib import Path


class SpecGraphError(Exception):
    """Base exception for all specgraph errors."""

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class MigrationError(SpecGraphError):
    """Raised when a migration cannot be generated, saved or recorded."""

    pass


class StateCorruptError(MigrationError):
    """Raised when the migration state file exists but cannot be read."""

    def __init__(self, path: Path | str, cause: Exception | None = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Migration state file {self.path} is unreadable{detail}")


class UnknownDialectError(SpecGraphError, ValueError):
    """Raised when a dialect name does not match any registered dialect."""

    def __init__(self, dialect: str, known: list[str] | None = None):
        self.dialect = dialect
        self.known = known or []
        choices = f" (expected one of: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown SQL dialect: {dialect!r}{choices}")


class EntityLoadError(SpecGraphError):
    """Raised when an entity file cannot be parsed into entities."""

    def __init__(self, message: str, path: Path | str | None = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


__all__ = [
    "SpecGraphError",
    "MigrationError",
    "StateCorruptError",
    "UnknownDialectError",
    "EntityLoadError",
]
