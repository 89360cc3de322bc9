"""
Configuration for the migration engine.

Provides an immutable configuration container used by
``MigrationManager.from_config()`` and the CLI.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .types import DEFAULT_DIALECT, CorruptStatePolicy, SqlDialect

ENV_GRAPH_DIR = "SPECGRAPH_DIR"
ENV_DIALECT = "SPECGRAPH_DIALECT"
ENV_ON_CORRUPT = "SPECGRAPH_ON_CORRUPT"


@dataclass(frozen=True)
class MigrationConfig:
    """
    Immutable configuration for a migration manager.

    Attributes:
        graph_dir: Directory holding the state file and migrations directory.
        dialect: Target SQL dialect.
        state_filename: Name of the state file inside ``graph_dir``.
        migrations_dirname: Name of the migrations directory inside ``graph_dir``.
        on_corrupt: What to do with an unreadable state file.
    """

    graph_dir: Path = Path(".graph")
    dialect: SqlDialect = DEFAULT_DIALECT
    state_filename: str = "migrations.json"
    migrations_dirname: str = "migrations"
    on_corrupt: CorruptStatePolicy = CorruptStatePolicy.RESET

    def __post_init__(self) -> None:
        object.__setattr__(self, "graph_dir", Path(self.graph_dir))
        object.__setattr__(self, "dialect", SqlDialect(self.dialect))
        object.__setattr__(self, "on_corrupt", CorruptStatePolicy(self.on_corrupt))

    @property
    def state_file(self) -> Path:
        return self.graph_dir / self.state_filename

    @property
    def migrations_dir(self) -> Path:
        return self.graph_dir / self.migrations_dirname

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> MigrationConfig:
        """
        Build a configuration from environment variables.

        Reads ``SPECGRAPH_DIR``, ``SPECGRAPH_DIALECT`` and
        ``SPECGRAPH_ON_CORRUPT``; keyword overrides win over the environment.

        Raises:
            ValueError: If a dialect or policy value is not recognised
        """
        env = os.environ if environ is None else environ
        config = cls()
        if env.get(ENV_GRAPH_DIR):
            config = replace(config, graph_dir=Path(env[ENV_GRAPH_DIR]))
        if env.get(ENV_DIALECT):
            config = replace(config, dialect=SqlDialect(env[ENV_DIALECT].lower()))
        if env.get(ENV_ON_CORRUPT):
            config = replace(config, on_corrupt=CorruptStatePolicy(env[ENV_ON_CORRUPT].lower()))
        if overrides:
            config = replace(config, **overrides)  # type: ignore[arg-type]
        return config


__all__ = ["MigrationConfig", "ENV_GRAPH_DIR", "ENV_DIALECT", "ENV_ON_CORRUPT"]
