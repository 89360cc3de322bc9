"""
CLI commands for specgraph migrations.

Uses click for command-line argument parsing. Entities are read from JSON
files holding a list of entity objects (or ``{"entities": [...]}``).
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from ..config import ENV_DIALECT, ENV_GRAPH_DIR, ENV_ON_CORRUPT, MigrationConfig
from ..entities import load_entities
from ..exceptions import SpecGraphError
from ..migrations.differ import diff_entities
from ..migrations.manager import MigrationManager
from ..migrations.migration import split_migration_file
from ..types import CorruptStatePolicy, MigrationDirection, SqlDialect

logger = logging.getLogger(__name__)


def _manager(ctx: click.Context) -> MigrationManager:
    return MigrationManager.from_config(ctx.obj["config"])


def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--graph-dir",
    "-g",
    envvar=ENV_GRAPH_DIR,
    default=".graph",
    show_default=True,
    help="Directory holding migrations.json and migrations/",
)
@click.option(
    "--dialect",
    "-d",
    envvar=ENV_DIALECT,
    type=click.Choice([d.value for d in SqlDialect], case_sensitive=False),
    default=SqlDialect.POSTGRESQL.value,
    show_default=True,
    help="Target SQL dialect",
)
@click.option(
    "--on-corrupt",
    envvar=ENV_ON_CORRUPT,
    type=click.Choice([p.value for p in CorruptStatePolicy], case_sensitive=False),
    default=CorruptStatePolicy.RESET.value,
    show_default=True,
    help="What to do when the state file is unreadable",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, graph_dir: str, dialect: str, on_corrupt: str, verbose: bool) -> None:
    """specgraph schema migration tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = MigrationConfig(
        graph_dir=Path(graph_dir),
        dialect=SqlDialect(dialect.lower()),
        on_corrupt=CorruptStatePolicy(on_corrupt.lower()),
    )
    logger.debug(f"Using graph directory {graph_dir} ({dialect})")


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Exit with status 1 when breaking changes are found")
def diff(old: Path, new: Path, strict: bool) -> None:
    """Show classified changes between OLD and NEW entity files."""
    try:
        result = diff_entities(load_entities(old), load_entities(new))
    except SpecGraphError as e:
        _fail(f"Error: {e}")

    if not result.has_changes:
        click.echo("No changes detected.")
        return

    for change in result.changes:
        marker = "!" if change.breaking else " "
        click.echo(f"{marker} {change.description}")
    click.echo("-" * 60)
    for line in result.summary:
        click.echo(line)

    if strict and result.has_breaking_changes:
        sys.exit(1)


@cli.command()
@click.argument("entities_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def baseline(ctx: click.Context, entities_file: Path) -> None:
    """Record the entities in ENTITIES_FILE as the starting snapshot."""
    try:
        entities = load_entities(entities_file)
        _manager(ctx).baseline(entities)
    except (SpecGraphError, OSError) as e:
        _fail(f"Baseline failed: {e}")

    click.echo(f"Baselined {len(entities)} entities.")


@cli.command()
@click.argument("entities_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", "-n", help="Migration name (default: migration_<timestamp>)")
@click.option("--dry-run", is_flag=True, help="Print the migration without saving it")
@click.pass_context
def makemigrations(ctx: click.Context, entities_file: Path, name: str | None, dry_run: bool) -> None:
    """Generate a SQL migration from changes in ENTITIES_FILE."""
    manager = _manager(ctx)
    try:
        entities = load_entities(entities_file)
        migration = manager.generate_migration(entities, name=name)
    except (SpecGraphError, OSError) as e:
        _fail(f"Migration generation failed: {e}")

    if migration is None:
        click.echo("No changes detected.")
        return

    for warning in migration.output.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if dry_run:
        click.echo(migration.content)
        return

    try:
        filepath = manager.save_migration(migration, entities)
    except (SpecGraphError, OSError) as e:
        _fail(f"Saving migration failed: {e}")

    click.echo(f"Created migration: {filepath}")
    click.echo(f"Changes: {len(migration.diff.changes)}")
    for change in migration.diff.changes:
        click.echo(f"  - {change.description}")


@cli.command()
@click.argument("name")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in MigrationDirection]),
    default=MigrationDirection.UP.value,
    show_default=True,
    help="Direction the migration was applied in",
)
@click.pass_context
def record(ctx: click.Context, name: str, direction: str) -> None:
    """Record migration NAME as applied by an external runner."""
    manager = _manager(ctx)
    try:
        content = manager.generator.read(name)
        entry = manager.record_applied(name, direction, content)
    except FileNotFoundError:
        _fail(f"Migration not found: {name}")
    except (SpecGraphError, OSError) as e:
        _fail(f"Recording failed: {e}")

    click.echo(f"Recorded {entry.direction} {entry.name} ({entry.hash})")


@cli.command()
@click.pass_context
def pending(ctx: click.Context) -> None:
    """List generated migrations that have not been applied."""
    try:
        names = _manager(ctx).get_pending_migrations()
    except (SpecGraphError, OSError) as e:
        _fail(f"Error: {e}")

    if not names:
        click.echo("No pending migrations.")
        return
    for name in names:
        click.echo(name)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show migration status."""
    manager = _manager(ctx)
    try:
        info = manager.get_status()
    except (SpecGraphError, OSError) as e:
        _fail(f"Status failed: {e}")

    click.echo("Migration status:")
    click.echo("-" * 60)
    click.echo(f"Dialect:           {manager.dialect}")
    click.echo(f"Baseline:          {'yes' if info.has_snapshot else 'no'}")
    click.echo(f"Snapshot entities: {info.last_snapshot_entities}")
    click.echo(f"Applied:           {info.applied_count}")
    click.echo(f"Pending:           {info.pending_count}")
    if info.last_applied is not None:
        last = info.last_applied
        click.echo(f"Last:              {last.name} ({last.direction}, {last.applied_at})")


@cli.command()
@click.argument("migration")
@click.option("--down", is_flag=True, help="Show the rollback section instead")
@click.pass_context
def sqlmigrate(ctx: click.Context, migration: str, down: bool) -> None:
    """Show SQL for MIGRATION without executing."""
    try:
        content = _manager(ctx).generator.read(migration)
    except FileNotFoundError:
        _fail(f"Migration not found: {migration}")

    up_sql, down_sql = split_migration_file(content)
    click.echo(down_sql if down else up_sql)
