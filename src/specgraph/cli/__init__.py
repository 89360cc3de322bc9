"""
specgraph Command Line Interface.

Provides migration commands over a graph directory:
- diff: Show the classified changes between two entity files
- baseline: Record the current entities as the starting snapshot
- makemigrations: Generate a SQL migration from entity changes
- record: Mark a migration as applied (up) or reverted (down)
- pending: List generated migrations not yet applied
- status: Show migration status
- sqlmigrate: Show the SQL of a generated migration
"""

from .commands import cli

__all__ = ["cli"]
