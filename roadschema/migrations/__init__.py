"""Migration tracking for RoadSchema.

Usage:
    from roadschema.migrations import Migration, MigrationTracker

    class CreateBooksTable(Migration):
        def up(self, schema):
            schema.create("books", lambda table: table.increments("id"))

        def down(self, schema):
            schema.drop("books")

    MigrationTracker(executor).run_migrations([CreateBooksTable()])

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadschema.migrations.base import (
    Migration,
    MigrationRecord,
    MigrationStatus,
    migration_identifier,
)
from roadschema.migrations.repository import MigrationRepository
from roadschema.migrations.tracker import MigrationTracker, run_migrations

__all__ = [
    "Migration",
    "MigrationRecord",
    "MigrationStatus",
    "MigrationRepository",
    "MigrationTracker",
    "migration_identifier",
    "run_migrations",
]
