"""Migration record store.

A single tracking table holds one row per applied migration:

    id          INT UNSIGNED AUTO_INCREMENT PRIMARY KEY
    migration   VARCHAR(191) NOT NULL, unique
    batch       INT UNSIGNED NOT NULL
    created_at  DATETIME NOT NULL

The unique index on ``migration`` is what keeps two concurrent runners from
both recording the same migration.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional, Set

from roadschema.blueprint import Blueprint
from roadschema.migrations.base import MigrationRecord
from roadschema.schema import Schema

logger = logging.getLogger(__name__)


class MigrationRepository:
    """Reads and writes the migrations tracking table."""

    def __init__(self, schema: Schema, table: Optional[str] = None):
        """Initialize the repository.

        Args:
            schema: Schema compiler (supplies executor and prefix)
            table: Tracking table name without prefix
        """
        self.schema = schema
        self.executor = schema.executor
        self.table = table or schema.config.migrations_table

    @property
    def table_name(self) -> str:
        return self.schema.table_name(self.table)

    @staticmethod
    def define(table: Blueprint) -> None:
        """Declare the tracking table's columns."""
        table.increments("id")
        table.string("migration", 191).unique()
        table.integer("batch")
        table.date_time("created_at")

    def ensure_table(self) -> None:
        """Create the tracking table if it is missing.

        Existence is checked on every call, so a table dropped between runs
        is recreated.
        """
        if self.schema.create(self.table, self.define):
            logger.info(f"Created migrations table {self.table_name}")

    def has_run(self, migration: str) -> bool:
        """Check if a migration has already been recorded."""
        count = self.executor.query_scalar(
            f"SELECT COUNT(*) FROM `{self.table_name}` WHERE migration = :migration",
            {"migration": migration},
        )
        return int(count or 0) > 0

    def current_batch(self) -> int:
        """Highest batch number recorded so far (0 when empty)."""
        batch = self.executor.query_scalar(f"SELECT MAX(batch) FROM `{self.table_name}`")
        return int(batch or 0)

    def log(self, migration: str, batch: int) -> MigrationRecord:
        """Record a migration as applied.

        Raises:
            DuplicateRecord: If the migration was recorded concurrently
        """
        created_at = datetime.now().replace(microsecond=0)
        record_id = self.executor.insert_record(
            self.table_name,
            {"migration": migration, "batch": batch, "created_at": created_at},
        )
        logger.debug(f"Recorded migration {migration} in batch {batch}")
        return MigrationRecord(migration=migration, batch=batch, created_at=created_at, id=record_id)

    def applied(self) -> List[MigrationRecord]:
        """All recorded migrations, oldest first."""
        rows = self.executor.query_rows(
            f"SELECT id, migration, batch, created_at FROM `{self.table_name}` ORDER BY batch, id"
        )
        return [
            MigrationRecord(
                migration=row["migration"],
                batch=int(row["batch"]),
                created_at=_as_datetime(row.get("created_at")),
                id=row.get("id"),
            )
            for row in rows
        ]

    def applied_identifiers(self) -> Set[str]:
        return {record.migration for record in self.applied()}


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
