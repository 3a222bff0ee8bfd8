"""Migration tracker for applying migration sets exactly once.

Provides:
- Apply pending migrations in caller order, one batch per run
- Pending / applied status reporting

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from roadschema.engine import DatabaseConfig, DatabaseExecutor
from roadschema.errors import DuplicateRecord
from roadschema.migrations.base import Migration, MigrationRecord, MigrationStatus
from roadschema.migrations.repository import MigrationRepository
from roadschema.schema import Schema

logger = logging.getLogger(__name__)

StatusRow = Tuple[str, MigrationStatus, Optional[int]]


class MigrationTracker:
    """Runs migrations and records them in the tracking table.

    Usage:
        tracker = MigrationTracker(executor, config)
        tracker.run_migrations([CreateBooksTable(), AddAuthorsTable()])
    """

    def __init__(
        self,
        executor: DatabaseExecutor,
        config: Optional[DatabaseConfig] = None,
        repository: Optional[MigrationRepository] = None,
    ):
        """Initialize the tracker.

        Args:
            executor: Database executor shared by migrations and the record store
            config: Prefix, table options and tracking table name
            repository: Record store (built from ``config`` if not provided)
        """
        self.schema = Schema(executor, config)
        self.repository = repository or MigrationRepository(self.schema)

    def run_migrations(self, units: Iterable[Any]) -> List[MigrationRecord]:
        """Run every migration that has not been applied yet.

        All migrations applied by one call share the same batch number.
        A failing ``up()`` propagates and leaves that migration unrecorded,
        so the next run retries it.

        Args:
            units: Migration instances, in the order they should run

        Returns:
            Records written by this run
        """
        self.repository.ensure_table()
        batch = self.repository.current_batch() + 1
        applied: List[MigrationRecord] = []

        for unit in units:
            if not isinstance(unit, Migration):
                logger.warning(f"Skipping {unit!r}: not a Migration instance")
                continue

            identifier = unit.identifier
            if self.repository.has_run(identifier):
                logger.debug(f"Migration {identifier} already applied, skipping")
                continue

            logger.info(f"Running migration {identifier} (batch {batch})")
            try:
                unit.up(self.schema)
            except Exception as e:
                logger.error(f"Migration {identifier} failed: {e}", exc_info=True)
                raise

            try:
                record = self.repository.log(identifier, batch)
            except DuplicateRecord:
                logger.warning(f"Migration {identifier} was recorded by another runner, ignoring")
                continue
            applied.append(record)

        if applied:
            logger.info(f"Applied {len(applied)} migration(s) in batch {batch}")
        else:
            logger.info("All migrations up to date")
        return applied

    def pending(self, units: Sequence[Any]) -> List[Migration]:
        """Migrations from ``units`` that have not been applied."""
        self.repository.ensure_table()
        done = self.repository.applied_identifiers()
        return [u for u in units if isinstance(u, Migration) and u.identifier not in done]

    def status(self, units: Sequence[Any]) -> List[StatusRow]:
        """Status of each migration in ``units``.

        Returns:
            ``(identifier, status, batch)`` rows; batch is None when pending
        """
        self.repository.ensure_table()
        batches = {record.migration: record.batch for record in self.repository.applied()}
        rows: List[StatusRow] = []
        for unit in units:
            if not isinstance(unit, Migration):
                continue
            batch = batches.get(unit.identifier)
            status = MigrationStatus.APPLIED if batch is not None else MigrationStatus.PENDING
            rows.append((unit.identifier, status, batch))
        return rows

    def applied(self) -> List[MigrationRecord]:
        """All recorded migrations, oldest first."""
        self.repository.ensure_table()
        return self.repository.applied()

    def last_batch(self) -> List[MigrationRecord]:
        """Records of the most recent batch."""
        records = self.applied()
        if not records:
            return []
        latest = max(record.batch for record in records)
        return [record for record in records if record.batch == latest]


def run_migrations(
    executor: DatabaseExecutor,
    units: Iterable[Any],
    config: Optional[DatabaseConfig] = None,
) -> List[MigrationRecord]:
    """Run a migration set with a one-off tracker.

    Args:
        executor: Database executor
        units: Migration instances
        config: Optional configuration

    Returns:
        Records written by this run
    """
    return MigrationTracker(executor, config).run_migrations(units)
