"""RoadSchema Schema - Compiles blueprints and runs them against a database.

Provides idempotent entry points for table management:
- ``create``: build a table only if it does not exist yet
- ``alter``: apply column/index changes only if the table exists
- ``drop``: remove a table if present

Architecture:
    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Schema Compiler                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐                 │
    │  │  Blueprint  │  │ Foreign Key │  │  Database   │                 │
    │  │  (callback) │──│   Drafts    │──│  Executor   │                 │
    │  └─────────────┘  └─────────────┘  └─────────────┘                 │
    └─────────────────────────────────────────────────────────────────────┘

Usage:
    from roadschema import Schema, create_executor

    schema = Schema(create_executor(config), config)

    schema.create("books", lambda table: (
        table.increments("id"),
        table.string("title"),
        table.timestamps(),
    ))

    schema.alter("books", lambda table: table.rename_column("title", "name"))

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from roadschema.blueprint import Blueprint, ColumnSpec, SpecKind
from roadschema.engine import DatabaseConfig, DatabaseExecutor

logger = logging.getLogger(__name__)

BlueprintCallback = Callable[[Blueprint], object]


class Schema:
    """Compiles table blueprints into DDL and hands it to an executor.

    Executor errors are not caught here; they reach the caller unchanged.
    """

    def __init__(self, executor: DatabaseExecutor, config: Optional[DatabaseConfig] = None):
        """Initialize schema compiler.

        Args:
            executor: Database executor that runs the statements
            config: Table prefix and table options
        """
        self.executor = executor
        self.config = config or DatabaseConfig()

    @property
    def prefix(self) -> str:
        return self.config.prefix

    def table_name(self, table: str) -> str:
        """Get fully qualified table name."""
        return self.prefix + table

    def blueprint(self, table: str) -> Blueprint:
        """Create an empty blueprint for a table."""
        return Blueprint(table, prefix=self.prefix)

    def has_table(self, table: str) -> bool:
        """Check whether a table (without prefix) exists."""
        return self.executor.exists(self.table_name(table))

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create(self, table: str, callback: BlueprintCallback) -> bool:
        """Create a table unless it already exists.

        Args:
            table: Table name without prefix
            callback: Receives the blueprint and declares the columns

        Returns:
            True if a CREATE TABLE statement was executed
        """
        name = self.table_name(table)
        if self.executor.exists(name):
            logger.debug(f"Table {name} already exists, skipping create")
            return False

        blueprint = self.blueprint(table)
        callback(blueprint)

        sql = self.to_sql_create(blueprint)
        if sql is None:
            logger.debug(f"Blueprint for {name} declares no columns, nothing to create")
            return False

        self.executor.execute(sql)
        logger.info(f"Created table {name}")
        return True

    def to_sql_create(self, blueprint: Blueprint) -> Optional[str]:
        """Generate the CREATE TABLE statement for a blueprint.

        Args:
            blueprint: Populated blueprint (finalized here)

        Returns:
            SQL statement, or None when the blueprint adds nothing
        """
        blueprint.finalize()
        specs = blueprint.add_specs()
        if not specs:
            return None

        body = ",\n".join(spec.sql() for spec in specs)
        return f"CREATE TABLE `{blueprint.table}` (\n{body}\n) {self.config.table_options}"

    # -------------------------------------------------------------------------
    # Alter
    # -------------------------------------------------------------------------

    def alter(self, table: str, callback: BlueprintCallback) -> int:
        """Alter an existing table; a missing table is left alone.

        Statements run one per spec, in the order they were declared.

        Args:
            table: Table name without prefix
            callback: Receives the blueprint and declares the changes

        Returns:
            Number of ALTER TABLE statements executed
        """
        name = self.table_name(table)
        if not self.executor.exists(name):
            logger.debug(f"Table {name} does not exist, skipping alter")
            return 0

        blueprint = self.blueprint(table)
        callback(blueprint)

        statements = self.to_sql_alter(blueprint)
        for sql in statements:
            self.executor.execute(sql)

        if statements:
            logger.info(f"Altered table {name} ({len(statements)} statements)")
        return len(statements)

    def to_sql_alter(self, blueprint: Blueprint) -> List[str]:
        """Generate ALTER TABLE statements for a blueprint.

        Args:
            blueprint: Populated blueprint (finalized here)

        Returns:
            List of SQL statements in declaration order
        """
        blueprint.finalize()
        statements = []

        for spec in blueprint.specs:
            clause = self._alter_clause(spec)
            if clause is None:
                logger.warning(f"Skipping unsupported spec kind {spec.kind!r} on {blueprint.table}")
                continue
            statements.append(f"ALTER TABLE `{blueprint.table}` {clause}")

        return statements

    def _alter_clause(self, spec: ColumnSpec) -> Optional[str]:
        if spec.kind is SpecKind.ADD:
            if spec.is_constraint:
                return f"ADD {spec.sql()}"
            return f"ADD COLUMN {spec.sql()}"
        if spec.kind is SpecKind.MODIFY:
            return f"MODIFY COLUMN {spec.sql()}"
        if spec.kind is SpecKind.DROP:
            return f"DROP COLUMN `{spec.column}`"
        if spec.kind is SpecKind.RENAME:
            return f"RENAME COLUMN `{spec.column}` TO `{spec.new_name}`"
        if spec.kind is SpecKind.DROP_INDEX:
            return f"DROP INDEX `{spec.column}`"
        return None

    # -------------------------------------------------------------------------
    # Drop
    # -------------------------------------------------------------------------

    def drop(self, table: str) -> None:
        """Drop a table if it exists."""
        name = self.table_name(table)
        self.executor.execute(f"DROP TABLE IF EXISTS `{name}`")
        logger.info(f"Dropped table {name}")


__all__ = ["Schema", "BlueprintCallback"]
