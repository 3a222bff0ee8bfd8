"""RoadSchema - Schema builder and migration tracker for BlackRoad OS.

RoadSchema provides:
- A fluent table blueprint (columns, indexes, foreign keys, alterations)
- Idempotent CREATE / ALTER compilation against an injected executor
- Exactly-once migration tracking with batch numbering

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                          RoadSchema                            │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐             │
    │  │  Blueprint  │  │   Schema    │  │  Database   │             │
    │  │  + FK Draft │──│  Compiler   │──│  Executor   │             │
    │  └─────────────┘  └─────────────┘  └─────────────┘             │
    │                          │                                      │
    │                   ┌─────────────┐  ┌─────────────┐             │
    │                   │  Migration  │  │  Migration  │             │
    │                   │   Tracker   │──│ Repository  │             │
    │                   └─────────────┘  └─────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Usage:
    from roadschema import DatabaseConfig, Migration, MigrationTracker, create_executor

    config = DatabaseConfig.from_yaml("roadschema.yaml")
    executor = create_executor(config)

    class CreateBooksTable(Migration):
        def up(self, schema):
            def define(table):
                table.increments("id")
                table.string("title", 255)
                table.foreign_id("author_id").references("id").on("authors").on_delete("cascade")
                table.timestamps()

            schema.create("books", define)

    MigrationTracker(executor, config).run_migrations([CreateBooksTable()])

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "BlackRoad OS, Inc."
__email__ = "engineering@blackroad.io"

# Core exports
from roadschema.blueprint import Blueprint, ColumnDefinition, ColumnSpec, SpecKind
from roadschema.engine import DatabaseConfig, DatabaseExecutor, SQLAlchemyExecutor, create_executor
from roadschema.errors import (
    ConfigError,
    DuplicateRecord,
    ExecutionFailure,
    InvalidInput,
    RoadSchemaError,
)
from roadschema.foreign import ForeignKeyDraft, OnAction
from roadschema.schema import Schema

# Migration exports
from roadschema.migrations import (
    Migration,
    MigrationRecord,
    MigrationRepository,
    MigrationStatus,
    MigrationTracker,
    run_migrations,
)

__all__ = [
    # Version
    "__version__",

    # Schema
    "Schema",
    "Blueprint",
    "ColumnDefinition",
    "ColumnSpec",
    "SpecKind",
    "ForeignKeyDraft",
    "OnAction",

    # Engine
    "DatabaseConfig",
    "DatabaseExecutor",
    "SQLAlchemyExecutor",
    "create_executor",

    # Migrations
    "Migration",
    "MigrationRecord",
    "MigrationRepository",
    "MigrationStatus",
    "MigrationTracker",
    "run_migrations",

    # Errors
    "RoadSchemaError",
    "InvalidInput",
    "ExecutionFailure",
    "DuplicateRecord",
    "ConfigError",
]
