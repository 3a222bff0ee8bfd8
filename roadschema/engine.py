"""RoadSchema Engine - Database executor contract and configuration.

The schema compiler and migration tracker never open connections
themselves. They talk to a ``DatabaseExecutor`` that is injected by the
caller:

    DatabaseExecutor
    ├── exists(table)              -> bool
    ├── execute(sql)               -> None
    ├── query_scalar(sql, params)  -> value | None
    ├── query_rows(sql, params)    -> [row, ...]
    └── insert_record(table, row)  -> generated id

``SQLAlchemyExecutor`` implements the contract on top of an SQLAlchemy
``Engine``. Queries use named ``:param`` placeholders; statements passed to
``execute()`` go to the driver untouched, so literals may contain colons.

The compiler emits MySQL DDL, so ``create_executor`` only accepts MySQL and
MariaDB URLs.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import sqlalchemy as sa
import yaml
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, IntegrityError, SQLAlchemyError

from roadschema.errors import ConfigError, DuplicateRecord, ExecutionFailure

logger = logging.getLogger(__name__)

RowType = Dict[str, Any]

# Backends whose DDL the compiler emits
SUPPORTED_BACKENDS = ("mysql", "mariadb")

# MySQL ER_DUP_ENTRY, ER_DUP_ENTRY_WITH_KEY_NAME
MYSQL_DUPLICATE_CODES = (1062, 1586)


@dataclass
class DatabaseConfig:
    """Configuration for schema compilation and migration tracking."""

    url: str = "mysql+pymysql://root@localhost:3306/roadschema"
    prefix: str = ""
    engine: str = "InnoDB"
    charset: str = "utf8mb4"
    collation: str = "utf8mb4_unicode_ci"
    migrations_table: str = "migrations"
    echo: bool = False

    @property
    def table_options(self) -> str:
        """Table options appended to CREATE TABLE statements."""
        return f"ENGINE={self.engine} DEFAULT CHARSET={self.charset} COLLATE={self.collation}"

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DatabaseConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")

        return cls(**data)

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Load configuration from environment variables."""
        defaults = cls()
        return cls(
            url=os.getenv("ROADSCHEMA_URL", defaults.url),
            prefix=os.getenv("ROADSCHEMA_PREFIX", defaults.prefix),
            engine=os.getenv("ROADSCHEMA_ENGINE", defaults.engine),
            charset=os.getenv("ROADSCHEMA_CHARSET", defaults.charset),
            collation=os.getenv("ROADSCHEMA_COLLATION", defaults.collation),
            migrations_table=os.getenv("ROADSCHEMA_MIGRATIONS_TABLE", defaults.migrations_table),
            echo=os.getenv("ROADSCHEMA_ECHO", "false").lower() in ("1", "true", "yes"),
        )


class DatabaseExecutor(ABC):
    """Contract for the component that actually talks to the database.

    Implementations raise ``ExecutionFailure`` (or ``DuplicateRecord``) when
    the database rejects a statement.
    """

    @abstractmethod
    def exists(self, table: str) -> bool:
        """Check whether a table exists.

        Args:
            table: Fully-qualified table name

        Returns:
            True if the table exists
        """
        pass

    @abstractmethod
    def execute(self, sql: str) -> None:
        """Execute a statement that returns no rows."""
        pass

    @abstractmethod
    def query_scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the first column of the first row, or None."""
        pass

    @abstractmethod
    def query_rows(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[RowType]:
        """Return all rows as dictionaries."""
        pass

    @abstractmethod
    def insert_record(self, table: str, values: Mapping[str, Any]) -> Optional[int]:
        """Insert one row.

        Args:
            table: Fully-qualified table name
            values: Column name -> value

        Returns:
            Generated id, when the database reports one
        """
        pass


class SQLAlchemyExecutor(DatabaseExecutor):
    """Executor backed by an SQLAlchemy engine.

    Each call runs in its own ``engine.begin()`` block, so every statement
    is committed before the call returns.

    Example:
        executor = SQLAlchemyExecutor(sa.create_engine("mysql+pymysql://..."))
        schema = Schema(executor)
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def exists(self, table: str) -> bool:
        return sa.inspect(self.engine).has_table(table)

    def execute(self, sql: str) -> None:
        logger.debug(f"Executing: {sql}")
        try:
            with self.engine.begin() as conn:
                conn.exec_driver_sql(sql)
        except SQLAlchemyError as e:
            raise _wrap_error(e, "Statement", sql) from e

    def query_scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._run(sql, params, lambda result: result.scalar())

    def query_rows(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[RowType]:
        return self._run(sql, params, lambda result: [dict(row) for row in result.mappings()])

    def insert_record(self, table: str, values: Mapping[str, Any]) -> Optional[int]:
        target = sa.table(table, *(sa.column(name) for name in values))
        statement = sa.insert(target).values(dict(values))
        try:
            with self.engine.begin() as conn:
                result = conn.execute(statement)
                return result.lastrowid
        except SQLAlchemyError as e:
            raise _wrap_error(e, f"Insert into {table}", str(statement)) from e

    def _run(self, sql: str, params: Optional[Mapping[str, Any]] = None, reader: Any = None) -> Any:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(sa.text(sql), dict(params or {}))
                return reader(result) if reader else None
        except SQLAlchemyError as e:
            raise _wrap_error(e, "Statement", sql) from e

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an integrity error comes from a unique key.

    NOT NULL, foreign key and check violations are integrity errors too;
    only duplicate-key errors count here.
    """
    orig = error.orig
    args = getattr(orig, "args", ())
    if args and args[0] in MYSQL_DUPLICATE_CODES:
        return True
    if getattr(orig, "pgcode", None) == "23505":
        return True
    message = str(orig)
    return "Duplicate entry" in message or "UNIQUE constraint failed" in message


def _wrap_error(error: SQLAlchemyError, action: str, statement: str) -> ExecutionFailure:
    if isinstance(error, IntegrityError) and is_unique_violation(error):
        return DuplicateRecord(f"{action} rejected: {error.orig}", statement)
    return ExecutionFailure(f"{action} failed: {error}", statement)


def create_executor(config: Optional[DatabaseConfig] = None) -> SQLAlchemyExecutor:
    """Build an executor from configuration.

    Raises:
        ConfigError: If the URL is malformed or names a backend other
            than MySQL or MariaDB
    """
    config = config or DatabaseConfig()
    try:
        url = make_url(config.url)
    except ArgumentError as e:
        raise ConfigError(f"Invalid database URL {config.url!r}: {e}") from e

    backend = url.get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ConfigError(
            f"Unsupported backend {backend!r}; expected one of {', '.join(SUPPORTED_BACKENDS)}"
        )

    engine = sa.create_engine(url, echo=config.echo)
    logger.info(f"Executor created for {engine.url.render_as_string(hide_password=True)}")
    return SQLAlchemyExecutor(engine)


__all__ = [
    "DatabaseConfig",
    "DatabaseExecutor",
    "SQLAlchemyExecutor",
    "create_executor",
    "is_unique_violation",
]
