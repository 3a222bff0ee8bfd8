"""Pytest fixtures for RoadSchema tests."""

import re
from typing import Any, Dict, List, Mapping, Optional

import pytest

from roadschema.engine import DatabaseConfig, DatabaseExecutor
from roadschema.errors import DuplicateRecord, ExecutionFailure
from roadschema.schema import Schema


class RecordingExecutor(DatabaseExecutor):
    """In-memory executor that records every statement it is given.

    Tables come into existence through CREATE TABLE statements; records
    written with ``insert_record`` are kept per table and answer the
    tracking-table queries issued by the migration repository.
    """

    def __init__(self, tables=(), unique=("migration",)):
        self.tables = set(tables)
        self.unique = tuple(unique)
        self.statements: List[str] = []
        self.records: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_on: Optional[str] = None

    def exists(self, table: str) -> bool:
        return table in self.tables

    def execute(self, sql: str) -> None:
        self.statements.append(sql)
        if self.fail_on and self.fail_on in sql:
            raise ExecutionFailure("Statement rejected", sql)

        created = re.match(r"CREATE TABLE `([^`]+)`", sql)
        if created:
            self.tables.add(created.group(1))
        dropped = re.match(r"DROP TABLE IF EXISTS `([^`]+)`", sql)
        if dropped:
            self.tables.discard(dropped.group(1))
            self.records.pop(dropped.group(1), None)

    def _rows(self, sql: str) -> List[Dict[str, Any]]:
        table = re.search(r"FROM `([^`]+)`", sql).group(1)
        return self.records.get(table, [])

    def query_scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        rows = self._rows(sql)
        if sql.startswith("SELECT COUNT(*)"):
            return sum(1 for row in rows if row["migration"] == params["migration"])
        if sql.startswith("SELECT MAX(batch)"):
            return max((row["batch"] for row in rows), default=None)
        raise AssertionError(f"Unexpected query: {sql}")

    def query_rows(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        rows = sorted(self._rows(sql), key=lambda row: (row["batch"], row["id"]))
        return [dict(row) for row in rows]

    def insert_record(self, table: str, values: Mapping[str, Any]) -> Optional[int]:
        rows = self.records.setdefault(table, [])
        for column in self.unique:
            if any(row.get(column) == values.get(column) for row in rows):
                raise DuplicateRecord(f"Duplicate {column} in {table}")
        row = dict(values, id=len(rows) + 1)
        rows.append(row)
        return row["id"]


@pytest.fixture
def executor():
    """Recording executor with no tables."""
    return RecordingExecutor()


@pytest.fixture
def config():
    """Configuration with a WordPress-style table prefix."""
    return DatabaseConfig(prefix="wp_")


@pytest.fixture
def schema(executor, config):
    """Schema compiler bound to the recording executor."""
    return Schema(executor, config)
