"""RoadSchema Errors - Exception taxonomy.

Callers can tell a bad declaration (``InvalidInput``) apart from a statement
the database rejected (``ExecutionFailure``) without parsing messages.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional


class RoadSchemaError(Exception):
    """Base exception for all RoadSchema errors."""

    pass


class InvalidInput(RoadSchemaError, ValueError):
    """A schema declaration was invalid (e.g. an empty enum value set)."""

    pass


class ExecutionFailure(RoadSchemaError):
    """The database executor rejected a statement."""

    def __init__(self, message: str, statement: Optional[str] = None):
        super().__init__(message)
        self.statement = statement


class DuplicateRecord(ExecutionFailure):
    """A write violated a uniqueness constraint."""

    pass


class ConfigError(RoadSchemaError):
    """Configuration could not be loaded."""

    pass


__all__ = [
    "RoadSchemaError",
    "InvalidInput",
    "ExecutionFailure",
    "DuplicateRecord",
    "ConfigError",
]
