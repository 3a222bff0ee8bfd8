"""Base classes for the migration system.

Defines the core abstractions:
- Migration: Abstract base class for all migrations
- MigrationRecord: Record of an applied migration
- MigrationStatus: Enum for migration states

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from roadschema.schema import Schema


class MigrationStatus(str, Enum):
    """Status of a migration."""

    PENDING = "pending"
    APPLIED = "applied"


@dataclass
class MigrationRecord:
    """Row of the migrations tracking table."""

    migration: str
    batch: int
    created_at: Optional[datetime] = None
    id: Optional[int] = None


class Migration(ABC):
    """Abstract base class for database migrations.

    Each migration must implement ``up()``. ``down()`` is available for
    explicit rollbacks; the tracker never calls it.

    A migration is identified by its fully-qualified class name, so renaming
    or moving the class makes it look like a new migration.
    """

    @abstractmethod
    def up(self, schema: "Schema") -> None:
        """Apply the migration.

        Args:
            schema: Schema compiler bound to the target database
        """
        pass

    def down(self, schema: "Schema") -> None:
        """Reverse the migration.

        Args:
            schema: Schema compiler bound to the target database
        """
        pass

    @property
    def identifier(self) -> str:
        """Stable name stored in the tracking table."""
        return migration_identifier(self)

    def __repr__(self) -> str:
        return f"<Migration {self.identifier}>"


def migration_identifier(unit: Any) -> str:
    """Fully-qualified type name of a migration unit."""
    cls = unit if isinstance(unit, type) else type(unit)
    return f"{cls.__module__}.{cls.__qualname__}"
