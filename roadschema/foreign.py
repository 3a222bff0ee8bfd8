"""RoadSchema Foreign Keys - Deferred foreign key declarations.

``Blueprint.foreign_id()`` appends the key column and hands back a
``ForeignKeyDraft``. The draft collects the referenced column and table plus
the referential actions; the blueprint turns every complete draft into a
``CONSTRAINT ... FOREIGN KEY`` spec when it is finalized.

Usage:
    table.foreign_id("user_id").references("id").on("users").on_delete("cascade")

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from roadschema.blueprint import Blueprint, ColumnDefinition


class OnAction(Enum):
    """Referential action for foreign keys."""

    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    NO_ACTION = "NO ACTION"


def normalize_action(action: Union[str, OnAction]) -> str:
    """Render a referential action in upper form."""
    if isinstance(action, OnAction):
        return action.value
    return str(action).strip().upper()


class ForeignKeyDraft:
    """A foreign key that has not been finalized yet.

    Each ``foreign_id()`` call returns its own draft, so starting a new
    foreign key never disturbs an earlier one. Attributes that are not part
    of the draft fall through to the key column's handle, which lets callers
    apply column modifiers (``nullable()``, ``comment()``) or keep defining
    columns on the same chain.
    """

    def __init__(self, blueprint: "Blueprint", column: "ColumnDefinition"):
        self._blueprint = blueprint
        self._column = column
        self.referenced_column: Optional[str] = None
        self.referenced_table: Optional[str] = None
        self.delete_action: Optional[str] = None
        self.update_action: Optional[str] = None

    @property
    def column(self) -> str:
        """Name of the local key column."""
        return self._column.name

    @property
    def is_complete(self) -> bool:
        """Whether both the referenced column and table are known."""
        return bool(self.referenced_column and self.referenced_table)

    def references(self, column: str) -> ForeignKeyDraft:
        """Set the column this key references."""
        self.referenced_column = column
        return self

    def on(self, table: str) -> ForeignKeyDraft:
        """Set the referenced table (the blueprint prefix is applied)."""
        self.referenced_table = self._blueprint.prefix + table
        return self

    def on_delete(self, action: Union[str, OnAction]) -> ForeignKeyDraft:
        """Set the ON DELETE action (CASCADE, SET NULL, RESTRICT, NO ACTION)."""
        self.delete_action = normalize_action(action)
        return self

    def on_update(self, action: Union[str, OnAction]) -> ForeignKeyDraft:
        """Set the ON UPDATE action (CASCADE, SET NULL, RESTRICT, NO ACTION)."""
        self.update_action = normalize_action(action)
        return self

    def cascade_on_delete(self) -> ForeignKeyDraft:
        return self.on_delete(OnAction.CASCADE)

    def null_on_delete(self) -> ForeignKeyDraft:
        return self.on_delete(OnAction.SET_NULL)

    def constraint_name(self) -> str:
        """Deterministic constraint name for this key."""
        return f"{self._blueprint.table}_{self.column}_fk"

    def sql(self) -> str:
        """Generate the constraint fragment.

        Returns:
            ``CONSTRAINT ... FOREIGN KEY ... REFERENCES ...`` text
        """
        sql = (
            f"CONSTRAINT `{self.constraint_name()}` FOREIGN KEY (`{self.column}`) "
            f"REFERENCES `{self.referenced_table}` (`{self.referenced_column}`)"
        )
        if self.delete_action:
            sql += f" ON DELETE {self.delete_action}"
        if self.update_action:
            sql += f" ON UPDATE {self.update_action}"
        return sql

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._column, name)

    def __repr__(self) -> str:
        return (
            f"ForeignKeyDraft({self.column} -> "
            f"{self.referenced_table}.{self.referenced_column})"
        )


__all__ = ["OnAction", "ForeignKeyDraft", "normalize_action"]
