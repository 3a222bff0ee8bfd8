"""RoadSchema Blueprint - Fluent table definition builder.

A ``Blueprint`` accumulates an ordered list of specs for one table:
- column definitions (``ADD``) created by the column-type methods
- index and constraint definitions (also ``ADD``)
- alteration instructions (``MODIFY``, ``DROP``, ``RENAME``, ``DROP_INDEX``)

Every column-type method returns a ``ColumnDefinition`` handle bound to the
spec it appended. Modifiers called on the handle edit that column only;
modifiers called on the blueprint edit the most recently defined column.

Usage:
    from roadschema.blueprint import Blueprint

    table = Blueprint("books", prefix="wp_")
    table.increments("id")
    table.string("title", 255)
    table.integer("pages").nullable().default(0)
    table.foreign_id("author_id").references("id").on("authors")
    table.timestamps()

Spec lifecycle:
    ┌─────────┐  modifiers   ┌──────────┐  finalize()  ┌────────────┐
    │ appended│─────────────▶│  edited  │─────────────▶│  compiled  │
    └─────────┘              └──────────┘              └────────────┘

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from roadschema.errors import InvalidInput
from roadschema.foreign import ForeignKeyDraft
from roadschema.types import (
    JSON,
    BigInteger,
    Binary,
    Boolean,
    Char,
    DataType,
    Date,
    DateTime,
    Decimal,
    Float,
    Integer,
    String,
    Text,
    Time,
    Timestamp,
    format_default,
    quote,
)
from roadschema.types import Enum as EnumType

logger = logging.getLogger(__name__)

Columns = Union[str, Sequence[str], None]


class SpecKind(Enum):
    """Kinds of structural elements a blueprint can hold."""

    ADD = "add"
    MODIFY = "modify"
    DROP = "drop"
    RENAME = "rename"
    DROP_INDEX = "drop_index"


# =============================================================================
# Specs
# =============================================================================


class ColumnSpec:
    """One structural element of a table definition.

    Index and constraint specs are ``ADD`` specs with ``is_constraint`` set;
    they carry their SQL fragment verbatim.
    """

    def __init__(
        self,
        kind: SpecKind,
        column: Optional[str] = None,
        text: str = "",
        new_name: Optional[str] = None,
        is_constraint: bool = False,
    ):
        self.kind = kind
        self.column = column
        self._text = text
        self.new_name = new_name
        self.is_constraint = is_constraint

    def sql(self) -> str:
        """SQL fragment for this spec."""
        return self._text

    def __repr__(self) -> str:
        return f"<{self.kind.name} {self.sql() or self.column}>"


class ColumnDefinition(ColumnSpec):
    """Handle to a column spec appended by a blueprint.

    The column's SQL fragment is rendered from its fields on demand, so
    modifiers can be applied in any order:

        `name` TYPE [NOT NULL|NULL] [AUTO_INCREMENT] [PRIMARY KEY]
        [DEFAULT v] [ON UPDATE CURRENT_TIMESTAMP] [COMMENT 'c'] [FIRST|AFTER `col`]

    Unknown attributes fall through to the owning blueprint, so a chain can
    move on to the next column: ``table.increments().string("title")``.
    """

    def __init__(
        self,
        blueprint: "Blueprint",
        name: str,
        data_type: Optional[DataType] = None,
        *,
        kind: SpecKind = SpecKind.ADD,
        definition: Optional[str] = None,
    ):
        super().__init__(kind, column=name)
        self._blueprint = blueprint
        self.name = name
        self.data_type = data_type
        self.definition = definition
        # None leaves the nullability marker out entirely
        self.is_nullable: Optional[bool] = False if data_type is not None else None
        self.auto_increment = False
        self.primary_key = False
        self.has_default = False
        self.default_value: Any = None
        self.default_expression: Optional[str] = None
        self.update_current = False
        self.comment_text: Optional[str] = None
        self.position: Optional[str] = None

    @property
    def is_typed(self) -> bool:
        return self.data_type is not None or self.definition is not None

    def sql(self) -> str:
        parts = [f"`{self.name}`"]

        if self.definition is not None:
            parts.append(self.definition)
        elif self.data_type is not None:
            parts.append(self.data_type.sql_type())

        if self.is_nullable is not None:
            parts.append("NULL" if self.is_nullable else "NOT NULL")

        if self.auto_increment:
            parts.append("AUTO_INCREMENT")

        if self.primary_key:
            parts.append("PRIMARY KEY")

        if self.default_expression is not None:
            parts.append(f"DEFAULT {self.default_expression}")
        elif self.has_default:
            parts.append(f"DEFAULT {format_default(self.default_value)}")

        if self.update_current:
            parts.append("ON UPDATE CURRENT_TIMESTAMP")

        if self.comment_text is not None:
            parts.append(f"COMMENT {quote(self.comment_text)}")

        if self.position:
            parts.append(self.position)

        return " ".join(parts)

    # -------------------------------------------------------------------------
    # Modifiers
    # -------------------------------------------------------------------------

    def nullable(self, value: bool = True) -> ColumnDefinition:
        """Allow (or forbid) NULL values in this column."""
        self.is_nullable = value
        return self

    def default(self, value: Any) -> ColumnDefinition:
        """Set the default value, replacing any earlier default.

        Args:
            value: Python value; strings are quoted, booleans become 1/0

        Raises:
            InvalidInput: If the value is not valid for the column type
        """
        if self.data_type is not None:
            errors = self.data_type.validate_default(value)
            if errors:
                raise InvalidInput(f"Column {self.name}: {errors[0].message}")
        self.has_default = True
        self.default_value = value
        self.default_expression = None
        return self

    def default_raw(self, expression: str) -> ColumnDefinition:
        """Set an unquoted SQL expression as the default, replacing any earlier default.

        Example: ``table.date("day").default_raw("(CURRENT_DATE)")``
        """
        self.has_default = False
        self.default_value = None
        self.default_expression = expression
        return self

    def use_current(self) -> ColumnDefinition:
        """Default the column to CURRENT_TIMESTAMP."""
        return self.default_raw("CURRENT_TIMESTAMP")

    def use_current_on_update(self) -> ColumnDefinition:
        """Refresh the column to CURRENT_TIMESTAMP on every update."""
        self.update_current = True
        return self

    def comment(self, text: str) -> ColumnDefinition:
        """Attach a column comment."""
        self.comment_text = text
        return self

    def after(self, column: str) -> ColumnDefinition:
        """Place the column after another column."""
        self.position = f"AFTER `{column}`"
        return self

    def first(self) -> ColumnDefinition:
        """Place the column first in the table."""
        self.position = "FIRST"
        return self

    def index(self, name: Optional[str] = None) -> ColumnDefinition:
        """Add a plain index on this column."""
        self._blueprint.index(self.name, name=name)
        return self

    def unique(self, name: Optional[str] = None) -> ColumnDefinition:
        """Add a unique index on this column."""
        self._blueprint.unique(self.name, name=name)
        return self

    def primary(self) -> ColumnDefinition:
        """Add a primary key constraint on this column."""
        self._blueprint.primary(self.name)
        return self

    def change(self) -> ColumnDefinition:
        """Turn this definition into a MODIFY of an existing column."""
        self.kind = SpecKind.MODIFY
        return self

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._blueprint, name)


# =============================================================================
# Blueprint
# =============================================================================


class Blueprint:
    """Accumulates column specs and operations for one table.

    Args:
        table: Logical table name (without prefix)
        prefix: Storage prefix prepended to table names
    """

    def __init__(self, table: str, prefix: str = ""):
        self.name = table
        self.prefix = prefix
        self.table = prefix + table
        self.specs: List[ColumnSpec] = []
        self.foreign_keys: List[ForeignKeyDraft] = []
        self._current: Optional[ColumnDefinition] = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _append(self, spec: ColumnSpec) -> ColumnSpec:
        self.specs.append(spec)
        if isinstance(spec, ColumnDefinition):
            self._current = spec
        return spec

    def _define(self, name: str, data_type: DataType, default: Any = None) -> ColumnDefinition:
        """Append a typed column, or type a pending ``modify_column`` spec."""
        current = self._current
        if (
            current is not None
            and current.kind is SpecKind.MODIFY
            and current.name == name
            and not current.is_typed
        ):
            current.data_type = data_type
            if current.is_nullable is None:
                current.is_nullable = False
            column = current
        else:
            column = ColumnDefinition(self, name, data_type)
            self._append(column)

        if default is not None:
            column.default(default)
        return column

    def _resolve_columns(self, columns: Columns) -> List[str]:
        if columns is None:
            return [self._current.name] if self._current is not None else []
        if isinstance(columns, str):
            return [columns]
        return list(columns)

    def _constraint(self, text: str) -> ColumnSpec:
        return self._append(ColumnSpec(SpecKind.ADD, text=text, is_constraint=True))

    @staticmethod
    def _column_list(columns: Sequence[str]) -> str:
        return ", ".join(f"`{c}`" for c in columns)

    @property
    def current(self) -> Optional[ColumnDefinition]:
        """The most recently defined column, if any."""
        return self._current

    @property
    def columns(self) -> List[str]:
        """Names of the columns added by this blueprint."""
        return [
            s.name
            for s in self.specs
            if isinstance(s, ColumnDefinition) and s.kind is SpecKind.ADD
        ]

    # -------------------------------------------------------------------------
    # Column types
    # -------------------------------------------------------------------------

    def increments(self, name: str = "id") -> ColumnDefinition:
        """Auto-incrementing unsigned INT primary key."""
        column = self._define(name, Integer(unsigned=True))
        column.auto_increment = True
        column.primary_key = True
        return column

    def big_increments(self, name: str = "id") -> ColumnDefinition:
        """Auto-incrementing unsigned BIGINT primary key."""
        column = self._define(name, BigInteger(unsigned=True))
        column.auto_increment = True
        column.primary_key = True
        return column

    def string(self, name: str, length: int = 191, default: Optional[str] = None) -> ColumnDefinition:
        return self._define(name, String(length), default)

    def char(self, name: str, length: int = 255, default: Optional[str] = None) -> ColumnDefinition:
        return self._define(name, Char(length), default)

    def text(self, name: str) -> ColumnDefinition:
        return self._define(name, Text())

    def long_text(self, name: str) -> ColumnDefinition:
        return self._define(name, Text("long"))

    def json(self, name: str) -> ColumnDefinition:
        return self._define(name, JSON())

    def blob(self, name: str) -> ColumnDefinition:
        return self._define(name, Binary())

    def integer(self, name: str, unsigned: bool = True, default: Optional[int] = None) -> ColumnDefinition:
        return self._define(name, Integer(unsigned=unsigned), default)

    def big_integer(self, name: str, unsigned: bool = False, default: Optional[int] = None) -> ColumnDefinition:
        return self._define(name, BigInteger(unsigned=unsigned), default)

    def float(self, name: str, default: Optional[float] = None) -> ColumnDefinition:
        return self._define(name, Float(precision="float"), default)

    def double(self, name: str, default: Optional[float] = None) -> ColumnDefinition:
        return self._define(name, Float(precision="double"), default)

    def decimal(
        self,
        name: str,
        precision: int = 8,
        scale: int = 2,
        default: Any = None,
    ) -> ColumnDefinition:
        return self._define(name, Decimal(precision, scale), default)

    def enum(self, name: str, values: Sequence[str], default: Optional[str] = None) -> ColumnDefinition:
        """Add an ENUM column.

        Args:
            name: Column name
            values: Allowed values
            default: Optional default; must be one of ``values``

        Raises:
            InvalidInput: If ``values`` is empty or ``default`` is not allowed
        """
        return self._define(name, EnumType(values), default)

    def boolean(self, name: str, default: Optional[bool] = None) -> ColumnDefinition:
        return self._define(name, Boolean(), default)

    def date(self, name: str) -> ColumnDefinition:
        return self._define(name, Date())

    def time(self, name: str) -> ColumnDefinition:
        return self._define(name, Time())

    def date_time(self, name: str) -> ColumnDefinition:
        return self._define(name, DateTime())

    def timestamp(self, name: str) -> ColumnDefinition:
        return self._define(name, Timestamp())

    def timestamps(self) -> Blueprint:
        """Add ``created_at`` and ``updated_at`` with automatic stamping."""
        self.date_time("created_at").use_current()
        self.date_time("updated_at").use_current().use_current_on_update()
        return self

    def soft_deletes(self, name: str = "deleted_at") -> ColumnDefinition:
        """Add a nullable deletion timestamp."""
        return self.date_time(name).nullable()

    def add_column(self, name: str, definition: str) -> ColumnDefinition:
        """Add a column from a raw SQL definition.

        Example: ``table.add_column("status", "TINYINT(1) NOT NULL DEFAULT 0")``
        """
        column = ColumnDefinition(self, name, definition=definition)
        self._append(column)
        return column

    def foreign_id(self, column: str) -> ForeignKeyDraft:
        """Add an unsigned INT key column and start a foreign key on it."""
        definition = self._define(column, Integer(unsigned=True))
        return self.foreign(definition)

    def foreign(self, column: Union[str, ColumnDefinition]) -> ForeignKeyDraft:
        """Start a foreign key on a column without defining the column."""
        if isinstance(column, str):
            column = ColumnDefinition(self, column)
        draft = ForeignKeyDraft(self, column)
        self.foreign_keys.append(draft)
        return draft

    # -------------------------------------------------------------------------
    # Modifiers for the most recently defined column
    # -------------------------------------------------------------------------

    def nullable(self, value: bool = True) -> Blueprint:
        if self._current is not None:
            self._current.nullable(value)
        return self

    def default(self, value: Any) -> Blueprint:
        if self._current is not None:
            self._current.default(value)
        return self

    def comment(self, text: str) -> Blueprint:
        if self._current is not None:
            self._current.comment(text)
        return self

    def after(self, column: str) -> Blueprint:
        if self._current is not None:
            self._current.after(column)
        return self

    def first(self) -> Blueprint:
        if self._current is not None:
            self._current.first()
        return self

    # -------------------------------------------------------------------------
    # Indexes and constraints
    # -------------------------------------------------------------------------

    def index(self, columns: Columns = None, name: Optional[str] = None) -> Blueprint:
        """Add a plain index.

        Args:
            columns: Column name(s); defaults to the last defined column
            name: Index name; defaults to ``{table}_{columns}_index``
        """
        cols = self._resolve_columns(columns)
        if cols:
            name = name or f"{self.table}_{'_'.join(cols)}_index"
            self._constraint(f"KEY `{name}` ({self._column_list(cols)})")
        return self

    def unique(self, columns: Columns = None, name: Optional[str] = None) -> Blueprint:
        """Add a unique index."""
        cols = self._resolve_columns(columns)
        if cols:
            name = name or f"{self.table}_{'_'.join(cols)}_unique"
            self._constraint(f"UNIQUE KEY `{name}` ({self._column_list(cols)})")
        return self

    def primary(self, columns: Columns = None) -> Blueprint:
        """Add a (possibly composite) primary key constraint."""
        cols = self._resolve_columns(columns)
        if cols:
            name = f"{self.table}_{'_'.join(cols)}_primary"
            self._constraint(f"CONSTRAINT `{name}` PRIMARY KEY ({self._column_list(cols)})")
        return self

    # -------------------------------------------------------------------------
    # Alterations
    # -------------------------------------------------------------------------

    def rename_column(self, old: str, new: str) -> Blueprint:
        self._append(ColumnSpec(SpecKind.RENAME, column=old, new_name=new))
        return self

    def modify_column(self, name: str) -> ColumnDefinition:
        """Start a MODIFY of an existing column.

        The next typed definition for the same column name (for example
        ``table.string(name, 255)``) supplies the new type.
        """
        column = ColumnDefinition(self, name, kind=SpecKind.MODIFY)
        self._append(column)
        return column

    def drop_column(self, *names: str) -> Blueprint:
        for name in names:
            self._append(ColumnSpec(SpecKind.DROP, column=name))
        return self

    def drop_index(self, name: str) -> Blueprint:
        self._append(ColumnSpec(SpecKind.DROP_INDEX, column=name))
        return self

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def finalize(self) -> None:
        """Promote complete foreign key drafts to constraint specs."""
        for draft in self.foreign_keys:
            if not draft.is_complete:
                logger.debug(f"Dropping incomplete foreign key on {self.table}.{draft.column}")
                continue
            self._constraint(draft.sql())
        self.foreign_keys = []

    def add_specs(self) -> List[ColumnSpec]:
        """Specs that belong in a CREATE TABLE body."""
        return [s for s in self.specs if s.kind is SpecKind.ADD]

    def __repr__(self) -> str:
        return f"Blueprint({self.table}, specs={len(self.specs)})"


__all__ = ["Blueprint", "ColumnDefinition", "ColumnSpec", "SpecKind"]
