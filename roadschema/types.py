"""RoadSchema Types - Column data type definitions.

Provides the column types understood by the blueprint:
- Numeric types (Integer, BigInteger, Float, Decimal, Boolean)
- String types (String, Char, Text)
- Temporal types (Date, Time, DateTime, Timestamp)
- Binary and document types (Binary, JSON)
- Special types (Enum)

Each type supports:
- SQL type declaration for the MySQL-like target
- Validation of declared default values

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from roadschema.errors import InvalidInput


@dataclass
class ValidationError:
    """Validation error details."""

    field: str
    message: str
    value: Any
    constraint: Optional[str] = None


def quote(value: str) -> str:
    """Quote a string literal, doubling embedded single quotes."""
    return "'" + value.replace("'", "''") + "'"


def format_default(value: Any) -> str:
    """Format a default value for a column definition.

    Strings are always literals; SQL expressions such as
    ``CURRENT_TIMESTAMP`` go through ``ColumnDefinition.default_raw()``.

    Args:
        value: Python value to render

    Returns:
        SQL literal
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, str):
        return quote(value)
    return str(value)


class DataType(ABC):
    """Base class for all column data types.

    All types must implement:
    - sql_type(): Get SQL type declaration
    """

    @abstractmethod
    def sql_type(self) -> str:
        """Get SQL type declaration.

        Returns:
            SQL type string
        """
        pass

    def validate_default(self, value: Any) -> List[ValidationError]:
        """Validate a default value against this type.

        Args:
            value: Proposed default

        Returns:
            List of validation errors (empty if valid)
        """
        return []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.sql_type()})"


# =============================================================================
# Numeric Types
# =============================================================================


class Integer(DataType):
    """Integer type.

    Supports TINYINT, SMALLINT, INT and BIGINT, optionally UNSIGNED.
    """

    def __init__(self, *, size: str = "int", unsigned: bool = False):
        """Initialize Integer type.

        Args:
            size: tinyint, smallint, int, bigint
            unsigned: Whether unsigned (no negative values)
        """
        self.size = size.lower()
        self.unsigned = unsigned

    def sql_type(self) -> str:
        type_map = {
            "tinyint": "TINYINT",
            "smallint": "SMALLINT",
            "int": "INT",
            "bigint": "BIGINT",
        }
        sql = type_map.get(self.size, "INT")
        if self.unsigned:
            sql += " UNSIGNED"
        return sql


class BigInteger(Integer):
    """Convenience class for BIGINT type."""

    def __init__(self, **kwargs):
        kwargs["size"] = "bigint"
        super().__init__(**kwargs)


class Float(DataType):
    """Floating-point number type (FLOAT or DOUBLE)."""

    def __init__(self, *, precision: str = "float"):
        self.precision = precision.lower()

    def sql_type(self) -> str:
        return "DOUBLE" if self.precision == "double" else "FLOAT"


class Decimal(DataType):
    """Fixed-precision decimal type for financial calculations."""

    def __init__(self, precision: int = 8, scale: int = 2):
        """Initialize Decimal type.

        Args:
            precision: Total number of digits
            scale: Number of decimal places
        """
        if precision < 1 or scale < 0 or scale > precision:
            raise InvalidInput(f"Invalid DECIMAL precision/scale: ({precision}, {scale})")
        self.precision = precision
        self.scale = scale

    def sql_type(self) -> str:
        return f"DECIMAL({self.precision},{self.scale})"


class Boolean(DataType):
    """Boolean stored as TINYINT(1)."""

    def sql_type(self) -> str:
        return "TINYINT(1)"


# =============================================================================
# String Types
# =============================================================================


class String(DataType):
    """Variable-length string type."""

    def __init__(self, length: int = 191):
        if length < 1:
            raise InvalidInput(f"String length must be positive, got {length}")
        self.length = length

    def sql_type(self) -> str:
        return f"VARCHAR({self.length})"


class Char(String):
    """Fixed-length string type."""

    def sql_type(self) -> str:
        return f"CHAR({self.length})"


class Text(DataType):
    """Unbounded text type (TEXT, MEDIUMTEXT, LONGTEXT)."""

    def __init__(self, size: str = "text"):
        self.size = size.lower()

    def sql_type(self) -> str:
        return {"medium": "MEDIUMTEXT", "long": "LONGTEXT"}.get(self.size, "TEXT")


# =============================================================================
# Binary and Document Types
# =============================================================================


class Binary(DataType):
    """Binary large object."""

    def sql_type(self) -> str:
        return "BLOB"


class JSON(DataType):
    """JSON document."""

    def sql_type(self) -> str:
        return "JSON"


# =============================================================================
# Temporal Types
# =============================================================================


class Date(DataType):
    """Calendar date."""

    def sql_type(self) -> str:
        return "DATE"


class Time(DataType):
    """Time of day."""

    def sql_type(self) -> str:
        return "TIME"


class DateTime(DataType):
    """Date and time without time zone conversion."""

    def sql_type(self) -> str:
        return "DATETIME"


class Timestamp(DateTime):
    """Timestamp stored in UTC by the server."""

    def sql_type(self) -> str:
        return "TIMESTAMP"


# =============================================================================
# Special Types
# =============================================================================


class Enum(DataType):
    """Enumeration restricted to a fixed set of string values."""

    def __init__(self, values: Sequence[str]):
        """Initialize Enum type.

        Args:
            values: Allowed values, in declaration order

        Raises:
            InvalidInput: If no values are given
        """
        self.values = list(dict.fromkeys(str(v) for v in values))
        if not self.values:
            raise InvalidInput("Enum column requires at least one allowed value")

    def sql_type(self) -> str:
        return "ENUM(" + ",".join(quote(v) for v in self.values) + ")"

    def validate_default(self, value: Any) -> List[ValidationError]:
        if value is None or value in self.values:
            return []
        return [
            ValidationError(
                "default",
                f"Default {value!r} is not one of {self.values}",
                value,
                "enum",
            )
        ]


__all__ = [
    "ValidationError",
    "DataType",
    "Integer",
    "BigInteger",
    "Float",
    "Decimal",
    "Boolean",
    "String",
    "Char",
    "Text",
    "Binary",
    "JSON",
    "Date",
    "Time",
    "DateTime",
    "Timestamp",
    "Enum",
    "quote",
    "format_default",
]
