"""Tests for column data types and default formatting."""

import pytest

from roadschema.errors import InvalidInput
from roadschema.types import (
    Decimal,
    Enum,
    Integer,
    String,
    Text,
    format_default,
    quote,
)


class TestFormatDefault:
    """Tests for format_default()."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, "NULL"),
            (True, "1"),
            (False, "0"),
            (0, "0"),
            (2.5, "2.5"),
            ("draft", "'draft'"),
            ("it's", "'it''s'"),
            ("CURRENT_TIMESTAMP", "'CURRENT_TIMESTAMP'"),
            ("now()", "'now()'"),
        ],
    )
    def test_literals(self, value, expected):
        assert format_default(value) == expected

    def test_quote_doubles_single_quotes(self):
        assert quote("a'b''c") == "'a''b''''c'"


class TestTypes:
    """Tests for SQL type declarations."""

    def test_integer_sizes(self):
        assert Integer().sql_type() == "INT"
        assert Integer(size="tinyint", unsigned=True).sql_type() == "TINYINT UNSIGNED"
        assert Integer(size="unknown").sql_type() == "INT"

    def test_text_sizes(self):
        assert Text("medium").sql_type() == "MEDIUMTEXT"
        assert Text().sql_type() == "TEXT"

    def test_invalid_lengths(self):
        with pytest.raises(InvalidInput):
            String(0)
        with pytest.raises(InvalidInput):
            Decimal(4, 6)

    def test_enum_deduplicates_and_quotes(self):
        column = Enum(["a", "b", "a", "o'k"])
        assert column.sql_type() == "ENUM('a','b','o''k')"

    def test_enum_default_validation(self):
        column = Enum(["a", "b"])
        assert column.validate_default("a") == []
        assert column.validate_default(None) == []
        errors = column.validate_default("z")
        assert len(errors) == 1
        assert errors[0].constraint == "enum"
