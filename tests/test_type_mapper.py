"""Tests for native to semantic type mapping."""

import pytest

from schemalens.database.type_mappers import TypeMapper, UNKNOWN_TYPE, map_column_type


class TestMapColumnType:
    """Test resolution order of map_column_type."""

    @pytest.mark.parametrize("native,expected", [
        ("TEXT", "string"),
        ("character varying", "string"),
        ("int4", "number"),
        ("BIGINT", "number"),
        ("float8", "number"),
        ("bool", "boolean"),
        ("timestamptz", "Date"),
        ("DATETIME", "Date"),
        ("uuid", "string"),
        ("jsonb", "object"),
        ("BLOB", "Buffer"),
        ("bytea", "Buffer"),
    ])
    def test_builtin_types(self, native, expected):
        """Test built-in table lookups are case-insensitive."""
        assert map_column_type(native) == expected

    def test_parameterized_type_falls_back_to_base(self):
        """Test VARCHAR(255) and DECIMAL(10,2) resolve through their base name."""
        assert map_column_type("VARCHAR(255)") == "string"
        assert map_column_type("DECIMAL(10,2)") == "number"

    def test_unknown_type(self):
        """Test unrecognized types map to 'unknown'."""
        assert map_column_type("geometry") == UNKNOWN_TYPE
        assert map_column_type("") == UNKNOWN_TYPE

    def test_override_wins(self):
        """Test caller overrides take priority over the built-in table."""
        assert map_column_type("jsonb", {"jsonb": "Record<string, unknown>"}) == "Record<string, unknown>"

    def test_override_is_keyed_by_raw_type(self):
        """Test overrides match the raw native string exactly."""
        assert map_column_type("JSONB", {"jsonb": "Custom"}) == "object"


class TestMapColumnInfo:
    """Test building ColumnInfo from raw introspector records."""

    def test_full_record(self):
        """Test all optional keys are carried over."""
        column = TypeMapper.map_column_info({
            "name": "price",
            "type": "DECIMAL(10,2)",
            "nullable": False,
            "default_value": "0",
            "is_primary_key": False,
            "is_auto_increment": False,
            "precision": 10,
            "scale": 2,
        })

        assert column.name == "price"
        assert column.native_type == "DECIMAL(10,2)"
        assert column.type == "number"
        assert column.nullable is False
        assert column.default_value == "0"
        assert column.precision == 10
        assert column.scale == 2
        assert column.max_length is None

    def test_minimal_record_defaults(self):
        """Test a record with only name and type gets nullable defaults."""
        column = TypeMapper.map_column_info({"name": "notes", "type": None})

        assert column.native_type == ""
        assert column.type == UNKNOWN_TYPE
        assert column.nullable is True
        assert column.is_primary_key is False
