"""Native column type to semantic type mapping."""

from typing import Any, Dict, Mapping, Optional

from .models import ColumnInfo

UNKNOWN_TYPE = "unknown"


class TypeMapper:
    """Maps native database type names to semantic target types.

    Resolution order:
    1. Caller overrides keyed by the raw native type string
    2. Built-in table, case-insensitive
    3. Built-in table on the base name with any ``(...)`` suffix stripped
    4. ``unknown``
    """

    TYPE_MAPPING: Dict[str, str] = {
        # Character types
        "text": "string",
        "varchar": "string",
        "char": "string",
        "character": "string",
        "character varying": "string",
        "nvarchar": "string",
        "nchar": "string",
        "clob": "string",
        "citext": "string",
        "uuid": "string",
        "name": "string",
        # Integer and numeric types
        "integer": "number",
        "int": "number",
        "int2": "number",
        "int4": "number",
        "int8": "number",
        "smallint": "number",
        "bigint": "number",
        "tinyint": "number",
        "mediumint": "number",
        "serial": "number",
        "bigserial": "number",
        "smallserial": "number",
        "real": "number",
        "float": "number",
        "float4": "number",
        "float8": "number",
        "double": "number",
        "double precision": "number",
        "numeric": "number",
        "decimal": "number",
        "money": "number",
        # Boolean
        "boolean": "boolean",
        "bool": "boolean",
        # Date and time
        "date": "Date",
        "datetime": "Date",
        "timestamp": "Date",
        "timestamptz": "Date",
        "timestamp without time zone": "Date",
        "timestamp with time zone": "Date",
        "time": "string",
        "timetz": "string",
        "interval": "string",
        # Structured
        "json": "object",
        "jsonb": "object",
        # Binary
        "blob": "Buffer",
        "bytea": "Buffer",
    }

    @classmethod
    def map_column_type(cls, db_type: str, custom_mappings: Optional[Mapping[str, str]] = None) -> str:
        """Map a native column type to its semantic type."""
        if custom_mappings and db_type in custom_mappings:
            return custom_mappings[db_type]

        normalized = (db_type or "").strip().lower()
        if normalized in cls.TYPE_MAPPING:
            return cls.TYPE_MAPPING[normalized]

        base_type = normalized.split("(")[0].strip()
        if base_type in cls.TYPE_MAPPING:
            return cls.TYPE_MAPPING[base_type]

        return UNKNOWN_TYPE

    @classmethod
    def map_column_info(cls, raw: Mapping[str, Any], custom_mappings: Optional[Mapping[str, str]] = None) -> ColumnInfo:
        """Build a ColumnInfo from a raw introspector column record.

        Args:
            raw: Mapping with at least ``name`` and ``type``; the optional keys
                ``nullable``, ``default_value``, ``is_primary_key``,
                ``is_auto_increment``, ``max_length``, ``precision`` and
                ``scale`` are carried over when present
            custom_mappings: Caller type overrides

        Returns:
            ColumnInfo with the semantic type resolved
        """
        native_type = raw.get("type") or ""
        return ColumnInfo(
            name=raw["name"],
            native_type=native_type,
            type=cls.map_column_type(native_type, custom_mappings),
            nullable=bool(raw.get("nullable", True)),
            default_value=raw.get("default_value"),
            is_primary_key=bool(raw.get("is_primary_key", False)),
            is_auto_increment=bool(raw.get("is_auto_increment", False)),
            max_length=raw.get("max_length"),
            precision=raw.get("precision"),
            scale=raw.get("scale"),
        )


def map_column_type(db_type: str, custom_mappings: Optional[Mapping[str, str]] = None) -> str:
    """Module-level shortcut for ``TypeMapper.map_column_type``."""
    return TypeMapper.map_column_type(db_type, custom_mappings)
