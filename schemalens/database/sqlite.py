"""SQLite catalog introspector."""

import re
from typing import Any, Dict, List, Optional, Sequence

from .base import DatabaseIntrospector
from .executor import QueryExecutor

_TYPE_PARAMS = re.compile(r"\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)")
_LENGTH_TYPES = ("char", "text", "clob", "binary", "blob")


def parse_type_parameters(native_type: str) -> Dict[str, Optional[int]]:
    """Extract length or precision/scale from a type like ``DECIMAL(10,2)``."""
    match = _TYPE_PARAMS.search(native_type or "")
    if not match:
        return {"max_length": None, "precision": None, "scale": None}
    first = int(match.group(1))
    second = int(match.group(2)) if match.group(2) is not None else None
    base = native_type.split("(")[0].lower()
    if any(t in base for t in _LENGTH_TYPES):
        return {"max_length": first, "precision": None, "scale": None}
    return {"max_length": None, "precision": first, "scale": second}


class SQLiteIntrospector(DatabaseIntrospector):
    """Reads table metadata from ``sqlite_master`` and the PRAGMA functions."""

    EXCLUDED_PREFIX = "sqlite_"

    def __init__(self, executor: QueryExecutor):
        super().__init__(executor)

    def get_tables(self, include_views: bool = False) -> List[Dict[str, Any]]:
        types = ("table", "view") if include_views else ("table",)
        placeholders = ", ".join("?" for _ in types)
        rows = self.executor.fetch_all(
            f"""
            SELECT name, type
            FROM sqlite_master
            WHERE type IN ({placeholders})
              AND name NOT LIKE 'sqlite_%'
            ORDER BY name
            """,
            types,
        )
        return [
            {"name": row["name"], "schema": None, "is_view": row["type"] == "view"}
            for row in rows
        ]

    def get_table_sql(self, table: str) -> Optional[str]:
        """Return the CREATE statement stored for a table, if any."""
        row = self.executor.fetch_one(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
        )
        return row["sql"] if row else None

    def get_columns(self, table: str, primary_keys: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        # pragma_table_info carries the pk flag, so primary_keys is not needed
        rows = self.executor.fetch_all(
            "SELECT cid, name, type, \"notnull\", dflt_value, pk FROM pragma_table_info(?) ORDER BY cid",
            (table,),
        )
        auto_increment_column = self._detect_auto_increment(self.get_table_sql(table), rows)

        columns = []
        for row in rows:
            native_type = row["type"] or ""
            column = {
                "name": row["name"],
                "type": native_type,
                "nullable": not row["notnull"],
                "default_value": row["dflt_value"],
                "is_primary_key": row["pk"] > 0,
                "is_auto_increment": row["name"] == auto_increment_column,
            }
            column.update(parse_type_parameters(native_type))
            columns.append(column)
        return columns

    def get_primary_keys(self, table: str) -> List[str]:
        rows = self.executor.fetch_all(
            "SELECT name, pk FROM pragma_table_info(?) WHERE pk > 0 ORDER BY pk",
            (table,),
        )
        return [row["name"] for row in rows]

    def get_views(self) -> List[Dict[str, Any]]:
        rows = self.executor.fetch_all(
            "SELECT name, sql FROM sqlite_master WHERE type = 'view' ORDER BY name"
        )
        return [
            {"name": row["name"], "schema": None, "definition": row["sql"] or ""}
            for row in rows
        ]

    def _detect_auto_increment(self, create_sql: Optional[str], rows: List[Dict[str, Any]]) -> Optional[str]:
        """Find the column that aliases the rowid, if any.

        An explicit AUTOINCREMENT wins; otherwise a single INTEGER primary
        key column is a rowid alias in an ordinary rowid table.
        """
        if create_sql:
            match = re.search(
                r"[\"`\[]?(\w+)[\"`\]]?\s+INTEGER\s+PRIMARY\s+KEY\s+(?:ASC\s+|DESC\s+)?AUTOINCREMENT",
                create_sql,
                re.IGNORECASE,
            )
            if match:
                return match.group(1)
            if re.search(r"WITHOUT\s+ROWID", create_sql, re.IGNORECASE):
                return None

        pk_rows = [row for row in rows if row["pk"] > 0]
        if len(pk_rows) == 1 and (pk_rows[0]["type"] or "").strip().upper() == "INTEGER":
            return pk_rows[0]["name"]
        return None
