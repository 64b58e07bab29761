"""PostgreSQL catalog introspector."""

from typing import Any, Dict, List, Optional, Sequence

from .base import DatabaseIntrospector
from .executor import QueryExecutor


class PostgreSQLIntrospector(DatabaseIntrospector):
    """Reads table metadata for one PostgreSQL namespace."""

    EXCLUDED_SCHEMAS = {'information_schema', 'pg_catalog', 'pg_toast'}

    def __init__(self, executor: QueryExecutor, schema: str = "public"):
        """Initialize PostgreSQL introspector.

        Args:
            executor: Connected executor using %s-style parameters
            schema: Namespace to introspect
        """
        super().__init__(executor)
        self.schema = schema

    def get_tables(self, include_views: bool = False) -> List[Dict[str, Any]]:
        kinds = ["r", "p"]
        if include_views:
            kinds.extend(["v", "m"])

        rows = self.executor.fetch_all(
            """
            SELECT c.relname AS name, n.nspname AS schema, c.relkind AS kind
            FROM pg_catalog.pg_class c
            JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
            WHERE n.nspname = %s
              AND c.relkind = ANY(%s)
              AND NOT c.relispartition
            ORDER BY c.relname
            """,
            (self.schema, kinds),
        )
        return [
            {"name": row["name"], "schema": row["schema"], "is_view": row["kind"] in ("v", "m")}
            for row in rows
        ]

    def get_columns(self, table: str, primary_keys: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        rows = self.executor.fetch_all(
            """
            SELECT
                column_name,
                udt_name,
                is_nullable,
                column_default,
                is_identity,
                character_maximum_length,
                numeric_precision,
                numeric_scale
            FROM information_schema.columns
            WHERE table_schema = %s
              AND table_name = %s
            ORDER BY ordinal_position
            """,
            (self.schema, table),
        )
        if primary_keys is None:
            primary_keys = self.get_primary_keys(table)
        primary_keys = set(primary_keys)

        columns = []
        for row in rows:
            default = row["column_default"]
            is_serial = isinstance(default, str) and default.startswith("nextval(")
            columns.append({
                "name": row["column_name"],
                "type": row["udt_name"],
                "nullable": row["is_nullable"] == "YES",
                "default_value": default,
                "is_primary_key": row["column_name"] in primary_keys,
                "is_auto_increment": is_serial or row["is_identity"] == "YES",
                "max_length": row["character_maximum_length"],
                "precision": row["numeric_precision"],
                "scale": row["numeric_scale"],
            })
        return columns

    def get_primary_keys(self, table: str) -> List[str]:
        rows = self.executor.fetch_all(
            """
            SELECT a.attname AS column_name
            FROM pg_catalog.pg_constraint con
            JOIN pg_catalog.pg_class c ON c.oid = con.conrelid
            JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
            JOIN pg_catalog.pg_attribute a ON a.attrelid = con.conrelid AND a.attnum = ANY(con.conkey)
            WHERE n.nspname = %s
              AND c.relname = %s
              AND con.contype = 'p'
            ORDER BY array_position(con.conkey, a.attnum)
            """,
            (self.schema, table),
        )
        return [row["column_name"] for row in rows]

    def get_views(self) -> List[Dict[str, Any]]:
        rows = self.executor.fetch_all(
            """
            SELECT viewname AS name, schemaname AS schema, definition
            FROM pg_catalog.pg_views
            WHERE schemaname = %s
            ORDER BY viewname
            """,
            (self.schema,),
        )
        return [
            {"name": row["name"], "schema": row["schema"], "definition": row["definition"] or ""}
            for row in rows
        ]
