"""PostgreSQL index and constraint discovery, and the PostgreSQL coordinator."""

import re
from typing import List, Optional

from ..database.executor import QueryExecutor
from ..database.models import (
    CheckConstraintInfo,
    DiscoveryConfig,
    ForeignKeyInfo,
    IndexInfo,
    IndexUsageStats,
)
from ..database.postgresql import PostgreSQLIntrospector
from .base import ConstraintDiscovery, IndexDiscovery
from .coordinator import DialectDiscoveryCoordinator
from .dialects import Dialect

# pg_constraint.confdeltype / confupdtype codes
FK_ACTIONS = {
    "a": "NO ACTION",
    "r": "RESTRICT",
    "c": "CASCADE",
    "n": "SET NULL",
    "d": "SET DEFAULT",
}

_CHECK_DEFINITION = re.compile(r"^\s*CHECK\s*\((.*)\)(?:\s+NOT\s+VALID)?\s*$", re.IGNORECASE | re.DOTALL)

INDEXES_SQL = """
    SELECT
        ic.relname AS name,
        i.indisunique AS is_unique,
        i.indisprimary AS is_primary,
        i.indisvalid AS is_valid,
        array_agg(a.attname::text ORDER BY array_position(i.indkey::int2[], a.attnum)) AS columns,
        pg_get_indexdef(i.indexrelid) AS definition,
        obj_description(i.indexrelid, 'pg_class') AS comment
    FROM pg_catalog.pg_index i
    JOIN pg_catalog.pg_class c ON c.oid = i.indrelid
    JOIN pg_catalog.pg_class ic ON ic.oid = i.indexrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    JOIN pg_catalog.pg_attribute a ON a.attrelid = c.oid AND a.attnum = ANY(i.indkey)
    WHERE n.nspname = %s
      AND c.relname = %s
    GROUP BY ic.relname, i.indisunique, i.indisprimary, i.indisvalid, i.indexrelid
    ORDER BY ic.relname
"""

INDEX_USAGE_SQL = """
    SELECT
        s.indexrelname AS index_name,
        s.idx_scan AS scans,
        s.idx_tup_read AS tuples_read,
        s.idx_tup_fetch AS tuples_fetched
    FROM pg_catalog.pg_stat_user_indexes s
    WHERE s.schemaname = %s
      AND s.relname = %s
    ORDER BY s.indexrelname
"""

# One row per column pair, so composite keys come back in key order
FOREIGN_KEYS_SQL = """
    SELECT
        con.conname AS name,
        a.attname AS column_name,
        f.relname AS referenced_table,
        fa.attname AS referenced_column,
        con.confdeltype AS delete_action,
        con.confupdtype AS update_action,
        con.condeferrable AS deferrable,
        con.condeferred AS deferred
    FROM pg_catalog.pg_constraint con
    JOIN pg_catalog.pg_class c ON c.oid = con.conrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    JOIN pg_catalog.pg_class f ON f.oid = con.confrelid
    CROSS JOIN LATERAL generate_subscripts(con.conkey, 1) AS k(pos)
    JOIN pg_catalog.pg_attribute a ON a.attrelid = con.conrelid AND a.attnum = con.conkey[k.pos]
    JOIN pg_catalog.pg_attribute fa ON fa.attrelid = con.confrelid AND fa.attnum = con.confkey[k.pos]
    WHERE n.nspname = %s
      AND c.relname = %s
      AND con.contype = 'f'
    ORDER BY con.conname, k.pos
"""

CHECK_CONSTRAINTS_SQL = """
    SELECT
        con.conname AS name,
        pg_get_constraintdef(con.oid) AS definition,
        con.condeferrable AS deferrable,
        con.condeferred AS deferred,
        obj_description(con.oid, 'pg_constraint') AS comment
    FROM pg_catalog.pg_constraint con
    JOIN pg_catalog.pg_class c ON c.oid = con.conrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = %s
      AND c.relname = %s
      AND con.contype = 'c'
    ORDER BY con.conname
"""


def strip_check_keyword(definition: str) -> str:
    """``CHECK ((price > 0))`` -> ``(price > 0)``."""
    match = _CHECK_DEFINITION.match(definition or "")
    return match.group(1).strip() if match else (definition or "")


class PostgreSQLIndexDiscovery(IndexDiscovery):
    """Index discovery from ``pg_index`` plus ``pg_stat_user_indexes`` counters."""

    def discover_table_indexes(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[IndexInfo]:
        rows = executor.fetch_all(INDEXES_SQL, (schema or "public", table))
        return [
            IndexInfo(
                name=row["name"],
                columns=tuple(row["columns"] or ()),
                unique=bool(row["is_unique"]),
                is_primary=bool(row["is_primary"]),
                valid=bool(row["is_valid"]),
                definition=row["definition"],
                comment=row["comment"],
            )
            for row in rows
        ]

    def get_index_usage_stats(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[IndexUsageStats]:
        rows = executor.fetch_all(INDEX_USAGE_SQL, (schema or "public", table))
        return [
            IndexUsageStats(
                index_name=row["index_name"],
                scans=row["scans"] or 0,
                tuples_read=row["tuples_read"] or 0,
                tuples_fetched=row["tuples_fetched"] or 0,
            )
            for row in rows
        ]


class PostgreSQLConstraintDiscovery(ConstraintDiscovery):
    """Foreign key and CHECK discovery from ``pg_constraint``."""

    def discover_foreign_keys(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[ForeignKeyInfo]:
        rows = executor.fetch_all(FOREIGN_KEYS_SQL, (schema or "public", table))
        return [
            ForeignKeyInfo(
                name=row["name"],
                column=row["column_name"],
                referenced_table=row["referenced_table"],
                referenced_column=row["referenced_column"],
                on_delete=FK_ACTIONS.get(row["delete_action"], "NO ACTION"),
                on_update=FK_ACTIONS.get(row["update_action"], "NO ACTION"),
                deferrable=bool(row["deferrable"]),
                deferred=bool(row["deferred"]),
            )
            for row in rows
        ]

    def discover_check_constraints(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[CheckConstraintInfo]:
        rows = executor.fetch_all(CHECK_CONSTRAINTS_SQL, (schema or "public", table))
        return [
            CheckConstraintInfo(
                name=row["name"],
                expression=strip_check_keyword(row["definition"]),
                deferrable=bool(row["deferrable"]),
                deferred=bool(row["deferred"]),
                comment=row["comment"],
            )
            for row in rows
        ]

    def _query_foreign_key_enforcement(self, executor: QueryExecutor) -> bool:
        # session_replication_role = replica suppresses FK triggers
        row = executor.fetch_one("SELECT current_setting('session_replication_role') AS role")
        return bool(row) and row["role"] != "replica"


class PostgreSQLDiscoveryCoordinator(DialectDiscoveryCoordinator):
    """Discovery pipeline for one PostgreSQL namespace."""

    dialect = Dialect.POSTGRESQL

    def create_introspector(self, executor: QueryExecutor, config: DiscoveryConfig) -> PostgreSQLIntrospector:
        return PostgreSQLIntrospector(executor, schema=config.schema)
