"""SQLite index and constraint discovery, and the SQLite coordinator."""

import logging
import re
from typing import List, Optional, Tuple

from ..database.executor import QueryExecutor
from ..database.models import (
    CheckConstraintInfo,
    CompatibilityAnalysis,
    DiscoveryConfig,
    ForeignKeyInfo,
    IndexInfo,
)
from ..database.sqlite import SQLiteIntrospector
from .base import ConstraintDiscovery, IndexDiscovery
from .coordinator import DialectDiscoveryCoordinator
from .dialects import Dialect

logger = logging.getLogger(__name__)

_CHECK_START = re.compile(
    r"(?:\bCONSTRAINT\s+[\"`\[]?(\w+)[\"`\]]?\s+)?\bCHECK\s*\(",
    re.IGNORECASE,
)

_SQLITE_DATE_FUNCTIONS = re.compile(r"\b(?:datetime|date)\s*\(", re.IGNORECASE)
_SQLITE_STRING_FUNCTIONS = re.compile(r"\b(?:substr|length)\s*\(", re.IGNORECASE)


def read_balanced(text: str, start: int) -> Optional[str]:
    """Read up to the parenthesis closing the one just before ``start``.

    Quoted strings and identifiers are skipped, so a ``)`` inside ``'a)b'``
    does not end the expression. Returns None when the text is unbalanced.
    """
    depth = 1
    quote = None
    i = start
    while i < len(text):
        char = text[i]
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"', "`"):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return text[start:i]
        i += 1
    return None


def quoted_spans(text: str) -> List[Tuple[int, int]]:
    """Start and end offsets of every quoted string or identifier in ``text``.

    An unterminated quote runs to the end of the text.
    """
    spans = []
    quote = None
    begin = 0
    for i, char in enumerate(text):
        if quote:
            if char == quote:
                spans.append((begin, i))
                quote = None
        elif char in ("'", '"', "`"):
            quote = char
            begin = i
    if quote:
        spans.append((begin, len(text)))
    return spans


def parse_check_constraints(create_sql: str, table: str) -> List[CheckConstraintInfo]:
    """Extract CHECK constraints from a CREATE TABLE statement.

    Named constraints keep their name; anonymous ones are numbered
    ``<table>_check_<n>`` in order of appearance.
    """
    checks = []
    create_sql = create_sql or ""
    spans = quoted_spans(create_sql)
    position = 0
    while True:
        match = _CHECK_START.search(create_sql, position)
        if match is None:
            break
        # A match starting inside a string literal or quoted identifier is text, not DDL
        if any(begin <= match.start() <= end for begin, end in spans):
            position = match.start() + 1
            continue
        position = match.end()
        expression = read_balanced(create_sql, match.end())
        if expression is None:
            logger.debug("Unbalanced CHECK expression in table %s", table)
            continue
        name = match.group(1) or f"{table}_check_{len(checks) + 1}"
        checks.append(CheckConstraintInfo(name=name, expression=expression.strip()))
    return checks


class SQLiteIndexDiscovery(IndexDiscovery):
    """Index discovery via ``pragma_index_list`` and ``pragma_index_info``."""

    def discover_table_indexes(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[IndexInfo]:
        rows = executor.fetch_all(
            "SELECT seq, name, \"unique\", origin, partial FROM pragma_index_list(?) ORDER BY seq",
            (table,),
        )

        indexes = []
        for row in rows:
            name = row["name"]
            columns = executor.fetch_all(
                "SELECT seqno, cid, name FROM pragma_index_info(?) ORDER BY seqno",
                (name,),
            )
            definition = executor.fetch_one(
                "SELECT sql FROM sqlite_master WHERE type = 'index' AND name = ?",
                (name,),
            )
            indexes.append(IndexInfo(
                name=name,
                # Expression index terms have no column name
                columns=tuple(c["name"] for c in columns if c["name"] is not None),
                unique=bool(row["unique"]),
                is_primary=row["origin"] == "pk",
                definition=definition["sql"] if definition else None,
            ))
        return indexes


class SQLiteConstraintDiscovery(ConstraintDiscovery):
    """Foreign keys from ``pragma_foreign_key_list``; CHECKs from the table DDL."""

    def discover_foreign_keys(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[ForeignKeyInfo]:
        rows = executor.fetch_all(
            "SELECT id, seq, \"table\", \"from\", \"to\", on_update, on_delete, \"match\" "
            "FROM pragma_foreign_key_list(?) ORDER BY id, seq",
            (table,),
        )

        foreign_keys = []
        for row in rows:
            referenced_column = row["to"]
            if referenced_column is None:
                # REFERENCES parent without a column list targets the parent's primary key
                referenced_column = self._primary_key_column(executor, row["table"], row["seq"])
            foreign_keys.append(ForeignKeyInfo(
                name=f"fk_{table}_{row['from']}",
                column=row["from"],
                referenced_table=row["table"],
                referenced_column=referenced_column,
                on_delete=row["on_delete"] or "NO ACTION",
                on_update=row["on_update"] or "NO ACTION",
            ))
        return foreign_keys

    def _primary_key_column(self, executor: QueryExecutor, table: str, position: int) -> Optional[str]:
        rows = executor.fetch_all(
            "SELECT name FROM pragma_table_info(?) WHERE pk > 0 ORDER BY pk",
            (table,),
        )
        return rows[position]["name"] if position < len(rows) else None

    def discover_check_constraints(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[CheckConstraintInfo]:
        row = executor.fetch_one(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
        )
        if not row or not row["sql"]:
            return []
        return parse_check_constraints(row["sql"], table)

    def analyze_constraint_compatibility(self, check_constraints: List[CheckConstraintInfo]) -> CompatibilityAnalysis:
        """Flag CHECK expressions relying on SQLite's date and string functions."""
        analysis = CompatibilityAnalysis()
        for check in check_constraints:
            if _SQLITE_DATE_FUNCTIONS.search(check.expression):
                analysis.compatibility_issues.append(
                    f"Check constraint {check.name} uses SQLite-specific date functions"
                )
            if _SQLITE_STRING_FUNCTIONS.search(check.expression):
                analysis.compatibility_issues.append(
                    f"Check constraint {check.name} uses SQLite-specific string functions"
                )

        if analysis.compatibility_issues:
            analysis.recommendations.append(
                "Consider using standard SQL functions for better database portability"
            )
        return analysis

    def _query_foreign_key_enforcement(self, executor: QueryExecutor) -> bool:
        row = executor.fetch_one("PRAGMA foreign_keys")
        return bool(row and row["foreign_keys"] == 1)


class SQLiteDiscoveryCoordinator(DialectDiscoveryCoordinator):
    """Discovery pipeline for SQLite databases."""

    dialect = Dialect.SQLITE

    def create_introspector(self, executor: QueryExecutor, config: DiscoveryConfig) -> SQLiteIntrospector:
        return SQLiteIntrospector(executor)
