"""Fake query executor for catalog queries."""

import re
from typing import Any, Dict, List, Optional, Sequence

from schemalens.database.executor import QueryExecutor


class FakeExecutor(QueryExecutor):
    """Executor returning canned rows for SQL matching a pattern.

    Responses are matched in registration order. A response registered with
    ``table=...`` only matches calls whose parameters include that table
    name. Unmatched statements return no rows.
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self.calls: List[Dict[str, Any]] = []

    def _register(self, entry: tuple, first: bool):
        if first:
            self._responses.insert(0, entry)
        else:
            self._responses.append(entry)

    def add_response(self, sql_pattern: str, rows: List[Dict[str, Any]], table: Optional[str] = None, first: bool = False):
        """Return ``rows`` for statements matching ``sql_pattern`` (regex).

        Args:
            sql_pattern: Regex searched in the SQL text
            rows: Rows to return
            table: Only match calls whose parameters include this name
            first: Take priority over responses registered earlier
        """
        self._register((re.compile(sql_pattern, re.DOTALL), table, rows, None), first)

    def add_error(self, sql_pattern: str, error: Exception, table: Optional[str] = None, first: bool = False):
        """Raise ``error`` for statements matching ``sql_pattern``."""
        self._register((re.compile(sql_pattern, re.DOTALL), table, None, error), first)

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append({"sql": sql, "params": tuple(params)})
        for pattern, table, rows, error in self._responses:
            if not pattern.search(sql):
                continue
            if table is not None and table not in tuple(params):
                continue
            if error is not None:
                raise error
            return [dict(row) for row in rows]
        return []

    def calls_matching(self, sql_pattern: str) -> List[Dict[str, Any]]:
        pattern = re.compile(sql_pattern, re.DOTALL)
        return [call for call in self.calls if pattern.search(call["sql"])]
