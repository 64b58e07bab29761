"""Query executors that run catalog statements and return rows as dicts."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..errors import ExecutorError

logger = logging.getLogger(__name__)


class QueryExecutor(ABC):
    """An already-connected executor for dialect-native introspection SQL.

    Implementations must be safe to call from several threads, since
    per-table enhancement fans out concurrently.
    """

    @abstractmethod
    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a read-only statement and return every row.

        Args:
            sql: Dialect-native SQL
            params: Positional parameters for the statement

        Returns:
            List of rows keyed by column name
        """
        pass

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None

    def close(self):
        """Release the underlying connection."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SQLiteExecutor(QueryExecutor):
    """Executor backed by the standard library ``sqlite3`` module."""

    def __init__(self, database_path: str = ":memory:", connection=None):
        """Initialize SQLite executor.

        Args:
            database_path: Path to the .db file, or :memory:
            connection: Existing sqlite3 connection to reuse instead of opening one
        """
        import sqlite3

        self.database_path = database_path
        self._owns_connection = connection is None
        if connection is None:
            try:
                connection = sqlite3.connect(database_path, check_same_thread=False)
            except sqlite3.Error as e:
                raise ExecutorError(
                    f"Cannot open SQLite database '{database_path}': {e}",
                    details={"path": database_path},
                ) from e
        self._connection = connection
        self._lock = threading.Lock()

    @property
    def connection(self):
        return self._connection

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        with self._lock:
            cursor = self._connection.execute(sql, tuple(params))
            try:
                columns = [d[0] for d in cursor.description or ()]
                return [dict(zip(columns, row)) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def close(self):
        """Close the SQLite connection if this executor opened it."""
        if self._connection is not None and self._owns_connection:
            self._connection.close()
        self._connection = None


class PostgresExecutor(QueryExecutor):
    """Executor backed by psycopg2 with dictionary rows."""

    def __init__(self, dsn: Optional[str] = None, connection=None, **connect_kwargs):
        """Initialize PostgreSQL executor.

        Args:
            dsn: libpq connection string (e.g. postgresql://user@host/db)
            connection: Existing psycopg2 connection to reuse
            **connect_kwargs: Passed to psycopg2.connect when no DSN is given
        """
        self.dsn = dsn
        self._owns_connection = connection is None
        self._lock = threading.Lock()
        self._connection = connection if connection is not None else self._connect(dsn, connect_kwargs)

    def _connect(self, dsn: Optional[str], connect_kwargs: Dict[str, Any]):
        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL discovery. "
                "Install it with: pip install psycopg2-binary"
            )

        try:
            connection = psycopg2.connect(dsn, **connect_kwargs) if dsn else psycopg2.connect(**connect_kwargs)
        except psycopg2.Error as e:
            raise ExecutorError(f"Cannot connect to PostgreSQL: {e}") from e
        # A failed catalog query must not abort the session for other tables
        connection.autocommit = True
        logger.debug("Connected to PostgreSQL")
        return connection

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        from psycopg2.extras import RealDictCursor

        with self._lock:
            with self._connection.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(sql, tuple(params) if params else None)
                return [dict(row) for row in cursor.fetchall()]

    def close(self):
        """Close the PostgreSQL connection if this executor opened it."""
        if self._connection is not None and self._owns_connection:
            try:
                self._connection.close()
            except Exception as e:
                logger.warning("Error closing PostgreSQL connection: %s", e)
        self._connection = None
