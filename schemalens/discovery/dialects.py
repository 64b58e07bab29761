"""Dialect identifiers and alias normalization."""

from enum import Enum
from typing import Any, Dict

from ..database.models import DialectCapabilities


class Dialect(str, Enum):
    """Database engines known to schemalens."""

    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"
    MYSQL = "mysql"
    MSSQL = "mssql"
    UNKNOWN = "unknown"

    @property
    def engine_name(self) -> str:
        """Human-readable engine name used in messages."""
        return ENGINE_NAMES[self]


ENGINE_NAMES: Dict[Dialect, str] = {
    Dialect.POSTGRESQL: "PostgreSQL",
    Dialect.SQLITE: "SQLite",
    Dialect.MYSQL: "MySQL",
    Dialect.MSSQL: "MSSQL",
    Dialect.UNKNOWN: "Unknown",
}

DIALECT_ALIASES: Dict[str, Dialect] = {
    "postgresql": Dialect.POSTGRESQL,
    "postgres": Dialect.POSTGRESQL,
    "sqlite": Dialect.SQLITE,
    "sqlite3": Dialect.SQLITE,
    "mysql": Dialect.MYSQL,
    "mssql": Dialect.MSSQL,
    "sqlserver": Dialect.MSSQL,
}


def parse_dialect(value: Any) -> Dialect:
    """Resolve a caller-supplied identifier to a Dialect.

    Non-string input is coerced with ``str()``; matching ignores case and
    surrounding whitespace. Anything unrecognized, including ``"unknown"``
    itself, maps to ``Dialect.UNKNOWN``.
    """
    if isinstance(value, Dialect):
        return value
    return DIALECT_ALIASES.get(str(value).strip().lower(), Dialect.UNKNOWN)


_FULL = DialectCapabilities(
    supports_views=True,
    supports_indexes=True,
    supports_constraints=True,
    supports_foreign_keys=True,
    supports_check_constraints=True,
    supports_deferred_constraints=True,
)
_NO_DEFERRED = DialectCapabilities(
    supports_views=True,
    supports_indexes=True,
    supports_constraints=True,
    supports_foreign_keys=True,
    supports_check_constraints=True,
    supports_deferred_constraints=False,
)

DIALECT_CAPABILITIES: Dict[Dialect, DialectCapabilities] = {
    Dialect.POSTGRESQL: _FULL,
    Dialect.SQLITE: _NO_DEFERRED,
    Dialect.MYSQL: _NO_DEFERRED,
    Dialect.MSSQL: _FULL,
}
