"""Schema discovery services.

Usage:
    from schemalens.database import SQLiteExecutor
    from schemalens.discovery import SchemaDiscoveryCoordinator

    with SQLiteExecutor("app.db") as executor:
        schema = SchemaDiscoveryCoordinator().discover_schema(executor, dialect="sqlite")
"""

from .dialects import Dialect, parse_dialect
from .table_discovery import TableDiscovery
from .view_discovery import ViewDiscovery
from .relationship import RelationshipDiscovery
from .base import IndexDiscovery, ConstraintDiscovery
from .coordinator import DialectDiscoveryCoordinator, DiscoveryServices
from .sqlite import SQLiteIndexDiscovery, SQLiteConstraintDiscovery, SQLiteDiscoveryCoordinator
from .postgresql import (
    PostgreSQLIndexDiscovery,
    PostgreSQLConstraintDiscovery,
    PostgreSQLDiscoveryCoordinator,
)
from .factory import DiscoveryFactory
from .schema_coordinator import SchemaDiscoveryCoordinator

__all__ = [
    "Dialect",
    "parse_dialect",
    # Shared services
    "TableDiscovery",
    "ViewDiscovery",
    "RelationshipDiscovery",
    "IndexDiscovery",
    "ConstraintDiscovery",
    # Coordinators
    "DialectDiscoveryCoordinator",
    "DiscoveryServices",
    "SchemaDiscoveryCoordinator",
    "DiscoveryFactory",
    # SQLite
    "SQLiteIndexDiscovery",
    "SQLiteConstraintDiscovery",
    "SQLiteDiscoveryCoordinator",
    # PostgreSQL
    "PostgreSQLIndexDiscovery",
    "PostgreSQLConstraintDiscovery",
    "PostgreSQLDiscoveryCoordinator",
]
