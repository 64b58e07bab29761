"""Database introspection module for schemalens.

This module provides the schema data model, query executors, and
catalog introspectors for SQLite and PostgreSQL.
"""

from .models import (
    ColumnInfo,
    ForeignKeyInfo,
    IndexInfo,
    CheckConstraintInfo,
    RelationshipInfo,
    RelationshipType,
    TableInfo,
    ViewInfo,
    SchemaInfo,
    DiscoveryConfig,
    DialectCapabilities,
    EnhancementReport,
    DiscoveryResult,
)
from .executor import QueryExecutor, SQLiteExecutor, PostgresExecutor
from .base import DatabaseIntrospector
from .type_mappers import TypeMapper, map_column_type
from .sqlite import SQLiteIntrospector
from .postgresql import PostgreSQLIntrospector

__all__ = [
    # Data models
    "ColumnInfo",
    "ForeignKeyInfo",
    "IndexInfo",
    "CheckConstraintInfo",
    "RelationshipInfo",
    "RelationshipType",
    "TableInfo",
    "ViewInfo",
    "SchemaInfo",
    "DiscoveryConfig",
    "DialectCapabilities",
    "EnhancementReport",
    "DiscoveryResult",
    # Executors
    "QueryExecutor",
    "SQLiteExecutor",
    "PostgresExecutor",
    # Introspectors
    "DatabaseIntrospector",
    "SQLiteIntrospector",
    "PostgreSQLIntrospector",
    # Type mapping
    "TypeMapper",
    "map_column_type",
]
