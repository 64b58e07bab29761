"""Abstract base class for catalog introspection."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .executor import QueryExecutor


class DatabaseIntrospector(ABC):
    """Abstract base class for catalog introspection.

    Subclasses translate one dialect's catalog shape into plain records
    that the dialect-agnostic discovery services consume. Every method
    issues read-only statements through the wrapped executor.
    """

    # Override in subclasses to exclude system schemas
    EXCLUDED_SCHEMAS: set = {'information_schema'}

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    @abstractmethod
    def get_tables(self, include_views: bool = False) -> List[Dict[str, Any]]:
        """Get all user tables (and optionally views).

        Args:
            include_views: Whether to include views

        Returns:
            List of ``{"name", "schema", "is_view"}`` records
        """
        pass

    @abstractmethod
    def get_columns(self, table: str, primary_keys: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
        """Get all columns for a table or view, in ordinal order.

        Args:
            table: Table name
            primary_keys: Key columns the caller already read, used instead of
                looking them up again where the dialect needs them

        Returns:
            List of raw column records understood by ``TypeMapper.map_column_info``
        """
        pass

    @abstractmethod
    def get_primary_keys(self, table: str) -> List[str]:
        """Get primary key columns for a table, in key order.

        Args:
            table: Table name

        Returns:
            List of primary key column names
        """
        pass

    @abstractmethod
    def get_views(self) -> List[Dict[str, Any]]:
        """Get all user views.

        Returns:
            List of ``{"name", "schema", "definition"}`` records
        """
        pass
