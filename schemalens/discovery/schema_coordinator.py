"""Dialect-selecting entry point for schema discovery."""

import logging
from typing import Any, Optional

from ..database.executor import QueryExecutor
from ..database.models import DialectCapabilities, DiscoveryConfig, DiscoveryResult, SchemaInfo
from ..errors import UnsupportedDialectError
from .dialects import Dialect, parse_dialect
from .factory import DiscoveryFactory

logger = logging.getLogger(__name__)


class SchemaDiscoveryCoordinator:
    """Resolves a dialect name and delegates to that dialect's coordinator.

    Example:
        coordinator = SchemaDiscoveryCoordinator()
        with SQLiteExecutor("app.db") as executor:
            schema = coordinator.discover_schema(executor, dialect="sqlite")
    """

    def __init__(self, factory: Optional[DiscoveryFactory] = None):
        self.factory = factory or DiscoveryFactory()
        self.current_dialect: Optional[Dialect] = None

    def discover_schema(
        self,
        executor: QueryExecutor,
        config: Optional[DiscoveryConfig] = None,
        dialect: Any = "sqlite",
    ) -> SchemaInfo:
        """Discover the full schema behind ``executor``.

        Args:
            executor: Connected executor matching ``dialect``
            config: Discovery options
            dialect: Dialect name or alias (case-insensitive)

        Returns:
            SchemaInfo snapshot

        Raises:
            UnsupportedDialectError: Unknown dialect, raised before any query
            UnimplementedDialectError: Known engine without discovery support
        """
        return self.discover_schema_with_report(executor, config, dialect).schema

    def discover_schema_with_report(
        self,
        executor: QueryExecutor,
        config: Optional[DiscoveryConfig] = None,
        dialect: Any = "sqlite",
    ) -> DiscoveryResult:
        self.current_dialect = parse_dialect(dialect)
        if self.current_dialect is Dialect.UNKNOWN:
            raise UnsupportedDialectError(dialect.value if isinstance(dialect, Dialect) else dialect)

        coordinator = self.factory.create_discovery_coordinator(self.current_dialect)
        logger.debug("Discovering %s schema", self.current_dialect.engine_name)
        return coordinator.discover_schema_with_report(executor, config)

    def get_current_dialect(self) -> Optional[Dialect]:
        return self.current_dialect

    def get_dialect_capabilities(self) -> DialectCapabilities:
        """Capabilities of the dialect used by the most recent discovery call."""
        if self.current_dialect is None:
            return DialectCapabilities()
        return self.factory.get_dialect_capabilities(self.current_dialect)
