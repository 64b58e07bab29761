"""Factory resolving dialect identifiers to discovery services."""

import logging
import threading
from typing import Any, Dict, List, Type

from ..database.models import DialectCapabilities
from ..errors import UnimplementedDialectError, UnsupportedDialectError
from .base import ConstraintDiscovery, IndexDiscovery
from .coordinator import DialectDiscoveryCoordinator, DiscoveryServices
from .dialects import DIALECT_CAPABILITIES, Dialect, parse_dialect
from .postgresql import PostgreSQLConstraintDiscovery, PostgreSQLDiscoveryCoordinator, PostgreSQLIndexDiscovery
from .relationship import RelationshipDiscovery
from .sqlite import SQLiteConstraintDiscovery, SQLiteDiscoveryCoordinator, SQLiteIndexDiscovery
from .table_discovery import TableDiscovery
from .view_discovery import ViewDiscovery

logger = logging.getLogger(__name__)

COORDINATOR_CLASSES: Dict[Dialect, Type[DialectDiscoveryCoordinator]] = {
    Dialect.SQLITE: SQLiteDiscoveryCoordinator,
    Dialect.POSTGRESQL: PostgreSQLDiscoveryCoordinator,
}


class DiscoveryFactory:
    """Builds and hands out discovery services per dialect.

    Every service is stateless and constructed once per factory; coordinators
    are built on first request and reused, so ``"postgres"`` and
    ``"PostgreSQL "`` resolve to the same coordinator instance.
    """

    def __init__(self):
        self.table_discovery = TableDiscovery()
        self.relationship_discovery = RelationshipDiscovery()
        self.view_discovery = ViewDiscovery()
        self._index_discovery: Dict[Dialect, IndexDiscovery] = {
            Dialect.SQLITE: SQLiteIndexDiscovery(),
            Dialect.POSTGRESQL: PostgreSQLIndexDiscovery(),
        }
        self._constraint_discovery: Dict[Dialect, ConstraintDiscovery] = {
            Dialect.SQLITE: SQLiteConstraintDiscovery(),
            Dialect.POSTGRESQL: PostgreSQLConstraintDiscovery(),
        }
        self._coordinators: Dict[Dialect, DialectDiscoveryCoordinator] = {}
        self._lock = threading.Lock()

    def resolve(self, dialect: Any, component: str, implemented: Dict[Dialect, Any]) -> Dialect:
        """Normalize an identifier and check that ``component`` exists for it.

        Raises:
            UnsupportedDialectError: The identifier names no known engine
            UnimplementedDialectError: The engine is known but ``component``
                has no implementation for it
        """
        resolved = parse_dialect(dialect)
        if resolved is Dialect.UNKNOWN:
            literal = dialect.value if isinstance(dialect, Dialect) else dialect
            raise UnsupportedDialectError(literal, component)
        if resolved not in implemented:
            raise UnimplementedDialectError(resolved.engine_name, component, dialect=resolved.value)
        return resolved

    def create_index_discovery(self, dialect: Any) -> IndexDiscovery:
        resolved = self.resolve(dialect, "index discovery", self._index_discovery)
        return self._index_discovery[resolved]

    def create_constraint_discovery(self, dialect: Any) -> ConstraintDiscovery:
        resolved = self.resolve(dialect, "constraint discovery", self._constraint_discovery)
        return self._constraint_discovery[resolved]

    def create_discovery_services(self, dialect: Any) -> DiscoveryServices:
        """Bundle the shared services with the dialect's index and constraint discovery."""
        return DiscoveryServices(
            table=self.table_discovery,
            relationship=self.relationship_discovery,
            view=self.view_discovery,
            index=self.create_index_discovery(dialect),
            constraint=self.create_constraint_discovery(dialect),
        )

    def create_discovery_coordinator(self, dialect: Any) -> DialectDiscoveryCoordinator:
        resolved = self.resolve(dialect, "discovery coordinator", COORDINATOR_CLASSES)
        with self._lock:
            coordinator = self._coordinators.get(resolved)
            if coordinator is None:
                coordinator = COORDINATOR_CLASSES[resolved](self.create_discovery_services(resolved))
                self._coordinators[resolved] = coordinator
                logger.debug("Created %s discovery coordinator", resolved.engine_name)
        return coordinator

    def get_supported_dialects(self) -> List[str]:
        return [dialect.value for dialect in COORDINATOR_CLASSES]

    def is_dialect_supported(self, dialect: Any) -> bool:
        return parse_dialect(dialect) in COORDINATOR_CLASSES

    def get_dialect_capabilities(self, dialect: Any) -> DialectCapabilities:
        """Feature flags for a dialect; all false for anything unrecognized."""
        return DIALECT_CAPABILITIES.get(parse_dialect(dialect), DialectCapabilities())
