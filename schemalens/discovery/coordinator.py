"""Per-dialect schema discovery pipeline."""

import dataclasses
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from ..database.base import DatabaseIntrospector
from ..database.executor import QueryExecutor
from ..database.models import (
    DialectCapabilities,
    DiscoveryConfig,
    DiscoveryResult,
    EnhancementReport,
    SchemaInfo,
    TableEnhancement,
    TableInfo,
)
from .base import ConstraintDiscovery, IndexDiscovery
from .dialects import DIALECT_CAPABILITIES, Dialect
from .relationship import RelationshipDiscovery
from .table_discovery import TableDiscovery
from .view_discovery import ViewDiscovery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryServices:
    """The five services one dialect's discovery pipeline needs."""
    table: TableDiscovery
    relationship: RelationshipDiscovery
    view: ViewDiscovery
    index: IndexDiscovery
    constraint: ConstraintDiscovery


class DialectDiscoveryCoordinator(ABC):
    """Runs the full discovery pipeline for one dialect.

    Steps, in order:
    1. Table discovery (columns and primary keys)
    2. Foreign key enforcement check
    3. Per-table enhancement with indexes, foreign keys and CHECK
       constraints, fanned out over a thread pool
    4. Relationship inference over all enhanced tables
    5. View discovery, when requested

    Failures in steps 1, 4 and 5 propagate unchanged. A failure while
    enhancing one table is logged, recorded in the report, and leaves that
    table with empty indexes, foreign keys and check constraints.
    """

    dialect: Dialect = Dialect.UNKNOWN

    def __init__(self, services: DiscoveryServices):
        self.services = services

    @abstractmethod
    def create_introspector(self, executor: QueryExecutor, config: DiscoveryConfig) -> DatabaseIntrospector:
        """Build the catalog introspector for this dialect."""
        pass

    def get_capabilities(self) -> DialectCapabilities:
        return DIALECT_CAPABILITIES.get(self.dialect, DialectCapabilities())

    def discover_schema(self, executor: QueryExecutor, config: Optional[DiscoveryConfig] = None) -> SchemaInfo:
        """Discover the schema and discard the enhancement report."""
        return self.discover_schema_with_report(executor, config).schema

    def discover_schema_with_report(
        self, executor: QueryExecutor, config: Optional[DiscoveryConfig] = None
    ) -> DiscoveryResult:
        """Discover the schema and report which tables were only partially enhanced.

        Args:
            executor: Connected executor for this dialect
            config: Discovery options; defaults to ``DiscoveryConfig()``

        Returns:
            DiscoveryResult holding the SchemaInfo snapshot and its report
        """
        config = config or DiscoveryConfig()
        introspector = self.create_introspector(executor, config)
        report = EnhancementReport(dialect=self.dialect.value)

        tables = self.services.table.discover_tables(introspector, config)

        report.foreign_keys_enforced = self.services.constraint.is_foreign_key_enforcement_enabled(executor)
        if not report.foreign_keys_enforced:
            logger.warning(
                "Foreign key enforcement is disabled on this %s connection; "
                "declared foreign keys are reported but not enforced",
                self.dialect.engine_name,
            )

        tables = self._enhance_tables(executor, tables, config, report)

        relationships = self.services.relationship.discover_relationships(
            tables, include_many_to_many=config.infer_many_to_many
        )

        views = []
        if config.include_views:
            views = self.services.view.discover_views(introspector, config.custom_type_mappings)

        if not report.is_complete:
            logger.warning(
                "%d of %d tables discovered without indexes or constraints: %s",
                len(report.degraded_tables), len(tables), ", ".join(report.degraded_tables),
            )

        schema = SchemaInfo(tables=tables, relationships=relationships, views=views)
        return DiscoveryResult(schema=schema, report=report)

    def _enhance_tables(
        self,
        executor: QueryExecutor,
        tables: List[TableInfo],
        config: DiscoveryConfig,
        report: EnhancementReport,
    ) -> List[TableInfo]:
        if not tables:
            return []

        enhanced = []
        with ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as pool:
            futures = [
                pool.submit(self.enhance_table, executor, table, config)
                for table in tables
            ]
            for table, future in zip(tables, futures):
                try:
                    enhanced.append(future.result())
                    report.results.append(TableEnhancement(table=table.name))
                except Exception as e:
                    logger.warning("Failed to enhance %s metadata for table %s: %s",
                                   self.dialect.engine_name, table.name, e)
                    enhanced.append(table)
                    report.results.append(TableEnhancement(table=table.name, error=e))

        return enhanced

    def enhance_table(self, executor: QueryExecutor, table: TableInfo, config: DiscoveryConfig) -> TableInfo:
        """Return a copy of ``table`` with indexes, foreign keys and checks filled in.

        All three lookups must succeed; otherwise the error is raised and
        the original table is left untouched.
        """
        schema = table.schema or config.schema
        indexes = self.services.index.discover_table_indexes(executor, table.name, schema)
        foreign_keys = self.services.constraint.discover_foreign_keys(executor, table.name, schema)
        checks = self.services.constraint.discover_check_constraints(executor, table.name, schema)
        return dataclasses.replace(
            table,
            indexes=indexes,
            foreign_keys=foreign_keys,
            check_constraints=checks,
        )

    def get_recommendations(self, executor: QueryExecutor, tables: List[TableInfo]) -> List[str]:
        """Index and constraint recommendations for already-discovered tables.

        A table whose usage statistics cannot be read is logged and skipped.
        """
        recommendations = []
        index_discovery = self.services.index
        constraint_discovery = self.services.constraint
        for table in tables:
            try:
                stats = index_discovery.get_index_usage_stats(executor, table.name, table.schema)
                index_analysis = index_discovery.analyze_index_efficiency(table.indexes, stats)
                constraint_analysis = constraint_discovery.analyze_constraint_performance(
                    table.foreign_keys, table.check_constraints
                )
            except Exception as e:
                logger.warning("Failed to get recommendations for %s table %s: %s",
                               self.dialect.engine_name, table.name, e)
                continue
            recommendations.extend(index_analysis.recommendations)
            recommendations.extend(constraint_analysis.recommendations)
        return recommendations
