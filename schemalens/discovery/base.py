"""Abstract index and constraint discovery services."""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..database.executor import QueryExecutor
from ..database.models import (
    CheckConstraintInfo,
    ConstraintAnalysis,
    ForeignKeyInfo,
    IndexAnalysis,
    IndexInfo,
    IndexUsageStats,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# CHECK expressions that read other rows
_COMPLEX_CHECK = re.compile(r"\b(?:SELECT|JOIN)\b", re.IGNORECASE)


class IndexDiscovery(ABC):
    """Reads the indexes of one table through a dialect-native catalog."""

    @abstractmethod
    def discover_table_indexes(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[IndexInfo]:
        """Get all indexes defined on a table.

        Args:
            executor: Connected executor
            table: Table name
            schema: Namespace, for engines that have one

        Returns:
            List of IndexInfo with columns in key order
        """
        pass

    def get_index_usage_stats(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[IndexUsageStats]:
        """Scan counters per index. Engines without statistics return nothing."""
        return []

    def analyze_index_efficiency(
        self, indexes: Sequence[IndexInfo], usage_stats: Sequence[IndexUsageStats] = ()
    ) -> IndexAnalysis:
        """Find never-scanned indexes and indexes covering the same column set."""
        analysis = IndexAnalysis()

        for stat in usage_stats:
            if stat.unused:
                analysis.unused_indexes.append(stat.index_name)
                analysis.recommendations.append(f"Consider dropping unused index: {stat.index_name}")

        groups: Dict[str, List[str]] = {}
        for index in indexes:
            key = ",".join(sorted(index.columns))
            groups.setdefault(key, []).append(index.name)

        for columns, names in groups.items():
            if len(names) > 1:
                analysis.duplicate_indexes.extend(names)
                analysis.recommendations.append(
                    f"Duplicate indexes found on columns ({columns}): {', '.join(names)}"
                )

        return analysis


class ConstraintDiscovery(ABC):
    """Reads foreign keys and CHECK constraints of one table."""

    @abstractmethod
    def discover_foreign_keys(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[ForeignKeyInfo]:
        """Get declared foreign keys, one entry per column pair."""
        pass

    @abstractmethod
    def discover_check_constraints(
        self, executor: QueryExecutor, table: str, schema: Optional[str] = None
    ) -> List[CheckConstraintInfo]:
        """Get CHECK constraints with their boolean expression."""
        pass

    @abstractmethod
    def _query_foreign_key_enforcement(self, executor: QueryExecutor) -> bool:
        pass

    def is_foreign_key_enforcement_enabled(self, executor: QueryExecutor) -> bool:
        """Whether the connection currently enforces declared foreign keys.

        A failing check counts as not enforced.
        """
        try:
            return self._query_foreign_key_enforcement(executor)
        except Exception as e:
            logger.warning("Could not determine foreign key enforcement: %s", e)
            return False

    def validate_constraints(
        self,
        foreign_keys: Sequence[ForeignKeyInfo] = (),
        check_constraints: Sequence[CheckConstraintInfo] = (),
    ) -> ValidationResult:
        """Check constraint records for missing required parts."""
        issues = []

        for fk in foreign_keys:
            if not fk.name:
                issues.append("Constraint name is required")
            if not fk.column:
                issues.append(f"Foreign key constraint {fk.name} missing column")
            if not fk.referenced_table:
                issues.append(f"Foreign key constraint {fk.name} missing referenced table")
            if not fk.referenced_column:
                issues.append(f"Foreign key constraint {fk.name} missing referenced column")

        for check in check_constraints:
            if not check.name:
                issues.append("Constraint name is required")
            if not check.expression or not check.expression.strip():
                issues.append(f"Check constraint {check.name} missing definition")

        return ValidationResult(is_valid=not issues, issues=issues)

    def analyze_constraint_performance(
        self,
        foreign_keys: Sequence[ForeignKeyInfo] = (),
        check_constraints: Sequence[CheckConstraintInfo] = (),
    ) -> ConstraintAnalysis:
        """Split constraints into deferred and immediate, and flag costly ones.

        Composite foreign keys are counted once per constraint name.
        """
        analysis = ConstraintAnalysis()
        seen = set()

        for constraint in [*foreign_keys, *check_constraints]:
            if constraint.name in seen:
                continue
            seen.add(constraint.name)
            if constraint.deferrable and constraint.deferred:
                analysis.deferred_constraints.append(constraint.name)
                analysis.recommendations.append(
                    f"Deferred constraint {constraint.name} may impact performance during bulk operations"
                )
            else:
                analysis.immediate_constraints.append(constraint.name)

        for check in check_constraints:
            if check.expression and _COMPLEX_CHECK.search(check.expression):
                analysis.recommendations.append(
                    f"Complex check constraint {check.name} may impact performance"
                )

        return analysis
