"""View discovery and light-weight view analysis."""

import logging
import re
from typing import Dict, List, Mapping, Optional

from ..database.base import DatabaseIntrospector
from ..database.models import ValidationResult, ViewInfo
from ..database.type_mappers import TypeMapper

logger = logging.getLogger(__name__)

# Statements that have no business inside a view body
DANGEROUS_PATTERNS = [
    re.compile(r"DROP\s+TABLE", re.IGNORECASE),
    re.compile(r"DELETE\s+FROM", re.IGNORECASE),
    re.compile(r"UPDATE\s+\S+\s+SET", re.IGNORECASE),
    re.compile(r"INSERT\s+INTO", re.IGNORECASE),
    re.compile(r"TRUNCATE", re.IGNORECASE),
    re.compile(r"ALTER\s+TABLE", re.IGNORECASE),
]

_TABLE_REFERENCE = re.compile(r"\b(?:FROM|JOIN)\s+[\"`\[]?(?:\w+[\"`\]]?\.[\"`\[]?)?([A-Za-z_]\w*)", re.IGNORECASE)


class ViewDiscovery:
    """Discovers views and maps their columns through the type mapper."""

    def discover_views(
        self,
        introspector: DatabaseIntrospector,
        custom_mappings: Optional[Mapping[str, str]] = None,
    ) -> List[ViewInfo]:
        """Discover every view visible to the introspector.

        Raises:
            Any error raised by the introspector, unchanged
        """
        views = []
        for record in introspector.get_views():
            columns = [
                TypeMapper.map_column_info(raw, custom_mappings)
                for raw in introspector.get_columns(record["name"])
            ]
            views.append(ViewInfo(
                name=record["name"],
                schema=record.get("schema"),
                definition=record.get("definition") or "",
                columns=columns,
            ))

        logger.debug("Discovered %d views", len(views))
        return views

    def validate_view(self, view: ViewInfo) -> ValidationResult:
        """Flag views with a missing name or body, or a body containing DDL/DML."""
        issues = []
        if not view.name:
            issues.append("View name is required")
        if not view.definition or not view.definition.strip():
            issues.append("View definition is required")
        else:
            for pattern in DANGEROUS_PATTERNS:
                if pattern.search(view.definition):
                    issues.append(f"View definition contains potentially dangerous SQL: {pattern.pattern}")
        return ValidationResult(is_valid=not issues, issues=issues)

    def analyze_view_dependencies(self, views: List[ViewInfo]) -> Dict[str, List[str]]:
        """Map each view to the tables named after FROM/JOIN in its definition.

        A regex scan, not a SQL parser: subqueries and CTE names show up as
        references too. Order of first appearance is kept.
        """
        dependencies = {}
        for view in views:
            if not view.definition:
                continue
            references: List[str] = []
            for match in _TABLE_REFERENCE.finditer(view.definition):
                name = match.group(1)
                if name not in references:
                    references.append(name)
            dependencies[view.name] = references
        return dependencies
