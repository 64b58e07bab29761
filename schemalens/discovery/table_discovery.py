"""Table and column discovery."""

import logging
from fnmatch import fnmatchcase
from typing import Iterable, List

from ..database.base import DatabaseIntrospector
from ..database.models import DiscoveryConfig, TableInfo
from ..database.type_mappers import TypeMapper

logger = logging.getLogger(__name__)


def is_excluded(name: str, patterns: Iterable[str]) -> bool:
    """Check a table name against glob-style exclusion patterns."""
    return any(fnmatchcase(name, pattern) for pattern in patterns)


class TableDiscovery:
    """Builds TableInfo entries with columns and primary keys.

    Indexes, foreign keys and check constraints are left empty here; the
    dialect coordinator fills them in during enhancement.
    """

    def discover_tables(self, introspector: DatabaseIntrospector, config: DiscoveryConfig) -> List[TableInfo]:
        """Discover every base table not matched by ``config.exclude_tables``.

        Args:
            introspector: Dialect introspector bound to a live executor
            config: Discovery options

        Returns:
            List of TableInfo in catalog order

        Raises:
            Any error raised by the introspector, unchanged
        """
        tables = []
        for record in introspector.get_tables(include_views=False):
            name = record["name"]
            if record.get("is_view"):
                continue
            if is_excluded(name, config.exclude_tables):
                logger.debug("Excluding table %s", name)
                continue

            primary_key = introspector.get_primary_keys(name)
            columns = [
                TypeMapper.map_column_info(raw, config.custom_type_mappings)
                for raw in introspector.get_columns(name, primary_keys=primary_key)
            ]
            tables.append(TableInfo(
                name=name,
                schema=record.get("schema"),
                columns=columns,
                primary_key=primary_key,
            ))

        logger.debug("Discovered %d tables", len(tables))
        return tables
