"""Relationship inference from discovered foreign keys."""

import logging
from collections import Counter
from itertools import combinations
from typing import Dict, Iterator, List, Set, Tuple

from ..database.models import (
    ForeignKeyInfo,
    RelationshipInfo,
    RelationshipPatterns,
    RelationshipType,
    TableInfo,
    ValidationResult,
)
from .naming import relationship_name, reverse_relationship_name

logger = logging.getLogger(__name__)


class RelationshipDiscovery:
    """Derives named, directional relationships from foreign keys.

    Stateless: one instance is shared by every coordinator and every
    discovery call.
    """

    def discover_relationships(
        self,
        tables: List[TableInfo],
        include_reverse: bool = True,
        include_many_to_many: bool = False,
    ) -> List[RelationshipInfo]:
        """Build relationship records for every resolvable foreign key.

        Each foreign key yields a forward record and, unless
        ``include_reverse`` is off, its inverse. Foreign keys whose
        referenced table is not in ``tables`` are skipped.

        Args:
            tables: Fully enhanced tables of one snapshot
            include_reverse: Emit the inverse record for every foreign key
            include_many_to_many: Also emit a many-to-many pair for every
                junction table

        Returns:
            List of RelationshipInfo in table/foreign key order
        """
        by_name = self._index_tables(tables)
        relationships: List[RelationshipInfo] = []

        for table in tables:
            targets = Counter(fk.referenced_table for fk in table.foreign_keys)
            for fk in table.foreign_keys:
                referenced = by_name.get(fk.referenced_table)
                if referenced is None:
                    logger.debug(
                        "Skipping foreign key %s on %s: table %s not discovered",
                        fk.name, table.name, fk.referenced_table,
                    )
                    continue

                forward_type = self._classify(fk, referenced)
                relationships.append(RelationshipInfo(
                    name=relationship_name(fk.column, fk.referenced_table),
                    type=forward_type,
                    from_table=table.name,
                    from_column=fk.column,
                    to_table=fk.referenced_table,
                    to_column=fk.referenced_column,
                ))

                if include_reverse:
                    relationships.append(RelationshipInfo(
                        name=reverse_relationship_name(
                            table.name, fk.column, qualify=targets[fk.referenced_table] > 1
                        ),
                        type=forward_type.inverse(),
                        from_table=fk.referenced_table,
                        from_column=fk.referenced_column,
                        to_table=table.name,
                        to_column=fk.column,
                    ))

        if include_many_to_many:
            relationships.extend(self._many_to_many_relationships(tables, by_name))

        return relationships

    def _classify(self, fk: ForeignKeyInfo, referenced: TableInfo) -> RelationshipType:
        """many-to-one when the referenced column is part of the target's primary key."""
        if fk.referenced_column in referenced.primary_key:
            return RelationshipType.MANY_TO_ONE
        return RelationshipType.ONE_TO_MANY

    def _many_to_many_relationships(
        self, tables: List[TableInfo], by_name: Dict[str, TableInfo]
    ) -> List[RelationshipInfo]:
        relationships = []
        for junction in tables:
            if not self.is_junction_table(junction):
                continue
            fks = [fk for fk in junction.foreign_keys if fk.referenced_table in by_name]
            for left, right in combinations(fks, 2):
                for a, b in ((left, right), (right, left)):
                    relationships.append(RelationshipInfo(
                        name=reverse_relationship_name(b.referenced_table, b.column),
                        type=RelationshipType.MANY_TO_MANY,
                        from_table=a.referenced_table,
                        from_column=a.referenced_column,
                        to_table=b.referenced_table,
                        to_column=b.referenced_column,
                        junction_table=junction.name,
                        junction_from_column=a.column,
                        junction_to_column=b.column,
                    ))
        return relationships

    def is_junction_table(self, table: TableInfo) -> bool:
        """Check whether a table only exists to link two others.

        A junction table has a composite primary key made up entirely of
        foreign key columns, and every other column is a foreign key column
        too. Whether the foreign keys point at distinct tables is not checked.
        """
        if len(table.primary_key) <= 1:
            return False
        fk_columns = set(table.foreign_key_columns())
        if not set(table.primary_key) <= fk_columns:
            return False
        return all(col.name in fk_columns for col in table.columns)

    def analyze_relationship_patterns(self, tables: List[TableInfo]) -> RelationshipPatterns:
        """Count relationship shapes across the table set."""
        patterns = RelationshipPatterns()
        by_name = self._index_tables(tables)

        for table in tables:
            junction = self.is_junction_table(table)
            for fk in table.foreign_keys:
                if fk.referenced_table == table.name:
                    patterns.self_referencing += 1

                if fk.referenced_table in by_name and junction:
                    patterns.many_to_many += 1
                else:
                    patterns.one_to_many += 1

        patterns.circular_references = self.detect_circular_references(tables)
        return patterns

    def detect_circular_references(self, tables: List[TableInfo]) -> List[str]:
        """Find foreign key cycles.

        Depth-first search over table -> referenced table edges, driven by
        an explicit stack of ``(table, remaining edges)`` frames. A cycle is
        reported when an edge reaches a table that is still on the current
        path, rendered as ``a -> b -> c -> a``. Tables whose subtree is done
        are never re-entered.

        Returns:
            List of cycle chains in discovery order
        """
        by_name = self._index_tables(tables)
        cycles: List[str] = []
        visited: Set[str] = set()

        for start in tables:
            if start.name in visited:
                continue

            path: List[str] = [start.name]
            on_path: Set[str] = {start.name}
            visited.add(start.name)
            stack: List[Tuple[str, Iterator[str]]] = [(start.name, self._edges(start.name, by_name))]

            while stack:
                node, edges = stack[-1]
                target = next(edges, None)

                if target is None:
                    stack.pop()
                    path.pop()
                    on_path.discard(node)
                    continue

                if target in on_path:
                    cycle_start = path.index(target)
                    cycles.append(" -> ".join(path[cycle_start:] + [target]))
                    continue

                if target in visited:
                    continue

                visited.add(target)
                on_path.add(target)
                path.append(target)
                stack.append((target, self._edges(target, by_name)))

        return cycles

    def _edges(self, table_name: str, by_name: Dict[str, TableInfo]) -> Iterator[str]:
        table = by_name.get(table_name)
        if table is None:
            return iter(())
        return iter([fk.referenced_table for fk in table.foreign_keys])

    def validate_relationships(self, tables: List[TableInfo]) -> ValidationResult:
        """Check every foreign key against the table set.

        All problems are collected: a dangling referenced table, a missing
        referenced column, and a foreign key column absent from its own table.
        """
        issues: List[str] = []
        by_name = self._index_tables(tables)

        for table in tables:
            own_columns = set(table.column_names)
            for fk in table.foreign_keys:
                referenced = by_name.get(fk.referenced_table)
                if referenced is None:
                    issues.append(
                        f"Foreign key '{fk.name}' in table '{table.name}' references "
                        f"non-existent table '{fk.referenced_table}'"
                    )
                elif fk.referenced_column not in referenced.column_names:
                    issues.append(
                        f"Foreign key '{fk.name}' in table '{table.name}' references "
                        f"non-existent column '{fk.referenced_column}' in table '{fk.referenced_table}'"
                    )

                if fk.column not in own_columns:
                    issues.append(
                        f"Foreign key '{fk.name}' in table '{table.name}' references "
                        f"non-existent column '{fk.column}'"
                    )

        return ValidationResult(is_valid=not issues, issues=issues)

    @staticmethod
    def _index_tables(tables: List[TableInfo]) -> Dict[str, TableInfo]:
        # First occurrence wins when two schemas share a table name
        by_name: Dict[str, TableInfo] = {}
        for table in tables:
            by_name.setdefault(table.name, table)
        return by_name
