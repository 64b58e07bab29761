"""Database data models for schema discovery."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RelationshipType(str, Enum):
    """Cardinality of a relationship seen from its ``from`` side."""

    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"

    def inverse(self) -> "RelationshipType":
        if self is RelationshipType.ONE_TO_MANY:
            return RelationshipType.MANY_TO_ONE
        if self is RelationshipType.MANY_TO_ONE:
            return RelationshipType.ONE_TO_MANY
        return RelationshipType.MANY_TO_MANY


@dataclass(frozen=True)
class ColumnInfo:
    """Represents a discovered database column."""
    name: str
    native_type: str
    type: str  # semantic type produced by the type mapper
    nullable: bool = True
    default_value: Any = None
    is_primary_key: bool = False
    is_auto_increment: bool = False
    max_length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None


@dataclass(frozen=True)
class ForeignKeyInfo:
    """A single-column foreign key edge.

    Composite foreign keys are reported as one entry per column pair sharing
    the same constraint name.
    """
    name: str
    column: str
    referenced_table: str
    referenced_column: str
    on_delete: str = "NO ACTION"
    on_update: str = "NO ACTION"
    deferrable: bool = False
    deferred: bool = False


@dataclass(frozen=True)
class IndexInfo:
    """Represents a table index."""
    name: str
    columns: Tuple[str, ...] = ()
    unique: bool = False
    is_primary: bool = False
    valid: bool = True
    definition: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class CheckConstraintInfo:
    """Represents a CHECK constraint."""
    name: str
    expression: str
    deferrable: bool = False
    deferred: bool = False
    comment: Optional[str] = None


@dataclass(frozen=True)
class RelationshipInfo:
    """A named, directional relationship between two tables."""
    name: str
    type: RelationshipType
    from_table: str
    from_column: str
    to_table: str
    to_column: str
    junction_table: Optional[str] = None
    junction_from_column: Optional[str] = None
    junction_to_column: Optional[str] = None


@dataclass
class TableInfo:
    """Represents a database table and its structural metadata."""
    name: str
    schema: Optional[str] = None
    columns: List[ColumnInfo] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKeyInfo] = field(default_factory=list)
    indexes: List[IndexInfo] = field(default_factory=list)
    check_constraints: List[CheckConstraintInfo] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def full_name(self) -> str:
        """Return schema-qualified table name."""
        return f"{self.schema}.{self.name}" if self.schema else self.name

    def get_column(self, name: str) -> Optional[ColumnInfo]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def foreign_key_columns(self) -> List[str]:
        return [fk.column for fk in self.foreign_keys]

    def validate(self) -> List[str]:
        """Check the column invariants of this table.

        Returns:
            List of human-readable problems, empty when the table is consistent
        """
        issues = []
        names = set(self.column_names)
        for pk in self.primary_key:
            if pk not in names:
                issues.append(f"Primary key column '{pk}' is not a column of table '{self.name}'")
        for fk in self.foreign_keys:
            if fk.column not in names:
                issues.append(f"Foreign key '{fk.name}' column '{fk.column}' is not a column of table '{self.name}'")
        return issues


@dataclass
class ViewInfo:
    """Represents a database view."""
    name: str
    schema: Optional[str] = None
    definition: str = ""
    columns: List[ColumnInfo] = field(default_factory=list)


@dataclass
class SchemaInfo:
    """One complete discovery snapshot."""
    tables: List[TableInfo] = field(default_factory=list)
    relationships: List[RelationshipInfo] = field(default_factory=list)
    views: List[ViewInfo] = field(default_factory=list)

    def get_table(self, name: str) -> Optional[TableInfo]:
        """Find a table by name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def relationships_for(self, table_name: str) -> List[RelationshipInfo]:
        """Relationships whose ``from`` side is the given table."""
        return [r for r in self.relationships if r.from_table == table_name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        for rel in data["relationships"]:
            rel["type"] = rel["type"].value
        return data


@dataclass
class DiscoveryConfig:
    """Options accepted by ``discover_schema``."""
    exclude_tables: List[str] = field(default_factory=list)  # fnmatch patterns
    include_views: bool = False
    custom_type_mappings: Dict[str, str] = field(default_factory=dict)
    schema: str = "public"  # PostgreSQL namespace; ignored by SQLite
    max_workers: int = 4
    infer_many_to_many: bool = False

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "DiscoveryConfig":
        """Build a config seeded from application settings."""
        if settings is None:
            from ..config import settings
        values = {
            "include_views": settings.include_views,
            "schema": settings.postgres_schema,
            "max_workers": settings.max_workers,
        }
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class DialectCapabilities:
    """Informational feature flags for a dialect."""
    supports_views: bool = False
    supports_indexes: bool = False
    supports_constraints: bool = False
    supports_foreign_keys: bool = False
    supports_check_constraints: bool = False
    supports_deferred_constraints: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


@dataclass
class TableEnhancement:
    """Outcome of enhancing a single table with indexes and constraints."""
    table: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class EnhancementReport:
    """Per-table enhancement outcomes for one discovery call."""
    dialect: str
    results: List[TableEnhancement] = field(default_factory=list)
    foreign_keys_enforced: Optional[bool] = None

    @property
    def degraded_tables(self) -> List[str]:
        return [r.table for r in self.results if not r.ok]

    @property
    def is_complete(self) -> bool:
        return not self.degraded_tables

    def error_for(self, table: str) -> Optional[BaseException]:
        for result in self.results:
            if result.table == table:
                return result.error
        return None


@dataclass
class DiscoveryResult:
    """A schema snapshot together with its enhancement report."""
    schema: SchemaInfo
    report: EnhancementReport


@dataclass
class RelationshipPatterns:
    """Summary of relationship shapes found across a table set."""
    one_to_many: int = 0
    many_to_many: int = 0
    self_referencing: int = 0
    circular_references: List[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Structured outcome of a validation pass."""
    is_valid: bool
    issues: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class IndexUsageStats:
    """Scan counters for one index, where the engine keeps them."""
    index_name: str
    scans: int = 0
    tuples_read: int = 0
    tuples_fetched: int = 0

    @property
    def unused(self) -> bool:
        return not self.scans


@dataclass
class IndexAnalysis:
    """Findings of an index efficiency pass over one table."""
    unused_indexes: List[str] = field(default_factory=list)
    duplicate_indexes: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ConstraintAnalysis:
    """Performance findings for one table's constraints."""
    deferred_constraints: List[str] = field(default_factory=list)
    immediate_constraints: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class CompatibilityAnalysis:
    """Portability findings for CHECK expressions."""
    compatibility_issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
