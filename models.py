# models.py
# Value objects shared by the query service, the catalogs and the HTTP layer.
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any, Dict, List, Optional, Tuple

import config


class EngineGeneration(Enum):
    """Major version family of the cluster; each one has its own system tables."""
    V1 = 1
    V2 = 2


class ColumnType(Enum):
    PARTITION_KEY = "partition_key"
    CLUSTERING_KEY = "clustering_key"
    REGULAR = "regular"
    STATIC = "static"
    COMPACT_VALUE = "compact_value"


# spellings used by newer metadata tables
COLUMN_TYPE_ALIASES = {
    "clustering": ColumnType.CLUSTERING_KEY,
}


class QueryKind(Enum):
    USE = "use"
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    DROP = "drop"
    ALTER = "alter"
    TRUNCATE = "truncate"
    OTHER = "other"


class QueryError(Exception):
    """Raised when a query the user asked for could not be executed."""

    def __init__(self, cql: str, cause: Optional[BaseException] = None):
        reason = str(cause) if cause is not None else "unknown"
        super().__init__(f"Error executing CQL: '{cql}', reason: {reason}")
        self.cql = cql
        self.cause = cause


@total_ordering
@dataclass(frozen=True, eq=False)
class Identifier:
    """
    Name of a schema element. Lookups and ordering ignore case,
    `str()` keeps the case as it was read.
    """
    part: str

    def __post_init__(self):
        if not isinstance(self.part, str) or not self.part.strip():
            raise ValueError(f"{type(self).__name__} requires a non-blank name")

    @property
    def part_lc(self) -> str:
        return self.part.lower()

    def _family(self) -> type:
        return type(self)

    def __eq__(self, other):
        if not isinstance(other, Identifier) or self._family() is not other._family():
            return NotImplemented
        return self.part_lc == other.part_lc

    def __lt__(self, other):
        if not isinstance(other, Identifier) or self._family() is not other._family():
            return NotImplemented
        return (self.part_lc, self.part) < (other.part_lc, other.part)

    def __hash__(self):
        return hash((self._family().__name__, self.part_lc))

    def __str__(self):
        return self.part


class KeySpace(Identifier):
    pass


class Table(Identifier):
    pass


class Index(Identifier):
    pass


@dataclass(frozen=True, eq=False)
class ColumnName(Identifier):
    # storage type name as reported by the driver, metadata only
    data_type: Optional[str] = None

    def _family(self) -> type:
        return ColumnName


@dataclass(frozen=True, eq=False)
class ExtendedColumnName(ColumnName):
    """Column name plus its resolved classification. Two instances with the same name are equal."""
    column_type: ColumnType = ColumnType.REGULAR

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.part, "type": self.column_type.value, "data_type": self.data_type}


@dataclass(frozen=True)
class PartitionKey:
    column: ExtendedColumnName

    @classmethod
    def from_column(cls, column: ExtendedColumnName) -> "PartitionKey":
        return cls(column)

    def __str__(self):
        return str(self.column)


@dataclass(frozen=True)
class Row:
    # (column, value) pairs in stream order, null values already dropped
    cells: Tuple[Tuple[ExtendedColumnName, Any], ...]

    @property
    def columns(self) -> Tuple[ExtendedColumnName, ...]:
        return tuple(col for col, _ in self.cells)

    def get(self, name: str, default: Any = None) -> Any:
        lc = name.lower()
        for col, value in self.cells:
            if col.part_lc == lc:
                return value
        return default

    def to_dict(self) -> Dict[str, Any]:
        return {col.part: json_value(value) for col, value in self.cells}


@dataclass(frozen=True)
class SelectResult:
    common_columns: Tuple[ExtendedColumnName, ...] = ()
    dynamic_columns: Tuple[ExtendedColumnName, ...] = ()
    rows: Tuple[Row, ...] = ()
    partition_key: Optional[PartitionKey] = None
    # every distinct partition-key column seen, in first-seen order
    partition_key_columns: Tuple[ExtendedColumnName, ...] = ()

    @classmethod
    def empty(cls) -> "SelectResult":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def has_composite_partition_key(self) -> bool:
        return len(self.partition_key_columns) > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "common_columns": [c.to_dict() for c in self.common_columns],
            "dynamic_columns": [c.to_dict() for c in self.dynamic_columns],
            "rows": [r.to_dict() for r in self.rows],
            "partition_key": str(self.partition_key) if self.partition_key else None,
            "partition_key_columns": [c.part for c in self.partition_key_columns],
        }


@dataclass(frozen=True)
class Query:
    cql: str
    kind: QueryKind = QueryKind.OTHER

    @classmethod
    def parse(cls, cql: str) -> "Query":
        text = (cql or "").strip().rstrip(";").strip()
        if not text:
            raise ValueError("empty query")
        first = text.split(None, 1)[0].lower()
        try:
            kind = QueryKind(first)
        except ValueError:
            kind = QueryKind.OTHER
        return cls(text, kind)

    def __str__(self):
        return self.cql


@dataclass(frozen=True)
class SessionContext:
    """Per-user state carried alongside each call instead of living in the service."""
    active_keyspace: Optional[KeySpace] = None

    def with_keyspace(self, keyspace: Optional[KeySpace]) -> "SessionContext":
        return SessionContext(active_keyspace=keyspace)


@dataclass(frozen=True)
class Limits:
    rows_limit: int = field(default_factory=lambda: config.ROWS_LIMIT)
    columns_limit: int = field(default_factory=lambda: config.COLUMNS_LIMIT)
    result_limit: int = field(default_factory=lambda: config.RESULT_LIMIT)

    def __post_init__(self):
        for name in ("rows_limit", "columns_limit", "result_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_config(cls) -> "Limits":
        return cls(config.ROWS_LIMIT, config.COLUMNS_LIMIT, config.RESULT_LIMIT)


def json_value(value: Any) -> Any:
    """Convert a driver value into something `json.dumps` accepts."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict) or hasattr(value, "items"):
        return {str(k): json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [json_value(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def identifiers(cls, names: List[Optional[str]]) -> Tuple[Identifier, ...]:
    """Build a sorted, de-duplicated tuple of `cls`, skipping blank names."""
    result = set()
    for name in names:
        name = name.strip() if isinstance(name, str) else None
        if name:
            result.add(cls(name))
    return tuple(sorted(result))
