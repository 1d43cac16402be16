# type_catalog.py
# Resolves declared column types of the table a query reads from.
import json
import logging
from typing import Dict, List, Optional

from db.cassandra_client import row_value
from models import COLUMN_TYPE_ALIASES, ColumnType, Query
from query_helper import KW_FROM, extract_table_name, quote_literal

LOG = logging.getLogger(__name__)

TypeMap = Dict[str, ColumnType]


def parse_column_type(type_text: str) -> ColumnType:
    """Map metadata type text to ColumnType, anything unknown is REGULAR."""
    key = (type_text or "").strip()
    try:
        return ColumnType[key.upper()]
    except KeyError:
        pass
    if key.lower() in COLUMN_TYPE_ALIASES:
        return COLUMN_TYPE_ALIASES[key.lower()]
    LOG.warning("Read unsupported column type: %s - using regular", type_text)
    return ColumnType.REGULAR


def parse_aliases(text: Optional[str]) -> List[str]:
    """Column names from a JSON list such as '["id","ts"]', empty on anything unreadable."""
    if not text or not str(text).strip():
        return []
    try:
        names = json.loads(text)
    except ValueError:
        LOG.warning("Cannot parse column aliases: %s", text)
        return []
    if not isinstance(names, list):
        LOG.warning("Column aliases are not a list: %s", text)
        return []
    return [n.strip() for n in names if isinstance(n, str) and n.strip()]


class TypeCatalog:
    """Column types for the newer dialect, which stores them in system.schema_columns."""

    def __init__(self, executor):
        self.executor = executor

    def create_type_map(self, query: Query) -> TypeMap:
        table = extract_table_name(KW_FROM, query)
        if table is None:
            LOG.warning("Could not extract table name from: %s. Column type information is not available.", query)
            return {}

        rows = self.executor.execute_silent(
            "select column_name, type from system.schema_columns where columnfamily_name=%s allow filtering"
            % quote_literal(table.part)
        )
        if rows is None:
            LOG.warning("Could not read types for columns of table: %s", table)
            return {}

        types = {}
        for row in rows:
            type_text = (row_value(row, "type") or "").strip()
            name = (row_value(row, "column_name") or "").strip()
            if not type_text or not name:
                continue
            types[name.lower()] = parse_column_type(type_text)
        return types


class LegacyTypeCatalog(TypeCatalog):
    """
    Older dialect: system.schema_columns has no type column. Key columns are
    listed as JSON in key_aliases / column_aliases of system.schema_columnfamilies,
    everything else falls back to REGULAR.
    """

    def create_type_map(self, query: Query) -> TypeMap:
        table = extract_table_name(KW_FROM, query)
        if table is None:
            LOG.warning("Could not extract table name from: %s. Column type information is not available.", query)
            return {}

        rows = self.executor.execute_silent(
            "select columnfamily_name, key_aliases, column_aliases from system.schema_columnfamilies"
            " where columnfamily_name=%s allow filtering" % quote_literal(table.part)
        )
        if rows is None:
            LOG.warning("Could not read key aliases of table: %s", table)
            return {}

        types = {}
        for row in rows:
            for name in parse_aliases(row_value(row, "column_aliases")):
                types[name.lower()] = ColumnType.CLUSTERING_KEY
            for name in parse_aliases(row_value(row, "key_aliases")):
                types[name.lower()] = ColumnType.PARTITION_KEY
        return types
