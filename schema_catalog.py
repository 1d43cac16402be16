# schema_catalog.py
# Keyspace / table / column listing against the system metadata tables.
# Listing is best-effort: a failed lookup is logged and comes back empty.
import logging
from typing import Optional, Set, Tuple

from db.cassandra_client import row_value
from models import ColumnName, Index, KeySpace, Table, identifiers
from query_helper import quote_literal
from type_catalog import parse_aliases

LOG = logging.getLogger(__name__)


class SchemaCatalog:
    """Newer dialect."""

    def __init__(self, executor, limits):
        self.executor = executor
        self.limits = limits

    def find_all_keyspaces(self) -> Tuple[KeySpace, ...]:
        rows = self.executor.execute_silent("select keyspace_name from system.schema_keyspaces")
        if rows is None:
            LOG.debug("Cannot read keyspace info")
            return ()
        return identifiers(KeySpace, [row_value(r, "keyspace_name") for r in rows])

    def check_keyspace_exists(self, keyspace: Optional[KeySpace]) -> bool:
        if keyspace is None:
            return False
        return keyspace in self.find_all_keyspaces()

    def find_table_names(self, keyspace: Optional[KeySpace] = None) -> Tuple[Table, ...]:
        cql = "select columnfamily_name from system.schema_columnfamilies"
        if keyspace is not None:
            cql += " where keyspace_name=%s" % quote_literal(keyspace.part_lc)
        rows = self.executor.execute_silent(cql)
        if rows is None:
            LOG.debug("No table names found for keyspace: %s", keyspace)
            return ()
        return identifiers(Table, [row_value(r, "columnfamily_name") for r in rows])

    def check_table_exists(self, table: Optional[Table]) -> bool:
        if table is None:
            return False
        rows = self.executor.execute_silent(
            "select columnfamily_name from system.schema_columnfamilies where columnfamily_name=%s allow filtering"
            % quote_literal(table.part_lc)
        )
        return bool(rows)

    def find_all_indexes(self, keyspace: Optional[KeySpace] = None) -> Tuple[Index, ...]:
        cql = "SELECT index_name FROM system.schema_columns"
        if keyspace is not None:
            cql += " where keyspace_name=%s" % quote_literal(keyspace.part_lc)
        rows = self.executor.execute_silent(cql)
        if rows is None:
            LOG.debug("No indexes found for keyspace: %s", keyspace)
            return ()
        return identifiers(Index, [row_value(r, "index_name") for r in rows])

    def find_column_names(self, table: Optional[Table] = None) -> Tuple[ColumnName, ...]:
        cql = "select column_name from system.schema_columns"
        if table is not None:
            cql += " where columnfamily_name=%s" % quote_literal(table.part_lc)
        cql += " limit %d allow filtering" % self.limits.result_limit

        rows = self.executor.execute_silent(cql)
        if rows is None:
            LOG.warning("Cannot read column names")
            return ()

        names = set(identifiers(ColumnName, [row_value(r, "column_name") for r in rows]))
        self.load_partition_key_names(table, names)
        return tuple(sorted(names))

    def find_all_column_names(self) -> Tuple[ColumnName, ...]:
        return self.find_column_names(None)

    def load_partition_key_names(self, table: Optional[Table], names: Set[ColumnName]) -> None:
        # partition keys are regular rows of schema_columns here
        pass


class LegacySchemaCatalog(SchemaCatalog):
    """Older dialect: no index metadata, partition keys live in key_aliases."""

    def find_all_indexes(self, keyspace: Optional[KeySpace] = None) -> Tuple[Index, ...]:
        return ()

    def load_partition_key_names(self, table: Optional[Table], names: Set[ColumnName]) -> None:
        cql = "select columnfamily_name, key_aliases, column_aliases from system.schema_columnfamilies"
        if table is not None:
            cql += " where columnfamily_name=%s" % quote_literal(table.part_lc)
        cql += " allow filtering"

        rows = self.executor.execute_silent(cql)
        if rows is None:
            LOG.warning("Cannot read partition key names for table: %s", table)
            return
        for row in rows:
            for name in parse_aliases(row_value(row, "key_aliases")):
                names.add(ColumnName(name))
