# query_service.py
import logging
import threading
from typing import Optional, Tuple

from db.cassandra_client import detect_engine_generation
from executor import RawExecutor
from materializer import materialize
from models import (
    ColumnName, EngineGeneration, Index, KeySpace, Limits, Query, QueryKind,
    SelectResult, SessionContext, Table,
)
from query_helper import extract_keyspace
from schema_catalog import LegacySchemaCatalog, SchemaCatalog
from type_catalog import LegacyTypeCatalog, TypeCatalog

LOG = logging.getLogger(__name__)


class QueryService:
    """Schema browsing and query execution for one metadata dialect."""

    generation = EngineGeneration.V2
    schema_catalog_class = SchemaCatalog
    type_catalog_class = TypeCatalog

    def __init__(self, executor: RawExecutor, limits: Optional[Limits] = None):
        self.executor = executor
        self.limits = limits or Limits.from_config()
        self.schema = self.schema_catalog_class(executor, self.limits)
        self.types = self.type_catalog_class(executor)

    def find_all_keyspaces(self) -> Tuple[KeySpace, ...]:
        return self.schema.find_all_keyspaces()

    def check_keyspace_exists(self, keyspace: Optional[KeySpace]) -> bool:
        return self.schema.check_keyspace_exists(keyspace)

    def find_table_names(self, keyspace: Optional[KeySpace] = None) -> Tuple[Table, ...]:
        return self.schema.find_table_names(keyspace)

    def find_table_names_for_active_keyspace(self, context: Optional[SessionContext]) -> Tuple[Table, ...]:
        return self.schema.find_table_names(context.active_keyspace if context else None)

    def check_table_exists(self, table: Optional[Table]) -> bool:
        return self.schema.check_table_exists(table)

    def find_column_names(self, table: Optional[Table] = None) -> Tuple[ColumnName, ...]:
        return self.schema.find_column_names(table)

    def find_all_column_names(self) -> Tuple[ColumnName, ...]:
        return self.schema.find_all_column_names()

    def find_all_indexes(self, keyspace: Optional[KeySpace] = None) -> Tuple[Index, ...]:
        return self.schema.find_all_indexes(keyspace)

    def create_type_map(self, query: Query):
        return self.types.create_type_map(query)

    def execute(self, query: Query, context: Optional[SessionContext] = None) -> Tuple[SelectResult, SessionContext]:
        """
        Run the user's query. Returns the result together with the session
        context to use for the next call; only a USE query changes it.
        Raises QueryError when the query itself fails.
        """
        LOG.debug("Executing CQL: %s", query)
        context = context or SessionContext()

        rows = self.executor.execute(query.cql)
        if query.kind == QueryKind.USE:
            context = context.with_keyspace(extract_keyspace(query))

        first = next(rows, None)
        if first is None:
            return SelectResult.empty(), context

        type_map = self.create_type_map(query)
        return materialize(_chain(first, rows), type_map, self.limits), context


def _chain(first, rest):
    yield first
    yield from rest


class LegacyQueryService(QueryService):
    generation = EngineGeneration.V1
    schema_catalog_class = LegacySchemaCatalog
    type_catalog_class = LegacyTypeCatalog


SERVICES = {
    EngineGeneration.V1: LegacyQueryService,
    EngineGeneration.V2: QueryService,
}


class QueryServiceDispatcher:
    """
    Single entry point for callers. The engine generation is resolved once,
    on first use, and the matching QueryService serves every later call.
    """

    def __init__(self, session, generation: Optional[EngineGeneration] = None, limits: Optional[Limits] = None):
        self.session = session
        self.limits = limits or Limits.from_config()
        self._generation = generation
        self._service = None
        self._lock = threading.Lock()

    @property
    def generation(self) -> EngineGeneration:
        return self.get().generation

    def get(self) -> QueryService:
        if self._service is None:
            with self._lock:
                if self._service is None:
                    generation = self._generation or detect_engine_generation(self.session)
                    self._service = SERVICES[generation](RawExecutor(self.session), self.limits)
        return self._service

    def find_all_keyspaces(self):
        return self.get().find_all_keyspaces()

    def check_keyspace_exists(self, keyspace):
        return self.get().check_keyspace_exists(keyspace)

    def find_table_names(self, keyspace=None):
        return self.get().find_table_names(keyspace)

    def find_table_names_for_active_keyspace(self, context):
        return self.get().find_table_names_for_active_keyspace(context)

    def check_table_exists(self, table):
        return self.get().check_table_exists(table)

    def find_column_names(self, table=None):
        return self.get().find_column_names(table)

    def find_all_column_names(self):
        return self.get().find_all_column_names()

    def find_all_indexes(self, keyspace=None):
        return self.get().find_all_indexes(keyspace)

    def execute(self, query, context=None):
        return self.get().execute(query, context)
