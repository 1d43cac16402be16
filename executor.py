# executor.py
import logging
from typing import List, Optional

import config
from db.cassandra_client import Cell, RowStream, run_query
from models import QueryError

LOG = logging.getLogger(__name__)


class RawExecutor:
    """
    Sends CQL text to the cluster.

    `execute_silent` is for metadata lookups: a failure is logged and turned into None.
    `execute` is for the user's own query: a failure raises QueryError, also when
    it happens while later rows are being fetched.
    Neither retries.
    """

    def __init__(self, session, timeout=config.QUERY_TIMEOUT):
        self.session = session
        self.timeout = timeout

    def execute_silent(self, cql: str) -> Optional[List[List[Cell]]]:
        LOG.debug("Executing: %s", cql)
        try:
            # metadata results are small, read them here so paging errors are caught too
            return list(run_query(self.session, cql, timeout=self.timeout))
        except Exception as e:
            LOG.warning("Error executing CQL: '%s', reason: %s", cql, e)
            LOG.debug("CQL failure detail", exc_info=True)
            return None

    def execute(self, cql: str) -> RowStream:
        LOG.debug("Executing: %s", cql)
        try:
            rows = run_query(self.session, cql, timeout=self.timeout)
        except Exception as e:
            raise QueryError(cql, e) from e
        return _guarded(cql, rows)


def _guarded(cql: str, rows: RowStream) -> RowStream:
    try:
        yield from rows
    except Exception as e:
        raise QueryError(cql, e) from e
