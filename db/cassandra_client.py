# db/cassandra_client.py
import logging
from collections import namedtuple
from typing import Iterator, List

from cassandra.auth import PlainTextAuthProvider

import config
from models import EngineGeneration

LOG = logging.getLogger(__name__)


class Cell(namedtuple("Cell", ["name", "data_type", "value"])):
    """One column of one returned row."""
    __slots__ = ()

    @property
    def is_null(self) -> bool:
        return self.value is None


RowStream = Iterator[List[Cell]]


def connect(contact_points=None, port=None):
    """Open a session against the cluster configured in `config`."""
    # importing the cluster module selects an event loop
    from cassandra.cluster import Cluster

    auth_provider = None
    if config.CASSANDRA_USERNAME and config.CASSANDRA_PASSWORD:
        auth_provider = PlainTextAuthProvider(
            username=config.CASSANDRA_USERNAME, password=config.CASSANDRA_PASSWORD
        )
    cluster = Cluster(
        contact_points=contact_points or config.CASSANDRA_CONTACT_POINTS,
        port=port or config.CASSANDRA_PORT,
        auth_provider=auth_provider,
        protocol_version=config.CASSANDRA_PROTOCOL_VERSION,
        connect_timeout=config.CONNECT_TIMEOUT,
    )
    LOG.info("Connecting to cluster at %s", cluster.contact_points)
    return cluster.connect()


def _type_name(cql_type):
    if cql_type is None:
        return None
    if hasattr(cql_type, "cql_parameterized_type"):
        return cql_type.cql_parameterized_type()
    return str(cql_type)


def _iter_rows(result) -> RowStream:
    names = getattr(result, "column_names", None)
    if not names:
        # USE, INSERT and DDL statements carry no row description
        return
    types = getattr(result, "column_types", None) or [None] * len(names)
    type_names = [_type_name(t) for t in types]
    for row in result:
        yield [Cell(n, t, v) for n, t, v in zip(names, type_names, row)]


def row_value(row: List[Cell], name: str):
    """Value of column `name` in `row`, None when the row has no such column."""
    lc = name.lower()
    for cell in row:
        if cell.name.lower() == lc:
            return cell.value
    return None


def run_query(session, cql, timeout=config.QUERY_TIMEOUT) -> RowStream:
    """
    Execute `cql` and return its rows as a one-shot iterator.
    Driver errors are raised as-is; the caller decides whether they are fatal.
    """
    result = session.execute(cql, timeout=timeout)
    return _iter_rows(result)


def detect_engine_generation(session, override=None) -> EngineGeneration:
    """
    Work out which metadata dialect the cluster speaks.
    Anything that cannot be read falls back to the older dialect.
    """
    override = config.ENGINE_GENERATION if override is None else override
    if override:
        try:
            return EngineGeneration(int(override))
        except ValueError:
            LOG.warning("Ignoring unsupported engine generation override: %s", override)

    try:
        rows = list(run_query(session, "select release_version from system.local"))
    except Exception as e:
        LOG.warning("Cannot read release version, assuming %s: %s", EngineGeneration.V1.name, e)
        return EngineGeneration.V1

    version = rows[0][0].value if rows and rows[0] else None
    try:
        major = int(str(version).split(".")[0])
    except ValueError:
        LOG.warning("Unparseable release version %r, assuming %s", version, EngineGeneration.V1.name)
        return EngineGeneration.V1

    generation = EngineGeneration.V1 if major < 2 else EngineGeneration.V2
    LOG.info("Cluster release %s uses metadata dialect %s", version, generation.name)
    return generation
