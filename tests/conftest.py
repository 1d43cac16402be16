"""Shared fixtures: an in-memory stand-in for a cassandra-driver session."""

import pytest

import config
from db.cassandra_client import Cell
from models import Limits


class FakeResult:
    """
    Mimics the parts of cassandra.cluster.ResultSet that the client reads.
    `paging_error` is raised once the canned rows are used up, like a failed
    fetch of the next page.
    """

    def __init__(self, columns=None, rows=(), types=None, paging_error=None):
        self.column_names = list(columns) if columns else None
        self.column_types = types
        self._rows = [tuple(r) for r in rows]
        self._paging_error = paging_error

    def __iter__(self):
        yield from self._rows
        if self._paging_error is not None:
            raise self._paging_error


class FakeSession:
    """
    Answers `execute` with canned results, picked by the first registered
    fragment contained in the CQL text. Unmatched CQL gets an empty result.
    """

    def __init__(self):
        self.executed = []
        self._responses = []

    def on(self, fragment, columns=None, rows=(), types=None, error=None, paging_error=None):
        self._responses.append((fragment, error or FakeResult(columns, rows, types, paging_error)))
        return self

    def execute(self, cql, timeout=None):
        self.executed.append(cql)
        for fragment, response in self._responses:
            if fragment in cql:
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResult()


def cells(**values):
    return [Cell(name, "text", value) for name, value in values.items()]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def limits():
    return Limits(rows_limit=100, columns_limit=50, result_limit=500)


@pytest.fixture(autouse=True)
def no_generation_override(monkeypatch):
    # CASSANDRA_ENGINE_GENERATION from the environment must not leak into tests
    monkeypatch.setattr(config, "ENGINE_GENERATION", "")
