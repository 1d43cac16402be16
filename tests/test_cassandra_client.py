"""Tests for the driver adapter."""

import pytest

from db.cassandra_client import detect_engine_generation, row_value, run_query
from models import EngineGeneration


def test_run_query_returns_cells(session):
    session.on("from users", columns=["id", "name"], rows=[(1, None)])

    rows = list(run_query(session, "select * from users"))

    assert len(rows) == 1
    assert [c.name for c in rows[0]] == ["id", "name"]
    assert rows[0][1].is_null
    assert row_value(rows[0], "ID") == 1
    assert row_value(rows[0], "missing") is None


def test_run_query_without_row_description_is_empty(session):
    assert list(run_query(session, "use shop")) == []


def test_run_query_propagates_driver_errors(session):
    session.on("boom", error=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        run_query(session, "select boom")


@pytest.mark.parametrize(
    "version, expected",
    [
        ("1.2.19", EngineGeneration.V1),
        ("2.0.17", EngineGeneration.V2),
        ("2.1.22", EngineGeneration.V2),
        ("garbage", EngineGeneration.V1),
    ],
)
def test_detect_engine_generation(session, version, expected):
    session.on("system.local", columns=["release_version"], rows=[(version,)])

    assert detect_engine_generation(session, override="") == expected


def test_detect_engine_generation_without_rows(session):
    assert detect_engine_generation(session, override="") == EngineGeneration.V1


def test_detect_engine_generation_on_error(session):
    session.on("system.local", error=RuntimeError("unavailable"))

    assert detect_engine_generation(session, override="") == EngineGeneration.V1


def test_detect_engine_generation_override(session):
    assert detect_engine_generation(session, override="2") == EngineGeneration.V2
    assert session.executed == []
