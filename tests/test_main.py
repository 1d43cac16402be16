"""Tests for the HTTP surface."""

import pytest

import main
from models import EngineGeneration
from query_service import QueryServiceDispatcher


@pytest.fixture
def client(session, limits):
    main.app.config["TESTING"] = True
    main.app.config["QUERY_SERVICE"] = QueryServiceDispatcher(session, generation=EngineGeneration.V2, limits=limits)
    with main.app.test_client() as client:
        yield client
    main.app.config.pop("QUERY_SERVICE", None)


def test_keyspaces(client, session):
    session.on("system.schema_keyspaces", columns=["keyspace_name"], rows=[("shop",), ("audit",)])

    response = client.get("/keyspaces")

    assert response.status_code == 200
    assert response.get_json() == {"keyspaces": ["audit", "shop"]}


def test_keyspaces_when_store_is_down(client, session):
    session.on("system.", error=ConnectionError("down"))

    assert client.get("/keyspaces").get_json() == {"keyspaces": []}


def test_tables_filtered_by_keyspace(client, session):
    client.get("/tables?keyspace=Shop")

    assert session.executed[-1].endswith("where keyspace_name='shop'")


def test_table_exists(client, session):
    session.on("columnfamily_name='users'", columns=["columnfamily_name"], rows=[("users",)])

    assert client.get("/tables/users/exists").get_json() == {"table": "users", "exists": True}
    assert client.get("/tables/other/exists").get_json() == {"table": "other", "exists": False}


def test_all_columns_without_table(client, session):
    client.get("/columns")

    assert "where" not in session.executed[-1]


def test_query(client, session):
    session.on("select column_name, type", columns=["column_name", "type"], rows=[("id", "partition_key")])
    session.on("from users", columns=["id", "name"], rows=[(1, "a"), (2, None)])

    response = client.post("/query", json={"cql": "select * from users", "active_keyspace": "shop"})
    body = response.get_json()

    assert response.status_code == 200
    assert [c["name"] for c in body["common_columns"]] == ["id"]
    assert [c["name"] for c in body["dynamic_columns"]] == ["name"]
    assert body["partition_key"] == "id"
    assert body["rows"] == [{"id": 1, "name": "a"}, {"id": 2}]
    assert body["active_keyspace"] == "shop"


def test_use_query_switches_keyspace(client):
    body = client.post("/query", json={"cql": "use audit"}).get_json()

    assert body["active_keyspace"] == "audit"
    assert body["rows"] == []


def test_query_failure(client, session):
    session.on("nonsense", error=RuntimeError("syntax error"))

    response = client.post("/query", json={"cql": "nonsense"})

    assert response.status_code == 400
    assert response.get_json()["cql"] == "nonsense"


def test_query_requires_cql(client):
    assert client.post("/query", json={}).status_code == 400


@pytest.mark.parametrize(
    "body",
    [
        {"cql": 5},
        {"cql": ["select * from users"]},
        {"cql": "select * from users", "active_keyspace": 7},
        ["select * from users"],
    ],
)
def test_query_rejects_non_string_input(client, session, body):
    response = client.post("/query", json=body)

    assert response.status_code == 400
    assert session.executed == []
