# main.py
import logging

from flask import Flask, jsonify, request

import config
from db.cassandra_client import connect
from models import KeySpace, Limits, Query, QueryError, SessionContext, Table
from query_service import QueryServiceDispatcher

LOG = logging.getLogger(__name__)

app = Flask(__name__)


def get_query_service():
    service = app.config.get("QUERY_SERVICE")
    if service is None:
        service = QueryServiceDispatcher(connect(), limits=Limits.from_config())
        app.config["QUERY_SERVICE"] = service
    return service


def _optional(cls, name):
    value = (request.args.get(name) or "").strip()
    return cls(value) if value else None


def _names(items):
    return [str(i) for i in items]


@app.errorhandler(QueryError)
def query_error(e):
    return jsonify({"error": str(e), "cql": e.cql}), 400


@app.errorhandler(ValueError)
def bad_request(e):
    return jsonify({"error": str(e)}), 400


@app.route("/keyspaces", methods=["GET"])
def keyspaces():
    return jsonify({"keyspaces": _names(get_query_service().find_all_keyspaces())})


@app.route("/keyspaces/<name>/exists", methods=["GET"])
def keyspace_exists(name):
    return jsonify({"keyspace": name, "exists": get_query_service().check_keyspace_exists(KeySpace(name))})


@app.route("/tables", methods=["GET"])
def tables():
    keyspace = _optional(KeySpace, "keyspace")
    return jsonify({"tables": _names(get_query_service().find_table_names(keyspace))})


@app.route("/tables/<name>/exists", methods=["GET"])
def table_exists(name):
    return jsonify({"table": name, "exists": get_query_service().check_table_exists(Table(name))})


@app.route("/columns", methods=["GET"])
def columns():
    table = _optional(Table, "table")
    service = get_query_service()
    names = service.find_column_names(table) if table else service.find_all_column_names()
    return jsonify({"columns": _names(names)})


@app.route("/indexes", methods=["GET"])
def indexes():
    keyspace = _optional(KeySpace, "keyspace")
    return jsonify({"indexes": _names(get_query_service().find_all_indexes(keyspace))})


@app.route("/query", methods=["POST"])
def query():
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "JSON object required"}), 400
    cql = body.get("cql")
    if not isinstance(cql, str) or not cql.strip():
        return jsonify({"error": "cql must be a non-empty string"}), 400

    active = body.get("active_keyspace") or ""
    if not isinstance(active, str):
        return jsonify({"error": "active_keyspace must be a string"}), 400
    active = active.strip()
    context = SessionContext(KeySpace(active) if active else None)

    result, context = get_query_service().execute(Query.parse(cql), context)
    response = result.to_dict()
    response["active_keyspace"] = str(context.active_keyspace) if context.active_keyspace else None
    return jsonify(response)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("Registered routes:")
    for r in sorted([rule.rule for rule in app.url_map.iter_rules()]):
        print(" ", r)
    app.run(host="0.0.0.0", port=8000)
