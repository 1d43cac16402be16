# config.py
# Edit these values directly or override them through the environment
import os

# Cluster connection
CASSANDRA_CONTACT_POINTS = [
    cp.strip() for cp in os.getenv("CASSANDRA_CONTACT_POINTS", "localhost").split(",") if cp.strip()
]
CASSANDRA_PORT = int(os.getenv("CASSANDRA_PORT", "9042"))
CASSANDRA_USERNAME = os.getenv("CASSANDRA_USERNAME", "")
CASSANDRA_PASSWORD = os.getenv("CASSANDRA_PASSWORD", "")
CASSANDRA_PROTOCOL_VERSION = int(os.getenv("CASSANDRA_PROTOCOL_VERSION", "2"))
CONNECT_TIMEOUT = int(os.getenv("CASSANDRA_CONNECT_TIMEOUT", "10"))  # seconds
QUERY_TIMEOUT = int(os.getenv("CASSANDRA_QUERY_TIMEOUT", "120"))     # seconds

# "1" or "2" pins the metadata dialect, empty means detect from system.local
ENGINE_GENERATION = os.getenv("CASSANDRA_ENGINE_GENERATION", "").strip()

# Row/column limits to protect memory when materializing results
ROWS_LIMIT = int(os.getenv("CQL_ROWS_LIMIT", "1000"))
COLUMNS_LIMIT = int(os.getenv("CQL_COLUMNS_LIMIT", "500"))
# Upper bound for metadata listing queries
RESULT_LIMIT = int(os.getenv("CQL_RESULT_LIMIT", "5000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
