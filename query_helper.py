# query_helper.py
# Keyword based extraction of table and keyspace names from CQL text. No parsing, no I/O.
import re
from typing import Optional, Tuple

from models import KeySpace, Query, QueryKind, Table

KW_FROM = "from"
KW_INTO = "into"
KW_UPDATE = "update"
KW_TABLE = "table"

IDENT = r'"[^"]+"|[A-Za-z0-9_]+'
QUALIFIED_RE = r"(?:(%s)\s*\.\s*)?(%s)" % (IDENT, IDENT)
USE_RE = re.compile(r"^\s*use\s+(%s)\s*;?\s*$" % IDENT, re.IGNORECASE)


def _unquote(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    name = name.strip()
    if len(name) > 1 and name.startswith('"') and name.endswith('"'):
        name = name[1:-1]
    return name.strip() or None


def _qualified_name(keyword: str, query: Query) -> Tuple[Optional[str], Optional[str]]:
    pattern = re.compile(r"\b%s\s+%s" % (re.escape(keyword), QUALIFIED_RE), re.IGNORECASE)
    m = pattern.search(query.cql)
    if not m:
        return None, None
    return _unquote(m.group(1)), _unquote(m.group(2))


def extract_table_name(keyword: str, query: Query) -> Optional[Table]:
    """Table named right after `keyword`, without its keyspace prefix."""
    _, table = _qualified_name(keyword, query)
    return Table(table) if table else None


def extract_keyspace(query: Query) -> Optional[KeySpace]:
    """Target of a USE statement, or the keyspace prefix of the first qualified table name."""
    if query.kind == QueryKind.USE:
        m = USE_RE.match(query.cql)
        name = _unquote(m.group(1)) if m else None
        return KeySpace(name) if name else None
    for keyword in (KW_FROM, KW_INTO, KW_UPDATE, KW_TABLE):
        space, _ = _qualified_name(keyword, query)
        if space:
            return KeySpace(space)
    return None


def quote_literal(text: str) -> str:
    """Inline a string as a CQL literal."""
    return "'" + str(text).replace("'", "''") + "'"
