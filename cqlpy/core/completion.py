"""Context-sensitive completion candidates for CQL input."""
from __future__ import annotations
from typing import Iterable, List, Sequence

CQL_KEYWORDS = [
    # DML
    'SELECT', 'INSERT', 'UPDATE', 'DELETE', 'TRUNCATE',
    'FROM', 'WHERE', 'SET', 'VALUES', 'INTO',
    'ORDER BY', 'GROUP BY', 'LIMIT', 'ALLOW FILTERING',
    # DDL
    'CREATE', 'ALTER', 'DROP', 'USE',
    'KEYSPACE', 'TABLE', 'INDEX', 'TYPE', 'MATERIALIZED VIEW',
    'WITH', 'AND', 'PRIMARY KEY', 'CLUSTERING ORDER',
    # types
    'TEXT', 'INT', 'BIGINT', 'FLOAT', 'DOUBLE', 'BOOLEAN',
    'UUID', 'TIMEUUID', 'TIMESTAMP', 'DATE', 'TIME',
    'BLOB', 'COUNTER', 'DECIMAL', 'VARINT',
    'LIST', 'SET', 'MAP', 'TUPLE', 'FROZEN',
    'IF', 'EXISTS', 'NOT EXISTS', 'AS', 'IN',
    'DISTINCT', 'COUNT', 'TOKEN', 'TTL', 'WRITETIME',
    'DESCRIBE', 'DESC', 'KEYSPACES', 'TABLES', 'TYPES',
    'BEGIN', 'BATCH', 'APPLY', 'UNLOGGED',
    'CONSISTENCY', 'GRANT', 'REVOKE', 'PERMISSIONS',
]
# SET appears twice in CQL (DML clause and collection type); offer it once
CQL_KEYWORDS = list(dict.fromkeys(CQL_KEYWORDS))

KEYSPACE_CONTEXT_MARKERS = ('USE ', 'KEYSPACE ')
TABLE_CONTEXT_MARKERS = ('FROM ', 'INTO ', 'TABLE ')


def last_word(line: str, cursor: int) -> str:
    """Token immediately before the cursor; empty when the cursor follows whitespace."""
    before = line[:cursor]
    if not before or before[-1].isspace():
        return ''
    parts = before.split()
    return parts[-1] if parts else ''


def _prefix_matches(prefix_upper: str, names: Iterable[str]) -> List[str]:
    return [n for n in names if n.upper().startswith(prefix_upper)]


def candidates(line: str,
               cursor: int,
               keywords: Sequence[str],
               keyspaces: Iterable[str],
               tables: Iterable[str]) -> List[str]:
    """Completion strings for the word under the cursor.

    Keywords always participate. Keyspace names join in once the line mentions
    USE or KEYSPACE, table names once it mentions FROM, INTO or TABLE; the
    three groups are concatenated in that order.
    """
    word = last_word(line, cursor)
    if not word:
        return []
    prefix = word.upper()
    context = line[:cursor].upper()

    out = _prefix_matches(prefix, keywords)
    if any(marker in context for marker in KEYSPACE_CONTEXT_MARKERS):
        out.extend(_prefix_matches(prefix, sorted(keyspaces)))
    if any(marker in context for marker in TABLE_CONTEXT_MARKERS):
        out.extend(_prefix_matches(prefix, sorted(tables)))
    return out


__all__ = ['CQL_KEYWORDS', 'candidates', 'last_word']
