"""Best-effort snapshot of keyspace and table names used for completion."""
from __future__ import annotations
from typing import Callable, FrozenSet, Iterable, Optional, Tuple
import logging

from cqlpy.core.results import QueryResult
from cqlpy.core.values import CqlType

logger = logging.getLogger(__name__)

KEYSPACES_QUERY = "SELECT keyspace_name FROM system_schema.keyspaces"
TABLES_QUERY = "SELECT keyspace_name, table_name FROM system_schema.tables"

Execute = Callable[[str], QueryResult]


def _text_column(result: QueryResult, index: int) -> FrozenSet[str]:
    names = set()
    for row in result.rows or ():
        if len(row) <= index:
            continue
        cell = row[index]
        if cell is not None and cell.kind in (CqlType.TEXT, CqlType.ASCII):
            names.add(cell.value)
    return frozenset(names)


class SchemaCache:
    """Keyspace/table names as of the last refresh.

    Stale between refreshes. Each refresh builds new sets and swaps them in,
    so a reader never sees a half-updated cache.
    """

    def __init__(self, keyspaces: Iterable[str] = (), tables: Iterable[str] = (),
                 current_keyspace: Optional[str] = None):
        self.keyspaces: FrozenSet[str] = frozenset(keyspaces)
        self.tables: FrozenSet[str] = frozenset(tables)
        self.current_keyspace = current_keyspace

    def refresh(self, execute: Execute) -> Tuple[FrozenSet[str], FrozenSet[str]]:
        """Re-read names through ``execute``; never raises.

        The two metadata queries are independent: a failing one leaves its
        half of the cache as it was.
        """
        try:
            self.keyspaces = _text_column(execute(KEYSPACES_QUERY), 0)
        except Exception as e:
            logger.debug("Keyspace refresh failed: %s", e)
        try:
            self.tables = _text_column(execute(TABLES_QUERY), 1)
        except Exception as e:
            logger.debug("Table refresh failed: %s", e)
        logger.debug("Schema cache: %d keyspaces, %d tables", len(self.keyspaces), len(self.tables))
        return self.keyspaces, self.tables

    def set_keyspace(self, keyspace: Optional[str]) -> None:
        self.current_keyspace = keyspace
