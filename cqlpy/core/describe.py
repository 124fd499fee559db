"""Translate describe shortcuts into canned system_schema queries.

Names are spliced into the query text as typed, without quote escaping.
"""
from __future__ import annotations
from typing import Optional, Sequence

DESCRIBE_USAGE = "Usage: describe [cluster|keyspaces|keyspace NAME|table NAME|tables KEYSPACE]"
SHORTCUT_USAGE = "Usage: \\dk | \\dt [keyspace]"


def describe_query(target: Sequence[str]) -> Optional[str]:
    """Query for ``describe <target...>``, or None when the target is unknown.

    Target words are matched case-sensitively.
    """
    if not target:
        return None
    kind = target[0]
    if kind == 'cluster':
        return "SELECT * FROM system.local"
    if kind == 'keyspaces':
        return "SELECT keyspace_name FROM system_schema.keyspaces"
    if kind == 'keyspace' and len(target) > 1:
        return f"SELECT * FROM system_schema.keyspaces WHERE keyspace_name = '{target[1]}'"
    if kind == 'table' and len(target) > 1:
        return f"SELECT * FROM system_schema.columns WHERE table_name = '{target[1]}'"
    if kind == 'tables' and len(target) > 1:
        return f"SELECT table_name FROM system_schema.tables WHERE keyspace_name = '{target[1]}'"
    return None


def shortcut_query(command: str) -> Optional[str]:
    r"""Query for a ``\dk`` / ``\dt [keyspace]`` shortcut, or None. A trailing ``;`` is ignored."""
    parts = command.strip().rstrip(';').split()
    if not parts:
        return None
    if parts[0] == '\\dk':
        return "SELECT keyspace_name FROM system_schema.keyspaces;"
    if parts[0] == '\\dt':
        if len(parts) > 1:
            return f"SELECT table_name FROM system_schema.tables WHERE keyspace_name = '{parts[1]}';"
        return "SELECT keyspace_name, table_name FROM system_schema.tables;"
    return None


def is_describe_line(line: str) -> bool:
    return line.startswith('\\d') or line.lower().startswith('describe ')


def translate_describe_line(line: str) -> Optional[str]:
    r"""Statement to run for a describe-style shell line.

    ``\d`` shortcuts that are not recognized yield None. ``describe`` lines
    with an unknown target are handed to the server verbatim with a
    terminator, as CQL itself has a DESCRIBE statement.
    """
    line = line.strip()
    if line.startswith('\\d'):
        return shortcut_query(line)
    words = line.rstrip(';').split()
    query = describe_query(words[1:])
    if query is not None:
        return query
    return line if line.endswith(';') else line + ';'


__all__ = ['describe_query', 'shortcut_query', 'is_describe_line', 'translate_describe_line',
           'DESCRIBE_USAGE', 'SHORTCUT_USAGE']
