"""Columnar result data model handed from the executor to the formatter."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from cqlpy.core.values import CqlValue

Row = Tuple[Optional[CqlValue], ...]


@dataclass(frozen=True)
class QueryResult:
    """Ordered column names plus ordered rows.

    ``rows is None`` means the statement produced no row-set at all (a write
    acknowledgment), which is rendered differently from an empty row list.
    """
    columns: Tuple[str, ...]
    rows: Optional[List[Row]]

    def __post_init__(self):
        if self.rows is None:
            return
        width = len(self.columns)
        for idx, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"Row {idx} has {len(row)} cells, expected {width}")

    @property
    def has_rows(self) -> bool:
        return self.rows is not None

    @property
    def row_count(self) -> int:
        return len(self.rows) if self.rows is not None else 0

    @classmethod
    def acknowledged(cls) -> 'QueryResult':
        return cls(columns=(), rows=None)

    @classmethod
    def from_native(cls, columns: Sequence[str], rows: Iterable[Sequence[Any]],
                    column_types: Optional[Sequence[Any]] = None) -> 'QueryResult':
        """Build a result from driver column names, tuple rows and optional column types."""
        types = list(column_types or ())
        converted = [
            tuple(CqlValue.from_native(cell, types[i] if i < len(types) else None) for i, cell in enumerate(row))
            for row in rows
        ]
        return cls(columns=tuple(columns), rows=converted)


__all__ = ['QueryResult', 'Row']
