"""Column width allocation for table output."""
from __future__ import annotations
from typing import List, Sequence
import shutil

from cqlpy.utils.constants import DEFAULT_TERMINAL_WIDTH, MAX_COLUMN_WIDTH, MIN_COLUMN_WIDTH


def terminal_width(default: int = DEFAULT_TERMINAL_WIDTH) -> int:
    """Current terminal width; re-read on every call so resizes take effect."""
    return shutil.get_terminal_size(fallback=(default, 24)).columns


def border_overhead(column_count: int) -> int:
    # "| x " per column plus the closing "|"
    return column_count * 3 + 1


def allocate_widths(column_count: int,
                    header_lengths: Sequence[int],
                    cell_lengths_per_column: Sequence[Sequence[int]],
                    terminal_width: int) -> List[int]:
    """Compute the display width of every column.

    Each column asks for its widest header/cell, capped at a per-column
    ceiling derived from the terminal width. When the asks still do not fit,
    every column is shrunk in proportion to its ask and re-floored at
    ``MIN_COLUMN_WIDTH`` so an ellipsis always fits.
    """
    if column_count <= 0:
        raise ValueError("allocate_widths requires at least one column")
    available = max(terminal_width - border_overhead(column_count), column_count)
    soft_cap = min(max(available // column_count, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)

    needed: List[int] = []
    for idx in range(column_count):
        width = min(header_lengths[idx], soft_cap) if idx < len(header_lengths) else 0
        cells = cell_lengths_per_column[idx] if idx < len(cell_lengths_per_column) else ()
        for length in cells:
            width = max(width, min(length, soft_cap))
        needed.append(max(width, 1))

    total = sum(needed)
    if total > available:
        scale = available / total
        needed = [max(int(w * scale), MIN_COLUMN_WIDTH) for w in needed]
    return needed


__all__ = ['allocate_widths', 'border_overhead', 'terminal_width']
