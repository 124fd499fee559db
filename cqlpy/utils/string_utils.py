"""String helpers for table layout."""
from __future__ import annotations

from cqlpy.utils.constants import ELLIPSIS


def truncate_string(s: str, max_length: int, suffix: str = ELLIPSIS) -> str:
    """Cut ``s`` to ``max_length`` characters, ending with ``suffix`` when there is room.

    Widths no larger than the suffix get a plain cut with no marker.
    """
    if len(s) <= max_length:
        return s
    if max_length <= len(suffix):
        return s[:max(max_length, 0)]
    return s[:max_length - len(suffix)] + suffix


def pad_right(s: str, width: int) -> str:
    extra = width - len(s)
    return s + ' ' * extra if extra > 0 else s
