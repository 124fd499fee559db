"""Render query results as table, JSON or CSV text."""
from __future__ import annotations
from enum import Enum
from typing import List, Optional, Union
import json
import logging

from cqlpy.core.errors import FormattingError
from cqlpy.core.layout import allocate_widths, terminal_width as current_terminal_width
from cqlpy.core.results import QueryResult
from cqlpy.core.values import render_display, render_json
from cqlpy.utils.string_utils import pad_right, truncate_string

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "Query OK (no results)"
EMPTY_RESULT_MESSAGE = "Empty result set"
NO_COLUMNS_MESSAGE = "No columns in result"
JSON_ACK = {"status": "ok", "rows": []}


class OutputFormat(Enum):
    TABLE = 'table'
    JSON = 'json'
    CSV = 'csv'

    @classmethod
    def parse(cls, name: Optional[str]) -> 'OutputFormat':
        """Case-insensitive lookup; anything unrecognized renders as a table."""
        try:
            return cls((name or '').strip().lower())
        except ValueError:
            return cls.TABLE

    @classmethod
    def is_known(cls, name: Optional[str]) -> bool:
        return (name or '').strip().lower() in {f.value for f in cls}


def _colorize(text: str, code: str, enabled: bool) -> str:
    return f"\033[{code}m{text}\033[0m" if enabled else text


def format_result(result: QueryResult,
                  output_format: Union[OutputFormat, str, None] = OutputFormat.TABLE,
                  terminal_width: Optional[int] = None,
                  color: bool = False) -> str:
    """Format ``result`` for printing.

    Only table output depends on the terminal width; it is looked up per call
    unless ``terminal_width`` is given.
    """
    fmt = output_format if isinstance(output_format, OutputFormat) else OutputFormat.parse(output_format)
    if fmt == OutputFormat.JSON:
        return format_json(result)
    if fmt == OutputFormat.CSV:
        return format_csv(result)
    width = terminal_width if terminal_width is not None else current_terminal_width()
    return format_table(result, width, color=color)


def _rule(widths: List[int]) -> str:
    return '+' + '+'.join('-' * (w + 2) for w in widths) + '+'


def _line(cells: List[str], widths: List[int]) -> str:
    return '| ' + ' | '.join(pad_right(c, w) for c, w in zip(cells, widths)) + ' |'


def format_table(result: QueryResult, terminal_width: int, color: bool = False) -> str:
    if result.rows is None:
        return _colorize(NO_RESULTS_MESSAGE, '32', color)
    if not result.rows:
        return _colorize(EMPTY_RESULT_MESSAGE, '33', color)
    num_cols = len(result.columns)
    if num_cols == 0:
        return _colorize(NO_COLUMNS_MESSAGE, '33', color)

    data_rows = [[render_display(cell) for cell in row] for row in result.rows]
    cell_lengths = [[len(row[i]) for row in data_rows] for i in range(num_cols)]
    widths = allocate_widths(num_cols, [len(c) for c in result.columns], cell_lengths, terminal_width)
    logger.debug("Column widths %s for terminal width %d", widths, terminal_width)

    rule = _rule(widths)
    header = [truncate_string(name, w) for name, w in zip(result.columns, widths)]
    header_line = '| ' + ' | '.join(_colorize(pad_right(h, w), '1', color) for h, w in zip(header, widths)) + ' |'
    out = [rule, header_line, rule]
    for row in data_rows:
        out.append(_line([truncate_string(cell, w) for cell, w in zip(row, widths)], widths))
    out.append(rule)
    out.append(f"{_colorize(str(len(data_rows)), '36', color)} row(s) returned")
    return '\n'.join(out)


def format_json(result: QueryResult) -> str:
    if result.rows is None:
        return json.dumps(JSON_ACK, separators=(',', ':'))
    records = []
    for row in result.rows:
        records.append({name: render_json(cell) for name, cell in zip(result.columns, row)})
    try:
        return json.dumps({"rows": records, "count": len(records)}, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise FormattingError(f"JSON serialization error: {e}") from e


def escape_csv_value(value: str) -> str:
    if ',' in value or '"' in value or '\n' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def format_csv(result: QueryResult) -> str:
    if result.rows is None:
        return ''
    lines = [','.join(result.columns)]
    for row in result.rows:
        lines.append(','.join(escape_csv_value(render_display(cell)) for cell in row))
    return '\n'.join(lines) + '\n'


__all__ = [
    'OutputFormat', 'format_result', 'format_table', 'format_json', 'format_csv', 'escape_csv_value',
    'NO_RESULTS_MESSAGE', 'EMPTY_RESULT_MESSAGE', 'NO_COLUMNS_MESSAGE'
]
