"""Result formatting, completion and execution building blocks."""
from cqlpy.core.errors import CqlClientException, CqlConnectionError, FormattingError, QueryError
from cqlpy.core.formatter import OutputFormat, format_result
from cqlpy.core.results import QueryResult
from cqlpy.core.values import CqlType, CqlValue, render_display, render_json

__all__ = [
    'CqlClientException', 'CqlConnectionError', 'FormattingError', 'QueryError',
    'OutputFormat', 'format_result', 'QueryResult',
    'CqlType', 'CqlValue', 'render_display', 'render_json',
]
