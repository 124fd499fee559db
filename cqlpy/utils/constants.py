"""Constants used throughout the cqlpy package."""
import os

# Output formats understood by the formatter and the \format directive
SUPPORTED_OUTPUT_FORMATS = ['table', 'json', 'csv']
DEFAULT_OUTPUT_FORMAT = 'table'

# Connection defaults
DEFAULT_HOSTS = '127.0.0.1'
DEFAULT_PORT = 9042

# Table layout
DEFAULT_TERMINAL_WIDTH = 120
MIN_COLUMN_WIDTH = 3
MAX_COLUMN_WIDTH = 50
ELLIPSIS = '...'

# Shell
PROMPT = 'cqlpy> '
MORE_PROMPT = '    -> '
STATEMENT_TERMINATOR = ';'
CLEAR_SCREEN = '\x1b[2J\x1b[1;1H'
DEFAULT_HISTORY_FILE = os.path.join('~', '.cqlpy_history')
DEFAULT_HISTORY_SIZE = 1000

# Statements after which the schema cache is refreshed
SCHEMA_MUTATING_VERBS = ('CREATE ', 'DROP ', 'USE ')
