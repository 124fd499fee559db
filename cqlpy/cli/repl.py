r"""Interactive CQL shell.
Commands (only recognized at the start of a new statement):
  quit / exit              Exit
  help                     Show this summary
  clear                    Clear the screen
Directives:
  \format [fmt]            Show / set output format (table|json|csv)
  \refresh                 Reload keyspace and table names used for completion
  \dk                      List keyspaces
  \dt [keyspace]           List tables (optionally of one keyspace)
  describe <target>        cluster | keyspaces | keyspace NAME | table NAME | tables KEYSPACE
Anything else is CQL; statements run once a line ends with ';' and may span lines.
"""
from __future__ import annotations
from typing import Any, Callable, List, Optional, TextIO
import logging
import sys

from cqlpy.core.completion import CQL_KEYWORDS, candidates
from cqlpy.core.describe import SHORTCUT_USAGE, is_describe_line, translate_describe_line
from cqlpy.core.errors import CqlClientException
from cqlpy.core.formatter import OutputFormat
from cqlpy.core.schema import SchemaCache
from cqlpy.utils.constants import (
    CLEAR_SCREEN, DEFAULT_OUTPUT_FORMAT, MORE_PROMPT, PROMPT, SCHEMA_MUTATING_VERBS, STATEMENT_TERMINATOR,
    SUPPORTED_OUTPUT_FORMATS
)
from cqlpy.utils.history import HistoryFile

try:
    import readline  # type: ignore
except ImportError:  # pragma: no cover
    readline = None
# Attempt gnureadline fallback if readline missing
if readline is None:
    try:
        import gnureadline as readline  # type: ignore
    except ImportError:  # pragma: no cover
        readline = None

logger = logging.getLogger(__name__)

BANNER = "=== cqlpy: CQL shell ==="
HELP_TEXT = r"""=== Available Commands ===
  quit, exit      - Exit the shell
  help            - Show this help message
  clear           - Clear the screen
  \format <fmt>   - Change output format (table, json, csv)
  \dk             - List all keyspaces
  \dt [keyspace]  - List tables in keyspace
  \refresh        - Refresh schema cache

=== Auto-Completion ===
  Press TAB to complete:
  - CQL keywords (SELECT, INSERT, CREATE, ...)
  - Keyspace names (after USE, CREATE KEYSPACE, ...)
  - Table names (after FROM, INTO, TABLE, ...)

=== CQL Commands ===
  Execute any CQL statement ending with ';'.
  Multi-line statements are supported.

Examples:
  SELECT * FROM system.local;
  USE my_keyspace;
  describe keyspaces
"""


class Session:
    """Mutable state of one shell session."""

    def __init__(self, output_format: str = DEFAULT_OUTPUT_FORMAT):
        self.output_format = output_format
        self.pending_statement = ''
        self.history: List[str] = []

    @property
    def accumulating(self) -> bool:
        return bool(self.pending_statement)


class Repl:
    """Line-driven shell over a statement executor.

    ``executor`` needs ``execute(statement) -> QueryResult`` (used for schema
    refresh), ``run_statement(statement, output_format, color) -> str | None``
    and an optional ``keyspace`` attribute.
    """

    def __init__(self, executor: Any,
                 output_format: str = DEFAULT_OUTPUT_FORMAT,
                 schema: Optional[SchemaCache] = None,
                 history_file: Optional[HistoryFile] = None,
                 color: bool = False,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None,
                 input_func: Callable[[str], str] = input):
        self.executor = executor
        self.session = Session(output_format)
        self.schema = schema or SchemaCache()
        self.history_file = history_file
        self.color = color
        self.out = stdout or sys.stdout
        self.err = stderr or sys.stderr
        self.input_func = input_func
        self._matches: List[str] = []

    # ------------------------------------------------------------------
    # output helpers
    # ------------------------------------------------------------------
    def _colorize(self, text: str, code: str) -> str:
        return f"\033[{code}m{text}\033[0m" if self.color else text

    def _emit(self, text: str) -> None:
        print(text, file=self.out, end='' if text.endswith('\n') else '\n')

    def _error(self, message: Any) -> None:
        print(f"{self._colorize('Error:', '1;31')} {message}", file=self.err)

    # ------------------------------------------------------------------
    # schema / completion
    # ------------------------------------------------------------------
    def refresh_schema(self) -> None:
        self.schema.refresh(self.executor.execute)
        self.schema.set_keyspace(getattr(self.executor, 'keyspace', None))

    def complete(self, text: str, state: int) -> Optional[str]:
        """readline completer: candidates for the word before the cursor."""
        if state == 0:
            if readline:
                line = readline.get_line_buffer()
                cursor = readline.get_endidx()
            else:
                line, cursor = text, len(text)
            self._matches = candidates(line, cursor, CQL_KEYWORDS, self.schema.keyspaces, self.schema.tables)
        return self._matches[state] if state < len(self._matches) else None

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------
    def _load_history(self) -> None:
        if not self.history_file:
            return
        entries = self.history_file.load()
        self.session.history.extend(entries)
        if readline:
            for entry in entries:
                readline.add_history(entry)

    def _save_history(self) -> None:
        if self.history_file:
            self.history_file.save(self.session.history)

    # ------------------------------------------------------------------
    # statement handling
    # ------------------------------------------------------------------
    def _run(self, statement: str) -> bool:
        """Run ``statement`` and print its output; False when it failed."""
        try:
            output = self.executor.run_statement(statement, self.session.output_format, self.color)
        except CqlClientException as e:
            self._error(e)
            return False
        if output is not None:
            self._emit(output)
        return True

    def submit(self, statement: str) -> None:
        ok = self._run(statement)
        if ok and any(verb in statement.upper() for verb in SCHEMA_MUTATING_VERBS):
            self.refresh_schema()

    def set_format(self, name: str) -> None:
        if name and not OutputFormat.is_known(name):
            logger.warning("Unknown output format '%s'; results will be shown as a table (choices: %s)",
                           name, ', '.join(SUPPORTED_OUTPUT_FORMATS))
        self.session.output_format = name
        print(f"Output format set to: {self._colorize(name, '36')}", file=self.out)

    def run_describe(self, line: str) -> None:
        query = translate_describe_line(line)
        if query is None:
            print(SHORTCUT_USAGE, file=self.out)
            return
        self._run(query)

    def interrupt(self) -> None:
        """Drop any partially typed statement."""
        self.session.pending_statement = ''
        print(self._colorize('^C', '33'), file=self.out)

    def handle_line(self, raw: str) -> bool:
        """Process one input line; returns False once the session should end."""
        line = raw.strip()
        if line:
            self.session.history.append(line)

        if not self.session.accumulating:
            command = line.lower()
            if command in ('quit', 'exit'):
                print(self._colorize('Goodbye!', '96'), file=self.out)
                return False
            if command == 'help':
                print(HELP_TEXT, file=self.out)
                return True
            if command == 'clear':
                self.out.write(CLEAR_SCREEN)
                self.out.flush()
                return True
            if command == '':
                return True

        if line == '\\format':
            print(f"Output format: {self.session.output_format}", file=self.out)
            return True
        if line.startswith('\\format '):
            self.set_format(line[len('\\format '):].strip())
            return True
        if line == '\\refresh':
            print(self._colorize('Refreshing schema...', '36'), file=self.out)
            self.refresh_schema()
            print(self._colorize('Schema refreshed successfully!', '32'), file=self.out)
            return True
        if is_describe_line(line):
            self.run_describe(line)
            return True

        if line:
            pending = self.session.pending_statement
            self.session.pending_statement = f"{pending} {line}" if pending else line
        if self.session.pending_statement.endswith(STATEMENT_TERMINATOR):
            statement = self.session.pending_statement
            self.session.pending_statement = ''
            self.submit(statement)
        return True

    # ------------------------------------------------------------------
    # main loop
    # ------------------------------------------------------------------
    def _setup_readline(self) -> None:
        if not readline:
            return
        try:
            readline.set_completer(self.complete)
            readline.set_completer_delims(' \t\n')
            # libedit (macOS default) needs a different binding than GNU readline
            docstr = getattr(readline, '__doc__', '') or ''
            if 'libedit' in docstr.lower():
                readline.parse_and_bind('bind ^I rl_complete')
            else:
                readline.parse_and_bind('tab: complete')
        except (AttributeError, RuntimeError) as e:  # pragma: no cover
            logger.debug("Completion unavailable: %s", e)

    def _loop(self) -> None:
        while True:
            prompt = MORE_PROMPT if self.session.accumulating else PROMPT
            try:
                line = self.input_func(prompt)
                if not self.handle_line(line):
                    return
            except KeyboardInterrupt:
                self.interrupt()
            except EOFError:
                print(file=self.out)
                print(self._colorize('Goodbye!', '96'), file=self.out)
                return
            except OSError as e:
                # terminal went away; nothing sensible left to read from
                self._error(e)
                return

    def run(self, banner: bool = True) -> None:
        if banner:
            print(self._colorize(BANNER, '1;96'), file=self.out)
            print("Type 'help' for available commands, 'quit' or 'exit' to exit.", file=self.out)
            print("Auto-completion enabled: use TAB to complete CQL keywords, keyspaces, and tables.", file=self.out)
            print(file=self.out)

        self.refresh_schema()
        self._setup_readline()
        self._load_history()
        try:
            self._loop()
        finally:
            self._save_history()


def start_repl(executor: Any, output_format: str = DEFAULT_OUTPUT_FORMAT,
               history_path: Optional[str] = None, history_size: Optional[int] = None,
               color: bool = False, banner: bool = True) -> None:
    """Start the interactive shell on an already connected executor."""
    kwargs = {}
    if history_path:
        kwargs['path'] = history_path
    if history_size:
        kwargs['max_entries'] = history_size
    repl = Repl(executor, output_format=output_format, history_file=HistoryFile(**kwargs),
                color=color and sys.stdout.isatty())
    repl.run(banner=banner)
