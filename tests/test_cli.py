#!/usr/bin/env python3
"""Tests for the command-line entry point."""
import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

import cqlpy.cli.main as main_mod
from cqlpy.core.describe import DESCRIBE_USAGE
from cqlpy.core.errors import CqlConnectionError, QueryError
from cqlpy.utils.config import Config


class _FakeExecutor:
    def __init__(self):
        self.statements = []
        self.closed = False

    def run_statement(self, statement, output_format='table', color=False):
        self.statements.append((statement, output_format))
        return f"ran: {statement}"

    def close(self):
        self.closed = True


class CliTestCase(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.config = Config(os.path.join(self.temp_dir.name, 'config.json'))
        patcher = mock.patch.object(main_mod, 'config', self.config)
        patcher.start()
        self.addCleanup(patcher.stop)
        logging_patcher = mock.patch.object(main_mod, 'configure_logging')
        logging_patcher.start()
        self.addCleanup(logging_patcher.stop)
        self.executor = _FakeExecutor()

    def _main(self, argv, connect=None):
        """Run main(); returns (exit code, stdout, connect mock)."""
        out = io.StringIO()
        with mock.patch.object(main_mod.QueryExecutor, 'connect') as connect_mock:
            if connect is None:
                connect_mock.return_value = self.executor
            else:
                connect_mock.side_effect = connect
            with contextlib.redirect_stdout(out):
                with self.assertRaises(SystemExit) as ctx:
                    main_mod.main(argv)
        return ctx.exception.code, out.getvalue(), connect_mock


class SplitScriptTests(unittest.TestCase):

    def test_split(self):
        script = "CREATE TABLE t (id int PRIMARY KEY);\n\nINSERT INTO t (id) VALUES (1);\n;\n  "
        self.assertEqual(main_mod.split_script(script),
                         ['CREATE TABLE t (id int PRIMARY KEY)', 'INSERT INTO t (id) VALUES (1)'])

    def test_empty(self):
        self.assertEqual(main_mod.split_script(' ; ;\n'), [])


class ParserTests(CliTestCase):

    def test_defaults_from_config(self):
        self.config.set('hosts', 'db1,db2')
        self.config.set('output_format', 'csv')
        args = main_mod.build_parser().parse_args([])
        self.assertEqual(args.hosts, 'db1,db2')
        self.assertEqual(args.port, 9042)
        self.assertEqual(args.output_format, 'csv')
        self.assertIsNone(args.command)

    def test_connection_config(self):
        args = main_mod.build_parser().parse_args(['-H', 'a, b:9043', '-u', 'bob', '--password', 'pw', '-k', 'shop',
                                                   '--ssl'])
        cfg = main_mod._connection_config(args)
        self.assertEqual(cfg.hosts, ['a', 'b:9043'])
        self.assertEqual(cfg.username, 'bob')
        self.assertEqual(cfg.password, 'pw')
        self.assertEqual(cfg.keyspace, 'shop')
        self.assertTrue(cfg.ssl_enabled)

    def test_describe_subcommand(self):
        args = main_mod.build_parser().parse_args(['describe', 'tables', 'shop'])
        self.assertEqual(args.command, 'describe')
        self.assertEqual(args.target, ['tables', 'shop'])


class ModeTests(CliTestCase):

    def test_execute(self):
        code, out, _ = self._main(['-e', 'SELECT * FROM system.local;', '-o', 'json'])
        self.assertEqual(code, 0)
        self.assertEqual(self.executor.statements, [('SELECT * FROM system.local;', 'json')])
        self.assertIn('ran: SELECT * FROM system.local;', out)
        self.assertTrue(self.executor.closed)

    def test_file(self):
        path = os.path.join(self.temp_dir.name, 'setup.cql')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("CREATE KEYSPACE k WITH replication = {'class': 'SimpleStrategy'};\nUSE k;\n")
        code, _, _ = self._main(['-f', path])
        self.assertEqual(code, 0)
        self.assertEqual([s for s, _ in self.executor.statements], [
            "CREATE KEYSPACE k WITH replication = {'class': 'SimpleStrategy'}",
            'USE k',
        ])

    def test_file_stops_at_first_failure(self):
        path = os.path.join(self.temp_dir.name, 'script.cql')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("SELECT 1; SELEC 2; SELECT 3;")
        original = self.executor.run_statement

        def run_statement(statement, output_format='table', color=False):
            if statement == 'SELEC 2':
                raise QueryError("syntax error")
            return original(statement, output_format, color)

        self.executor.run_statement = run_statement
        code, _, _ = self._main(['-f', path])
        self.assertEqual(code, 1)
        self.assertEqual([s for s, _ in self.executor.statements], ['SELECT 1'])
        self.assertTrue(self.executor.closed)

    def test_missing_file_is_validation_error(self):
        code, _, connect = self._main(['-f', os.path.join(self.temp_dir.name, 'nope.cql')])
        self.assertEqual(code, 2)
        connect.assert_not_called()

    def test_bad_port(self):
        code, _, connect = self._main(['-p', '70000', '-e', 'SELECT 1;'])
        self.assertEqual(code, 2)
        connect.assert_not_called()

    def test_connection_failure(self):
        code, _, _ = self._main(['-e', 'SELECT 1;'], connect=CqlConnectionError("Failed to connect"))
        self.assertEqual(code, 1)

    def test_unexpected_failure(self):
        code, _, _ = self._main(['-e', 'SELECT 1;'], connect=RuntimeError("boom"))
        self.assertEqual(code, 1)

    def test_interrupt(self):
        code, _, _ = self._main(['-e', 'SELECT 1;'], connect=KeyboardInterrupt())
        self.assertEqual(code, 130)

    def test_describe(self):
        code, _, _ = self._main(['describe', 'keyspaces'])
        self.assertEqual(code, 0)
        self.assertEqual(self.executor.statements[0][0], "SELECT keyspace_name FROM system_schema.keyspaces")

    def test_describe_unknown_target(self):
        code, out, _ = self._main(['describe', 'views'])
        self.assertEqual(code, 0)
        self.assertIn(DESCRIBE_USAGE, out)
        self.assertEqual(self.executor.statements, [])

    def test_repl_is_default(self):
        with mock.patch.object(main_mod, 'start_repl') as start:
            code, _, _ = self._main(['--no-banner'])
        self.assertEqual(code, 0)
        start.assert_called_once()
        self.assertFalse(start.call_args.kwargs['banner'])
        self.assertTrue(self.executor.closed)


class ConfigCommandTests(CliTestCase):

    def test_set_and_get(self):
        code, out, connect = self._main(['config', '--set', 'port', '--value', '9142'])
        self.assertEqual(code, 0)
        self.assertIn('Set port = 9142', out)
        connect.assert_not_called()
        self.assertEqual(Config(self.config.config_file).get('port'), 9142)
        _, out, _ = self._main(['config', '--get', 'port'])
        self.assertEqual(out.strip(), 'port = 9142')

    def test_set_without_value(self):
        code, _, _ = self._main(['config', '--set', 'port'])
        self.assertEqual(code, 1)

    def test_list(self):
        _, out, _ = self._main(['config', '--list'])
        self.assertIn('output_format = table', out)


if __name__ == '__main__':
    unittest.main()
