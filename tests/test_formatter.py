#!/usr/bin/env python3
"""Tests for table, JSON and CSV rendering of query results."""
import json
import unittest
from unittest import mock

from cqlpy.core.errors import FormattingError
from cqlpy.core.formatter import (
    EMPTY_RESULT_MESSAGE, NO_COLUMNS_MESSAGE, NO_RESULTS_MESSAGE, OutputFormat, escape_csv_value, format_csv,
    format_json, format_result, format_table
)
from cqlpy.core.results import QueryResult
from cqlpy.core.values import CqlType, CqlValue


def _int(n):
    return CqlValue(CqlType.INT, n)


def _text(s):
    return CqlValue.text(s)


class OutputFormatTests(unittest.TestCase):

    def test_parse_is_case_insensitive(self):
        self.assertEqual(OutputFormat.parse('JSON'), OutputFormat.JSON)
        self.assertEqual(OutputFormat.parse(' csv '), OutputFormat.CSV)
        self.assertEqual(OutputFormat.parse('table'), OutputFormat.TABLE)

    def test_unknown_falls_back_to_table(self):
        self.assertEqual(OutputFormat.parse('xml'), OutputFormat.TABLE)
        self.assertEqual(OutputFormat.parse(None), OutputFormat.TABLE)
        self.assertFalse(OutputFormat.is_known('xml'))
        self.assertTrue(OutputFormat.is_known('Csv'))


class CannedMessageTests(unittest.TestCase):
    """Results without printable rows produce fixed messages."""

    def test_acknowledgment(self):
        ack = QueryResult.acknowledged()
        self.assertEqual(format_result(ack, 'table', terminal_width=80), NO_RESULTS_MESSAGE)
        self.assertEqual(format_result(ack, 'json'), '{"status":"ok","rows":[]}')
        self.assertEqual(format_result(ack, 'csv'), '')

    def test_empty_row_set(self):
        empty = QueryResult(columns=('a',), rows=[])
        self.assertEqual(format_table(empty, 80), EMPTY_RESULT_MESSAGE)

    def test_no_columns(self):
        result = QueryResult(columns=(), rows=[()])
        self.assertEqual(format_table(result, 80), NO_COLUMNS_MESSAGE)

    def test_unknown_format_renders_table(self):
        result = QueryResult(columns=('a',), rows=[(_int(1),)])
        self.assertEqual(format_result(result, 'xml', terminal_width=80), format_table(result, 80))


class TableTests(unittest.TestCase):

    def test_basic_table(self):
        result = QueryResult(columns=('id', 'name'), rows=[(_int(1), _text('alice')), (_int(22), None)])
        out = format_table(result, 120)
        self.assertEqual(out.splitlines(), [
            '+----+-------+',
            '| id | name  |',
            '+----+-------+',
            '| 1  | alice |',
            '| 22 | NULL  |',
            '+----+-------+',
            '2 row(s) returned',
        ])

    def test_long_cell_truncated_to_column_width(self):
        long_text = 'x' * 200
        result = QueryResult(columns=('a', 'b'), rows=[(_text(long_text), _text(long_text))])
        lines = format_table(result, 40).splitlines()
        body = lines[3]
        self.assertIn('...', body)
        self.assertNotIn(long_text, body)
        # every line of the grid has the same width and fits the terminal
        grid = lines[:-1]
        self.assertEqual(len({len(line) for line in grid}), 1)
        self.assertLessEqual(len(grid[0]), 40)

    def test_wide_terminal_caps_columns(self):
        result = QueryResult(columns=('c',), rows=[(_text('y' * 80),)])
        row_line = format_table(result, 500).splitlines()[3]
        self.assertEqual(row_line, '| ' + 'y' * 47 + '...' + ' |')

    def test_color_highlights_header(self):
        result = QueryResult(columns=('a',), rows=[(_int(1),)])
        out = format_table(result, 80, color=True)
        self.assertIn('\033[1m', out)
        self.assertNotIn('\033', format_table(result, 80))


class JsonTests(unittest.TestCase):

    def test_rows_and_count(self):
        result = QueryResult(columns=('id', 'tags'), rows=[
            (_int(5), CqlValue.list_of(_text('a'), _text('b'))),
            (None, None),
        ])
        payload = json.loads(format_json(result))
        self.assertEqual(payload['count'], 2)
        self.assertEqual(payload['rows'][0], {'id': 5, 'tags': ['a', 'b']})
        self.assertEqual(payload['rows'][1], {'id': None, 'tags': None})

    def test_empty_rows(self):
        payload = json.loads(format_json(QueryResult(columns=('a',), rows=[])))
        self.assertEqual(payload, {'rows': [], 'count': 0})

    def test_non_ascii_kept(self):
        result = QueryResult(columns=('name',), rows=[(_text('café'),)])
        self.assertIn('café', format_json(result))

    def test_non_finite_numbers_are_null(self):
        result = QueryResult(columns=('d', 'f', 'g'), rows=[(
            CqlValue(CqlType.DOUBLE, float('nan')),
            CqlValue(CqlType.FLOAT, float('inf')),
            CqlValue(CqlType.DOUBLE, float('-inf')),
        )])

        def reject(token):
            raise ValueError(f"invalid JSON token {token}")

        payload = json.loads(format_json(result), parse_constant=reject)
        self.assertEqual(payload['rows'], [{'d': None, 'f': None, 'g': None}])

    def test_serialization_failure_is_formatting_error(self):
        bad = QueryResult(columns=('n',), rows=[(CqlValue(CqlType.INT, 1),)])
        with mock.patch('cqlpy.core.formatter.render_json', return_value=object()):
            with self.assertRaises(FormattingError):
                format_json(bad)


class CsvTests(unittest.TestCase):

    def test_escape(self):
        self.assertEqual(escape_csv_value('plain'), 'plain')
        self.assertEqual(escape_csv_value('a,b'), '"a,b"')
        self.assertEqual(escape_csv_value('say "hi"'), '"say ""hi"""')
        self.assertEqual(escape_csv_value('two\nlines'), '"two\nlines"')

    def test_header_and_rows(self):
        result = QueryResult(columns=('id', 'note'), rows=[
            (_int(1), _text('hello, world')),
            (_int(2), None),
        ])
        out = format_csv(result)
        self.assertEqual(out, 'id,note\n1,"hello, world"\n2,NULL\n')
        self.assertEqual(len(out.splitlines()), result.row_count + 1)

    def test_header_only(self):
        self.assertEqual(format_csv(QueryResult(columns=('a', 'b'), rows=[])), 'a,b\n')


if __name__ == '__main__':
    unittest.main()
