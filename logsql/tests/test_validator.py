#!/usr/bin/env python3
"""
Tests for row validation against a schema

Run: python -m pytest logsql/tests/test_validator.py -v
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from logsql.core.schema import parse_schema
from logsql.core.validator import (
    is_leap_year, is_valid_date, is_valid_datetime, is_valid_time, validate,
)
from logsql.errors import (
    ArityMismatch, LengthViolation, NullNotAllowed, StringTooLong, TypeMismatch, ValidationError,
)


class TestValidate(unittest.TestCase):
    """Rows checked against 'id INT, name VARCHAR(5), active BOOLEAN'"""

    def setUp(self):
        self.schema = parse_schema("id INT NOT NULL, name VARCHAR(5), active BOOLEAN")

    def test_valid_row(self):
        validate([1, 'abc', True], self.schema)
        validate([2, None, None], self.schema)

    def test_string_too_long(self):
        with self.assertRaises(LengthViolation) as ctx:
            validate([1, 'toolong', True], self.schema)
        self.assertIsInstance(ctx.exception, StringTooLong)
        self.assertEqual(ctx.exception.column, 'name')
        self.assertEqual(ctx.exception.length, 7)
        self.assertEqual(ctx.exception.maximum, 5)

    def test_arity_mismatch(self):
        for row in ([1, 'a'], [1, 'a', True, 4]):
            with self.subTest(row=row):
                with self.assertRaises(ArityMismatch) as ctx:
                    validate(row, self.schema)
                self.assertEqual(ctx.exception.expected, 3)
                self.assertEqual(ctx.exception.actual, len(row))
                self.assertIn("42, 'text', true", str(ctx.exception))

    def test_null_in_not_null_column(self):
        with self.assertRaises(NullNotAllowed) as ctx:
            validate([None, 'a', True], self.schema)
        self.assertEqual(ctx.exception.column, 'id')
        self.assertEqual(ctx.exception.position, 1)

    def test_boolean_is_not_an_integer(self):
        with self.assertRaises(TypeMismatch) as ctx:
            validate([True, 'a', True], self.schema)
        self.assertEqual(ctx.exception.column, 'id')
        self.assertEqual(ctx.exception.actual, 'boolean')

    def test_integer_is_not_a_boolean(self):
        with self.assertRaises(TypeMismatch) as ctx:
            validate([1, 'a', 1], self.schema)
        self.assertEqual(ctx.exception.column, 'active')

    def test_string_in_integer_column(self):
        with self.assertRaises(TypeMismatch):
            validate(['1', 'a', True], self.schema)

    def test_float_in_integer_column(self):
        with self.assertRaises(TypeMismatch):
            validate([1.5, 'a', True], self.schema)

    def test_first_violation_wins(self):
        with self.assertRaises(ValidationError) as ctx:
            validate(['x', 'toolong', 3], self.schema)
        self.assertEqual(ctx.exception.column, 'id')

    def test_numeric_columns(self):
        schema = parse_schema("price DECIMAL(10), ratio FLOAT")
        validate([10, 0.5], schema)
        with self.assertRaises(TypeMismatch):
            validate(['10', 0.5], schema)
        with self.assertRaises(TypeMismatch):
            validate([10, False], schema)

    def test_char_size(self):
        schema = parse_schema("code CHAR")
        validate(['a'], schema)
        with self.assertRaises(StringTooLong):
            validate(['ab'], schema)

    def test_empty_schema_accepts_anything(self):
        validate([1, 'x', None, True, 2.5], [])
        validate([], [])


class TestTemporalValues(unittest.TestCase):

    def test_dates(self):
        self.assertTrue(is_valid_date('2024-02-29'))
        self.assertTrue(is_valid_date('2023-12-31'))
        self.assertFalse(is_valid_date('2023-02-29'))
        self.assertFalse(is_valid_date('2024-13-01'))
        self.assertFalse(is_valid_date('2024-04-31'))
        self.assertFalse(is_valid_date('2024-1-01'))
        self.assertFalse(is_valid_date('2024-01-01x'))

    def test_leap_years(self):
        self.assertTrue(is_leap_year(2000))
        self.assertTrue(is_leap_year(2024))
        self.assertFalse(is_leap_year(1900))
        self.assertFalse(is_leap_year(2023))

    def test_times(self):
        for text in ('14:30:00', '00:00:00', '23:59:59.123', '14:30:00Z', '14:30:00+05:30', '14:30:00-08:00'):
            with self.subTest(text=text):
                self.assertTrue(is_valid_time(text))
        for text in ('24:00:00', '14:60:00', '14:30:60', '14:30', '14:30:00+24:00', '2:30:00'):
            with self.subTest(text=text):
                self.assertFalse(is_valid_time(text))

    def test_datetimes(self):
        self.assertTrue(is_valid_datetime('2023-12-25T14:30:00Z'))
        self.assertTrue(is_valid_datetime('2023-12-25T14:30:00.5+01:00'))
        self.assertFalse(is_valid_datetime('2023-12-25 14:30:00'))
        self.assertFalse(is_valid_datetime('2023-02-30T14:30:00'))

    def test_temporal_columns(self):
        schema = parse_schema("day DATE, at TIME, ts DATETIME")
        validate(['2023-12-25', '14:30:00', '2023-12-25T14:30:00Z'], schema)

        with self.assertRaises(TypeMismatch) as ctx:
            validate(['2023-02-30', '14:30:00', '2023-12-25T14:30:00Z'], schema)
        self.assertEqual(ctx.exception.column, 'day')

        with self.assertRaises(TypeMismatch):
            validate([20231225, '14:30:00', '2023-12-25T14:30:00Z'], schema)


if __name__ == '__main__':
    unittest.main()
