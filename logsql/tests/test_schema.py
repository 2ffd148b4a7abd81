#!/usr/bin/env python3
"""
Tests for column declaration parsing

Run: python -m pytest logsql/tests/test_schema.py -v
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from logsql.core.schema import (
    ColumnDefinition, DeclarationFormat, detect_declaration_format, load_schema,
    parse_schema, render_schema,
)
from logsql.core.types import DataType
from logsql.errors import DuplicateColumn, InvalidSize, SchemaSyntaxError, UnknownType


class TestParseSchema(unittest.TestCase):
    """Declaration text to column definitions"""

    def test_basic_declaration(self):
        columns = parse_schema("id INT, name VARCHAR(5), active BOOLEAN")
        self.assertEqual(len(columns), 3)
        self.assertEqual([c.name for c in columns], ['id', 'name', 'active'])
        self.assertEqual(columns[0].data_type, DataType.INT)
        self.assertEqual(columns[1].size, 5)
        self.assertEqual(columns[2].data_type, DataType.BOOLEAN)

    def test_constraints(self):
        columns = parse_schema("id int primary key not null, email VARCHAR(100) NOT NULL, note text")
        self.assertTrue(columns[0].primary_key)
        self.assertFalse(columns[0].nullable)
        self.assertFalse(columns[1].primary_key)
        self.assertFalse(columns[1].nullable)
        self.assertTrue(columns[2].nullable)

    def test_type_synonyms(self):
        columns = parse_schema("a integer, b text, c bool, d real, e numeric(5), f timestamp, g string")
        self.assertEqual(
            [c.data_type for c in columns],
            [DataType.INT, DataType.VARCHAR, DataType.BOOLEAN, DataType.FLOAT,
             DataType.DECIMAL, DataType.DATETIME, DataType.VARCHAR],
        )
        self.assertEqual(columns[4].size, 5)

    def test_default_string_sizes(self):
        columns = parse_schema("name VARCHAR, code CHAR")
        self.assertEqual(columns[0].size, 255)
        self.assertEqual(columns[1].size, 1)

    def test_numeric_precision(self):
        columns = parse_schema("price DECIMAL(65), ratio FLOAT, weight DOUBLE(10)")
        self.assertEqual(columns[0].size, 65)
        self.assertIsNone(columns[1].size)
        self.assertEqual(columns[2].size, 10)

    def test_blank_declaration(self):
        self.assertEqual(parse_schema(""), [])
        self.assertEqual(parse_schema("   "), [])

    def test_int_forbids_size(self):
        with self.assertRaises(SchemaSyntaxError) as ctx:
            parse_schema("id INT(11)")
        self.assertIsInstance(ctx.exception, InvalidSize)
        self.assertEqual(ctx.exception.column, 'id')

    def test_other_types_forbid_size(self):
        for declaration in ("flag BOOLEAN(1)", "day DATE(10)", "at TIME(3)", "ts DATETIME(6)"):
            with self.subTest(declaration=declaration):
                with self.assertRaises(InvalidSize):
                    parse_schema(declaration)

    def test_size_out_of_range(self):
        for declaration in ("name VARCHAR(0)", "name VARCHAR(65536)", "code CHAR(0)", "price DECIMAL(66)"):
            with self.subTest(declaration=declaration):
                with self.assertRaises(InvalidSize):
                    parse_schema(declaration)

    def test_size_limits_accepted(self):
        columns = parse_schema("body VARCHAR(65535), code CHAR(1)")
        self.assertEqual(columns[0].size, 65535)

    def test_scale_is_rejected(self):
        with self.assertRaises(InvalidSize):
            parse_schema("price DECIMAL(10,2)")

    def test_malformed_size(self):
        with self.assertRaises(InvalidSize):
            parse_schema("name VARCHAR(abc)")
        with self.assertRaises(InvalidSize) as ctx:
            parse_schema("name VARCHAR(5")
        self.assertIn("name VARCHAR(100)", str(ctx.exception))

    def test_unknown_type(self):
        with self.assertRaises(UnknownType) as ctx:
            parse_schema("id INT, data BLOB")
        self.assertEqual(ctx.exception.type_name, 'BLOB')
        self.assertEqual(ctx.exception.column, 'data')
        self.assertIn("VARCHAR(100)", str(ctx.exception))

    def test_missing_type(self):
        with self.assertRaises(SchemaSyntaxError):
            parse_schema("id")

    def test_duplicate_column(self):
        with self.assertRaises(DuplicateColumn) as ctx:
            parse_schema("id INT, name VARCHAR(5), id VARCHAR(10)")
        self.assertEqual(ctx.exception.column, 'id')

    def test_render_is_reparsable(self):
        text = "id integer primary key not null, name VARCHAR, price numeric(12), born date"
        columns = parse_schema(text)
        self.assertEqual(parse_schema(render_schema(columns)), columns)
        self.assertEqual(
            render_schema(columns),
            "id INT NOT NULL PRIMARY KEY, name VARCHAR(255), price DECIMAL(12), born DATE",
        )

    def test_column_str(self):
        column = ColumnDefinition('code', DataType.CHAR, 3, nullable=False)
        self.assertEqual(str(column), "code CHAR(3) NOT NULL")


class TestStoredDeclarations(unittest.TestCase):
    """Stored "Schema: ..." text, including the older colon layout"""

    def test_load_canonical(self):
        columns = load_schema("Schema: id INT PRIMARY KEY, name VARCHAR(10)")
        self.assertEqual([c.name for c in columns], ['id', 'name'])
        self.assertTrue(columns[0].primary_key)

    def test_detect_legacy_layout(self):
        self.assertEqual(detect_declaration_format("id: INT, name: VARCHAR(10)"),
                         DeclarationFormat.LEGACY_COLON)
        self.assertEqual(detect_declaration_format("id INT, name VARCHAR(10)"),
                         DeclarationFormat.CANONICAL)

    def test_load_legacy(self):
        columns = load_schema("Schema: id: INT PRIMARY KEY, name: VARCHAR(10) NOT NULL")
        self.assertEqual(columns, parse_schema("id INT PRIMARY KEY, name VARCHAR(10) NOT NULL"))

    def test_missing_prefix_means_no_schema(self):
        self.assertEqual(load_schema("free-form table topic"), [])
        self.assertEqual(load_schema(None), [])
        self.assertEqual(load_schema(""), [])


if __name__ == '__main__':
    unittest.main()
