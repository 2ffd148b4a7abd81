#!/usr/bin/env python3
"""
Tests for primary-key uniqueness checks

Run: python -m pytest logsql/tests/test_uniqueness.py -v
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from logsql.core.schema import parse_schema
from logsql.core.uniqueness import check_primary_key, ensure_unique, key_values_equal
from logsql.errors import PrimaryKeyViolation, StoreError, StoreUnavailable
from logsql.storage.codec import encode_record
from logsql.storage.engine import MemoryRecordStore, RecordStore


class UnreadableStore(RecordStore):
    """Store whose reads always fail"""

    def append(self, key, record):
        pass

    def read_recent(self, key, limit):
        raise StoreError("log offline")


class TestCheckPrimaryKey(unittest.TestCase):

    def setUp(self):
        self.schema = parse_schema("id INT PRIMARY KEY, name VARCHAR(10)")
        self.records = [encode_record([1, 'Alice'], self.schema)]

    def test_duplicate_key(self):
        with self.assertRaises(PrimaryKeyViolation) as ctx:
            check_primary_key([1, 'Bob'], self.schema, self.records)
        self.assertEqual(ctx.exception.columns, ['id'])
        self.assertEqual(ctx.exception.values, [1])

    def test_new_key(self):
        check_primary_key([2, 'Alice'], self.schema, self.records)

    def test_key_comparison_is_type_aware(self):
        schema = parse_schema("code VARCHAR(5) PRIMARY KEY")
        records = [encode_record(['1'], schema)]
        check_primary_key(['01'], schema, records)
        with self.assertRaises(PrimaryKeyViolation):
            check_primary_key(['1'], schema, records)

    def test_composite_key(self):
        schema = parse_schema("a INT PRIMARY KEY, b INT PRIMARY KEY, note VARCHAR(10)")
        records = [encode_record([1, 2, 'x'], schema)]
        check_primary_key([1, 3, 'x'], schema, records)
        check_primary_key([2, 2, 'x'], schema, records)
        with self.assertRaises(PrimaryKeyViolation) as ctx:
            check_primary_key([1, 2, 'y'], schema, records)
        self.assertEqual(ctx.exception.columns, ['a', 'b'])

    def test_float_keys_within_epsilon(self):
        schema = parse_schema("k FLOAT PRIMARY KEY")
        records = [encode_record([1.0], schema)]
        with self.assertRaises(PrimaryKeyViolation):
            check_primary_key([1.0 + 1e-12], schema, records)
        check_primary_key([1.001], schema, records)

    def test_no_primary_key(self):
        schema = parse_schema("id INT, name VARCHAR(10)")
        records = [encode_record([1, 'Alice'], schema)]
        check_primary_key([1, 'Alice'], schema, records)

    def test_unreadable_records_are_skipped(self):
        records = ["garbage", "DATA:\n  id: ???"] + self.records
        with self.assertRaises(PrimaryKeyViolation):
            check_primary_key([1, 'Bob'], self.schema, records)

    def test_key_values_equal(self):
        self.assertTrue(key_values_equal(1, 1.0))
        self.assertTrue(key_values_equal(None, None))
        self.assertTrue(key_values_equal('a', 'a'))
        self.assertFalse(key_values_equal(True, 1))
        self.assertFalse(key_values_equal('1', 1))
        self.assertFalse(key_values_equal(1.0, 1.1))


class TestEnsureUnique(unittest.TestCase):

    def setUp(self):
        self.schema = parse_schema("id INT PRIMARY KEY, name VARCHAR(10)")
        self.store = MemoryRecordStore()
        self.key = 'db_shop/table_users'

    def test_duplicate_in_store(self):
        self.store.append(self.key, encode_record([1, 'Alice'], self.schema))
        with self.assertRaises(PrimaryKeyViolation):
            ensure_unique([1, 'Bob'], self.schema, self.store, self.key)
        ensure_unique([2, 'Bob'], self.schema, self.store, self.key)

    def test_only_recent_records_are_scanned(self):
        self.store.append(self.key, encode_record([1, 'Alice'], self.schema))
        self.store.append(self.key, encode_record([2, 'Bob'], self.schema))
        ensure_unique([1, 'Carol'], self.schema, self.store, self.key, limit=1)
        with self.assertRaises(PrimaryKeyViolation):
            ensure_unique([1, 'Carol'], self.schema, self.store, self.key, limit=2)

    def test_fail_open(self):
        with self.assertLogs('logsql.core.uniqueness', level='WARNING'):
            ensure_unique([1, 'Bob'], self.schema, UnreadableStore(), self.key, fail_open=True)

    def test_strict(self):
        with self.assertRaises(StoreUnavailable) as ctx:
            ensure_unique([1, 'Bob'], self.schema, UnreadableStore(), self.key, fail_open=False)
        self.assertIsInstance(ctx.exception.cause, StoreError)

    def test_no_primary_key_skips_reading(self):
        schema = parse_schema("id INT")
        ensure_unique([1], schema, UnreadableStore(), self.key, fail_open=False)


if __name__ == '__main__':
    unittest.main()
