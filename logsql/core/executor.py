"""
Query Executor - Runs parsed statements against the catalog and record logs

Inserts go through value parsing, schema validation and the primary-key check
before a record is appended. Selects read a table's recent records, filter
them with the WHERE expression, project the requested columns and optionally
remove duplicate rows.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .. import config
from ..errors import (
    CatalogError, NoDatabaseSelected, QueryError, SchemaRequired, StoreError,
    StoreUnavailable, UnknownColumn,
)
from ..parser.lexer import parse_values
from ..parser.parser import (
    CreateTableStatement, DeleteStatement, DescribeTableStatement, DropTableStatement,
    ExplainStatement, InsertStatement, SelectStatement, ShowTablesStatement, UpdateStatement,
)
from ..parser.where import evaluate, parse_where, referenced_columns
from ..storage.codec import decode_record, encode_record
from ..storage.engine import Catalog, RecordStore, sanitize_name, table_key
from .schema import ColumnDefinition, column_index, column_names, load_schema, parse_schema, render_schema
from .types import SqlValue, render_cell, values_equal
from .uniqueness import ensure_unique
from .validator import validate


logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Result of a statement execution"""
    columns: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
    message: str = ""
    affected_rows: int = 0
    total_rows: int = 0
    distinct: bool = False
    where: Optional[str] = None
    table: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.total_rows > len(self.rows)


def _same_row(left: List[SqlValue], right: List[SqlValue]) -> bool:
    return len(left) == len(right) and all(values_equal(a, b) for a, b in zip(left, right))


def distinct_rows(rows: List[List[SqlValue]]) -> List[List[SqlValue]]:
    """Drop repeated rows, keeping first occurrences in order"""
    unique = []
    for row in rows:
        if not any(_same_row(row, seen) for seen in unique):
            unique.append(row)
    return unique


class QueryExecutor:
    """
    Executes statements within a selected database.

    The executor holds no session state; callers pass the database their
    session has selected.
    """

    def __init__(self, catalog: Catalog, store: RecordStore,
                 read_limit: int = config.RECORD_READ_LIMIT,
                 fail_open: bool = config.UNIQUE_CHECK_FAIL_OPEN,
                 max_rows: int = config.MAX_DISPLAY_ROWS):
        self.catalog = catalog
        self.store = store
        self.read_limit = read_limit
        self.fail_open = fail_open
        self.max_rows = max_rows

    def execute(self, stmt: Any, database: Optional[str]) -> QueryResult:
        """Execute a table-level statement in a database"""
        if database is None:
            raise NoDatabaseSelected()

        if isinstance(stmt, SelectStatement):
            return self.select(database, stmt.table, stmt.columns, stmt.distinct, stmt.where)
        elif isinstance(stmt, InsertStatement):
            return self.insert(database, stmt.table, stmt.values)
        elif isinstance(stmt, CreateTableStatement):
            return self.create_table(database, stmt.table, stmt.declaration)
        elif isinstance(stmt, DropTableStatement):
            return self.drop_table(database, stmt.table)
        elif isinstance(stmt, ShowTablesStatement):
            return self.show_tables(database)
        elif isinstance(stmt, DescribeTableStatement):
            return self.describe_table(database, stmt.table)
        elif isinstance(stmt, UpdateStatement):
            return self.update(database, stmt.table)
        elif isinstance(stmt, DeleteStatement):
            return self.delete(database, stmt.table)
        elif isinstance(stmt, ExplainStatement):
            return self.explain(stmt.operation)
        else:
            raise QueryError(f"Unknown statement type: {type(stmt).__name__}")

    def _resolve(self, database: str, table: str) -> Tuple[str, List[ColumnDefinition]]:
        """Store key and schema of an existing table"""
        declaration = self.catalog.get_table_declaration(database, table)
        return table_key(database, sanitize_name(table)[0]), load_schema(declaration)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def insert(self, database: str, table: str, values_text: str) -> QueryResult:
        """
        Insert one row given as literal text.

        Raises:
            LiteralSyntaxError, ValidationError, PrimaryKeyViolation,
            StoreUnavailable, TableNotFound
        """
        key, schema = self._resolve(database, table)

        values = parse_values(values_text)
        validate(values, schema)
        ensure_unique(values, schema, self.store, key, self.read_limit, self.fail_open)

        try:
            self.store.append(key, encode_record(values, schema))
        except StoreError as e:
            raise StoreUnavailable("store the row", e) from e

        logger.info("Inserted row into %s", key)
        return QueryResult(
            message=f"1 row inserted into '{table}'",
            affected_rows=1,
            table=table,
        )

    def _projection(self, columns_text: str, schema: List[ColumnDefinition]) -> Tuple[List[str], List[int]]:
        """Selected column names and their positions"""
        if columns_text.strip() == '*':
            if not schema:
                raise SchemaRequired()
            return column_names(schema), list(range(len(schema)))

        names = [name.strip() for name in columns_text.split(',') if name.strip()]
        if not names:
            raise QueryError("No columns specified. Example: SELECT id, name FROM users")

        if not schema:
            return names, list(range(len(names)))

        positions = []
        for name in names:
            idx = column_index(schema, name)
            if idx is None:
                raise UnknownColumn(name, column_names(schema))
            positions.append(idx)
        return names, positions

    def select(self, database: str, table: str, columns_text: str,
               distinct: bool = False, where: Optional[str] = None) -> QueryResult:
        """
        Select rows from a table's recent records.

        Raises:
            SchemaRequired, UnknownColumn, QueryError, StoreUnavailable,
            TableNotFound
        """
        key, schema = self._resolve(database, table)
        columns, positions = self._projection(columns_text, schema)

        expr = parse_where(where) if where and where.strip() else None
        if expr is not None and schema:
            for name in referenced_columns(expr):
                if column_index(schema, name) is None:
                    raise UnknownColumn(name, column_names(schema))

        try:
            records = self.store.read_recent(key, self.read_limit)
        except StoreError as e:
            raise StoreUnavailable("read table records", e) from e

        selected = []
        for record in records:
            row = decode_record(record, schema)
            if row is None:
                logger.warning("Skipping unreadable record in %s", key)
                continue
            if not evaluate(expr, row, schema):
                continue
            selected.append([row[i] if i < len(row) else None for i in positions])

        if distinct:
            selected = distinct_rows(selected)

        logger.info("Selected %d rows from %s", len(selected), key)
        shown = selected[:self.max_rows]
        return QueryResult(
            columns=columns,
            rows=[[render_cell(value) for value in row] for row in shown],
            message=f"{len(selected)} rows",
            total_rows=len(selected),
            distinct=distinct,
            where=where,
            table=table,
        )

    def update(self, database: str, table: str) -> QueryResult:
        self._resolve(database, table)
        return QueryResult(message="UPDATE is not supported yet. Rows are append-only", table=table)

    def delete(self, database: str, table: str) -> QueryResult:
        self._resolve(database, table)
        return QueryResult(message="DELETE is not supported yet. Rows are append-only", table=table)

    def explain(self, operation: str) -> QueryResult:
        return QueryResult(
            message=f"EXPLAIN is not supported yet. Query plans are not available for: {operation}"
        )

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table(self, database: str, table: str, declaration: Optional[str]) -> QueryResult:
        """Create a table, validating its declaration before it is stored"""
        schema = parse_schema(declaration or '')
        name = self.catalog.create_table(database, table, render_schema(schema) if schema else None)
        logger.info("Created table %s", table_key(database, name))

        message = f"Table '{name}' created"
        if name != table:
            message += f" (name sanitized from '{table}')"
        if not schema:
            message += " without a schema; any row shape is accepted"
        return QueryResult(message=message, table=name)

    def drop_table(self, database: str, table: str) -> QueryResult:
        name = self.catalog.drop_table(database, table)
        try:
            self.store.drop(table_key(database, name))
        except StoreError as e:
            raise CatalogError(f"Table '{name}' dropped but its records could not be removed: {e}") from e
        logger.info("Dropped table %s", table_key(database, name))
        return QueryResult(message=f"Table '{name}' dropped", table=name)

    def show_tables(self, database: str) -> QueryResult:
        tables = self.catalog.list_tables(database)
        return QueryResult(
            columns=['table_name'],
            rows=[[name] for name in tables],
            total_rows=len(tables),
        )

    def describe_table(self, database: str, table: str) -> QueryResult:
        _, schema = self._resolve(database, table)
        rows = [
            [col.name, col.type_label, 'YES' if col.nullable else 'NO', 'PRI' if col.primary_key else '']
            for col in schema
        ]
        message = '' if schema else f"Table '{table}' has no schema"
        return QueryResult(
            columns=['column_name', 'data_type', 'nullable', 'key'],
            rows=rows,
            message=message,
            total_rows=len(rows),
            table=table,
        )
