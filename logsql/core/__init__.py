"""Core module - Types, Schema, Validator, Uniqueness, Executor, Database, REPL"""

from .types import DataType, SqlValue, render_literal
from .schema import ColumnDefinition, parse_schema, render_schema, load_schema
from .validator import validate
from .uniqueness import check_primary_key, ensure_unique
from .executor import QueryExecutor, QueryResult
from .database import Database, SessionContext
from .repl import REPL

__all__ = [
    'DataType', 'SqlValue', 'render_literal',
    'ColumnDefinition', 'parse_schema', 'render_schema', 'load_schema',
    'validate',
    'check_primary_key', 'ensure_unique',
    'QueryExecutor', 'QueryResult',
    'Database', 'SessionContext', 'REPL',
]
