"""
Database - Main entry point for LogSQL

Coordinates the catalog, the record store and the query executor, and keeps
track of which database each session has selected.
"""

import logging
import os
from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, List, Optional

from .. import config
from ..errors import DatabaseNotFound, NoDatabaseSelected
from ..parser.parser import (
    CreateDatabaseStatement, DropDatabaseStatement, ShowDatabasesStatement, UseStatement, parse_sql,
)
from ..storage.engine import Catalog, FileRecordStore, MemoryRecordStore, RecordStore, sanitize_name
from .executor import QueryExecutor, QueryResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Who is issuing commands; each session selects its own database"""
    tenant_id: str
    user_id: str


LOCAL_SESSION = SessionContext('local', 'local')


def split_statements(text: str) -> List[str]:
    """Split on semicolons outside quoted strings"""
    statements = []
    current = []
    in_string = False
    escaped = False
    for char in text:
        if escaped:
            # Character after a backslash inside a string
            escaped = False
        elif in_string and char == '\\':
            escaped = True
        elif char == "'":
            in_string = not in_string
        if char == ';' and not in_string:
            statements.append(''.join(current))
            current = []
        else:
            current.append(char)
    statements.append(''.join(current))
    return [s.strip() for s in statements if s.strip()]


class Database:
    """
    LogSQL Database instance.

    Usage:
        db = Database("./mydata")
        db.execute("CREATE DATABASE shop")
        db.execute("USE shop")
        db.execute("CREATE TABLE users (id INT PRIMARY KEY, name VARCHAR(100))")
        db.execute("INSERT INTO users VALUES (1, 'Alice')")
        result = db.execute("SELECT * FROM users")
        for row in result.rows:
            print(row)

    Pass data_dir=None to keep everything in memory.
    """

    def __init__(self, data_dir: Optional[str] = config.DATA_DIR,
                 store: Optional[RecordStore] = None,
                 fail_open: bool = config.UNIQUE_CHECK_FAIL_OPEN,
                 read_limit: int = config.RECORD_READ_LIMIT):
        """
        Initialize a LogSQL database.

        Args:
            data_dir: Directory holding the catalog and table logs, or None
            store: Record store to use instead of the default one
            fail_open: Allow inserts when the primary key check cannot read
                       existing rows
            read_limit: Number of most-recent records read per table
        """
        self.data_dir = data_dir

        if data_dir is None:
            self.catalog = Catalog()
            self.store = store or MemoryRecordStore()
        else:
            os.makedirs(data_dir, exist_ok=True)
            self.catalog = Catalog(os.path.join(data_dir, config.CATALOG_FILE))
            self.store = store or FileRecordStore(data_dir)

        self.executor = QueryExecutor(self.catalog, self.store, read_limit, fail_open)
        self.sessions: Dict[SessionContext, str] = {}
        self._sessions_lock = Lock()

    def current_database(self, session: SessionContext = LOCAL_SESSION) -> Optional[str]:
        return self.sessions.get(session)

    def use(self, name: str, session: SessionContext = LOCAL_SESSION) -> str:
        """Select a database for a session"""
        database, _ = sanitize_name(name)
        if not self.catalog.database_exists(database):
            raise DatabaseNotFound(database)
        with self._sessions_lock:
            self.sessions[session] = database
        logger.info("Session %s/%s using database %s", session.tenant_id, session.user_id, database)
        return database

    def execute(self, sql: str, session: SessionContext = LOCAL_SESSION) -> QueryResult:
        """
        Execute a LogSQL statement for a session.

        Args:
            sql: Statement to execute
            session: Session issuing the statement

        Returns:
            QueryResult containing columns, rows, and metadata

        Raises:
            ValueError: If the statement is invalid or execution fails
        """
        stmt = parse_sql(sql)

        if isinstance(stmt, CreateDatabaseStatement):
            database = self.catalog.create_database(stmt.name)
            message = f"Database '{database}' created"
            if database != stmt.name:
                message += f" (name sanitized from '{stmt.name}')"
            logger.info("Created database %s", database)
            return QueryResult(message=message)

        if isinstance(stmt, DropDatabaseStatement):
            database = self.catalog.drop_database(stmt.name)
            with self._sessions_lock:
                for key in [k for k, v in self.sessions.items() if v == database]:
                    del self.sessions[key]
            logger.info("Dropped database %s", database)
            return QueryResult(message=f"Database '{database}' dropped")

        if isinstance(stmt, UseStatement):
            database = self.use(stmt.name, session)
            return QueryResult(message=f"Using database '{database}'")

        if isinstance(stmt, ShowDatabasesStatement):
            databases = self.databases()
            return QueryResult(
                columns=['database_name'],
                rows=[[name] for name in databases],
                total_rows=len(databases),
            )

        return self.executor.execute(stmt, self.current_database(session))

    def execute_many(self, sql: str, session: SessionContext = LOCAL_SESSION) -> List[QueryResult]:
        """Execute several statements separated by semicolons"""
        return [self.execute(stmt, session) for stmt in split_statements(sql)]

    def databases(self) -> List[str]:
        return self.catalog.list_databases()

    def tables(self, session: SessionContext = LOCAL_SESSION) -> List[str]:
        """List the tables of the session's database"""
        database = self.current_database(session)
        if database is None:
            raise NoDatabaseSelected()
        return self.catalog.list_tables(database)

    def describe(self, table_name: str, session: SessionContext = LOCAL_SESSION) -> List[Dict[str, Any]]:
        """
        Get table schema information.

        Returns:
            One dictionary per column; empty for a table without a schema
        """
        database = self.current_database(session)
        if database is None:
            raise NoDatabaseSelected()
        result = self.executor.describe_table(database, table_name)
        return [dict(zip(result.columns, row)) for row in result.rows]

    def close(self) -> None:
        """Close database connection (placeholder for cleanup)."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
