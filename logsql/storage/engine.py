"""
Storage Engine - Catalog and append-only table logs

Features:
- Catalog of databases, tables and their schema declarations (JSON file)
- Append-only record log per table, one JSON-encoded record per line
- In-memory record store for tests and embedding
- Store keys of the form db_<database>/table_<table>
"""

import json
import logging
import os
import re
from abc import ABC, abstractmethod
from collections import deque
from threading import Lock
from typing import Dict, List, Optional, Tuple

from .. import config
from ..errors import CatalogError, DatabaseNotFound, StoreError, TableNotFound


logger = logging.getLogger(__name__)


def sanitize_name(name: str) -> Tuple[str, bool]:
    """
    Normalize a database or table name.

    Lowercases, turns spaces and other invalid characters into underscores,
    collapses repeated underscores and trims them from both ends.

    Returns:
        (sanitized_name, was_changed)
    """
    original = name.strip()
    sanitized = ''.join(c if (c.isascii() and c.isalnum()) or c == '_' else '_'
                        for c in original.lower())
    sanitized = re.sub(r'_+', '_', sanitized).strip('_')
    return sanitized, sanitized != original


def database_key(database: str) -> str:
    return f"{config.DATABASE_PREFIX}{database}"


def table_key(database: str, table: str) -> str:
    return f"{database_key(database)}/{config.TABLE_PREFIX}{table}"


# ============================================================================
# Collaborator interfaces
# ============================================================================

class RecordStore(ABC):
    """Append-only record logs, one per table"""

    @abstractmethod
    def append(self, key: str, record: str) -> None:
        """Append a record to a table's log"""

    @abstractmethod
    def read_recent(self, key: str, limit: int) -> List[str]:
        """Up to limit most-recent records, oldest first"""

    def drop(self, key: str) -> None:
        """Discard a table's log"""


class SchemaDeclarationStore(ABC):
    """Where table declarations are kept"""

    @abstractmethod
    def get_declaration(self, key: str) -> Optional[str]:
        """Stored declaration text of a table, or None"""


# ============================================================================
# Record stores
# ============================================================================

class MemoryRecordStore(RecordStore):
    """Record logs held in process memory"""

    def __init__(self):
        self.logs: Dict[str, List[str]] = {}
        self._lock = Lock()

    def append(self, key: str, record: str) -> None:
        with self._lock:
            self.logs.setdefault(key, []).append(record)

    def read_recent(self, key: str, limit: int) -> List[str]:
        if limit <= 0:
            return []
        return list(self.logs.get(key, [])[-limit:])

    def drop(self, key: str) -> None:
        with self._lock:
            self.logs.pop(key, None)


class FileRecordStore(RecordStore):
    """
    Record logs stored under a data directory.

    Each table key maps to <data_dir>/<db_key>/<table_key>.log holding one
    JSON-encoded record per line.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._lock = Lock()
        os.makedirs(data_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.data_dir, *key.split('/')) + config.LOG_FILE_EXT

    def append(self, key: str, record: str) -> None:
        path = self._path(key)
        with self._lock:
            try:
                os.makedirs(os.path.dirname(path), exist_ok=True)
                with open(path, 'a', encoding='utf-8') as f:
                    f.write(json.dumps(record) + '\n')
            except OSError as e:
                raise StoreError(f"cannot append to {key}: {e}") from e

    def read_recent(self, key: str, limit: int) -> List[str]:
        path = self._path(key)
        if limit <= 0 or not os.path.exists(path):
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                lines = deque((line for line in f if line.strip()), maxlen=limit)
        except OSError as e:
            raise StoreError(f"cannot read {key}: {e}") from e

        records = []
        for line in lines:
            try:
                record = json.loads(line)
            except ValueError:
                logger.warning("Skipping malformed line in %s", key)
                continue
            if not isinstance(record, str):
                logger.warning("Skipping malformed line in %s", key)
                continue
            records.append(record)
        return records

    def drop(self, key: str) -> None:
        path = self._path(key)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            raise StoreError(f"cannot remove {key}: {e}") from e


# ============================================================================
# Catalog
# ============================================================================

class Catalog(SchemaDeclarationStore):
    """
    System catalog of databases and tables.

    Tables keep their declaration as "Schema: <declaration>" text; a table
    created without columns has no declaration and accepts any row shape.
    Pass a file path to persist the catalog, or None to keep it in memory.
    Changes are saved before they become visible.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.databases: Dict[str, Dict[str, Optional[str]]] = {}
        self._lock = Lock()
        self._load()

    def _load(self) -> None:
        """Load catalog from disk"""
        if self.path and os.path.exists(self.path):
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise CatalogError(f"Catalog file {self.path} is unreadable: {e}") from e
            logger.debug("Loaded catalog from %s", self.path)
            self.databases = {
                name: dict(entry.get('tables', {}))
                for name, entry in data.get('databases', {}).items()
            }

    def _save(self, databases: Dict[str, Dict[str, Optional[str]]]) -> None:
        """Persist a catalog state, then make it current"""
        if self.path:
            data = {
                'databases': {
                    name: {'tables': tables} for name, tables in databases.items()
                }
            }
            try:
                directory = os.path.dirname(self.path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                with open(self.path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2)
            except OSError as e:
                raise CatalogError(f"Could not save catalog to {self.path}: {e}") from e
        self.databases = databases

    def _copy(self) -> Dict[str, Dict[str, Optional[str]]]:
        return {name: dict(tables) for name, tables in self.databases.items()}

    def _tables(self, database: str) -> Dict[str, Optional[str]]:
        if database not in self.databases:
            raise DatabaseNotFound(database)
        return self.databases[database]

    def create_database(self, name: str) -> str:
        """Register a database and return its sanitized name"""
        database, _ = sanitize_name(name)
        if not database:
            raise CatalogError(f"'{name}' is not a usable database name. Example: shop")
        with self._lock:
            if database in self.databases:
                raise CatalogError(f"Database '{database}' already exists")
            databases = self._copy()
            databases[database] = {}
            self._save(databases)
        return database

    def drop_database(self, name: str) -> str:
        """Remove an empty database"""
        database, _ = sanitize_name(name)
        with self._lock:
            tables = self._tables(database)
            if tables:
                raise CatalogError(
                    f"Refusing to drop '{database}': database is not empty ({len(tables)} tables). "
                    "Drop its tables first"
                )
            databases = self._copy()
            del databases[database]
            self._save(databases)
        return database

    def database_exists(self, name: str) -> bool:
        return sanitize_name(name)[0] in self.databases

    def list_databases(self) -> List[str]:
        return sorted(self.databases)

    def create_table(self, database: str, name: str, declaration: Optional[str]) -> str:
        """
        Register a table with already-validated canonical declaration text.

        Returns:
            The sanitized table name
        """
        table, _ = sanitize_name(name)
        with self._lock:
            tables = self._tables(database)
            if not table:
                raise CatalogError(f"'{name}' is not a usable table name. Example: users")
            if table in tables:
                raise CatalogError(f"Table '{table}' already exists in database '{database}'")
            databases = self._copy()
            databases[database][table] = f"{config.DECLARATION_PREFIX}{declaration}" if declaration else None
            self._save(databases)
        return table

    def drop_table(self, database: str, name: str) -> str:
        table, _ = sanitize_name(name)
        with self._lock:
            if table not in self._tables(database):
                raise TableNotFound(table, database)
            databases = self._copy()
            del databases[database][table]
            self._save(databases)
        return table

    def table_exists(self, database: str, name: str) -> bool:
        return sanitize_name(name)[0] in self.databases.get(database, {})

    def list_tables(self, database: str) -> List[str]:
        return sorted(self._tables(database))

    def get_table_declaration(self, database: str, name: str) -> Optional[str]:
        tables = self._tables(database)
        table, _ = sanitize_name(name)
        if table not in tables:
            raise TableNotFound(table, database)
        return tables[table]

    def get_declaration(self, key: str) -> Optional[str]:
        for database, tables in list(self.databases.items()):
            for table, declaration in tables.items():
                if table_key(database, table) == key:
                    return declaration
        return None
