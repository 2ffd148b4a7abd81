"""
Statement Parser - Recognizes LogSQL commands and splits them into parts

Each command is matched as a whole and turned into a statement dataclass.
Column declarations, value lists and WHERE text are kept as raw text; they
are parsed by the schema, value and WHERE parsers when the statement runs.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import ParseError


# ============================================================================
# Statement Types
# ============================================================================

@dataclass
class CreateDatabaseStatement:
    name: str


@dataclass
class DropDatabaseStatement:
    name: str


@dataclass
class UseStatement:
    """USE <database>"""
    name: str


@dataclass
class ShowDatabasesStatement:
    pass


@dataclass
class ShowTablesStatement:
    pass


@dataclass
class CreateTableStatement:
    """CREATE TABLE statement; declaration is None for a table without schema"""
    table: str
    declaration: Optional[str] = None


@dataclass
class DropTableStatement:
    table: str


@dataclass
class DescribeTableStatement:
    table: str


@dataclass
class InsertStatement:
    """INSERT INTO <table> VALUES (<values>)"""
    table: str
    values: str


@dataclass
class SelectStatement:
    """SELECT [DISTINCT] <columns> FROM <table> [WHERE <condition>]"""
    table: str
    columns: str
    distinct: bool = False
    where: Optional[str] = None


@dataclass
class UpdateStatement:
    table: str
    text: str = ''


@dataclass
class DeleteStatement:
    table: str
    text: str = ''


@dataclass
class ExplainStatement:
    operation: str


# ============================================================================
# Parser
# ============================================================================

_FLAGS = re.IGNORECASE | re.DOTALL

_PATTERNS = [
    (re.compile(r'CREATE\s+DATABASE\s+(.+)', _FLAGS),
     lambda m: CreateDatabaseStatement(m.group(1).strip())),
    (re.compile(r'DROP\s+DATABASE\s+(.+)', _FLAGS),
     lambda m: DropDatabaseStatement(m.group(1).strip())),
    (re.compile(r'USE\s+(.+)', _FLAGS),
     lambda m: UseStatement(m.group(1).strip())),
    (re.compile(r'SHOW\s+DATABASES', _FLAGS),
     lambda m: ShowDatabasesStatement()),
    (re.compile(r'SHOW\s+TABLES', _FLAGS),
     lambda m: ShowTablesStatement()),
    (re.compile(r'CREATE\s+TABLE\s+([^\s(]+)\s*(?:\((.*)\))?', _FLAGS),
     lambda m: CreateTableStatement(m.group(1), m.group(2).strip() if m.group(2) is not None else None)),
    (re.compile(r'DROP\s+TABLE\s+(\S+)', _FLAGS),
     lambda m: DropTableStatement(m.group(1))),
    (re.compile(r'(?:DESCRIBE|DESC)\s+(?:TABLE\s+)?(\S+)', _FLAGS),
     lambda m: DescribeTableStatement(m.group(1))),
    (re.compile(r'INSERT\s+INTO\s+([^\s(]+)\s+VALUES\s*\((.*)\)', _FLAGS),
     lambda m: InsertStatement(m.group(1), m.group(2))),
    (re.compile(r'SELECT\s+(DISTINCT\s+)?(.+?)\s+FROM\s+(\S+)(?:\s+WHERE\s+(.+))?', _FLAGS),
     lambda m: SelectStatement(m.group(3), m.group(2).strip(), m.group(1) is not None,
                               m.group(4).strip() if m.group(4) else None)),
    (re.compile(r'UPDATE\s+(\S+)(?:\s+(.*))?', _FLAGS),
     lambda m: UpdateStatement(m.group(1), (m.group(2) or '').strip())),
    (re.compile(r'DELETE\s+FROM\s+(\S+)(?:\s+(.*))?', _FLAGS),
     lambda m: DeleteStatement(m.group(1), (m.group(2) or '').strip())),
    (re.compile(r'EXPLAIN\s+(.+)', _FLAGS),
     lambda m: ExplainStatement(m.group(1).strip())),
]

_SUPPORTED = (
    "CREATE DATABASE, DROP DATABASE, USE, SHOW DATABASES, SHOW TABLES, "
    "CREATE TABLE, DROP TABLE, DESCRIBE, INSERT INTO ... VALUES (...), "
    "SELECT ... FROM ... [WHERE ...], UPDATE, DELETE, EXPLAIN"
)


def parse_sql(sql: str) -> Any:
    """
    Parse a single LogSQL statement.

    Keywords are case-insensitive and a trailing semicolon is optional.

    Raises:
        ParseError: If the text is not a supported statement
    """
    text = sql.strip()
    while text.endswith(';'):
        text = text[:-1].rstrip()

    if not text:
        raise ParseError("Empty statement", sql)

    for pattern, build in _PATTERNS:
        match = pattern.fullmatch(text)
        if match:
            return build(match)

    raise ParseError(f"Unrecognized statement: {text.split()[0]}. Supported: {_SUPPORTED}", sql)
