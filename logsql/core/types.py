"""
Data Types Module - Defines supported column data types for LogSQL

Supports: INT, VARCHAR, CHAR, BOOLEAN, FLOAT, DOUBLE, DECIMAL, DATE, TIME, DATETIME

Values are plain Python objects: int, float, str, bool and None (NULL).
"""

from enum import Enum
from typing import Any, Optional, Union

from .. import config


SqlValue = Union[int, float, str, bool, None]


class DataType(Enum):
    """Supported data types in LogSQL"""
    INT = "INT"
    VARCHAR = "VARCHAR"
    CHAR = "CHAR"
    BOOLEAN = "BOOLEAN"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"

    @property
    def is_string(self) -> bool:
        return self in (DataType.VARCHAR, DataType.CHAR)

    @property
    def is_numeric(self) -> bool:
        return self in (DataType.FLOAT, DataType.DOUBLE, DataType.DECIMAL)

    @property
    def is_temporal(self) -> bool:
        return self in (DataType.DATE, DataType.TIME, DataType.DATETIME)


# Accepted spellings, matched case-insensitively
TYPE_ALIASES = {
    'int': DataType.INT,
    'integer': DataType.INT,
    'varchar': DataType.VARCHAR,
    'string': DataType.VARCHAR,
    'text': DataType.VARCHAR,
    'char': DataType.CHAR,
    'character': DataType.CHAR,
    'bool': DataType.BOOLEAN,
    'boolean': DataType.BOOLEAN,
    'float': DataType.FLOAT,
    'real': DataType.FLOAT,
    'double': DataType.DOUBLE,
    'decimal': DataType.DECIMAL,
    'numeric': DataType.DECIMAL,
    'date': DataType.DATE,
    'time': DataType.TIME,
    'datetime': DataType.DATETIME,
    'timestamp': DataType.DATETIME,
}

# Example literal per type, used in error hints
EXAMPLES = {
    DataType.INT: "42",
    DataType.VARCHAR: "'text'",
    DataType.CHAR: "'a'",
    DataType.BOOLEAN: "true",
    DataType.FLOAT: "3.14",
    DataType.DOUBLE: "3.14",
    DataType.DECIMAL: "3.14",
    DataType.DATE: "'2023-12-25'",
    DataType.TIME: "'14:30:00'",
    DataType.DATETIME: "'2023-12-25T14:30:00Z'",
}


def normalize_type(type_name: str) -> Optional[DataType]:
    """Map a declared type name to a DataType, or None if unrecognized"""
    return TYPE_ALIASES.get(type_name.strip().lower())


def size_bounds(dtype: DataType) -> Optional[int]:
    """Upper bound for a declared size, or None when the type forbids one"""
    if dtype.is_string:
        return config.MAX_STRING_SIZE
    if dtype.is_numeric:
        return config.MAX_NUMERIC_PRECISION
    return None


def default_size(dtype: DataType) -> Optional[int]:
    """Size assumed when a type is declared without one"""
    if dtype == DataType.VARCHAR:
        return config.DEFAULT_VARCHAR_SIZE
    if dtype == DataType.CHAR:
        return config.DEFAULT_CHAR_SIZE
    return None


def value_type_name(value: Any) -> str:
    """Human-readable name of a value's type"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    return "string"


def render_literal(value: SqlValue) -> str:
    """
    Render a value as a literal the value parser reads back unchanged.

    Strings are single-quoted with quotes doubled and backslash, newline and
    carriage return escaped, so a rendered value always fits on one line.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    escaped = (value.replace('\\', '\\\\')
                    .replace("'", "''")
                    .replace('\n', '\\n')
                    .replace('\r', '\\r'))
    return f"'{escaped}'"


def render_cell(value: SqlValue) -> str:
    """Render a value for display: strings unquoted, everything else as a literal"""
    if isinstance(value, str):
        return value
    return render_literal(value)


def values_equal(left: SqlValue, right: SqlValue) -> bool:
    """Type-aware equality: True never equals 1, 'a' never equals 1"""
    return (type(left), left) == (type(right), right)
