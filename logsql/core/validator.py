"""
Validator Module - Checks parsed values against a table schema

Checks, in column order, stopping at the first violation:
- value count
- NULL against NOT NULL
- value type against column type
- VARCHAR/CHAR length
- ISO-8601 DATE, TIME and DATETIME text
"""

import re
from typing import List, Sequence

from ..errors import ArityMismatch, NullNotAllowed, StringTooLong, TypeMismatch
from .schema import ColumnDefinition, column_names
from .types import EXAMPLES, DataType, SqlValue, render_literal, value_type_name


_DATE_RE = re.compile(r'(\d{4})-(\d{2})-(\d{2})', re.ASCII)
_TIME_RE = re.compile(
    r'(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-](\d{2}):(\d{2}))?',
    re.ASCII,
)

_DAYS_IN_MONTH = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def is_valid_date(text: str) -> bool:
    """Strict YYYY-MM-DD naming a real calendar day"""
    match = _DATE_RE.fullmatch(text)
    if not match:
        return False
    year, month, day = (int(g) for g in match.groups())
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def is_valid_time(text: str) -> bool:
    """HH:MM:SS with optional .fraction and Z or +HH:MM/-HH:MM offset"""
    match = _TIME_RE.fullmatch(text)
    if not match:
        return False
    hours, minutes, seconds = int(match.group(1)), int(match.group(2)), int(match.group(3))
    if hours > 23 or minutes > 59 or seconds > 59:
        return False
    if match.group(6) is not None:
        if int(match.group(6)) > 23 or int(match.group(7)) > 59:
            return False
    return True


def is_valid_datetime(text: str) -> bool:
    """<DATE>T<TIME>"""
    date_part, sep, time_part = text.partition('T')
    if not sep:
        return False
    return is_valid_date(date_part) and is_valid_time(time_part)


_TEMPORAL_CHECKS = {
    DataType.DATE: (is_valid_date, "DATE (YYYY-MM-DD)"),
    DataType.TIME: (is_valid_time, "TIME (HH:MM:SS)"),
    DataType.DATETIME: (is_valid_datetime, "DATETIME (YYYY-MM-DDTHH:MM:SS)"),
}


def example_row(schema: Sequence[ColumnDefinition]) -> str:
    """Synthesize a value list matching the schema"""
    return ', '.join(EXAMPLES[col.data_type] for col in schema)


def validate_value(value: SqlValue, column: ColumnDefinition, position: int) -> None:
    """
    Validate a single value against its column.

    Args:
        value: Parsed value
        column: Column the value is positioned at
        position: 1-based position, used in messages

    Raises:
        ValidationError: On the first violated rule
    """
    if value is None:
        if not column.nullable:
            raise NullNotAllowed(column.name, position, column.type_label)
        return

    dtype = column.data_type
    example = EXAMPLES[dtype]
    actual = value_type_name(value)

    def mismatch(expected: str) -> TypeMismatch:
        return TypeMismatch(column.name, position, expected, actual,
                            f"{example} instead of {render_literal(value)}")

    is_bool = isinstance(value, bool)

    if dtype == DataType.INT:
        if is_bool or not isinstance(value, int):
            raise mismatch("integer")

    elif dtype.is_string:
        if not isinstance(value, str):
            raise mismatch("string")
        if column.size is not None and len(value) > column.size:
            raise StringTooLong(column.name, position, len(value), column.size)

    elif dtype == DataType.BOOLEAN:
        if not is_bool:
            raise mismatch("boolean")

    elif dtype.is_numeric:
        if is_bool or not isinstance(value, (int, float)):
            raise mismatch("number")

    elif dtype.is_temporal:
        check, expected = _TEMPORAL_CHECKS[dtype]
        if not isinstance(value, str):
            raise mismatch(f"string in {expected} format")
        if not check(value):
            raise TypeMismatch(column.name, position, expected, f"'{value}'", example)


def validate(values: List[SqlValue], schema: List[ColumnDefinition]) -> None:
    """
    Validate a row of values against a schema.

    An empty schema accepts any row.

    Raises:
        ValidationError: ArityMismatch, NullNotAllowed, TypeMismatch or
                         StringTooLong for the first violation found
    """
    if not schema:
        return

    if len(values) != len(schema):
        raise ArityMismatch(len(schema), len(values), column_names(schema), example_row(schema))

    for position, (value, column) in enumerate(zip(values, schema), start=1):
        validate_value(value, column, position)
