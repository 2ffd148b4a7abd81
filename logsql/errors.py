"""
Errors raised by LogSQL.

Every error is a ValueError so callers can report any user-facing failure
with a single handler. Messages are meant to be shown to the user as-is and
carry a corrective example where one applies.
"""

from typing import Any, List, Optional, Sequence


class LogSQLError(ValueError):
    """Base class for all LogSQL errors"""


# ============================================================================
# Schema declarations
# ============================================================================

class SchemaSyntaxError(LogSQLError):
    """Malformed column declaration"""

    def __init__(self, message: str, column: Optional[str] = None):
        self.column = column
        super().__init__(message)


class UnknownType(SchemaSyntaxError):
    def __init__(self, type_name: str, column: str):
        self.type_name = type_name
        super().__init__(
            f"'{type_name}' is not a valid data type for column '{column}'. "
            "Supported types: INT, VARCHAR, CHAR, BOOLEAN, FLOAT, DOUBLE, DECIMAL, "
            "DATE, TIME, DATETIME. Examples: id INT, name VARCHAR(100), active BOOLEAN",
            column,
        )


class InvalidSize(SchemaSyntaxError):
    def __init__(self, column: str, detail: str, example: str):
        self.detail = detail
        self.example = example
        super().__init__(f"Invalid size for column '{column}': {detail}. Example: {example}", column)


class DuplicateColumn(SchemaSyntaxError):
    def __init__(self, column: str):
        super().__init__(
            f"Column '{column}' is declared more than once. "
            "Example: id INT, name VARCHAR(50)",
            column,
        )


# ============================================================================
# Literal values
# ============================================================================

class LiteralSyntaxError(LogSQLError):
    """Malformed literal value list"""


class UnterminatedString(LiteralSyntaxError):
    def __init__(self):
        super().__init__("Unterminated string - missing closing quote. Example: 'John' instead of 'John")


class InvalidLiteral(LiteralSyntaxError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f"Invalid value: {text}. Valid formats: numbers 42 or 3.14, "
            "booleans true or false, strings 'text', NULL"
        )


class EmptyValue(LiteralSyntaxError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Empty value at position {position} - use NULL for empty values. Example: 1, NULL, 'x'")


class NoValuesProvided(LiteralSyntaxError):
    def __init__(self):
        super().__init__("No values provided. Examples: 1, 'John', true  or  42, 'Alice', false, NULL")


# ============================================================================
# Row validation
# ============================================================================

class ValidationError(LogSQLError):
    """Row does not satisfy its table schema"""

    def __init__(self, message: str, column: Optional[str] = None):
        self.column = column
        super().__init__(message)


class ArityMismatch(ValidationError):
    def __init__(self, expected: int, actual: int, columns: Sequence[str], example: str):
        self.expected = expected
        self.actual = actual
        self.columns = list(columns)
        super().__init__(
            f"Value count mismatch: expected {expected} values, got {actual}. "
            f"Expected columns: {', '.join(columns)}. Example: {example}"
        )


class NullNotAllowed(ValidationError):
    def __init__(self, column: str, position: int, data_type: str):
        self.position = position
        super().__init__(
            f"NULL not allowed for column '{column}' (position {position}, {data_type} NOT NULL)",
            column,
        )


class TypeMismatch(ValidationError):
    def __init__(self, column: str, position: int, expected: str, actual: str, example: str):
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Type mismatch for column '{column}' (position {position}): "
            f"expected {expected}, got {actual}. Example: {example}",
            column,
        )


class StringTooLong(ValidationError):
    def __init__(self, column: str, position: int, length: int, maximum: int):
        self.position = position
        self.length = length
        self.maximum = maximum
        super().__init__(
            f"String too long for column '{column}' (position {position}): "
            f"{length} characters, maximum {maximum}. Shorten the text or declare a larger size",
            column,
        )


# Names used by the error taxonomy
NullabilityViolation = NullNotAllowed
LengthViolation = StringTooLong


class PrimaryKeyViolation(LogSQLError):
    def __init__(self, columns: Sequence[str], values: Sequence[Any]):
        self.columns = list(columns)
        self.values = list(values)
        pairs = ', '.join(f"{c}={v!r}" for c, v in zip(self.columns, self.values))
        super().__init__(f"Duplicate primary key: a row with {pairs} already exists")


# ============================================================================
# Queries and catalog
# ============================================================================

class QueryError(LogSQLError):
    """Query cannot be answered as written"""


class UnknownColumn(QueryError):
    def __init__(self, column: str, available: List[str]):
        self.column = column
        self.available = list(available)
        super().__init__(
            f"Column '{column}' does not exist in table schema. "
            f"Available columns: {', '.join(available)}"
        )


class SchemaRequired(QueryError):
    def __init__(self):
        super().__init__(
            "Cannot use '*' selection on tables without a defined schema. "
            "Specify column names explicitly, e.g. SELECT column_1, column_2 FROM t"
        )


class TableNotFound(QueryError):
    def __init__(self, table: str, database: str):
        self.table = table
        self.database = database
        super().__init__(f"Table '{table}' does not exist in database '{database}'")


class DatabaseNotFound(QueryError):
    def __init__(self, database: str):
        self.database = database
        super().__init__(f"Database '{database}' does not exist")


class NoDatabaseSelected(QueryError):
    def __init__(self):
        super().__init__("No database selected. Select one first with: USE <database_name>")


class CatalogError(QueryError):
    """Database or table lifecycle request cannot be applied"""


# ============================================================================
# Record store
# ============================================================================

class StoreError(LogSQLError):
    """Raised by record stores when a log cannot be read or written"""


class StoreUnavailable(LogSQLError):
    def __init__(self, action: str, cause: Exception):
        self.cause = cause
        super().__init__(f"Could not {action}: {cause}")


# ============================================================================
# Statements
# ============================================================================

class ParseError(LogSQLError):
    """Statement text is not a recognized command"""

    def __init__(self, message: str, statement: str = ''):
        self.statement = statement
        super().__init__(message)
