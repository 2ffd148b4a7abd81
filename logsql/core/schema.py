"""
Schema Module - Parses and renders table column declarations

A declaration is a comma-separated list of columns:

    id INT PRIMARY KEY, name VARCHAR(100) NOT NULL, price DECIMAL(10)

Supports:
- Type synonyms (integer, text, bool, real, numeric, timestamp, ...)
- Type-dependent size rules (VARCHAR/CHAR limits, numeric precision)
- NOT NULL and PRIMARY KEY constraints
- The older colon-separated form (id: INT, name: VARCHAR(100))
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .. import config
from ..errors import DuplicateColumn, InvalidSize, SchemaSyntaxError, UnknownType
from .types import DataType, default_size, normalize_type, size_bounds


@dataclass
class ColumnDefinition:
    """Represents a column in a table"""
    name: str
    data_type: DataType
    size: Optional[int] = None
    nullable: bool = True
    primary_key: bool = False

    @property
    def type_label(self) -> str:
        if self.size is not None:
            return f"{self.data_type.value}({self.size})"
        return self.data_type.value

    def __str__(self) -> str:
        parts = [self.name, self.type_label]
        if not self.nullable:
            parts.append("NOT NULL")
        if self.primary_key:
            parts.append("PRIMARY KEY")
        return ' '.join(parts)


class DeclarationFormat(Enum):
    """Known layouts of stored declaration text"""
    CANONICAL = auto()
    LEGACY_COLON = auto()


# name, type word, optional "(size" with optional ")", trailing constraint tokens
_COLUMN_RE = re.compile(r'(\S+)\s+([^\s(]+)\s*(\([^)]*\)?)?\s*(.*)$', re.DOTALL)

# "name: TYPE ..." as written by older versions
_LEGACY_SEGMENT_RE = re.compile(r'^(\s*[^\s:]+):\s+(.*)$', re.DOTALL)


def split_top_level(text: str, separator: str = ',') -> List[str]:
    """Split on separator characters outside parentheses"""
    parts = []
    current = []
    depth = 0
    for char in text:
        if char == '(':
            depth += 1
        elif char == ')' and depth > 0:
            depth -= 1
        if char == separator and depth == 0:
            parts.append(''.join(current))
            current = []
        else:
            current.append(char)
    parts.append(''.join(current))
    return parts


def detect_declaration_format(text: str) -> DeclarationFormat:
    """Detect whether declaration text uses the colon-separated layout"""
    for segment in split_top_level(text):
        if _LEGACY_SEGMENT_RE.match(segment):
            return DeclarationFormat.LEGACY_COLON
    return DeclarationFormat.CANONICAL


def normalize_declaration(text: str) -> str:
    """Rewrite declaration text into the canonical layout"""
    if detect_declaration_format(text) == DeclarationFormat.CANONICAL:
        return text

    segments = []
    for segment in split_top_level(text):
        match = _LEGACY_SEGMENT_RE.match(segment)
        if match:
            segment = f"{match.group(1)} {match.group(2)}"
        segments.append(segment)
    return ','.join(segments)


def _parse_size(column: str, dtype: DataType, size_text: Optional[str]) -> Optional[int]:
    """Apply the size policy of a type to an optional '(n)' suffix"""
    bound = size_bounds(dtype)

    if size_text is None:
        return default_size(dtype)

    if bound is None:
        raise InvalidSize(column, f"{dtype.value} does not take a size", f"{column} {dtype.value}")

    sample = 100 if dtype.is_string else 10
    example = f"{column} {dtype.value}({sample})"

    if not size_text.endswith(')'):
        raise InvalidSize(column, "missing closing parenthesis", example)

    inner = size_text[1:-1].strip()
    if not re.fullmatch(r'\d+', inner, re.ASCII):
        raise InvalidSize(column, f"'{inner}' is not a whole number", example)

    size = int(inner)
    if size < 1 or size > bound:
        raise InvalidSize(column, f"size must be between 1 and {bound}, got {size}", example)
    return size


def parse_column(segment: str) -> ColumnDefinition:
    """Parse one 'name TYPE[(n)] [constraints]' segment"""
    match = _COLUMN_RE.match(segment.strip())
    if match is None:
        raise SchemaSyntaxError(
            f"Invalid column definition: '{segment.strip()}'. "
            "Expected format: column_name data_type, e.g. id INT"
        )

    name, type_name, size_text, rest = match.groups()

    dtype = normalize_type(type_name)
    if dtype is None:
        raise UnknownType(type_name, name)

    size = _parse_size(name, dtype, size_text)

    # Forgiving keyword scan: unrecognized tokens are ignored
    nullable = True
    primary_key = False
    tokens = [t.upper() for t in rest.split()]
    for i, token in enumerate(tokens[:-1]):
        following = tokens[i + 1]
        if token == 'NOT' and following == 'NULL':
            nullable = False
        elif token == 'PRIMARY' and following == 'KEY':
            primary_key = True

    return ColumnDefinition(name, dtype, size, nullable, primary_key)


def parse_schema(text: str) -> List[ColumnDefinition]:
    """
    Parse a column declaration list.

    Args:
        text: Declaration such as "id INT, name VARCHAR(5)". Blank text
              yields an empty schema (a table without a fixed schema).

    Returns:
        Column definitions in declaration order

    Raises:
        SchemaSyntaxError: On malformed segments, unknown types, bad sizes
                           or repeated column names
    """
    if not text or not text.strip():
        return []

    columns = []
    seen = set()
    for segment in split_top_level(text):
        if not segment.strip():
            continue
        column = parse_column(segment)
        if column.name in seen:
            raise DuplicateColumn(column.name)
        seen.add(column.name)
        columns.append(column)

    return columns


def render_schema(columns: List[ColumnDefinition]) -> str:
    """Render columns as canonical declaration text"""
    return ', '.join(str(col) for col in columns)


def load_schema(stored: Optional[str]) -> List[ColumnDefinition]:
    """
    Parse stored declaration text ("Schema: <declaration>").

    Text without the declaration prefix describes a table with no fixed
    schema. Older colon-separated declarations are normalized first.
    """
    if not stored:
        return []

    start = stored.find(config.DECLARATION_PREFIX)
    if start < 0:
        return []

    declaration = stored[start + len(config.DECLARATION_PREFIX):]
    return parse_schema(normalize_declaration(declaration))


def column_names(schema: List[ColumnDefinition]) -> List[str]:
    return [col.name for col in schema]


def column_index(schema: List[ColumnDefinition], name: str) -> Optional[int]:
    """Position of a column by exact name"""
    for idx, col in enumerate(schema):
        if col.name == name:
            return idx
    return None


def primary_key_indices(schema: List[ColumnDefinition]) -> List[int]:
    return [idx for idx, col in enumerate(schema) if col.primary_key]
