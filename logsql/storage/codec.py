"""
Record Codec - Serializes rows into the text records kept in table logs

A record looks like:

    Inserted: 2026-10-19T12:00:00.000000Z
    DATA:
      id: 1
      name: 'John''s'
      active: true

Records written by older versions used "**name**: value" data lines; they
are detected and rewritten to the current layout before parsing.
"""

import logging
import re
from datetime import datetime, timezone
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple

from .. import config
from ..core.schema import ColumnDefinition
from ..core.types import SqlValue, render_literal
from ..parser.lexer import parse_literal


logger = logging.getLogger(__name__)

TIMESTAMP_LABEL = 'Inserted: '
DATA_MARKER = 'DATA:'
FIELD_INDENT = '  '
FIELD_SEPARATOR = ': '

_LEGACY_FIELD_RE = re.compile(r'^\*\*(.+?)\*\*:\s?(.*)$')


class RecordFormat(Enum):
    """Known layouts of stored record text"""
    CANONICAL = auto()
    LEGACY_BOLD = auto()


def field_name(schema: Sequence[ColumnDefinition], idx: int) -> str:
    """Name a value is stored under; column_<n> when there is no schema"""
    if schema:
        return schema[idx].name
    return f"column_{idx + 1}"


def encode_record(values: Sequence[SqlValue], schema: Sequence[ColumnDefinition],
                  created_at: Optional[datetime] = None) -> str:
    """
    Serialize a validated row.

    Args:
        values: Row values, aligned with schema when it is not empty
        schema: Table columns (may be empty)
        created_at: Creation time, defaults to now (UTC)

    Returns:
        Record text
    """
    created_at = created_at or datetime.now(timezone.utc)
    lines = [
        TIMESTAMP_LABEL + created_at.strftime(config.RECORD_TIMESTAMP_FORMAT),
        DATA_MARKER,
    ]
    for idx, value in enumerate(values):
        lines.append(f"{FIELD_INDENT}{field_name(schema, idx)}{FIELD_SEPARATOR}{render_literal(value)}")
    return '\n'.join(lines)


def detect_record_format(text: str) -> RecordFormat:
    for line in text.splitlines():
        if _LEGACY_FIELD_RE.match(line):
            return RecordFormat.LEGACY_BOLD
    return RecordFormat.CANONICAL


def normalize_record(text: str) -> str:
    """Rewrite legacy data lines into the current layout"""
    if detect_record_format(text) == RecordFormat.CANONICAL:
        return text

    lines = []
    for line in text.splitlines():
        match = _LEGACY_FIELD_RE.match(line)
        if match:
            line = f"{FIELD_INDENT}{match.group(1).strip()}{FIELD_SEPARATOR}{match.group(2).strip()}"
        lines.append(line)
    return '\n'.join(lines)


def record_fields(text: str) -> List[Tuple[str, str]]:
    """(name, literal text) pairs of a canonical record, in record order"""
    fields = []
    for line in text.splitlines():
        if not line.startswith(FIELD_INDENT):
            continue
        sep = line.find(FIELD_SEPARATOR)
        if sep < 0:
            continue
        fields.append((line[len(FIELD_INDENT):sep].strip(), line[sep + len(FIELD_SEPARATOR):].strip()))
    return fields


def record_timestamp(text: str) -> Optional[str]:
    for line in text.splitlines():
        if line.startswith(TIMESTAMP_LABEL):
            return line[len(TIMESTAMP_LABEL):].strip()
    return None


def decode_record(text: str, schema: Sequence[ColumnDefinition]) -> Optional[List[SqlValue]]:
    """
    Rebuild a row from record text.

    Values are reordered to schema order. Returns None when the record cannot
    be reconstructed: a schema column is missing or a value is unreadable.
    Legacy records may hold bare unquoted text, which is read as a string.
    """
    legacy = detect_record_format(text) == RecordFormat.LEGACY_BOLD
    if legacy:
        text = normalize_record(text)

    parsed = []
    for name, literal in record_fields(text):
        try:
            value = parse_literal(literal)
        except ValueError:
            if not legacy:
                logger.debug("Unreadable value for %s in record: %r", name, literal)
                return None
            value = literal
        parsed.append((name, value))

    if not schema:
        return [value for _, value in parsed] if parsed else None

    by_name = {}
    for name, value in parsed:
        by_name.setdefault(name, value)

    row = []
    for col in schema:
        if col.name not in by_name:
            return None
        row.append(by_name[col.name])
    return row
