"""
Primary-key uniqueness checks against a table's recent records.

Only the most recent records of a table are scanned, so the check is
best-effort. When the records cannot be read the insert is allowed unless
the caller asks for the strict behaviour.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .. import config
from ..errors import PrimaryKeyViolation, StoreError, StoreUnavailable
from ..storage.codec import decode_record
from .schema import ColumnDefinition, primary_key_indices
from .types import SqlValue, values_equal


logger = logging.getLogger(__name__)


def _is_number(value: SqlValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def key_values_equal(left: SqlValue, right: SqlValue, epsilon: float = config.FLOAT_EPSILON) -> bool:
    """Exact equality, except floats which match within epsilon"""
    if _is_number(left) and _is_number(right) and (isinstance(left, float) or isinstance(right, float)):
        return abs(left - right) < epsilon
    return values_equal(left, right)


def find_duplicate(values: Sequence[SqlValue], schema: Sequence[ColumnDefinition],
                   records: Iterable[str]) -> Optional[List[SqlValue]]:
    """Return the key of the first stored row sharing the candidate's primary key"""
    key_idx = primary_key_indices(list(schema))
    if not key_idx:
        return None

    candidate = [values[i] for i in key_idx]

    for record in records:
        existing = decode_record(record, schema)
        if existing is None:
            continue
        if all(key_values_equal(candidate[n], existing[i]) for n, i in enumerate(key_idx)):
            return [existing[i] for i in key_idx]

    return None


def check_primary_key(values: Sequence[SqlValue], schema: Sequence[ColumnDefinition],
                      records: Iterable[str]) -> None:
    """
    Reject a row whose primary key already exists among records.

    Raises:
        PrimaryKeyViolation: If a stored row has the same key values
    """
    if find_duplicate(values, schema, records) is not None:
        key_idx = primary_key_indices(list(schema))
        raise PrimaryKeyViolation([schema[i].name for i in key_idx], [values[i] for i in key_idx])


def ensure_unique(values: Sequence[SqlValue], schema: Sequence[ColumnDefinition], store, table_key: str,
                  limit: int = config.RECORD_READ_LIMIT,
                  fail_open: bool = config.UNIQUE_CHECK_FAIL_OPEN) -> None:
    """
    Read a table's recent records and check the candidate row's primary key.

    Args:
        values: Validated candidate row
        schema: Table columns
        store: RecordStore holding the table's log
        table_key: Store key of the table
        limit: Number of most-recent records scanned
        fail_open: Allow the insert when the records cannot be read

    Raises:
        PrimaryKeyViolation: On a duplicate key
        StoreUnavailable: If reading fails and fail_open is False
    """
    if not primary_key_indices(list(schema)):
        return

    try:
        records = store.read_recent(table_key, limit)
    except StoreError as e:
        if fail_open:
            logger.warning("Primary key check skipped for %s, records unreadable: %s", table_key, e)
            return
        raise StoreUnavailable("read existing rows for the primary key check", e) from e

    check_primary_key(values, schema, records)
