"""Storage module - Catalog, record stores and record codec"""

from .engine import Catalog, RecordStore, MemoryRecordStore, FileRecordStore, sanitize_name
from .codec import encode_record, decode_record

__all__ = [
    'Catalog', 'RecordStore', 'MemoryRecordStore', 'FileRecordStore', 'sanitize_name',
    'encode_record', 'decode_record',
]
