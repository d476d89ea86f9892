"""
Record store and identity directory interfaces.
"""

from .record_store import (
    FILTER_FIELDS,
    IdentityDirectory,
    InMemoryIdentityDirectory,
    InMemoryRecordStore,
    RecordStore,
)

__all__ = [
    'FILTER_FIELDS',
    'IdentityDirectory',
    'InMemoryIdentityDirectory',
    'InMemoryRecordStore',
    'RecordStore',
]
