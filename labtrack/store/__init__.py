"""
Record Store
============

Durable storage for projects and samples.

This module provides:
- RecordStore: the create/get/list_records interface the services depend on
- JsonFileStore: the file-backed implementation
- StoreError: raised for any read or write failure
- get_store / set_store: the process-wide store instance
"""

from labtrack.store.base import RecordStore, StoreError
from labtrack.store.json_file import JsonFileStore
from labtrack.utils.config import get_config

_store: RecordStore | None = None


def set_store(store: RecordStore | None) -> None:
    """Set (or with None, reset) the process-wide store."""
    global _store
    _store = store


def get_store() -> RecordStore:
    """Get the process-wide store, creating a JsonFileStore from config on first use."""
    global _store
    if _store is None:
        _store = JsonFileStore(get_config().store.data_dir)
    return _store


__all__ = [
    "RecordStore",
    "StoreError",
    "JsonFileStore",
    "get_store",
    "set_store",
]
