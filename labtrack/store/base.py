"""
Record Store Interface
======================

The store is the only durable, shared resource the agent touches. It is used
with "create new record" semantics: the store assigns the id and the
timestamps, the caller supplies everything else.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

_COLLECTION_NAME = re.compile(r"^[a-z0-9_-]+$")


class StoreError(Exception):
    """A record could not be read or written."""


def check_collection(name: str) -> str:
    """
    Validate a collection name.

    Collection names become file names, so only lowercase letters, digits,
    underscores and dashes are accepted.

    Raises:
        StoreError: If the name is empty or contains other characters
    """
    if not name or not _COLLECTION_NAME.match(name):
        raise StoreError(f"Invalid collection name: {name!r}")
    return name


class RecordStore(ABC):
    """
    A collection-oriented document store.

    Example:
        store = JsonFileStore(Path("data"))

        record_id = await store.create("projects", {"name": "Atlas"})
        record = await store.get("projects", record_id)
        # {"id": record_id, "name": "Atlas", "createdAt": "...", "updatedAt": "..."}
    """

    @abstractmethod
    async def create(self, collection: str, fields: dict[str, Any]) -> str:
        """
        Create a record and return its new id.

        The store adds `createdAt` and `updatedAt`. Every call creates a new
        record; there is no deduplication.

        Raises:
            StoreError: If the write fails
        """

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Get one record (with its `id`), or None if it does not exist."""

    @abstractmethod
    async def list_records(self, collection: str) -> list[dict[str, Any]]:
        """List all records of a collection in creation order."""
