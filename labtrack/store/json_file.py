"""
JSON File Store
===============

File-backed RecordStore. Each collection lives in one human-readable file:

    data/
    ├── projects.json
    └── samples.json

File format:
    {
      "records": {
        "<id>": {"name": "...", "createdAt": "...", "updatedAt": "...", ...}
      },
      "last_updated": "2024-05-02T10:30:00+00:00"
    }

Writes go to a uniquely named temporary file in the same directory that then
replaces the original, so a crash mid-write leaves the previous version
intact. Every read-modify-write of a collection file holds a lock shared by
all JsonFileStore instances in the process, keyed by the file's resolved
path; file I/O runs in a worker thread. One process owns a data directory.
"""

import asyncio
import json
import os
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from labtrack.store.base import RecordStore, StoreError, check_collection
from labtrack.utils.logger import Logger

logger = Logger("Store")

# One lock per collection file, shared across store instances
_file_locks: dict[Path, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _file_locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = _file_locks[key] = threading.Lock()
        return lock


class JsonFileStore(RecordStore):
    """
    Stores each collection as a JSON file under `data_dir`.

    Example:
        store = JsonFileStore(Path("data"))
        project_id = await store.create("projects", {"name": "Atlas"})
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{check_collection(collection)}.json"

    def _read_records(self, path: Path) -> dict[str, dict[str, Any]]:
        """Read a collection file. A missing file is an empty collection."""
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                state = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read {path.name}: {e}") from e

        records = state.get("records") if isinstance(state, dict) else None
        if not isinstance(records, dict):
            raise StoreError(f"{path.name} is not a valid collection file")
        return records

    def _write_records(self, path: Path, records: dict[str, dict[str, Any]]) -> None:
        state = {"records": records, "last_updated": _now()}

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=str(path.parent))
        except OSError as e:
            raise StoreError(f"Could not write {path.name}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2, default=str)
            os.replace(tmp, path)
        except OSError as e:
            raise StoreError(f"Could not write {path.name}: {e}") from e
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)

    def _create_sync(self, collection: str, fields: dict[str, Any]) -> str:
        path = self._path(collection)

        with _lock_for(path):
            records = self._read_records(path)

            record_id = uuid.uuid4().hex
            timestamp = _now()
            record = dict(fields)
            record.pop("id", None)
            record["createdAt"] = timestamp
            record["updatedAt"] = timestamp

            records[record_id] = record
            self._write_records(path, records)
        return record_id

    async def create(self, collection: str, fields: dict[str, Any]) -> str:
        record_id = await asyncio.to_thread(self._create_sync, collection, fields)

        logger.info(f"Created {collection}/{record_id}")
        return record_id

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        records = await asyncio.to_thread(self._read_records, self._path(collection))
        record = records.get(record_id)
        if record is None:
            return None
        return {"id": record_id, **record}

    async def list_records(self, collection: str) -> list[dict[str, Any]]:
        records = await asyncio.to_thread(self._read_records, self._path(collection))
        return [{"id": record_id, **record} for record_id, record in records.items()]
