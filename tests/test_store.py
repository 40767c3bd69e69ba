"""Unit tests for the JSON file record store."""

import asyncio
import json

import pytest

from labtrack.store import JsonFileStore, StoreError


class TestJsonFileStoreCreate:
    """Creating records."""

    @pytest.mark.asyncio
    async def test_create_returns_new_id(self, store):
        record_id = await store.create("projects", {"name": "Atlas"})

        assert isinstance(record_id, str)
        assert record_id

    @pytest.mark.asyncio
    async def test_create_stamps_timestamps(self, store):
        record_id = await store.create("projects", {"name": "Atlas"})

        record = await store.get("projects", record_id)
        assert record["id"] == record_id
        assert record["name"] == "Atlas"
        assert record["createdAt"]
        assert record["createdAt"] == record["updatedAt"]

    @pytest.mark.asyncio
    async def test_caller_cannot_choose_the_id(self, store):
        record_id = await store.create("projects", {"id": "mine", "name": "Atlas"})

        assert record_id != "mine"
        assert await store.get("projects", "mine") is None

    @pytest.mark.asyncio
    async def test_identical_creates_make_distinct_records(self, store):
        first = await store.create("samples", {"sample_id": "S-1"})
        second = await store.create("samples", {"sample_id": "S-1"})

        assert first != second
        assert len(await store.list_records("samples")) == 2

    @pytest.mark.asyncio
    async def test_collections_are_separate_files(self, store, tmp_path):
        await store.create("projects", {"name": "Atlas"})
        await store.create("samples", {"sample_id": "S-1"})

        assert (tmp_path / "data" / "projects.json").exists()
        assert (tmp_path / "data" / "samples.json").exists()
        assert len(await store.list_records("projects")) == 1

    @pytest.mark.asyncio
    async def test_records_survive_a_new_store_instance(self, store, tmp_path):
        record_id = await store.create("projects", {"name": "Atlas"})

        reopened = JsonFileStore(tmp_path / "data")
        record = await reopened.get("projects", record_id)

        assert record["name"] == "Atlas"

    @pytest.mark.asyncio
    async def test_list_preserves_creation_order(self, store):
        for name in ("first", "second", "third"):
            await store.create("projects", {"name": name})

        names = [record["name"] for record in await store.list_records("projects")]
        assert names == ["first", "second", "third"]


class TestJsonFileStoreReads:
    """Reading records and collections."""

    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, store):
        assert await store.list_records("projects") == []
        assert await store.get("projects", "nope") is None

    @pytest.mark.asyncio
    async def test_corrupt_file_raises_store_error(self, store, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "projects.json").write_text("{not json")

        with pytest.raises(StoreError):
            await store.list_records("projects")

        with pytest.raises(StoreError):
            await store.create("projects", {"name": "Atlas"})

    @pytest.mark.asyncio
    async def test_file_without_records_raises_store_error(self, store, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "projects.json").write_text(json.dumps(["not", "a", "collection"]))

        with pytest.raises(StoreError):
            await store.get("projects", "x")


class TestCollectionNames:
    """Collection names become file names and are restricted."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "../escape", "Projects", "a/b"])
    async def test_invalid_collection_names_rejected(self, store, name):
        with pytest.raises(StoreError):
            await store.create(name, {"x": 1})


class TestSharedDataDirectory:
    """Several store instances writing to one data directory."""

    @pytest.mark.asyncio
    async def test_concurrent_creates_from_two_instances_all_persist(self, tmp_path):
        first = JsonFileStore(tmp_path / "data")
        second = JsonFileStore(tmp_path / "data")

        ids = await asyncio.gather(*(
            (first if i % 2 else second).create("samples", {"sample_id": f"S-{i}"})
            for i in range(20)
        ))

        assert len(set(ids)) == 20
        samples = await first.list_records("samples")
        assert sorted(s["id"] for s in samples) == sorted(ids)

    @pytest.mark.asyncio
    async def test_no_temporary_files_left_behind(self, store, tmp_path):
        await asyncio.gather(*(store.create("projects", {"name": f"P{i}"}) for i in range(5)))

        assert [p.name for p in (tmp_path / "data").iterdir()] == ["projects.json"]
