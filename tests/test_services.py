"""Unit tests for the project and sample services."""

import pytest
from pydantic import ValidationError

from labtrack.services import (
    ProjectCreationInput,
    SampleCreationInput,
    create_project,
    create_sample,
)

CREATED_BY = {"uid": "u1", "name": "Dr. Who"}


class TestCreateProject:
    """create_project validation and persistence."""

    @pytest.mark.asyncio
    async def test_persists_one_project_with_author(self, store):
        project_id = await create_project(
            {"name": "Atlas", "omics_type": "Proteomics", "lead": "Dr. Who"},
            CREATED_BY,
            store,
        )

        projects = await store.list_records("projects")
        assert len(projects) == 1
        assert projects[0]["id"] == project_id
        assert projects[0]["name"] == "Atlas"
        assert projects[0]["omics_type"] == "Proteomics"
        assert projects[0]["lead"] == "Dr. Who"
        assert projects[0]["createdBy"] == CREATED_BY

    @pytest.mark.asyncio
    async def test_omitted_description_is_not_stored(self, store):
        project_id = await create_project(
            {"name": "Atlas", "omics_type": "Genomics", "lead": "Dr. Who"},
            CREATED_BY,
            store,
        )

        record = await store.get("projects", project_id)
        assert "description" not in record

    @pytest.mark.asyncio
    async def test_missing_name_raises_and_writes_nothing(self, store):
        with pytest.raises(ValidationError) as exc_info:
            await create_project(
                {"omics_type": "Genomics", "lead": "Dr. Who"}, CREATED_BY, store
            )

        assert exc_info.value.errors()[0]["loc"] == ("name",)
        assert await store.list_records("projects") == []

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, store):
        with pytest.raises(ValidationError):
            await create_project(
                {"name": "   ", "omics_type": "Genomics", "lead": "Dr. Who"}, CREATED_BY, store
            )

        assert await store.list_records("projects") == []

    @pytest.mark.asyncio
    async def test_unknown_omics_type_is_rejected(self, store):
        with pytest.raises(ValidationError):
            await create_project(
                {"name": "Atlas", "omics_type": "Metabolomics", "lead": "Dr. Who"},
                CREATED_BY,
                store,
            )

    @pytest.mark.asyncio
    async def test_accepts_validated_model(self, store):
        data = ProjectCreationInput(name=" Atlas ", omics_type="Multi-omics", lead="Dr. Who")

        project_id = await create_project(data, CREATED_BY, store)

        record = await store.get("projects", project_id)
        assert record["name"] == "Atlas"


class TestCreateSample:
    """create_sample validation and persistence."""

    @pytest.mark.asyncio
    async def test_status_defaults_to_pending(self, store):
        sample_id = await create_sample(
            {"sample_id": "S-001", "project_name": "Atlas"}, CREATED_BY, "Dr. Who", store
        )

        record = await store.get("samples", sample_id)
        assert record["status"] == "pending"

    @pytest.mark.asyncio
    async def test_new_sample_has_empty_collections_and_collector(self, store):
        sample_id = await create_sample(
            {"sample_id": "S-001", "project_name": "Atlas", "status": "in-progress"},
            CREATED_BY,
            "Dr. Who",
            store,
        )

        record = await store.get("samples", sample_id)
        assert record["tags"] == []
        assert record["attachments"] == []
        assert record["collected_by"] == "Dr. Who"
        assert record["createdBy"] == CREATED_BY
        assert record["status"] == "in-progress"
        assert record["date_collected"]

    @pytest.mark.asyncio
    async def test_creating_same_sample_twice_makes_two_records(self, store):
        """No dedup key: repeated creation is accepted behaviour."""
        data = {"sample_id": "S-001", "project_name": "Atlas"}

        first = await create_sample(data, CREATED_BY, "Dr. Who", store)
        second = await create_sample(data, CREATED_BY, "Dr. Who", store)

        assert first != second
        samples = await store.list_records("samples")
        assert [s["sample_id"] for s in samples] == ["S-001", "S-001"]

    @pytest.mark.asyncio
    async def test_missing_sample_id_writes_nothing(self, store):
        with pytest.raises(ValidationError):
            await create_sample({"project_name": "Atlas"}, CREATED_BY, "Dr. Who", store)

        assert await store.list_records("samples") == []

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            SampleCreationInput(sample_id="S-1", project_name="Atlas", status="lost")
