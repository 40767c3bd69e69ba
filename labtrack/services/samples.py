"""
Sample Service
==============

Creates lab samples in the record store.

New samples start with no tags and no attachments; `date_collected` is the
creation time. There is no deduplication on `sample_id`: creating the same
sample twice produces two records.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from labtrack.store import RecordStore

SAMPLES_COLLECTION = "samples"

SampleStatus = Literal["pending", "in-progress", "completed", "failed"]


class SampleCreationInput(BaseModel):
    """Fields required to create a sample."""

    model_config = ConfigDict(str_strip_whitespace=True)

    sample_id: str = Field(min_length=1, description="The unique identifier for the sample.")
    project_name: str = Field(
        min_length=1, description="The name of the project this sample belongs to."
    )
    description: str | None = Field(default=None, description="A description of the sample.")
    status: SampleStatus = Field(default="pending", description="The status of the sample.")


async def create_sample(
    data: SampleCreationInput | dict,
    created_by: dict,
    collected_by: str,
    store: RecordStore
) -> str:
    """
    Validate and persist a new sample.

    Args:
        data: Sample fields, as a model or a raw dict
        created_by: Authorship stamp, {"uid": ..., "name": ...}
        collected_by: Name recorded as the sample's collector
        store: Where to write the record

    Returns:
        The new sample's id

    Raises:
        pydantic.ValidationError: If `data` does not describe a valid sample
        StoreError: If the write fails
    """
    sample = SampleCreationInput.model_validate(data)

    fields = sample.model_dump(exclude_none=True)
    fields.update(
        tags=[],
        attachments=[],
        date_collected=datetime.now(timezone.utc).isoformat(),
        createdBy=dict(created_by),
        collected_by=collected_by,
    )

    return await store.create(SAMPLES_COLLECTION, fields)
