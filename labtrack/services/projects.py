"""
Project Service
===============

Creates research projects in the record store.

ProjectCreationInput is the single definition of what a project request
looks like: it validates input here and, through its JSON schema, tells the
model what arguments the createProject tool takes.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from labtrack.store import RecordStore

PROJECTS_COLLECTION = "projects"

OmicsType = Literal["Genomics", "Transcriptomics", "Proteomics", "Multi-omics"]


class ProjectCreationInput(BaseModel):
    """Fields required to create a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, description="The name of the new project.")
    description: str | None = Field(
        default=None, description="A brief description of the project."
    )
    omics_type: OmicsType = Field(description="The omics type of the project.")
    lead: str = Field(min_length=1, description="The name of the project lead.")


async def create_project(
    data: ProjectCreationInput | dict,
    created_by: dict,
    store: RecordStore
) -> str:
    """
    Validate and persist a new project.

    Args:
        data: Project fields, as a model or a raw dict
        created_by: Authorship stamp, {"uid": ..., "name": ...}
        store: Where to write the record

    Returns:
        The new project's id

    Raises:
        pydantic.ValidationError: If `data` does not describe a valid project
        StoreError: If the write fails
    """
    project = ProjectCreationInput.model_validate(data)

    fields = project.model_dump(exclude_none=True)
    fields["createdBy"] = dict(created_by)

    return await store.create(PROJECTS_COLLECTION, fields)
