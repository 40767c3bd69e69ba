"""
Lab Record Tools
================

Tools that create records on behalf of the acting user.

Both tools take the authorship stamp from the ToolContext they are executed
with, never from their arguments: the model cannot choose who a record is
attributed to.
"""

from labtrack.services import (
    ProjectCreationInput,
    SampleCreationInput,
    create_project,
    create_sample,
)
from labtrack.store import StoreError
from labtrack.tools import PERSISTENCE_ERROR, ToolContext, ToolDefinition, ToolResult
from labtrack.utils.logger import Logger

logger = Logger("LabTools")


# ==============================================================================
# Tool: Create Project
# ==============================================================================

async def _create_project(params: ProjectCreationInput, context: ToolContext) -> ToolResult:
    try:
        project_id = await create_project(params, context.user.created_by(), context.store)
    except StoreError as e:
        logger.error(f"Could not save project {params.name!r}", e)
        return ToolResult.failure(
            f"The project could not be saved: {e}", PERSISTENCE_ERROR
        )

    logger.info(f"Created project {project_id} for {context.user.uid}")
    return ToolResult(
        success=True,
        data=f'Successfully created new project "{params.name}" with ID: {project_id}.'
    )


create_project_tool = ToolDefinition(
    name="createProject",
    description=(
        "Creates a new research project. "
        "Ask for any missing required fields before calling."
    ),
    input_model=ProjectCreationInput,
    execute=_create_project
)


# ==============================================================================
# Tool: Create Sample
# ==============================================================================

async def _create_sample(params: SampleCreationInput, context: ToolContext) -> ToolResult:
    user = context.user

    try:
        sample_record_id = await create_sample(
            params,
            user.created_by(),
            user.collector_name(),
            context.store
        )
    except StoreError as e:
        logger.error(f"Could not save sample {params.sample_id!r}", e)
        return ToolResult.failure(
            f"The sample could not be saved: {e}", PERSISTENCE_ERROR
        )

    logger.info(f"Created sample {sample_record_id} for {user.uid}")
    return ToolResult(
        success=True,
        data=(
            f'Successfully created new sample "{params.sample_id}" in project '
            f'"{params.project_name}" with ID: {sample_record_id}.'
        )
    )


create_sample_tool = ToolDefinition(
    name="createSample",
    description=(
        "Creates a new lab sample. "
        "Ask for any missing required fields before calling."
    ),
    input_model=SampleCreationInput,
    execute=_create_sample
)
