"""
Idea Tools
==========

Brainstorming tools. Each makes one extra completion request with a fixed
persona and returns the generated text unmodified; LabBot then relays or
summarizes it. Nothing is written to the store.
"""

import asyncio
from typing import TYPE_CHECKING

from openai import OpenAIError
from pydantic import BaseModel, ConfigDict, Field

from labtrack.tools import GENERATION_ERROR, ToolContext, ToolDefinition, ToolResult
from labtrack.utils.logger import Logger

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = Logger("IdeaTools")

PROJECT_IDEA_SYSTEM_PROMPT = (
    "You are a creative and experienced bioinformatics researcher. "
    "Generate 3-5 innovative project ideas based on the provided topic. "
    "For each idea, provide a name, a short description, and a suitable omics type. "
    "Format the output as a bulleted list."
)

WORKFLOW_IDEA_SYSTEM_PROMPT = (
    "You are an expert in creating scientific data analysis pipelines. "
    "Generate 3-5 workflow ideas based on the provided topic. "
    "For each idea, provide a name, a short description, and a suitable pipeline type. "
    "Format the output as a bulleted list."
)


class GenerationError(Exception):
    """The text-generation request failed or produced no text."""


async def generate_text(
    openai: "AsyncOpenAI",
    model: str,
    system: str,
    prompt: str,
    timeout: float
) -> str:
    """
    Single prompt-in, text-out completion.

    Raises:
        GenerationError: On API errors, timeouts, malformed or empty replies
    """
    try:
        response = await asyncio.wait_for(
            openai.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ]
            ),
            timeout=timeout
        )
    except asyncio.TimeoutError as e:
        raise GenerationError(f"No response within {timeout:g} seconds") from e
    except OpenAIError as e:
        raise GenerationError(str(e)) from e

    try:
        text = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise GenerationError(f"Malformed completion: {e}") from e

    if not text:
        raise GenerationError("The model returned no text")
    return text


class TopicInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    topic: str = Field(min_length=1)


class ProjectIdeasInput(TopicInput):
    topic: str = Field(
        min_length=1,
        description=(
            'The topic or field to generate project ideas for, '
            'e.g., "cancer genomics" or "CRISPR technology".'
        )
    )


class WorkflowIdeasInput(TopicInput):
    topic: str = Field(
        min_length=1,
        description=(
            'The project type or research area, '
            'e.g., "RNA-seq analysis" or "CRISPR library screening".'
        )
    )


async def _suggest(system: str, prompt: str, context: ToolContext) -> ToolResult:
    try:
        text = await generate_text(
            context.openai, context.model, system, prompt, context.request_timeout
        )
    except GenerationError as e:
        logger.warning(f"Idea generation failed: {e}")
        return ToolResult.failure(f"Could not generate ideas: {e}", GENERATION_ERROR)

    return ToolResult(success=True, data=text)


async def _suggest_project_ideas(params: ProjectIdeasInput, context: ToolContext) -> ToolResult:
    return await _suggest(
        PROJECT_IDEA_SYSTEM_PROMPT,
        f"Topic: {params.topic}",
        context
    )


async def _suggest_workflow_ideas(params: WorkflowIdeasInput, context: ToolContext) -> ToolResult:
    return await _suggest(
        WORKFLOW_IDEA_SYSTEM_PROMPT,
        f"Topic: {params.topic}",
        context
    )


suggest_project_ideas_tool = ToolDefinition(
    name="suggestProjectIdeas",
    description="Generates creative and relevant project ideas based on a given topic or field of study.",
    input_model=ProjectIdeasInput,
    execute=_suggest_project_ideas
)

suggest_workflow_ideas_tool = ToolDefinition(
    name="suggestWorkflowIdeas",
    description="Generates workflow ideas for a given project type or research area.",
    input_model=WorkflowIdeasInput,
    execute=_suggest_workflow_ideas
)
