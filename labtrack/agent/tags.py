"""
Tag Suggestions
===============

Suggests 5-7 tags for a sample from its description: gene names, techniques,
cell types or study areas. The model is asked for a JSON object and its
reply is validated before anything is returned.
"""

import asyncio
import json
from typing import TYPE_CHECKING

from openai import OpenAIError
from pydantic import BaseModel, ValidationError

from labtrack.utils.logger import Logger

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = Logger("Tags")

MAX_TAGS = 7

TAG_PROMPT = """You are an expert in bioinformatics and lab research. Based on the following sample description, suggest between 5 and 7 relevant tags. The tags could be gene names, scientific techniques, cell types, or study areas.

Sample Description:
"{description}"

Respond with a JSON object of the form {{"tags": ["tag1", "tag2", ...]}}."""


class TagSuggestionError(Exception):
    """The model could not produce a usable list of tags."""


class TagSuggestions(BaseModel):
    tags: list[str]


def _clean(tags: list[str]) -> list[str]:
    """Strip, drop empties, dedupe case-insensitively, keep order, cap at MAX_TAGS."""
    seen = set()
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        cleaned.append(tag)
    return cleaned[:MAX_TAGS]


async def suggest_tags(
    description: str,
    openai: "AsyncOpenAI",
    model: str,
    timeout: float = 60.0
) -> list[str]:
    """
    Suggest tags for a sample description.

    Args:
        description: Free-text description of the sample
        openai: Client for the completion request
        model: Model to use
        timeout: Seconds to wait for the reply

    Returns:
        Up to seven distinct tags

    Raises:
        ValueError: If the description is empty
        TagSuggestionError: If the request fails or the reply is unusable
    """
    description = description.strip()
    if not description:
        raise ValueError("A sample description is required to suggest tags")

    try:
        response = await asyncio.wait_for(
            openai.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": TAG_PROMPT.format(description=description)}],
                response_format={"type": "json_object"}
            ),
            timeout=timeout
        )
    except asyncio.TimeoutError as e:
        raise TagSuggestionError(f"No response within {timeout:g} seconds") from e
    except OpenAIError as e:
        raise TagSuggestionError(str(e)) from e

    content = response.choices[0].message.content or ""
    try:
        suggestions = TagSuggestions.model_validate(json.loads(content))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Unusable tag suggestions: {content[:100]!r}")
        raise TagSuggestionError("The model did not return a list of tags") from e

    tags = _clean(suggestions.tags)
    if not tags:
        raise TagSuggestionError("The model returned no tags")

    logger.info(f"Suggested {len(tags)} tags")
    return tags
