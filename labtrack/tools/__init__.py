"""
Agent Tools
===========

Tools are the actions LabBot can take. Each tool has a name, a description
the model uses to decide when to call it, an input model, and an executor.

Tool Set:
1. createProject        - create a research project (writes)
2. createSample         - create a lab sample (writes)
3. suggestProjectIdeas  - brainstorm project ideas (no writes)
4. suggestWorkflowIdeas - brainstorm workflow ideas (no writes)

Per-request registries:
    The write tools must stamp records with the identity of whoever is
    talking to the agent. Tool definitions themselves are module-level
    constants; the identity lives in a ToolContext that is bound to a new
    ToolRegistry on every request and passed to each executor:

        context = ToolContext(user=user, store=store, openai=client, model=model)
        registry = build_registry(context)
        result = await registry.execute("createProject", {...})

    A registry is never shared between requests, so a write can only ever
    be attributed to the user of the request that built it.

This module provides:
- ToolDefinition for defining tools
- ToolResult for standardized results
- ToolContext for per-request dependencies
- ToolRegistry and build_registry()
- UnknownToolError for names the registry does not contain
"""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from labtrack.utils.logger import Logger

if TYPE_CHECKING:
    from openai import AsyncOpenAI

    from labtrack.agent.models import ActingUser
    from labtrack.store import RecordStore

logger = Logger("Tools")

# ToolResult.error_type values
VALIDATION_ERROR = "validation"
PERSISTENCE_ERROR = "persistence"
GENERATION_ERROR = "generation"
EXECUTION_ERROR = "execution"


class UnknownToolError(Exception):
    """The model asked for a tool that is not in the registry."""

    def __init__(self, names: list[str], available: list[str]):
        self.names = names
        self.available = available
        super().__init__(
            f"Unknown tool(s) requested: {', '.join(names)} "
            f"(available: {', '.join(available) or 'none'})"
        )


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed successfully
        data: The result data, usually the text shown to the model
        error: Error message if success is False
        error_type: One of validation, persistence, generation, execution
    """
    success: bool
    data: Any = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def failure(cls, error: str, error_type: str = EXECUTION_ERROR) -> "ToolResult":
        return cls(success=False, error=error, error_type=error_type)

    def to_message(self) -> str:
        """Format as the content of a tool message for the model."""
        if self.success:
            if isinstance(self.data, str):
                return self.data
            return json.dumps(self.data, default=str)
        return f"Error ({self.error_type or EXECUTION_ERROR}): {self.error}"


@dataclass(frozen=True)
class ToolContext:
    """
    Everything an executor may depend on for one request.

    Attributes:
        user: The acting user; writes are stamped with this identity
        store: Record store for the write tools
        openai: Client for the generative tools
        model: Model used by the generative tools
        request_timeout: Seconds allowed for each generation request
    """
    user: "ActingUser"
    store: "RecordStore"
    openai: "AsyncOpenAI"
    model: str
    request_timeout: float = 60.0


@dataclass(frozen=True)
class ToolDefinition:
    """
    Definition of a tool.

    `input_model` is used twice: its JSON schema is advertised to the model,
    and it validates the arguments the model sends back.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model)
        input_model: Pydantic model describing the arguments
        execute: Async function taking the validated input and the context
    """
    name: str
    description: str
    input_model: type[BaseModel]
    execute: Callable[[Any, ToolContext], Awaitable[ToolResult]]

    @property
    def parameters(self) -> dict:
        """JSON schema of the tool's arguments."""
        return self.input_model.model_json_schema()

    def to_openai_function(self) -> dict:
        """Convert to the function-calling format of the chat completions API."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


def format_validation_error(error: ValidationError) -> str:
    """
    Summarize a pydantic ValidationError as one line per offending field.

    Example:
        "Invalid input: name: Field required; omics_type: Input should be ..."
    """
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "input"
        problems.append(f"{field}: {item.get('msg', 'invalid value')}")
    return "Invalid input: " + "; ".join(problems)


class ToolRegistry:
    """
    The closed set of tools available to one request.

    Example:
        registry = ToolRegistry(context)
        registry.register(create_project_tool)

        functions = registry.get_openai_functions()
        result = await registry.execute("createProject", {"name": "Atlas", ...})
    """

    def __init__(self, context: ToolContext):
        self.context = context
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def get_all(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def get_openai_functions(self) -> list[dict]:
        """Get all tools in the chat completions `tools` format."""
        return [tool.to_openai_function() for tool in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    async def execute(self, name: str, params: dict) -> ToolResult:
        """
        Validate arguments and execute a tool by name.

        Args:
            name: The tool name
            params: Arguments sent by the model

        Returns:
            ToolResult from the tool, or a failed result if validation or
            execution failed

        Raises:
            UnknownToolError: If no tool with this name is registered
        """
        tool = self.get(name)
        if tool is None:
            raise UnknownToolError([name], self.list_names())

        try:
            tool_input = tool.input_model.model_validate(params)
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {name}", {"errors": e.errors()})
            return ToolResult.failure(format_validation_error(e), VALIDATION_ERROR)

        try:
            logger.info(f"Executing tool: {name}")
            return await tool.execute(tool_input, self.context)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult.failure(str(e), EXECUTION_ERROR)


def build_registry(context: ToolContext) -> ToolRegistry:
    """
    Build a new registry holding every LabBot tool, bound to `context`.

    Called once per request. Never cache the result across requests.
    """
    # Imported here because the tool modules import this package
    from labtrack.tools.idea_tools import suggest_project_ideas_tool, suggest_workflow_ideas_tool
    from labtrack.tools.lab_tools import create_project_tool, create_sample_tool

    registry = ToolRegistry(context)
    registry.register(create_project_tool)
    registry.register(create_sample_tool)
    registry.register(suggest_project_ideas_tool)
    registry.register(suggest_workflow_ideas_tool)

    logger.debug(f"Built registry for {context.user.uid}: {registry.list_names()}")
    return registry


__all__ = [
    "ToolContext",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "UnknownToolError",
    "build_registry",
    "format_validation_error",
    "VALIDATION_ERROR",
    "PERSISTENCE_ERROR",
    "GENERATION_ERROR",
    "EXECUTION_ERROR",
]
