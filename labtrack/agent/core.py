"""
Agent Core
==========

The orchestrator that turns one user message into one assistant reply.

Agent Loop:
    User Message + caller-held history + acting user
         │
         ▼
    Build ToolContext and a fresh ToolRegistry
         │
         ▼
    Assemble system prompt, history and tools
         │
         ▼
    Generation round (bounded by request_timeout)
         │
    ┌─── Tool calls? ───┐
    │                   │
    Yes                 No
    │                   │
    ▼                   ▼
    Execute tools       Return reply
    │
    ▼
    Append results, next round (at most max_tool_iterations)

The agent keeps no per-user state. History is owned by the caller and passed
in on every call, so a single Agent can serve any number of users at once.

Every call returns displayable text. Tool failures go back to the model as
tool results; failures of the generation round itself become a fixed
fallback reply.
"""

import asyncio
from typing import TYPE_CHECKING, Sequence

from openai import AsyncOpenAI

from labtrack.agent.context import ContextAssembler
from labtrack.agent.models import ActingUser, ConversationMessage
from labtrack.agent.tools_executor import ToolExecutor
from labtrack.store import RecordStore, get_store
from labtrack.tools import ToolContext, UnknownToolError, build_registry
from labtrack.utils.config import (
    DEFAULT_MAX_TOOL_ITERATIONS,
    DEFAULT_MODEL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    get_config,
)
from labtrack.utils.logger import Logger

if TYPE_CHECKING:
    from labtrack.utils.config import Config

logger = Logger("Agent")

SIGN_IN_REPLY = "Please sign in to use the AI assistant."
APOLOGY_REPLY = (
    "Sorry, I ran into a problem while working on that. Please try again in a moment."
)
PROTOCOL_FAULT_REPLY = (
    "Sorry, something went wrong on my side and I couldn't complete that request. "
    "Nothing further was changed. Please try again."
)
ITERATION_LIMIT_REPLY = (
    "Sorry, I couldn't finish that request in a reasonable number of steps. "
    "Could you break it into smaller requests?"
)
EMPTY_REPLY = "I'm not sure how to help with that. Could you rephrase your request?"


class Agent:
    """
    The conversation orchestrator.

    Example:
        agent = Agent(openai=AsyncOpenAI(), store=JsonFileStore(Path("data")))

        reply = await agent.respond(
            message="Create a project called 'Atlas' led by Dr. Who, omics type Genomics",
            history=[],
            user=ActingUser(uid="u1", display_name="Dr. Who")
        )
    """

    def __init__(
        self,
        openai: AsyncOpenAI,
        store: RecordStore,
        model: str = DEFAULT_MODEL,
        idea_model: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        max_tool_iterations: int = DEFAULT_MAX_TOOL_ITERATIONS
    ):
        """
        Initialize the agent.

        Args:
            openai: Client used for every generation request
            store: Record store the write tools use
            model: Model driving the conversation
            idea_model: Model for the idea tools (defaults to `model`)
            request_timeout: Seconds allowed per generation round
            max_tool_iterations: Rounds allowed to request tools
        """
        self.openai = openai
        self.store = store
        self.model = model
        self.idea_model = idea_model or model
        self.request_timeout = request_timeout
        self.max_tool_iterations = max_tool_iterations

        self.context_assembler = ContextAssembler()
        self.tool_executor = ToolExecutor()

        logger.info(f"Agent initialized with model: {self.model}")

    @classmethod
    def from_config(cls, config: "Config | None" = None) -> "Agent":
        """Create an agent from the application configuration."""
        config = config or get_config()
        return cls(
            openai=AsyncOpenAI(api_key=config.openai.api_key),
            store=get_store(),
            model=config.openai.model,
            idea_model=config.openai.idea_model,
            request_timeout=config.openai.request_timeout,
            max_tool_iterations=config.agent.max_tool_iterations,
        )

    async def _generate(self, messages: list[dict], tools: list[dict]):
        """One generation round."""
        request = {"model": self.model, "messages": messages}
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        return await asyncio.wait_for(
            self.openai.chat.completions.create(**request),
            timeout=self.request_timeout
        )

    async def respond(
        self,
        message: str,
        history: Sequence[ConversationMessage],
        user: ActingUser
    ) -> str:
        """
        Produce the assistant's reply to `message`.

        Args:
            message: The user's new message
            history: Earlier turns, oldest first (not modified)
            user: The acting user

        Returns:
            The reply text; never raises for generation or tool failures
        """
        logger.info(f"Processing message from {user.uid}: {message[:50]}...")

        tool_context = ToolContext(
            user=user,
            store=self.store,
            openai=self.openai,
            model=self.idea_model,
            request_timeout=self.request_timeout
        )
        registry = build_registry(tool_context)

        try:
            context = self.context_assembler.assemble(user, message, history, registry)
            messages = context.to_openai_messages()

            response = await self._generate(messages, context.tools)

            iterations = 0
            tool_calls = self.tool_executor.parse_tool_calls(response)
            while tool_calls:
                if iterations >= self.max_tool_iterations:
                    logger.warning(
                        f"Reached max tool iterations ({self.max_tool_iterations}) for {user.uid}"
                    )
                    return ITERATION_LIMIT_REPLY

                iterations += 1
                logger.debug(f"Tool iteration {iterations}")

                results = await self.tool_executor.execute_all(registry, tool_calls)

                messages.append(self.tool_executor.assistant_message(response, tool_calls))
                messages.extend(result.to_openai_message() for result in results)

                response = await self._generate(messages, context.tools)
                tool_calls = self.tool_executor.parse_tool_calls(response)

            final_message = response.choices[0].message.content or ""

        except UnknownToolError as e:
            logger.error("Model requested a tool outside the registry", e)
            return PROTOCOL_FAULT_REPLY
        except Exception as e:
            logger.error("Error processing message", e)
            return APOLOGY_REPLY

        if not final_message.strip():
            logger.warning(f"Model returned an empty reply for {user.uid}")
            return EMPTY_REPLY

        logger.info(f"Generated response ({len(final_message)} chars)")
        return final_message


# ==============================================================================
# Entry point
# ==============================================================================

_agent_instance: Agent | None = None


def get_agent() -> Agent:
    """Get the process-wide agent, creating it from configuration on first use."""
    global _agent_instance
    if _agent_instance is None:
        _agent_instance = Agent.from_config()
    return _agent_instance


def set_agent(agent: Agent | None) -> None:
    """Set (or with None, reset) the process-wide agent."""
    global _agent_instance
    _agent_instance = agent


async def run_agent(
    query: str,
    history: Sequence[ConversationMessage],
    user: ActingUser | None,
    agent: Agent | None = None
) -> str:
    """
    The single entry point for talking to LabBot.

    Refuses anonymous requests without contacting the model or the store.

    Args:
        query: The user's new message
        history: Earlier turns of this user's conversation, oldest first
        user: The authenticated user, or None if nobody is signed in
        agent: The agent to use (defaults to get_agent())

    Returns:
        The assistant's reply. This function does not raise.
    """
    if user is None:
        logger.info("Rejected request without a signed-in user")
        return SIGN_IN_REPLY

    try:
        agent = agent or get_agent()
    except Exception as e:
        logger.error("Could not create the agent", e)
        return APOLOGY_REPLY

    return await agent.respond(query, history, user)
