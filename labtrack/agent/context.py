"""
Context Assembly
================

Builds the request for one generation round:

- System message: LabBot persona, behavioural rules, the current user
- Conversation history supplied by the caller
- The new user message
- Tool definitions from the request's registry

The caller owns the history. The assembler copies it into a new message list
and never modifies the sequence it was given.
"""

from dataclasses import dataclass, field
from typing import Sequence

from labtrack.agent.models import ActingUser, ConversationMessage
from labtrack.tools import ToolRegistry
from labtrack.utils.logger import Logger

logger = Logger("Context")


@dataclass
class AssembledContext:
    """
    The fully assembled context for the model.

    Attributes:
        system_message: The system prompt
        messages: History plus the new user message, in API format
        tools: Tool definitions in function-calling format
    """
    system_message: str
    messages: list[dict]
    tools: list[dict] = field(default_factory=list)

    def to_openai_messages(self) -> list[dict]:
        """Messages for the chat completions API, system message first."""
        result = [{"role": "system", "content": self.system_message}]
        result.extend(self.messages)
        return result


class ContextAssembler:
    """
    Assembles the request context for a conversation turn.

    Example:
        assembler = ContextAssembler()
        context = assembler.assemble(user, "Create a sample", history, registry)

        response = await openai.chat.completions.create(
            messages=context.to_openai_messages(),
            tools=context.tools
        )
    """

    SYSTEM_PROMPT = """You are LabBot, a friendly and highly intelligent AI assistant for the LabTrack AI application.
- Your goal is to help researchers manage their work efficiently.
- Be conversational and proactive.
- When asked to create something (like a project or sample), you MUST use the provided tools.
- Before using a tool, ensure you have all the required information from the user. If not, ask clarifying questions to get the necessary details (e.g., "What should I name the project?", "What omics type is it?").
- When asked for ideas for projects or workflows, use the 'suggestProjectIdeas' or 'suggestWorkflowIdeas' tools respectively.
- After a tool is successfully used, confirm the action with the user using the tool's output.
- If a tool reports an error, explain what went wrong and ask for whatever is missing or incorrect.
- If you can't fulfill a request, explain why in a helpful way.
- The current user is {user_name} ({user_email}). Assume they are the project lead unless they specify otherwise."""

    def assemble(
        self,
        user: ActingUser,
        user_message: str,
        history: Sequence[ConversationMessage],
        registry: ToolRegistry
    ) -> AssembledContext:
        """
        Assemble the context for one turn.

        Args:
            user: The acting user
            user_message: The new message
            history: Earlier turns, oldest first
            registry: The request's tool registry

        Returns:
            AssembledContext ready for the first generation round
        """
        messages = [message.to_dict() for message in history]
        messages.append({"role": "user", "content": user_message})

        logger.debug(f"Assembled {len(messages)} messages for {user.uid}")

        return AssembledContext(
            system_message=self.build_system_message(user),
            messages=messages,
            tools=registry.get_openai_functions()
        )

    def build_system_message(self, user: ActingUser) -> str:
        """The system prompt personalized for `user`."""
        return self.SYSTEM_PROMPT.format(
            user_name=user.display_name or "an unnamed researcher",
            user_email=user.email or "no email on file"
        )
