"""
Conversation Memory
===================

Caller-side storage of each user's conversation with LabBot.

The agent itself is stateless: whoever calls run_agent() owns the history
and passes it in on every turn. For the Slack front end that owner is this
class. It:

- Keeps one ordered list of ConversationMessage per Slack user
- Lives only in RAM (cleared on restart)
- Trims the oldest messages once a user exceeds `max_messages`
- Drops the least recently active user beyond `max_users`

Only completed exchanges are recorded: the user's message and the reply are
appended together after the agent has answered, so a failed turn never leaves
a dangling user message in the history.
"""

from collections import OrderedDict

from labtrack.agent.models import ConversationMessage


class ConversationMemory:
    """
    In-memory conversation history per user.

    Example:
        memory = ConversationMemory(max_messages=40)

        history = memory.get_history("U123")
        reply = await run_agent(text, history, user)
        memory.add_exchange("U123", text, reply)

        memory.clear("U123")
    """

    def __init__(self, max_messages: int = 40, max_users: int = 1000):
        """
        Args:
            max_messages: Maximum messages to keep per user
            max_users: Maximum users to keep; the least recently active
                user's conversation is dropped first
        """
        if max_messages < 2:
            raise ValueError("max_messages must allow at least one exchange")
        if max_users < 1:
            raise ValueError("max_users must be at least 1")
        self.max_messages = max_messages
        self.max_users = max_users
        self._conversations: OrderedDict[str, list[ConversationMessage]] = OrderedDict()

    def get_history(self, user_id: str) -> list[ConversationMessage]:
        """
        A copy of the user's history, oldest first.

        The copy can be handed to the agent while new exchanges are recorded.
        """
        return list(self._conversations.get(user_id, []))

    def add_exchange(self, user_id: str, user_message: str, assistant_reply: str) -> None:
        """Record one user message and the reply it received."""
        conversation = self._conversations.setdefault(user_id, [])
        self._conversations.move_to_end(user_id)
        conversation.append(ConversationMessage(role="user", content=user_message))
        conversation.append(ConversationMessage(role="assistant", content=assistant_reply))

        # Trim if over limit (remove oldest messages)
        if len(conversation) > self.max_messages:
            self._conversations[user_id] = conversation[-self.max_messages:]

        while len(self._conversations) > self.max_users:
            self._conversations.popitem(last=False)

    def clear(self, user_id: str) -> None:
        """Forget a user's conversation."""
        self._conversations.pop(user_id, None)

    def message_count(self, user_id: str) -> int:
        return len(self._conversations.get(user_id, []))

    def user_count(self) -> int:
        """Number of users with a conversation in memory."""
        return len(self._conversations)
