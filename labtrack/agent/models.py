"""
Conversation Models
===================

The two value types every agent invocation receives from its caller:

- ActingUser: who the turn runs on behalf of. Supplied fresh on every call,
  never looked up from shared state.
- ConversationMessage: one turn of caller-held history.
"""

from dataclasses import dataclass

USER_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class ActingUser:
    """
    The authenticated identity driving one conversation turn.

    Attributes:
        uid: Stable, opaque user identifier
        display_name: Optional human-readable name
        email: Optional email address
    """
    uid: str
    display_name: str | None = None
    email: str | None = None

    def __post_init__(self):
        if not self.uid:
            raise ValueError("ActingUser requires a non-empty uid")

    def created_by(self) -> dict:
        """The authorship stamp stored on every record this user creates."""
        return {"uid": self.uid, "name": self.display_name}

    def collector_name(self) -> str:
        """Who collected a sample when the request does not say otherwise."""
        return self.display_name or self.email or "AI Agent"


@dataclass(frozen=True)
class ConversationMessage:
    """
    A single turn in the conversation.

    Attributes:
        role: "user" or "assistant"
        content: The message text
    """
    role: str
    content: str

    def __post_init__(self):
        if self.role not in USER_ROLES:
            raise ValueError(
                f"Invalid message role {self.role!r}; expected one of {USER_ROLES}"
            )

    def to_dict(self) -> dict:
        """Convert to the message format of the chat completions API."""
        return {"role": self.role, "content": self.content}
