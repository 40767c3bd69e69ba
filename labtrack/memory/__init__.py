"""
Memory
======

Conversation history held on behalf of the agent's callers.
"""

from labtrack.memory.conversation import ConversationMemory

__all__ = ["ConversationMemory"]
