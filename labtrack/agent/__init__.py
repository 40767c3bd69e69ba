"""
Agent System
============

LabBot's conversation layer. It:
1. Refuses requests without a signed-in user
2. Builds a tool registry bound to the acting user
3. Assembles the system prompt, caller-held history and tools
4. Runs generation rounds and tool calls until there is a reply

This module provides:
- run_agent: The entry point; always returns reply text
- Agent: The orchestrator
- ActingUser, ConversationMessage: Inputs from the caller
- ContextAssembler, ToolExecutor: Pieces of the loop
- suggest_tags: Tag suggestions for sample descriptions
"""

from labtrack.agent.models import ActingUser, ConversationMessage
from labtrack.agent.context import ContextAssembler
from labtrack.agent.tools_executor import ToolExecutor
from labtrack.agent.core import Agent, get_agent, run_agent, set_agent
from labtrack.agent.tags import TagSuggestionError, suggest_tags

__all__ = [
    "ActingUser",
    "ConversationMessage",
    "ContextAssembler",
    "ToolExecutor",
    "Agent",
    "get_agent",
    "set_agent",
    "run_agent",
    "TagSuggestionError",
    "suggest_tags",
]
