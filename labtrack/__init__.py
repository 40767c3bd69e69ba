"""
LabTrack Agent - Conversational Lab Assistant
=============================================

LabBot helps researchers manage lab work through natural language:
- Create research projects and lab samples on the user's behalf
- Brainstorm project and workflow ideas
- Suggest tags for sample descriptions

This package provides:
- Agent orchestration over OpenAI tool calling
- A per-request tool registry bound to the acting user
- Project and sample services over a pluggable record store
- A Slack front end that holds each user's conversation history
"""

__version__ = "1.0.0"
