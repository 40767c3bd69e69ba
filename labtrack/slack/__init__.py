"""
Slack Integration
=================

LabBot's front end:
- Bolt app initialization
- Event handlers (DMs, mentions, /labbot)
- Resolving Slack users to acting users
"""

from labtrack.slack.app import create_slack_app
from labtrack.slack.handlers import register_handlers
from labtrack.slack.identity import resolve_acting_user

__all__ = ["create_slack_app", "register_handlers", "resolve_acting_user"]
