"""
Slack Identity
==============

Turns a Slack user ID into the ActingUser the agent runs as.

Slack has already authenticated whoever sent the event; this module only
looks up their profile. Anyone who cannot be resolved to an active human
account gets None, which run_agent() answers with a sign-in message.
"""

from typing import TYPE_CHECKING

from slack_sdk.errors import SlackApiError

from labtrack.agent.models import ActingUser
from labtrack.utils.logger import Logger

if TYPE_CHECKING:
    from slack_sdk.web.async_client import AsyncWebClient

logger = Logger("SlackIdentity")


async def resolve_acting_user(client: "AsyncWebClient", slack_user_id: str | None) -> ActingUser | None:
    """
    Look up a Slack user and build their ActingUser.

    Args:
        client: Slack Web API client
        slack_user_id: The `user` field of the event

    Returns:
        The ActingUser, or None for unknown, deleted or bot users
    """
    if not slack_user_id:
        return None

    try:
        response = await client.users_info(user=slack_user_id)
    except SlackApiError as e:
        logger.warning(f"Could not look up Slack user {slack_user_id}: {e.response.get('error')}")
        return None

    user = response.get("user") or {}
    if user.get("deleted") or user.get("is_bot"):
        logger.info(f"Ignoring non-human or deleted Slack user {slack_user_id}")
        return None

    profile = user.get("profile") or {}
    display_name = (
        profile.get("display_name")
        or profile.get("real_name")
        or user.get("real_name")
        or None
    )

    return ActingUser(
        uid=user.get("id") or slack_user_id,
        display_name=display_name,
        email=profile.get("email") or None
    )
