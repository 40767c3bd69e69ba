"""
Slack Event Handlers
====================

Routes Slack events to LabBot.

Event Types:
- app_mention: Someone mentions @LabBot in a channel (reply in thread)
- message.im: Direct messages to the bot
- /labbot: Slash command for help, status, clearing history and tags

Handler Pattern:
    1. Resolve the Slack user to an ActingUser
    2. Fetch that user's history from ConversationMemory
    3. run_agent(text, history, user)
    4. Record the exchange and reply

History is kept per Slack user, shared between DMs and mentions.
"""

import re
from typing import TYPE_CHECKING

from slack_bolt.async_app import AsyncAck, AsyncApp, AsyncSay
from slack_sdk.web.async_client import AsyncWebClient

from labtrack.agent import TagSuggestionError, run_agent, suggest_tags
from labtrack.memory import ConversationMemory
from labtrack.slack.identity import resolve_acting_user
from labtrack.utils.logger import Logger

if TYPE_CHECKING:
    from labtrack.agent import Agent

logger = Logger("Handlers")

ERROR_REPLY = "Sorry, I encountered an error processing your request."
STARTING_REPLY = "Sorry, I'm still starting up. Please try again in a moment."

HELP_TEXT = """*LabBot* - Your Lab Assistant

*Commands:*
- `/labbot help` - Show this help message
- `/labbot status` - Check bot status
- `/labbot clear` - Clear your conversation history
- `/labbot tags <sample description>` - Suggest tags for a sample

*Features:*
- Mention me (@LabBot) in any channel, or DM me
- Ask me to create projects and samples, or brainstorm ideas

*Examples:*
- "Suggest some project ideas for transcriptomics"
- "Create a project called 'Alzheimer's Research' led by Dr. Who, omics type Genomics"
- "Add sample S-042 to the Alzheimer's Research project"
"""

# Set during registration
_agent: "Agent | None" = None
_memory: ConversationMemory | None = None


def register_handlers(app: AsyncApp, agent: "Agent", memory: ConversationMemory) -> None:
    """
    Register all event handlers with the Slack app.

    Args:
        app: The Bolt app instance
        agent: The agent that answers messages
        memory: Where each user's conversation history is kept
    """
    global _agent, _memory
    _agent = agent
    _memory = memory

    app.event("app_mention")(_handle_mention)
    app.event("message")(_handle_message)
    app.command("/labbot")(_handle_command)

    logger.info("Registered Slack event handlers")


async def converse(client: AsyncWebClient, slack_user_id: str | None, text: str) -> str:
    """
    Run one conversation turn for a Slack user and record it.

    Exchanges of users who could not be identified are not recorded.
    """
    user = await resolve_acting_user(client, slack_user_id)
    history = _memory.get_history(slack_user_id) if slack_user_id else []

    reply = await run_agent(text, history, user, agent=_agent)

    if user is not None:
        _memory.add_exchange(slack_user_id, text, reply)
    return reply


async def _handle_mention(
    event: dict,
    say: AsyncSay,
    client: AsyncWebClient
) -> None:
    """Handle @mentions of the bot in channels, replying in the thread."""
    if _agent is None or _memory is None:
        logger.error("Agent not initialized")
        await say(STARTING_REPLY)
        return

    user_id = event.get("user")
    channel_id = event.get("channel")
    text = event.get("text", "")
    thread_ts = event.get("thread_ts") or event.get("ts")

    # Mentions look like <@U123ABC>
    text = re.sub(r"<@[A-Z0-9]+>", "", text).strip()

    if not text:
        await say(
            text="Hi! Ask me to create a project or sample, or to brainstorm ideas.",
            thread_ts=thread_ts
        )
        return

    logger.info(f"Mention from {user_id} in {channel_id}: {text[:50]}...")

    try:
        reply = await converse(client, user_id, text)
        await say(text=reply, thread_ts=thread_ts)
    except Exception as e:
        logger.error("Error handling mention", e)
        await say(text=ERROR_REPLY, thread_ts=thread_ts)


async def _handle_message(
    event: dict,
    say: AsyncSay,
    client: AsyncWebClient
) -> None:
    """Handle direct messages to the bot."""
    if event.get("channel_type") != "im":
        return

    # Ignore bot messages (including our own) and edits, deletes, etc.
    if event.get("bot_id") or event.get("subtype"):
        return

    if _agent is None or _memory is None:
        logger.error("Agent not initialized")
        await say(STARTING_REPLY)
        return

    user_id = event.get("user")
    text = (event.get("text") or "").strip()
    if not text:
        return

    logger.info(f"DM from {user_id}: {text[:50]}...")

    try:
        reply = await converse(client, user_id, text)
        await say(text=reply)
    except Exception as e:
        logger.error("Error handling DM", e)
        await say(text=ERROR_REPLY)


async def _handle_command(
    ack: AsyncAck,
    command: dict,
    say: AsyncSay
) -> None:
    """
    Handle the /labbot slash command.

    - /labbot help
    - /labbot status
    - /labbot clear
    - /labbot tags <sample description>
    """
    await ack()

    if _agent is None or _memory is None:
        await say(STARTING_REPLY)
        return

    user_id = command.get("user_id")
    text = command.get("text", "").strip()
    subcommand, _, argument = text.partition(" ")
    subcommand = subcommand.lower()

    if subcommand in ("", "help"):
        await say(text=HELP_TEXT)

    elif subcommand == "status":
        await say(text=(
            "*Bot Status*\n"
            "- Status: Online\n"
            f"- Model: {_agent.model}\n"
            f"- Active conversations: {_memory.user_count()}"
        ))

    elif subcommand == "clear":
        _memory.clear(user_id)
        await say(text="Conversation history cleared! Starting fresh.")

    elif subcommand == "tags":
        await _reply_with_tags(argument, say)

    else:
        await say(text=f"Unknown command: `{text}`. Try `/labbot help`")


async def _reply_with_tags(description: str, say: AsyncSay) -> None:
    if not description.strip():
        await say(text="Usage: `/labbot tags <sample description>`")
        return

    try:
        tags = await suggest_tags(
            description,
            _agent.openai,
            _agent.idea_model,
            _agent.request_timeout
        )
    except TagSuggestionError as e:
        logger.warning(f"Tag suggestion failed: {e}")
        await say(text="Sorry, I couldn't come up with tags for that description.")
        return

    await say(text="Suggested tags: " + ", ".join(f"`{tag}`" for tag in tags))
