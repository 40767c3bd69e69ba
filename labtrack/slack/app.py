"""
Slack Bolt App
==============

Creates the Slack Bolt application LabBot runs in.

LabBot connects over Socket Mode, so it needs no public URL: the bot token
authorizes Web API calls and the app-level token opens the WebSocket.
"""

from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

from labtrack.utils.config import ConfigError, get_config, is_slack_configured
from labtrack.utils.logger import Logger

logger = Logger("SlackApp")


def create_slack_app() -> AsyncApp:
    """
    Create the Bolt app.

    Raises:
        ConfigError: If the Slack tokens are not configured
    """
    if not is_slack_configured():
        raise ConfigError(
            "Slack is not configured. Set SLACK_BOT_TOKEN, SLACK_APP_TOKEN "
            "and SLACK_SIGNING_SECRET in your .env file."
        )

    config = get_config()
    app = AsyncApp(
        token=config.slack.bot_token,
        signing_secret=config.slack.signing_secret,
    )

    logger.info("Slack Bolt app created")
    return app


async def create_socket_handler(app: AsyncApp) -> AsyncSocketModeHandler:
    """Create the Socket Mode handler that delivers events to `app`."""
    handler = AsyncSocketModeHandler(
        app=app,
        app_token=get_config().slack.app_token
    )

    logger.info("Socket Mode handler created")
    return handler
