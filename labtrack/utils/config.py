"""
Configuration Management
========================

All environment variables LabTrack reads are declared, validated and typed
here. Values come from the process environment, with a `.env` file loaded
through python-dotenv first.

Required:
    OPENAI_API_KEY

Optional (defaults in parentheses):
    OPENAI_MODEL                    (gpt-4o-mini)
    OPENAI_IDEA_MODEL               (same as OPENAI_MODEL)
    OPENAI_REQUEST_TIMEOUT_SECONDS  (60)
    AGENT_MAX_TOOL_ITERATIONS       (10)
    AGENT_HISTORY_LIMIT             (40)
    LABTRACK_DATA_DIR               (data)
    SLACK_BOT_TOKEN / SLACK_APP_TOKEN / SLACK_SIGNING_SECRET
    LOG_LEVEL                       (info)

Usage:
    from labtrack.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.store.data_dir)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_TOOL_ITERATIONS = 10
DEFAULT_HISTORY_LIMIT = 40


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable configuration."""


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ConfigError: If the variable is not set or empty
    """
    value = os.getenv(name)
    if not value:
        raise ConfigError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name) or default


def _optional_int(name: str, default: int, minimum: int = 1) -> int:
    """
    Get an optional integer environment variable.

    Raises:
        ConfigError: If the value is not an integer or is below `minimum`
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if parsed < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {parsed}")
    return parsed


def _optional_float(name: str, default: float) -> float:
    """
    Get an optional positive float environment variable.

    Raises:
        ConfigError: If the value is not a positive number
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive, got {parsed}")
    return parsed


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI API configuration."""
    api_key: str              # sk-... API key
    model: str                # Model driving the conversation and tool calls
    idea_model: str           # Model for idea and tag generation
    request_timeout: float    # Seconds allowed per generation round


@dataclass(frozen=True)
class AgentConfig:
    """Conversation orchestration limits."""
    max_tool_iterations: int  # Generation rounds allowed to request tools
    history_limit: int        # Messages kept per user by the Slack surface


@dataclass(frozen=True)
class StoreConfig:
    """Record store configuration."""
    data_dir: Path            # Directory holding <collection>.json files


@dataclass(frozen=True)
class SlackConfig:
    """Slack API configuration (only needed to run the bot)."""
    bot_token: str | None       # xoxb-... token for bot operations
    app_token: str | None       # xapp-... token for Socket Mode
    signing_secret: str | None  # For verifying Slack requests


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

        config = get_config()
        config.openai.model
        config.agent.max_tool_iterations
        config.store.data_dir
    """
    openai: OpenAIConfig
    agent: AgentConfig
    store: StoreConfig
    slack: SlackConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Returns:
        The validated configuration

    Raises:
        ConfigError: If required configuration is missing or malformed
    """
    load_dotenv()

    model = _optional("OPENAI_MODEL", DEFAULT_MODEL)
    data_dir = Path(_optional("LABTRACK_DATA_DIR", "data")).expanduser()

    return Config(
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=model,
            idea_model=_optional("OPENAI_IDEA_MODEL", model),
            request_timeout=_optional_float(
                "OPENAI_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
        ),
        agent=AgentConfig(
            max_tool_iterations=_optional_int(
                "AGENT_MAX_TOOL_ITERATIONS", DEFAULT_MAX_TOOL_ITERATIONS
            ),
            history_limit=_optional_int("AGENT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT, minimum=2),
        ),
        store=StoreConfig(data_dir=data_dir),
        slack=SlackConfig(
            bot_token=os.getenv("SLACK_BOT_TOKEN"),
            app_token=os.getenv("SLACK_APP_TOKEN"),
            signing_secret=os.getenv("SLACK_SIGNING_SECRET"),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """Get the configuration, loading it on first access."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None


def is_slack_configured() -> bool:
    """Check if the Slack tokens needed to run the bot are all set."""
    slack = get_config().slack
    return bool(slack.bot_token and slack.app_token and slack.signing_secret)
