"""
LabTrack Agent - Main Entry Point
=================================

Starts LabBot as a Slack app:
1. Loads configuration
2. Creates the record store and the agent
3. Sets up Slack handlers with per-user conversation memory
4. Runs the Socket Mode connection until interrupted

Run with:
    python -m labtrack.main

Or after installing:
    labtrack
"""

import asyncio
import signal
import sys

from labtrack.utils.config import get_config
from labtrack.utils.logger import Logger, set_level

main_logger = Logger("Main")


async def main():
    """Initialize all components and run the bot."""
    main_logger.info("Starting LabTrack Agent...")

    try:
        main_logger.info("Loading configuration...")
        config = get_config()
        set_level(config.log_level)

        main_logger.info(f"Opening record store in {config.store.data_dir}...")
        from labtrack.store import JsonFileStore, set_store
        set_store(JsonFileStore(config.store.data_dir))

        main_logger.info("Creating agent...")
        from labtrack.agent import Agent, set_agent
        agent = Agent.from_config(config)
        set_agent(agent)

        main_logger.info("Creating Slack app...")
        from labtrack.slack.app import create_slack_app, create_socket_handler
        app = create_slack_app()

        main_logger.info("Registering event handlers...")
        from labtrack.memory import ConversationMemory
        from labtrack.slack.handlers import register_handlers
        register_handlers(app, agent, ConversationMemory(config.agent.history_limit))

        main_logger.info("Starting Socket Mode connection...")
        handler = await create_socket_handler(app)
        await serve(handler)

    except KeyboardInterrupt:
        main_logger.info("Received interrupt signal")
    except Exception as e:
        main_logger.error("Failed to start LabTrack Agent", e)
        sys.exit(1)


async def serve(handler) -> None:
    """
    Keep the Socket Mode connection open until SIGINT or SIGTERM.

    The signal handlers are removed again before returning.
    """
    stopped = asyncio.Event()
    loop = asyncio.get_running_loop()
    signals = (signal.SIGINT, signal.SIGTERM)

    for sig in signals:
        loop.add_signal_handler(
            sig,
            lambda: asyncio.create_task(_shutdown(handler, stopped))
        )

    try:
        await handler.connect_async()
        main_logger.info("LabBot is running! Press Ctrl+C to stop.")
        await stopped.wait()
    finally:
        for sig in signals:
            loop.remove_signal_handler(sig)


async def _shutdown(handler, stopped: asyncio.Event) -> None:
    """Close the Socket Mode connection and let serve() return."""
    if stopped.is_set():
        return

    main_logger.info("Shutting down...")
    try:
        await handler.close_async()
    finally:
        stopped.set()
    main_logger.info("Shutdown complete")


def run():
    """Synchronous entry point for the `labtrack` command."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
