"""
reactrole.bot.__main__ — Entry point for ``python -m reactrole.bot``
====================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (guild, message, reaction map).
3. Create the ReactRoleBot and hand it the config.
4. Start the bot (blocking — runs the asyncio event loop).  Role caching
   and reaction reconciliation happen in ``on_ready``.

Run with::

    python -m reactrole.bot
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from reactrole.bot.core import ReactRoleBot
from reactrole.config import DEFAULT_CONFIG_PATH, load_config
from reactrole.errors import ConfigurationError

logger = logging.getLogger("reactrole")

TOKEN_PLACEHOLDER = "your-discord-bot-token-here"


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )


def read_token() -> str:
    """Return the bot token from the environment.

    Raises
    ------
    ConfigurationError
        If neither ``DISCORD_TOKEN`` nor ``DISCORD_BOT_TOKEN`` holds a real token.
    """
    token = os.getenv("DISCORD_TOKEN") or os.getenv("DISCORD_BOT_TOKEN")
    if not token or token == TOKEN_PLACEHOLDER:
        raise ConfigurationError(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
    return token


def main() -> None:
    """Bootstrap and run the reaction role bot."""
    # 1. Environment variables (secrets, LOG_LEVEL).
    load_dotenv()
    configure_logging()

    # 2. Configuration.  Either failure aborts before serving begins.
    try:
        token = read_token()
        cfg = load_config(os.getenv("REACTROLE_CONFIG", DEFAULT_CONFIG_PATH))
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        sys.exit(1)

    # 3. Bot.
    bot = ReactRoleBot(cfg=cfg)

    # 4. Run (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting reactrole bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
