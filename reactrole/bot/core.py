"""
reactrole.bot.core — Bot Instance & Cog Loader
===============================================

Defines :class:`ReactRoleBot`, a ``commands.Bot`` subclass that:

1. Stores the shared config (``bot.cfg``), the error reporter and the
   :class:`DiscordPlatform` adapter so the Cog can reach them via
   ``self.bot.*``.
2. Loads the Cog extensions listed in :data:`EXTENSIONS`.
3. Runs :func:`~reactrole.services.bootstrap.bootstrap` once on the first
   ``on_ready``.  Until bootstrap finishes ``bot.synchronizer`` is ``None``
   and reaction events are dropped; a reconnect's later ``on_ready`` never
   re-enters bootstrap.
"""

from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from reactrole.config import ReactRoleConfig
from reactrole.services.bootstrap import bootstrap
from reactrole.services.error_reporter import ErrorReporter
from reactrole.services.platform import DiscordPlatform
from reactrole.services.synchronizer import ReactionSynchronizer

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "reactrole.bot.cogs.reactions",
]


class ReactRoleBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    cfg:
        The parsed :class:`ReactRoleConfig` from ``config.yaml``.
    reporter:
        Shared error sink; a fresh one is created when omitted.
    """

    def __init__(self, cfg: ReactRoleConfig, reporter: ErrorReporter | None = None) -> None:
        # Default intents include GUILD_MESSAGE_REACTIONS.  Members are
        # fetched over REST, so no privileged intents are needed.
        intents = discord.Intents.default()

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            description="Reaction role bot",
        )

        # Attach shared state so Cogs can read it via self.bot.*
        self.cfg = cfg
        self.reporter = reporter or ErrorReporter()
        self.platform = DiscordPlatform(self, timeout=cfg.request_timeout)

        # Set once bootstrap completes (Serving phase)
        self.synchronizer: ReactionSynchronizer | None = None
        self._bootstrap_lock = asyncio.Lock()

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all Cog extensions before the gateway connects.

        A failing extension is logged but doesn't stop the others.
        """
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)
        await self.run_bootstrap()

    async def run_bootstrap(self) -> ReactionSynchronizer:
        """Run the boot sequence once and publish the synchronizer."""
        async with self._bootstrap_lock:
            if self.synchronizer is not None:
                logger.info("Reconnected — bootstrap already done, skipping")
                return self.synchronizer

            assert self.user is not None
            self.synchronizer = await bootstrap(
                self.platform, self.cfg, self.user.id, reporter=self.reporter,
            )
            return self.synchronizer
