"""
reactrole.bot.cogs.reactions — Reaction Role Listener
======================================================

Listens for ``on_raw_reaction_add`` / ``on_raw_reaction_remove`` and hands
each payload to the :class:`ReactionSynchronizer` as a
:class:`ReactionEvent`.

Uses raw events so reactions on uncached (old) messages still arrive.
discord.py dispatches every event in its own task, so two members
reacting at once are handled concurrently.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from reactrole.engine.events import ReactionEvent

if TYPE_CHECKING:
    from reactrole.bot.core import ReactRoleBot

logger = logging.getLogger(__name__)


def to_reaction_event(payload: discord.RawReactionActionEvent) -> ReactionEvent | None:
    """Normalize a raw gateway payload; ``None`` for DM reactions."""
    if payload.guild_id is None:
        return None
    return ReactionEvent(
        message_id=payload.message_id,
        channel_id=payload.channel_id,
        guild_id=payload.guild_id,
        user_id=payload.user_id,
        emoji=str(payload.emoji),
    )


class ReactionRoles(commands.Cog, name="ReactionRoles"):
    """Grants and revokes roles from reactions on the role message."""

    def __init__(self, bot: ReactRoleBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        """Fire when any reaction is added, even on uncached messages."""
        logger.debug(
            "Gateway event: REACTION_ADD from user %s on message %s in channel %s",
            payload.user_id, payload.message_id, payload.channel_id,
        )
        try:
            event = to_reaction_event(payload)
            synchronizer = self.bot.synchronizer
            if event is None or synchronizer is None:
                return
            await synchronizer.handle_add(event)
        except Exception:
            logger.exception(
                "Error processing reaction add on message %s from user %s",
                payload.message_id, payload.user_id,
            )

    @commands.Cog.listener()
    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent) -> None:
        """Fire when any reaction is removed, even on uncached messages."""
        logger.debug(
            "Gateway event: REACTION_REMOVE from user %s on message %s in channel %s",
            payload.user_id, payload.message_id, payload.channel_id,
        )
        try:
            event = to_reaction_event(payload)
            synchronizer = self.bot.synchronizer
            if event is None or synchronizer is None:
                return
            await synchronizer.handle_remove(event)
        except Exception:
            logger.exception(
                "Error processing reaction remove on message %s from user %s",
                payload.message_id, payload.user_id,
            )


async def setup(bot: ReactRoleBot) -> None:
    await bot.add_cog(ReactionRoles(bot))
