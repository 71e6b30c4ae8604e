"""
reactrole.services.bootstrap — Boot Sequence
=============================================

Bootstrap runs exactly once per process, after the gateway connection is
up and before any reaction event is handled:

1. Cache the guild's role names (non-fatal on failure — DMs fall back to
   raw role ids).
2. Re-add every configured reaction to the role message (non-fatal per
   emoji).
3. Hand back the :class:`ReactionSynchronizer` that serves events from now
   on.

There is no way back from serving to bootstrap within one process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reactrole.engine.role_cache import RoleNameCache
from reactrole.services.error_reporter import ErrorReporter
from reactrole.services.notifier import Notifier
from reactrole.services.reconciler import StartupReconciler
from reactrole.services.synchronizer import ReactionSynchronizer

if TYPE_CHECKING:
    from reactrole.config import ReactRoleConfig
    from reactrole.services.platform import RolePlatform

logger = logging.getLogger(__name__)


async def bootstrap(
    platform: RolePlatform,
    config: ReactRoleConfig,
    bot_user_id: int,
    *,
    reporter: ErrorReporter | None = None,
) -> ReactionSynchronizer:
    """Warm the role cache, reconcile reactions, and return the synchronizer."""
    reporter = reporter or ErrorReporter()

    cache = RoleNameCache(reporter)
    await cache.refresh(platform, config.guild_id)

    await StartupReconciler(platform, config, reporter).ensure_reactions()

    synchronizer = ReactionSynchronizer(
        config=config,
        cache=cache,
        platform=platform,
        notifier=Notifier(platform, reporter),
        reporter=reporter,
        bot_user_id=bot_user_id,
    )
    logger.info("Bot is running — watching message %d", config.message_id)
    return synchronizer
