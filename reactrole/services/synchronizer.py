"""
reactrole.services.synchronizer — Reaction → Role Pipeline
===========================================================

**Why this file exists:**
This is the core of reactrole.  Each inbound reaction event goes through
the same four steps:

1. **Filter** — only the configured message counts, and the bot's own
   reactions (added by the startup reconciler) are ignored so they never
   grant roles to the bot.
2. **Resolve** — the emoji is looked up in the reaction map; emojis that
   aren't configured are left alone.
3. **Mutate** — one grant (add) or revoke (remove) call to Discord.
4. **Notify** — only after Discord accepted the mutation, the member gets
   a DM naming the role.

There is no membership pre-check.  Granting a role the member already has
(or revoking one they lack) is a no-op success on Discord's side, and
skipping the check avoids a check-then-act race.

Failures are contained per event: a rejected mutation is reported once, no
DM is sent, nothing is retried, and other events are unaffected.  Handlers
hold no shared lock, so concurrent events for different members never wait
on each other.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reactrole.engine.events import MutationDirection, ReactionEvent, RoleMutationRequest
from reactrole.errors import PlatformError

if TYPE_CHECKING:
    from reactrole.config import ReactRoleConfig
    from reactrole.engine.role_cache import RoleNameCache
    from reactrole.services.error_reporter import ErrorReporter
    from reactrole.services.notifier import Notifier
    from reactrole.services.platform import RolePlatform

logger = logging.getLogger(__name__)

GRANTED_TEMPLATE = "\u2705 You were given the role: **{role}** ({emoji})"  # ✅
REVOKED_TEMPLATE = "\u274c The role **{role}** ({emoji}) was removed from you"  # ❌


class ReactionSynchronizer:
    """Turns reaction add/remove events into role grants/revokes.

    Parameters
    ----------
    config:
        The immutable bot configuration (target message + reaction map).
    cache:
        Role-name cache used only to render notification text.
    platform:
        Discord operations (see :class:`RolePlatform`).
    notifier:
        DM sender used after a successful mutation.
    reporter:
        Sink for every :class:`PlatformError` the handler swallows.
    bot_user_id:
        The bot's own user id; its reactions are ignored.
    """

    def __init__(
        self,
        config: ReactRoleConfig,
        cache: RoleNameCache,
        platform: RolePlatform,
        notifier: Notifier,
        reporter: ErrorReporter,
        bot_user_id: int,
    ) -> None:
        self.config = config
        self.cache = cache
        self._platform = platform
        self._notifier = notifier
        self._reporter = reporter
        self.bot_user_id = bot_user_id

    # -------------------------------------------------------------------
    # Public entry points
    # -------------------------------------------------------------------
    async def handle_add(self, event: ReactionEvent) -> RoleMutationRequest | None:
        """Grant the mapped role for a reaction add.

        Returns the committed mutation, or ``None`` if the event was ignored
        or Discord rejected the grant.
        """
        return await self._handle(event, MutationDirection.GRANT)

    async def handle_remove(self, event: ReactionEvent) -> RoleMutationRequest | None:
        """Revoke the mapped role for a reaction removal."""
        return await self._handle(event, MutationDirection.REVOKE)

    # -------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------
    def resolve(self, event: ReactionEvent) -> int | None:
        """Return the role id *event* should affect, or ``None`` to ignore it."""
        if event.message_id != self.config.message_id:
            return None
        if event.user_id == self.bot_user_id:
            return None
        return self.config.role_for(event.emoji)

    async def _handle(
        self, event: ReactionEvent, direction: MutationDirection,
    ) -> RoleMutationRequest | None:
        role_id = self.resolve(event)
        if role_id is None:
            return None

        request = RoleMutationRequest.for_event(event, role_id, direction)
        try:
            await self._apply(request)
        except PlatformError as exc:
            self._reporter.report(
                "grant_role" if direction is MutationDirection.GRANT else "revoke_role",
                exc,
                guild_id=request.guild_id,
                user_id=request.user_id,
                role_id=request.role_id,
                emoji=event.emoji,
            )
            return None

        logger.info(
            "%s role %d %s user %d via %s",
            "Granted" if direction is MutationDirection.GRANT else "Revoked",
            role_id,
            "to" if direction is MutationDirection.GRANT else "from",
            event.user_id,
            event.emoji,
        )

        await self._notifier.notify(event.user_id, self.render(request, event.emoji))
        return request

    async def _apply(self, request: RoleMutationRequest) -> None:
        if request.direction is MutationDirection.GRANT:
            await self._platform.grant_role(
                request.guild_id, request.user_id, request.role_id, reason=request.reason,
            )
        else:
            await self._platform.revoke_role(
                request.guild_id, request.user_id, request.role_id, reason=request.reason,
            )

    def render(self, request: RoleMutationRequest, emoji: str) -> str:
        """Build the DM text for a committed mutation."""
        role = self.cache.display_name(request.guild_id, request.role_id)
        template = (
            GRANTED_TEMPLATE if request.direction is MutationDirection.GRANT else REVOKED_TEMPLATE
        )
        return template.format(role=role, emoji=emoji)
