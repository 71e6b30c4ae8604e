"""
reactrole.services.reconciler — Startup Reaction Reconciliation
================================================================

On every (re)start the bot re-asserts one reaction per configured emoji on
the role message, whatever state the message was left in.  Discord treats
adding an existing reaction as a no-op, so there is nothing to diff first.

Emojis are attempted independently: a bad emoji or a rejected call is
reported and skipped, and never stops the remaining emojis or startup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from reactrole.errors import PlatformError

if TYPE_CHECKING:
    from reactrole.config import ReactRoleConfig
    from reactrole.services.error_reporter import ErrorReporter
    from reactrole.services.platform import RolePlatform

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    """Which emojis were (re)added and which failed."""
    added: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class StartupReconciler:
    def __init__(
        self,
        platform: RolePlatform,
        config: ReactRoleConfig,
        reporter: ErrorReporter,
    ) -> None:
        self._platform = platform
        self._config = config
        self._reporter = reporter

    async def ensure_reactions(self) -> ReconcileResult:
        """Add every configured emoji to the role message once."""
        result = ReconcileResult()
        cfg = self._config

        for emoji in cfg.reactions:
            try:
                await self._platform.add_reaction(cfg.channel_id, cfg.message_id, emoji)
            except PlatformError as exc:
                self._reporter.report(
                    "add_reaction", exc,
                    emoji=emoji, channel_id=cfg.channel_id, message_id=cfg.message_id,
                )
                result.failed.append(emoji)
                continue
            logger.info("Added reaction: %s", emoji)
            result.added.append(emoji)

        logger.info(
            "Startup reactions reconciled on message %d: %d added, %d failed",
            cfg.message_id, len(result.added), len(result.failed),
        )
        return result
