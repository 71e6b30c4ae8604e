"""
reactrole.services.notifier — Best-Effort DM Notifications
===========================================================

Tells a member what just happened to their roles.  Delivery is strictly
best effort: members with DMs closed, unknown users and network hiccups
are reported and dropped.  A failed notification never undoes or retries
the role change that triggered it.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from reactrole.errors import PlatformError

if TYPE_CHECKING:
    from reactrole.services.error_reporter import ErrorReporter
    from reactrole.services.platform import RolePlatform

logger = logging.getLogger(__name__)


class Notifier:
    """Sends one-shot direct messages, reusing DM channels per user."""

    def __init__(self, platform: RolePlatform, reporter: ErrorReporter) -> None:
        self._platform = platform
        self._reporter = reporter
        # user_id → DM channel id
        self._dm_channels: dict[int, int] = {}
        self._lock = threading.Lock()

    async def _dm_channel(self, user_id: int) -> int:
        with self._lock:
            channel_id = self._dm_channels.get(user_id)
        if channel_id is None:
            channel_id = await self._platform.create_dm_channel(user_id)
            with self._lock:
                self._dm_channels[user_id] = channel_id
        return channel_id

    async def notify(self, user_id: int, message: str) -> bool:
        """DM *message* to *user_id*.  Returns ``True`` if it was delivered."""
        try:
            channel_id = await self._dm_channel(user_id)
        except PlatformError as exc:
            self._reporter.report("create_dm_channel", exc, user_id=user_id)
            return False

        try:
            await self._platform.send_message(channel_id, message)
        except PlatformError as exc:
            # The cached channel may be stale; reopen it next time.
            with self._lock:
                self._dm_channels.pop(user_id, None)
            self._reporter.report("send_dm", exc, user_id=user_id)
            return False

        logger.debug("Sent DM to user %d", user_id)
        return True
