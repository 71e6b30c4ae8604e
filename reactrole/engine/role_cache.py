"""
reactrole.engine.role_cache — Guild Role-Name Cache
====================================================

Maps ``guild_id → role_id → role name`` so DM notifications can say
"**Green Team**" instead of a bare snowflake.

The cache is filled once per guild during bootstrap by a full snapshot of
the guild's role list and is effectively read-only afterwards.  Each guild
entry is an immutable mapping swapped in as a whole, so a reader always sees
either the old snapshot or the new one, never a half-built mix.  Role renames
after startup are not picked up.

Lookups never fail: an unknown guild or role simply returns ``None`` and
callers fall back to the raw role id via :meth:`RoleNameCache.display_name`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from reactrole.errors import PlatformError

if TYPE_CHECKING:
    from reactrole.services.error_reporter import ErrorReporter
    from reactrole.services.platform import RolePlatform

logger = logging.getLogger(__name__)


class RoleNameCache:
    """Thread-safe snapshot cache of role display names per guild.

    Usage::

        cache = RoleNameCache(reporter)
        await cache.refresh(platform, guild_id)

        cache.lookup(guild_id, role_id)        # "Green Team" or None
        cache.display_name(guild_id, role_id)  # "Green Team" or "1469…"
    """

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self._reporter = reporter
        self._lock = threading.Lock()
        # guild_id → read-only {role_id: name}
        self._guilds: dict[int, Mapping[int, str]] = {}

    async def refresh(self, platform: RolePlatform, guild_id: int) -> bool:
        """Replace *guild_id*'s entry with a fresh snapshot from Discord.

        Returns ``True`` on success.  On failure the previous entry (if any)
        is left untouched, the error is reported, and ``False`` is returned.
        """
        try:
            roles = await platform.guild_roles(guild_id)
        except PlatformError as exc:
            if self._reporter is not None:
                self._reporter.report("cache_roles", exc, guild_id=guild_id)
            else:
                logger.warning("Error caching roles for guild %d: %s", guild_id, exc)
            return False

        snapshot = MappingProxyType({role.id: role.name for role in roles})
        with self._lock:
            self._guilds[guild_id] = snapshot
        logger.info("Cached %d roles for guild %d", len(snapshot), guild_id)
        return True

    def lookup(self, guild_id: int, role_id: int) -> str | None:
        """Return the cached name of *role_id*, or ``None`` if unknown."""
        with self._lock:
            roles = self._guilds.get(guild_id)
        if roles is None:
            return None
        return roles.get(role_id)

    def display_name(self, guild_id: int, role_id: int) -> str:
        """Cached role name, falling back to the raw role id."""
        name = self.lookup(guild_id, role_id)
        return name if name is not None else str(role_id)

    @property
    def guilds(self) -> frozenset[int]:
        """Guild ids that have been successfully refreshed."""
        with self._lock:
            return frozenset(self._guilds)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(roles) for roles in self._guilds.values())
