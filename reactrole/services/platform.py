"""
reactrole.services.platform — Discord Platform Collaborator
============================================================

**Why this file exists:**
Everything the bot *does* to Discord goes through six calls: list a guild's
roles, grant a role, revoke a role, add a reaction, open a DM channel and
send a message.  :class:`RolePlatform` is that surface as a protocol, so the
synchronizer, reconciler, notifier and role cache never import discord.py
and can be tested against a recording fake.

:class:`DiscordPlatform` is the production implementation on top of a
``discord.Client``.  It is the only place that knows about discord.py's
exception types: every ``discord.HTTPException`` (``Forbidden``,
``NotFound``, rate limits …), transport error or timeout becomes a
:class:`~reactrole.errors.PlatformError`.  Each call is bounded by the
configured ``request_timeout``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol, TypeVar

import aiohttp
import discord

from reactrole.config import DEFAULT_REQUEST_TIMEOUT
from reactrole.errors import PlatformError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RoleInfo:
    """One entry of a guild's role list."""
    id: int
    name: str


class RolePlatform(Protocol):
    """The Discord operations reactrole depends on.

    Every method raises :class:`PlatformError` on failure.
    """

    async def guild_roles(self, guild_id: int) -> list[RoleInfo]: ...

    async def grant_role(
        self, guild_id: int, user_id: int, role_id: int, *, reason: str | None = None,
    ) -> None: ...

    async def revoke_role(
        self, guild_id: int, user_id: int, role_id: int, *, reason: str | None = None,
    ) -> None: ...

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None: ...

    async def create_dm_channel(self, user_id: int) -> int: ...

    async def send_message(self, channel_id: int, text: str) -> None: ...


class DiscordPlatform:
    """:class:`RolePlatform` backed by a live discord.py client.

    Parameters
    ----------
    client:
        A logged-in ``discord.Client`` (usually the bot itself).
    timeout:
        Seconds allowed for each platform call before it is abandoned and
        reported as a :class:`PlatformError`.
    """

    def __init__(self, client: discord.Client, *, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    async def _call(self, operation: str, aw: Awaitable[T]) -> T:
        """Await *aw* under the request timeout, translating failures."""
        try:
            return await asyncio.wait_for(aw, timeout=self._timeout)
        except TimeoutError as exc:
            raise PlatformError(operation, f"timed out after {self._timeout:g}s") from exc
        except discord.HTTPException as exc:
            raise PlatformError(operation, exc.text or str(exc), status=exc.status) from exc
        except aiohttp.ClientError as exc:
            raise PlatformError(operation, str(exc) or type(exc).__name__) from exc

    # -------------------------------------------------------------------
    # Resolution helpers (cache first, REST fallback)
    # -------------------------------------------------------------------
    async def _guild(self, guild_id: int) -> discord.Guild:
        return self._client.get_guild(guild_id) or await self._client.fetch_guild(guild_id)

    # -------------------------------------------------------------------
    # RolePlatform
    # -------------------------------------------------------------------
    async def guild_roles(self, guild_id: int) -> list[RoleInfo]:
        async def _fetch() -> list[RoleInfo]:
            guild = await self._guild(guild_id)
            roles = await guild.fetch_roles()
            return [RoleInfo(id=r.id, name=r.name) for r in roles]

        return await self._call("guild_roles", _fetch())

    async def grant_role(
        self, guild_id: int, user_id: int, role_id: int, *, reason: str | None = None,
    ) -> None:
        # Single PUT on the member-role route; no member lookup needed.
        await self._call(
            "grant_role", self._client.http.add_role(guild_id, user_id, role_id, reason=reason),
        )

    async def revoke_role(
        self, guild_id: int, user_id: int, role_id: int, *, reason: str | None = None,
    ) -> None:
        await self._call(
            "revoke_role", self._client.http.remove_role(guild_id, user_id, role_id, reason=reason),
        )

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        channel = self._client.get_partial_messageable(channel_id)
        message = channel.get_partial_message(message_id)
        await self._call("add_reaction", message.add_reaction(emoji))

    async def create_dm_channel(self, user_id: int) -> int:
        async def _open() -> int:
            user = self._client.get_user(user_id) or await self._client.fetch_user(user_id)
            channel = user.dm_channel or await user.create_dm()
            return channel.id

        return await self._call("create_dm_channel", _open())

    async def send_message(self, channel_id: int, text: str) -> None:
        channel = self._client.get_partial_messageable(
            channel_id, type=discord.ChannelType.private,
        )
        await self._call("send_message", channel.send(text))
