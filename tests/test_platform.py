"""
tests/test_platform.py — DiscordPlatform Adapter Tests
=======================================================

Runs the adapter against a mocked ``discord.Client``: direct role routes,
cache-first guild resolution, and translation of discord.py / aiohttp /
timeout failures into PlatformError.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import discord
import pytest

from reactrole.errors import PlatformError
from reactrole.services.platform import DiscordPlatform, RoleInfo

from conftest import run_async


def _http_error(cls=discord.HTTPException, status: int = 403, text: str = "Missing Permissions"):
    response = MagicMock(status=status, reason="Forbidden")
    return cls(response, text)


def _make_client(*, cached: bool = True) -> tuple[MagicMock, MagicMock]:
    """Mock client → guild chain, plus the low-level member-role routes."""
    guild = MagicMock()
    guild.fetch_roles = AsyncMock(return_value=[])
    client = MagicMock()
    client.http.add_role = AsyncMock()
    client.http.remove_role = AsyncMock()

    if cached:
        client.get_guild.return_value = guild
    else:
        client.get_guild.return_value = None
        client.fetch_guild = AsyncMock(return_value=guild)
    return client, guild


class TestRoleMutations:
    def test_grant_is_a_single_route_call(self):
        client, guild = _make_client()
        platform = DiscordPlatform(client)

        run_async(platform.grant_role(1, 2, 3, reason="Reaction role: x"))

        client.http.add_role.assert_awaited_once_with(1, 2, 3, reason="Reaction role: x")
        client.get_guild.assert_not_called()
        guild.get_member.assert_not_called()
        guild.fetch_member.assert_not_called()

    def test_revoke_is_a_single_route_call(self):
        client, guild = _make_client(cached=False)
        platform = DiscordPlatform(client)

        run_async(platform.revoke_role(1, 2, 3))

        client.http.remove_role.assert_awaited_once_with(1, 2, 3, reason=None)
        client.fetch_guild.assert_not_called()
        guild.fetch_member.assert_not_called()
        client.http.add_role.assert_not_awaited()

    @pytest.mark.parametrize("cls, status", [
        (discord.HTTPException, 429),
        (discord.Forbidden, 403),
        (discord.NotFound, 404),
    ])
    def test_http_errors_become_platform_error(self, cls, status):
        client, _ = _make_client()
        client.http.add_role = AsyncMock(side_effect=_http_error(cls, status))

        with pytest.raises(PlatformError) as info:
            run_async(DiscordPlatform(client).grant_role(1, 2, 3))

        assert info.value.operation == "grant_role"
        assert info.value.status == status
        assert "Missing Permissions" in str(info.value)
        assert isinstance(info.value.__cause__, cls)

    def test_unknown_member_is_platform_error(self):
        client, _ = _make_client()
        client.http.remove_role = AsyncMock(
            side_effect=_http_error(discord.NotFound, 404, "Unknown Member"),
        )

        with pytest.raises(PlatformError, match="Unknown Member") as info:
            run_async(DiscordPlatform(client).revoke_role(1, 2, 3))
        assert info.value.operation == "revoke_role"

    def test_timeout_becomes_platform_error(self):
        async def _hang(*args, **kwargs):
            await asyncio.sleep(10)

        client, _ = _make_client()
        client.http.add_role = AsyncMock(side_effect=_hang)

        with pytest.raises(PlatformError, match="timed out") as info:
            run_async(DiscordPlatform(client, timeout=0.01).grant_role(1, 2, 3))
        assert info.value.status is None

    def test_transport_error_becomes_platform_error(self):
        client, _ = _make_client()
        client.http.add_role = AsyncMock(side_effect=aiohttp.ClientConnectionError("reset"))

        with pytest.raises(PlatformError, match="reset"):
            run_async(DiscordPlatform(client).grant_role(1, 2, 3))

    def test_unexpected_errors_propagate(self):
        client, _ = _make_client()
        client.http.add_role = AsyncMock(side_effect=ValueError("bug"))

        with pytest.raises(ValueError):
            run_async(DiscordPlatform(client).grant_role(1, 2, 3))


class TestGuildRoles:
    def test_returns_role_infos(self):
        client, guild = _make_client()
        guild.fetch_roles = AsyncMock(return_value=[
            SimpleNamespace(id=10, name="Green Team"),
            SimpleNamespace(id=11, name="Red Team"),
        ])

        roles = run_async(DiscordPlatform(client).guild_roles(1))

        assert roles == [RoleInfo(10, "Green Team"), RoleInfo(11, "Red Team")]

    def test_uncached_guild_falls_back_to_rest(self):
        client, guild = _make_client(cached=False)

        assert run_async(DiscordPlatform(client).guild_roles(1)) == []
        client.fetch_guild.assert_awaited_once_with(1)
        guild.fetch_roles.assert_awaited_once()

    def test_failure(self):
        client, guild = _make_client()
        guild.fetch_roles = AsyncMock(side_effect=_http_error(status=500, text="Internal"))

        with pytest.raises(PlatformError) as info:
            run_async(DiscordPlatform(client).guild_roles(1))
        assert info.value.operation == "guild_roles"


class TestReactionsAndMessages:
    def test_add_reaction(self):
        message = MagicMock(add_reaction=AsyncMock())
        channel = MagicMock()
        channel.get_partial_message.return_value = message
        client = MagicMock()
        client.get_partial_messageable.return_value = channel

        run_async(DiscordPlatform(client).add_reaction(5, 6, "<:party:9001>"))

        client.get_partial_messageable.assert_called_once_with(5)
        channel.get_partial_message.assert_called_once_with(6)
        message.add_reaction.assert_awaited_once_with("<:party:9001>")

    def test_add_reaction_unknown_emoji(self):
        message = MagicMock(add_reaction=AsyncMock(
            side_effect=_http_error(status=400, text="Unknown Emoji"),
        ))
        client = MagicMock()
        client.get_partial_messageable.return_value.get_partial_message.return_value = message

        with pytest.raises(PlatformError, match="Unknown Emoji"):
            run_async(DiscordPlatform(client).add_reaction(5, 6, "nope"))

    def test_create_dm_channel_opens_new(self):
        user = MagicMock(dm_channel=None, create_dm=AsyncMock(return_value=SimpleNamespace(id=77)))
        client = MagicMock()
        client.get_user.return_value = None
        client.fetch_user = AsyncMock(return_value=user)

        assert run_async(DiscordPlatform(client).create_dm_channel(2)) == 77
        client.fetch_user.assert_awaited_once_with(2)

    def test_create_dm_channel_reuses_existing(self):
        user = MagicMock(dm_channel=SimpleNamespace(id=88), create_dm=AsyncMock())
        client = MagicMock()
        client.get_user.return_value = user

        assert run_async(DiscordPlatform(client).create_dm_channel(2)) == 88
        user.create_dm.assert_not_awaited()

    def test_send_message(self):
        channel = MagicMock(send=AsyncMock())
        client = MagicMock()
        client.get_partial_messageable.return_value = channel

        run_async(DiscordPlatform(client).send_message(77, "hi"))

        client.get_partial_messageable.assert_called_once_with(77, type=discord.ChannelType.private)
        channel.send.assert_awaited_once_with("hi")

    def test_send_message_dms_closed(self):
        channel = MagicMock(send=AsyncMock(side_effect=_http_error(
            discord.Forbidden, 403, "Cannot send messages to this user",
        )))
        client = MagicMock()
        client.get_partial_messageable.return_value = channel

        with pytest.raises(PlatformError) as info:
            run_async(DiscordPlatform(client).send_message(77, "hi"))
        assert info.value.operation == "send_message"
        assert info.value.status == 403
