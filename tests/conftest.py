"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio

import pytest

from reactrole.config import ReactRoleConfig
from reactrole.engine.events import ReactionEvent
from reactrole.engine.role_cache import RoleNameCache
from reactrole.errors import PlatformError
from reactrole.services.error_reporter import ErrorReporter
from reactrole.services.notifier import Notifier
from reactrole.services.platform import RoleInfo
from reactrole.services.synchronizer import ReactionSynchronizer

GUILD_ID = 111222333
CHANNEL_ID = 444555666
MESSAGE_ID = 777888999
BOT_USER_ID = 1000
USER_ID = 2001

GREEN = "\U0001f7e2"  # 🟢
RED = "\U0001f534"    # 🔴
BLUE = "\U0001f535"   # 🔵

ROLE_GREEN = 501
ROLE_RED = 502


def run_async(coro):
    """Run an async coroutine to completion (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class FakePlatform:
    """In-memory RolePlatform that records every call.

    ``fail`` maps an operation name to the exception it should raise; it may
    also map to a callable ``(args) -> Exception | None`` for per-call control.
    """

    def __init__(self, roles: list[RoleInfo] | None = None) -> None:
        self.roles = roles or []
        self.calls: list[tuple] = []
        self.fail: dict[str, object] = {}
        self._next_dm = 9000

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        failure = self.fail.get(op)
        if callable(failure) and not isinstance(failure, BaseException):
            failure = failure(args)
        if failure is not None:
            raise failure

    def ops(self, name: str | None = None) -> list[tuple]:
        if name is None:
            return list(self.calls)
        return [c for c in self.calls if c[0] == name]

    async def guild_roles(self, guild_id):
        self._record("guild_roles", guild_id)
        return list(self.roles)

    async def grant_role(self, guild_id, user_id, role_id, *, reason=None):
        self._record("grant_role", guild_id, user_id, role_id)

    async def revoke_role(self, guild_id, user_id, role_id, *, reason=None):
        self._record("revoke_role", guild_id, user_id, role_id)

    async def add_reaction(self, channel_id, message_id, emoji):
        self._record("add_reaction", channel_id, message_id, emoji)

    async def create_dm_channel(self, user_id):
        self._record("create_dm_channel", user_id)
        self._next_dm += 1
        return self._next_dm

    async def send_message(self, channel_id, text):
        self._record("send_message", channel_id, text)


def platform_error(op: str = "grant_role", status: int | None = 403) -> PlatformError:
    return PlatformError(op, "Missing Permissions", status=status)


def make_event(
    *,
    message_id: int = MESSAGE_ID,
    user_id: int = USER_ID,
    emoji: str = GREEN,
    guild_id: int = GUILD_ID,
    channel_id: int = CHANNEL_ID,
) -> ReactionEvent:
    return ReactionEvent(
        message_id=message_id,
        channel_id=channel_id,
        guild_id=guild_id,
        user_id=user_id,
        emoji=emoji,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def config() -> ReactRoleConfig:
    return ReactRoleConfig(
        guild_id=GUILD_ID,
        channel_id=CHANNEL_ID,
        message_id=MESSAGE_ID,
        reactions={GREEN: ROLE_GREEN, RED: ROLE_RED},
    )


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform(roles=[
        RoleInfo(id=ROLE_GREEN, name="Green Team"),
        RoleInfo(id=ROLE_RED, name="Red Team"),
        RoleInfo(id=GUILD_ID, name="@everyone"),
    ])


@pytest.fixture
def reporter() -> ErrorReporter:
    return ErrorReporter()


@pytest.fixture
def cache(reporter: ErrorReporter) -> RoleNameCache:
    return RoleNameCache(reporter)


@pytest.fixture
def synchronizer(config, cache, platform, reporter) -> ReactionSynchronizer:
    return ReactionSynchronizer(
        config=config,
        cache=cache,
        platform=platform,
        notifier=Notifier(platform, reporter),
        reporter=reporter,
        bot_user_id=BOT_USER_ID,
    )
