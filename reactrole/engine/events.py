"""
reactrole.engine.events — ReactionEvent and RoleMutationRequest
================================================================

Every raw gateway reaction payload is normalized into a
:class:`ReactionEvent` before the synchronizer sees it, and every role
change the synchronizer decides on is expressed as a
:class:`RoleMutationRequest`.  Both are transient: built per event,
consumed once, never persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = ["MutationDirection", "ReactionEvent", "RoleMutationRequest"]


class MutationDirection(enum.StrEnum):
    """Whether a role is being granted to or revoked from a member."""
    GRANT = "GRANT"
    REVOKE = "REVOKE"


# ---------------------------------------------------------------------------
# ReactionEvent — normalized reaction add/remove payload
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ReactionEvent:
    """One reaction added to or removed from a message.

    ``emoji`` is ``str(discord.PartialEmoji)``: the character itself for
    unicode emoji, ``<:name:id>`` for custom ones.
    """

    message_id: int
    channel_id: int
    guild_id: int
    user_id: int
    emoji: str


# ---------------------------------------------------------------------------
# RoleMutationRequest — a single grant/revoke sent to Discord
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class RoleMutationRequest:
    guild_id: int
    user_id: int
    role_id: int
    direction: MutationDirection
    reason: str | None = None

    @classmethod
    def for_event(
        cls, event: ReactionEvent, role_id: int, direction: MutationDirection,
    ) -> RoleMutationRequest:
        """Build the mutation an actionable *event* maps to."""
        return cls(
            guild_id=event.guild_id,
            user_id=event.user_id,
            role_id=role_id,
            direction=direction,
            reason=f"Reaction role: {event.emoji}",
        )
