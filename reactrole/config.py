"""
reactrole.config — YAML Configuration Loader
=============================================

**Why this file exists:**
The bot manages exactly one message in exactly one guild.  Which message,
and which emoji maps to which role, is read once from ``config.yaml`` at
startup and never changes for the lifetime of the process (no hot reload).

Secrets (the bot token) are *not* stored here; they come from the
environment / ``.env`` file.

Usage::

    from reactrole.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.message_id)            # 1469000000000000001
    print(cfg.reactions["🟢"])       # 1469000000000000101

Example file::

    guild_id: 1468816181854081229
    channel_id: 1468816181854081300
    message_id: 1469000000000000001
    reactions:
      "🟢": 1469000000000000101
      "🔴": 1469000000000000102

JSON is a subset of YAML, so the older ``config.json`` layout (with the
camelCase keys ``guildID`` / ``channelID`` / ``messageID``) loads as well.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from reactrole.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_REQUEST_TIMEOUT = 10.0

# snake_case key → accepted legacy camelCase alias
_KEY_ALIASES: dict[str, str] = {
    "guild_id": "guildID",
    "channel_id": "channelID",
    "message_id": "messageID",
}


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ReactRoleConfig:
    """Immutable configuration loaded from ``config.yaml``.

    ``reactions`` maps an emoji string (unicode character, or ``<:name:id>``
    for custom emoji) to the role id it controls.  It is wrapped in a
    read-only mapping proxy so nothing can mutate it after load.
    """

    guild_id: int
    channel_id: int
    message_id: int
    reactions: Mapping[str, int] = field(default_factory=dict)

    # Upper bound (seconds) on every single Discord API call
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not isinstance(self.reactions, MappingProxyType):
            object.__setattr__(self, "reactions", MappingProxyType(dict(self.reactions)))

    def role_for(self, emoji: str) -> int | None:
        """Return the role id mapped to *emoji*, or ``None`` if unmanaged."""
        return self.reactions.get(emoji)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------
def _snowflake(value: Any, what: str) -> int:
    """Coerce *value* to a positive Discord snowflake."""
    if isinstance(value, (bool, float)):
        raise ConfigurationError(f"{what} must be a Discord ID, got {value!r}")
    try:
        snowflake = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{what} must be a Discord ID, got {value!r}") from None
    if snowflake <= 0:
        raise ConfigurationError(f"{what} must be a positive Discord ID, got {value!r}")
    return snowflake


def _required(raw: Mapping[str, Any], key: str) -> Any:
    if key in raw:
        return raw[key]
    alias = _KEY_ALIASES.get(key)
    if alias and alias in raw:
        return raw[alias]
    raise ConfigurationError(f"Missing required config key: {key!r}")


def _emoji_key(emoji: Any) -> str:
    """Normalize a reaction-map key to the string the gateway reports.

    JSON-style \\uXXXX escapes of non-BMP emoji reach PyYAML as two lone
    surrogates; they are rejoined into the real character here.
    """
    key = str(emoji).strip()
    try:
        key = key.encode("utf-16", "surrogatepass").decode("utf-16")
        key.encode("utf-8")
    except UnicodeError:
        raise ConfigurationError(f"'reactions' key {key!r} is not a valid emoji") from None
    return key


def _parse_reactions(value: Any) -> dict[str, int]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"'reactions' must be a mapping of emoji → role ID, got {type(value).__name__}"
        )

    reactions: dict[str, int] = {}
    for emoji, role_id in value.items():
        key = _emoji_key(emoji)
        if not key:
            raise ConfigurationError("'reactions' contains an empty emoji key")
        reactions[key] = _snowflake(role_id, f"role ID for {key!r}")
    return reactions


def _parse_timeout(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"'request_timeout' must be a number, got {value!r}")
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'request_timeout' must be a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigurationError(f"'request_timeout' must be positive, got {value!r}")
    return timeout


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def parse_config(raw: Any) -> ReactRoleConfig:
    """Validate an already-decoded mapping and build a :class:`ReactRoleConfig`.

    Raises
    ------
    ConfigurationError
        If a required key is missing or any value is malformed.
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Configuration root must be a mapping")

    reactions = _parse_reactions(raw.get("reactions"))
    if not reactions:
        logger.warning("Config has no reactions configured — the bot will manage no roles")

    return ReactRoleConfig(
        guild_id=_snowflake(_required(raw, "guild_id"), "guild_id"),
        channel_id=_snowflake(_required(raw, "channel_id"), "channel_id"),
        message_id=_snowflake(_required(raw, "message_id"), "message_id"),
        reactions=reactions,
        request_timeout=_parse_timeout(raw.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
    )


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ReactRoleConfig:
    """Read *path* and return a :class:`ReactRoleConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML (or JSON) configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    ConfigurationError
        If the file doesn't exist, can't be parsed, or fails validation.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    try:
        with open(config_path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse {config_path}: {exc}") from exc

    cfg = parse_config(raw)
    logger.info(
        "Config loaded — guild %d, message %d, %d reaction roles",
        cfg.guild_id, cfg.message_id, len(cfg.reactions),
    )
    return cfg
