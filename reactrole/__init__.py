"""
reactrole — Reaction-Driven Role Membership for Discord
========================================================
Keeps membership in a fixed set of roles in step with the emoji reactions
on one designated message.  Reacting grants the mapped role, un-reacting
revokes it, and the member gets a short DM confirming the change.

Package layout::

    reactrole/
    ├── config.py            # YAML → typed, immutable config
    ├── errors.py            # ConfigurationError / PlatformError
    ├── engine/
    │   ├── events.py        # ReactionEvent + RoleMutationRequest
    │   └── role_cache.py    # guild → role id → role name snapshot cache
    ├── services/
    │   ├── platform.py      # RolePlatform protocol + discord.py adapter
    │   ├── error_reporter.py  # Operator-facing error sink (ring buffer)
    │   ├── notifier.py      # Best-effort DM notifications
    │   ├── reconciler.py    # Startup reaction reconciliation
    │   ├── synchronizer.py  # Reaction → role mutation pipeline
    │   └── bootstrap.py     # Boot sequence (cache → reconcile → serve)
    └── bot/
        ├── core.py          # Bot subclass, cog loader, one-shot bootstrap
        ├── __main__.py      # ``python -m reactrole.bot``
        └── cogs/
            └── reactions.py # on_raw_reaction_add / on_raw_reaction_remove
"""

__version__ = "0.1.0"
