"""
reactrole.errors — Error Taxonomy
==================================

Two kinds of failure matter to the bot:

* :class:`ConfigurationError` is fatal.  It is raised while loading the
  config or credentials and aborts the process before any event is served.
* :class:`PlatformError` is never fatal.  It wraps every network/API failure
  coming back from Discord (role mutation, reaction add, DM) and is always
  handed to the :class:`~reactrole.services.error_reporter.ErrorReporter`,
  never retried.

A role-name cache miss is not an error at all; callers fall back to the raw
role id.
"""

from __future__ import annotations


class ReactRoleError(Exception):
    """Base class for every error raised by reactrole."""


class ConfigurationError(ReactRoleError):
    """Missing or invalid startup configuration or credentials."""


class PlatformError(ReactRoleError):
    """A Discord API call failed, was rejected, or timed out.

    Parameters
    ----------
    operation:
        Short name of the platform call that failed (``"grant_role"``,
        ``"add_reaction"`` …).
    message:
        Human-readable description of the failure.
    status:
        HTTP status code when Discord answered, ``None`` for timeouts and
        transport errors.
    """

    def __init__(self, operation: str, message: str, status: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status = status
