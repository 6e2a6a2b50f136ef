"""Exceptions shared across koko components."""

from __future__ import annotations


class KokoError(Exception):
    """Base class for all koko errors."""


class ConfigError(KokoError):
    """Credentials or settings are missing or malformed. Fatal at startup."""


class SlackStartupError(KokoError):
    """The Slack connection could not be established or identified."""


class DispatchError(KokoError):
    """Processing of a single inbound event failed.

    Never crosses an event boundary: the dispatcher logs it and moves on.
    """
