"""Custom exception hierarchy for pytoggle."""

from __future__ import annotations

from typing import Any


class ToggleError(Exception):
    """Base exception for all pytoggle errors."""


class ToggleConfigError(ToggleError):
    """Invalid or missing configuration."""


class InvalidChangeRequestError(ToggleError, TypeError):
    """A change request is neither a mapping nor a callable.

    Also raised when a callable request (or the state reducer) produces
    something other than a mapping or ``None``.  Silently ignoring such a
    request would let internal and controlled state drift apart, so the
    engine refuses it instead.
    """

    def __init__(self, message: str, *, request: Any = None) -> None:
        self.request = request
        super().__init__(message)


class UnknownStateKeyError(ToggleError, KeyError):
    """A change names a key that is not part of the state bag."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"unknown state key: {self.key!r}"


class UnknownPropGetterError(ToggleError, LookupError):
    """No prop getter is registered for the requested event kind."""
