"""Engine configuration for pytoggle."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any

from pytoggle.exceptions import ToggleConfigError

StateReducer = Callable[[Mapping[str, Any], dict[str, Any]], Mapping[str, Any] | None]
Scheduler = Callable[[Callable[[], None]], None]

# The change tag travels next to the state keys on the way to the reducer.
RESERVED_KEYS = frozenset({"type"})


def identity_reducer(state: Mapping[str, Any], changes: dict[str, Any]) -> Mapping[str, Any] | None:
    """Default state reducer: accept every proposed change as-is."""
    return changes


def run_now(callback: Callable[[], None]) -> None:
    """Default settle scheduler: run the callback synchronously."""
    callback()


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class EngineConfig:
    """State engine configuration.

    Parameters
    ----------
    initial_state : Mapping[str, Any]
        Keys and initial values of the state bag.  The key set is fixed
        for the lifetime of the engine.
    state_reducer : callable
        ``(state, changes) -> changes``.  Sees every transition before it
        commits and may transform or veto it.  ``changes`` carries the
        ``type`` tag of the request.
    controlled : Mapping[str, Any]
        External values supplied by the consumer.  A key with a non-``None``
        value here is controlled; the engine never commits it.
    on_change : Mapping[str, callable]
        Per-key external mutation handlers, called with the reduced value
        the widget wants a controlled key to take.
    on_state_change : callable or None
        Called with ``(changes, state)`` after every non-empty transition.
        ``changes`` includes the ``type`` tag.
    schedule : callable
        Runs settle callbacks.  Defaults to running them immediately; a
        host may defer them to its next loop turn.
    strict_keys : bool
        Reject changes naming keys outside the state bag.  When disabled
        such keys are dropped.
    """

    initial_state: Mapping[str, Any]
    state_reducer: StateReducer = identity_reducer
    controlled: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    on_change: Mapping[str, Callable[[Any], None]] = dataclasses.field(default_factory=dict)
    on_state_change: Callable[[dict[str, Any], dict[str, Any]], None] | None = None
    schedule: Scheduler = run_now
    strict_keys: bool = True

    def __post_init__(self) -> None:
        if not self.initial_state:
            raise ToggleConfigError("initial_state must define at least one key")
        reserved = RESERVED_KEYS.intersection(self.initial_state)
        if reserved:
            raise ToggleConfigError(f"reserved state key(s): {sorted(reserved)}")
        for label, mapping in (("controlled", self.controlled), ("on_change", self.on_change)):
            unknown = set(mapping) - set(self.initial_state)
            if unknown:
                raise ToggleConfigError(f"{label} names unknown state key(s): {sorted(unknown)}")

    @classmethod
    def from_env(cls, **overrides: Any) -> EngineConfig:
        """Create configuration from environment variables.

        Reads ``PYTOGGLE_STRICT_KEYS``.  Explicit keyword arguments
        override environment values.
        """
        config_kwargs: dict[str, Any] = {}
        if "strict_keys" not in overrides:
            config_kwargs["strict_keys"] = _env_bool(os.environ.get("PYTOGGLE_STRICT_KEYS"), True)
        config_kwargs.update(overrides)
        return cls(**config_kwargs)
