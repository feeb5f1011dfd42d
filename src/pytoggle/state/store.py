"""Controllable state engine.

This is the only component allowed to write a widget's internal state bag.
Every write goes through :meth:`StateEngine.propose`; every read goes through
:meth:`StateEngine.get_state`, which applies the control table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from pytoggle.config import EngineConfig
from pytoggle.exceptions import UnknownPropGetterError, UnknownStateKeyError
from pytoggle.props import PropGetter, PropsFactory
from pytoggle.state.changes import TYPE_KEY, Change, ChangeRequest, ChangeType, NoChange, Settlement, StateChange
from pytoggle.state.policy import is_controlled, reduce_request, resolve_state, split_change

_logger = logging.getLogger(__name__)

SettleCallback = Callable[[Settlement], None]
Listener = Callable[[dict[str, Any]], None]


def _guarded(label: str, callback: Callable[..., Any], *args: Any) -> None:
    """Run a consumer callback; its failure must not break the engine."""
    try:
        callback(*args)
    except Exception:
        _logger.debug("%s callback failed", label, exc_info=True)


class StateEngine:
    """Per-widget state bag with a reducer hook and per-key external control.

    Example::

        engine = StateEngine(EngineConfig(initial_state={"on": False}))
        engine.propose(lambda state: {"on": not state["on"]})
        engine.get_state("on")  # True
    """

    def __init__(self, config: EngineConfig) -> None:
        self._config = config
        self._initial_state: Mapping[str, Any] = MappingProxyType(dict(config.initial_state))
        self._state: dict[str, Any] = dict(config.initial_state)
        self._controlled: dict[str, Any] = {
            key: value for key, value in config.controlled.items() if value is not None
        }
        self._on_change: dict[str, Callable[[Any], None]] = dict(config.on_change)
        self._listeners: list[Listener] = []
        self._prop_getters: dict[str, PropsFactory] = {}

    def __repr__(self) -> str:
        return f"StateEngine(state={self.get_state()!r}, controlled={sorted(self._controlled)!r})"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def initial_state(self) -> Mapping[str, Any]:
        """Read-only snapshot captured at construction."""
        return self._initial_state

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self._state)

    def _require_key(self, key: str) -> None:
        if key not in self._state:
            raise UnknownStateKeyError(key)

    def is_controlled(self, key: str) -> bool:
        self._require_key(key)
        return is_controlled(self._controlled, key)

    def get_state(self, key: str | None = None) -> Any:
        """Resolved value of *key*, or a resolved snapshot of every key."""
        if key is None:
            return resolve_state(self._state, self._controlled)
        self._require_key(key)
        if is_controlled(self._controlled, key):
            return self._controlled[key]
        return self._state[key]

    def get_snapshot(self) -> dict[str, Any]:
        """Copy of the internal bag, ignoring external values."""
        return dict(self._state)

    # ------------------------------------------------------------------
    # External control
    # ------------------------------------------------------------------

    def set_props(self, **values: Any) -> None:
        """Update consumer-supplied values; ``None`` releases a key."""
        for key in values:
            self._require_key(key)
        released: dict[str, Any] = {}
        for key, value in values.items():
            if value is not None:
                if key not in self._controlled:
                    _logger.debug("State key %s is now controlled", key)
                self._controlled[key] = value
            elif key in self._controlled:
                released[key] = self._controlled.pop(key)
                _logger.debug("State key %s released with value %r", key, released[key])
        if released:
            # Adopting the last external value is a regular, reducible change.
            self.propose(released, type=ChangeType.RELEASE)

    def control(self, key: str, value: Any) -> None:
        if value is None:
            raise ValueError("a controlled value cannot be None; use release()")
        self.set_props(**{key: value})

    def release(self, key: str) -> None:
        self.set_props(**{key: None})

    def set_change_handler(self, key: str, handler: Callable[[Any], None] | None) -> None:
        self._require_key(key)
        if handler is None:
            self._on_change.pop(key, None)
        else:
            self._on_change[key] = handler

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _known_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        unknown = [key for key in changes if key not in self._state]
        if not unknown:
            return changes
        if self._config.strict_keys:
            raise UnknownStateKeyError(unknown[0])
        _logger.debug("Dropping unknown state key(s) %s", unknown)
        return {key: value for key, value in changes.items() if key in self._state}

    def _commit(self, changes: dict[str, Any]) -> tuple[str, ...]:
        written = {
            key: value
            for key, value in changes.items()
            if type(self._state[key]) is not type(value) or self._state[key] != value
        }
        if not written:
            return ()
        # Replace the bag in one step so no reader sees half a change.
        self._state = {**self._state, **written}
        _logger.debug("Committed state key(s) %s", list(written))
        resolved = self.get_state()
        for listener in list(self._listeners):
            _guarded("state listener", listener, dict(resolved))
        return tuple(written)

    def propose(
        self,
        request: Any,
        on_settled: SettleCallback | None = None,
        *,
        type: str | None = None,
    ) -> StateChange:
        """Resolve, reduce, and apply a change request.

        Uncontrolled keys are committed; controlled keys are only surfaced to
        their change handlers.  *on_settled* always runs, after the commit,
        with the resolved values as the widget would read them.
        """
        change_request = ChangeRequest.coerce(request, type)
        result = reduce_request(self.get_state(), change_request, self._config.state_reducer)

        proposed: dict[str, Any] = {}
        committed: tuple[str, ...] = ()
        notified: tuple[str, ...] = ()
        if isinstance(result, Change):
            proposed = self._known_changes(result.changes)
            if not proposed:
                result = NoChange(type=result.type)

        if isinstance(result, NoChange):
            _logger.debug("Transition %s produced no change", result.type)
        else:
            commit, surface = split_change(proposed, self._controlled)
            committed = self._commit(commit)
            notified = tuple(surface)
            if notified:
                _logger.debug("Surfaced controlled key(s) %s", list(notified))
            for key, value in surface.items():
                handler = self._on_change.get(key)
                if handler is not None:
                    _guarded(f"on_change[{key}]", handler, value)
            if self._config.on_state_change is not None:
                _guarded(
                    "on_state_change",
                    self._config.on_state_change,
                    {**proposed, TYPE_KEY: result.type},
                    self.get_state(),
                )

        if on_settled is not None:
            tag = result.type

            def settle() -> None:
                state = self.get_state()
                settlement = Settlement(
                    type=tag,
                    state=state,
                    changes={key: state[key] for key in proposed},
                    committed=committed,
                    notified=notified,
                    proposed=proposed,
                )
                _guarded("settle", on_settled, settlement)

            self._config.schedule(settle)
        return result

    def reset(self, on_settled: SettleCallback | None = None) -> StateChange:
        """Propose the initial snapshot through the regular reducer pipeline."""
        return self.propose(dict(self._initial_state), on_settled, type=ChangeType.RESET)

    # ------------------------------------------------------------------
    # Observers and prop getters
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the resolved state after every commit."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def register_prop_getter(self, kind: str, factory: PropsFactory) -> None:
        self._prop_getters[kind] = factory

    def get_prop_getter(self, kind: str) -> PropGetter:
        factory = self._prop_getters.get(kind)
        if factory is None:
            raise UnknownPropGetterError(f"no prop getter registered for {kind!r}")
        return PropGetter(kind, factory)
