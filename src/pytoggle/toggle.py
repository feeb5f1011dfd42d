"""Toggle: an on/off widget engine built on :class:`StateEngine`.

The visual control is not part of this package.  A host renders whatever it
likes from :meth:`Toggle.get_state_and_helpers` and attaches
:meth:`Toggle.get_toggler_props` to its clickable element.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pytoggle.config import EngineConfig, Scheduler, StateReducer, identity_reducer, run_now
from pytoggle.state.changes import ChangeType, Settlement, StateChange
from pytoggle.state.store import StateEngine

ON_KEY = "on"
TOGGLER = "toggler"


@dataclass(frozen=True)
class ToggleHelpers:
    """Render payload: current value plus the actions a view may bind."""

    on: bool
    toggle: Callable[..., StateChange]
    reset: Callable[[], StateChange]
    get_toggler_props: Callable[..., dict[str, Any]]


class Toggle:
    """On/off widget with a state reducer hook and an optionally controlled ``on``.

    Parameters mirror what a consumer passes to the widget: ``initial_on``
    seeds the internal value, ``on`` takes ownership of it, ``on_toggle``
    and ``on_reset`` are told the resulting value after each transition.
    When ``on`` is controlled, ``on_toggle`` receives the value the widget
    wants, and the owner decides whether to pass it back in.
    """

    def __init__(
        self,
        *,
        initial_on: bool = False,
        on: bool | None = None,
        on_toggle: Callable[[bool], None] | None = None,
        on_reset: Callable[[bool], None] | None = None,
        on_state_change: Callable[[dict[str, Any], dict[str, Any]], None] | None = None,
        state_reducer: StateReducer = identity_reducer,
        render: Callable[[ToggleHelpers], Any] | None = None,
        schedule: Scheduler = run_now,
    ) -> None:
        self._on_toggle = on_toggle
        self._on_reset = on_reset
        self._render = render
        self.engine = StateEngine(
            EngineConfig(
                initial_state={ON_KEY: initial_on},
                state_reducer=state_reducer,
                controlled={ON_KEY: on},
                on_state_change=on_state_change,
                schedule=schedule,
            )
        )
        self.engine.register_prop_getter(TOGGLER, self._toggler_props)

    @property
    def on(self) -> bool:
        return self.engine.get_state(ON_KEY)

    @property
    def is_controlled(self) -> bool:
        return self.engine.is_controlled(ON_KEY)

    def set_props(self, *, on: bool | None = None) -> None:
        """Pass a new externally owned value (``None`` hands ``on`` back to the widget)."""
        self.engine.set_props(on=on)

    def _settled(self, handler: Callable[[bool], None] | None) -> Callable[[Settlement], None]:
        def settle(settlement: Settlement) -> None:
            if handler is None:
                return
            if ON_KEY in settlement.notified:
                handler(settlement.proposed[ON_KEY])
            else:
                handler(settlement.state[ON_KEY])

        return settle

    def toggle(self, *, type: str = ChangeType.TOGGLE) -> StateChange:
        return self.engine.propose(
            lambda state: {ON_KEY: not state[ON_KEY]},
            self._settled(self._on_toggle),
            type=type,
        )

    def reset(self) -> StateChange:
        return self.engine.reset(self._settled(self._on_reset))

    def _handle_click(self, *_args: Any, **_kwargs: Any) -> None:
        self.toggle()

    def _toggler_props(self) -> dict[str, Any]:
        return {"on_click": self._handle_click, "aria-pressed": self.on}

    def get_toggler_props(self, overrides: Mapping[str, Any] | None = None, /, **kwargs: Any) -> dict[str, Any]:
        return self.engine.get_prop_getter(TOGGLER)(overrides, **kwargs)

    def get_state_and_helpers(self) -> ToggleHelpers:
        return ToggleHelpers(
            on=self.on,
            toggle=self.toggle,
            reset=self.reset,
            get_toggler_props=self.get_toggler_props,
        )

    def render(self) -> Any:
        """Hand the render payload to the consumer's ``render`` callable."""
        helpers = self.get_state_and_helpers()
        if self._render is None:
            return helpers
        return self._render(helpers)
