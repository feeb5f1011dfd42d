from __future__ import annotations

from typing import Any

import pytest

from pytoggle.config import EngineConfig
from pytoggle.exceptions import UnknownPropGetterError
from pytoggle.handlers import call_all, is_handler_key
from pytoggle.props import merge_props
from pytoggle.state.store import StateEngine


def test_call_all_runs_in_order_with_same_arguments() -> None:
    calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    composed = call_all(
        lambda *args, **kwargs: calls.append(("a", args, kwargs)),
        None,
        lambda *args, **kwargs: calls.append(("b", args, kwargs)),
    )
    composed("event", button=1)

    assert calls == [("a", ("event",), {"button": 1}), ("b", ("event",), {"button": 1})]


def test_call_all_fails_fast() -> None:
    calls: list[str] = []

    def first() -> None:
        calls.append("first")
        raise RuntimeError("first failed")

    composed = call_all(first, lambda: calls.append("second"))

    with pytest.raises(RuntimeError, match="first failed"):
        composed()
    assert calls == ["first"]


def test_call_all_with_nothing_is_harmless() -> None:
    call_all(None, None)("ignored")


def test_is_handler_key() -> None:
    assert is_handler_key("on_click")
    assert not is_handler_key("on")
    assert not is_handler_key("on_")
    assert not is_handler_key("aria-pressed")


def test_merge_props_composes_handlers_and_overrides_attributes() -> None:
    calls: list[str] = []
    own = {"on_click": lambda event: calls.append(f"own:{event}"), "aria-pressed": False}

    merged = merge_props(
        own,
        {"on_click": lambda event: calls.append(f"caller:{event}"), "aria-pressed": True, "id": "x"},
    )
    merged["on_click"]("e")

    assert calls == ["own:e", "caller:e"]
    assert merged["aria-pressed"] is True
    assert merged["id"] == "x"


def test_merge_props_keeps_own_handler_when_override_is_none() -> None:
    calls: list[str] = []
    own = {"on_click": lambda: calls.append("own")}

    merged = merge_props(own, {"on_click": None, "on_hover": None})
    merged["on_click"]()

    assert calls == ["own"]
    assert "on_hover" not in merged


def test_prop_getter_reads_fresh_state() -> None:
    engine = StateEngine(EngineConfig(initial_state={"on": False}))
    engine.register_prop_getter("toggler", lambda: {"aria-pressed": engine.get_state("on")})
    getter = engine.get_prop_getter("toggler")

    engine.propose({"on": True})

    assert getter() == {"aria-pressed": True}
    assert getter({"title": "t"}, role="switch") == {"aria-pressed": True, "title": "t", "role": "switch"}


def test_unknown_prop_getter() -> None:
    engine = StateEngine(EngineConfig(initial_state={"on": False}))

    with pytest.raises(UnknownPropGetterError):
        engine.get_prop_getter("missing")
