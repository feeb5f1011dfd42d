"""Prop getters: ready-to-attach bundles for interactive elements."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pytoggle.handlers import call_all, is_handler_key

PropsFactory = Callable[[], Mapping[str, Any]]


def merge_props(own: Mapping[str, Any], overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Merge caller *overrides* into the engine's *own* props.

    Display attributes are last-write-wins, so the caller's value is kept.
    Handler keys present on both sides are composed, engine handler first.
    """
    merged = dict(own)
    if not overrides:
        return merged
    for key, value in overrides.items():
        if is_handler_key(key) and key in own:
            merged[key] = call_all(own[key], value)
        elif is_handler_key(key) and value is None:
            continue
        else:
            merged[key] = value
    return merged


class PropGetter:
    """Callable building fresh props for one event kind on every call."""

    def __init__(self, kind: str, factory: PropsFactory) -> None:
        self.kind = kind
        self._factory = factory

    def __call__(self, overrides: Mapping[str, Any] | None = None, /, **kwargs: Any) -> dict[str, Any]:
        combined: dict[str, Any] = dict(overrides or {})
        combined.update(kwargs)
        return merge_props(self._factory(), combined)

    def __repr__(self) -> str:
        return f"PropGetter(kind={self.kind!r})"
