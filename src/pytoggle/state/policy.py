"""Deterministic transition policy.

This module contains the pure parts of a transition: the control table view,
the reduce step, and the split between committed and surfaced keys.  It never
touches an engine's state bag.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pytoggle.config import StateReducer
from pytoggle.exceptions import InvalidChangeRequestError
from pytoggle.state.changes import TYPE_KEY, Change, ChangeRequest, NoChange, StateChange


def is_controlled(controlled: Mapping[str, Any], key: str) -> bool:
    """A key is controlled while the consumer supplies a non-``None`` value."""
    return controlled.get(key) is not None


def resolve_state(internal: Mapping[str, Any], controlled: Mapping[str, Any]) -> dict[str, Any]:
    """Merge the internal bag with external values; external wins for controlled keys."""
    return {key: controlled[key] if is_controlled(controlled, key) else value for key, value in internal.items()}


def strip_type(changes: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in changes.items() if key != TYPE_KEY}


def reduce_request(
    state: Mapping[str, Any],
    request: ChangeRequest,
    reducer: StateReducer,
) -> StateChange:
    """Resolve *request* against *state* and pass it through *reducer* once.

    The reducer sees the proposed change with its ``type`` tag.  An empty or
    ``None`` result is a veto and yields :class:`NoChange`.
    """
    partial, tag = request.resolve(state)
    proposed = {**partial, TYPE_KEY: tag}
    reduced = reducer(dict(state), proposed)
    if reduced is None:
        return NoChange(type=tag)
    if not isinstance(reduced, Mapping):
        raise InvalidChangeRequestError(
            f"state reducer returned {type(reduced).__name__}, expected a mapping",
            request=request,
        )
    changes = strip_type(reduced)
    if not changes:
        return NoChange(type=tag)
    return Change(changes=changes, type=reduced.get(TYPE_KEY) or tag)


def split_change(
    changes: Mapping[str, Any],
    controlled: Mapping[str, Any],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a change into ``(to_commit, to_surface)`` by control state."""
    commit: dict[str, Any] = {}
    surface: dict[str, Any] = {}
    for key, value in changes.items():
        if is_controlled(controlled, key):
            surface[key] = value
        else:
            commit[key] = value
    return commit, surface
