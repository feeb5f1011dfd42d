"""Change requests and transition results.

Every mutation of a state bag is described by a :class:`ChangeRequest`.
The reduce step turns it into either :class:`NoChange` or :class:`Change`,
and observers are handed a :class:`Settlement` once the transition is done.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pytoggle.exceptions import InvalidChangeRequestError

TYPE_KEY = "type"


class ChangeType(StrEnum):
    """Stable tags for the semantic origin of a change."""

    SET = "set"
    TOGGLE = "toggle"
    RESET = "reset"
    FORCED = "forced"
    RELEASE = "release"


def _check_partial(value: Any, request: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidChangeRequestError(
            f"change request resolved to {type(value).__name__}, expected a mapping",
            request=request,
        )
    return dict(value)


class ChangeRequest(BaseModel):
    """A desired mutation: a literal partial state or a function of state."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    changes: dict[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any] | None]
    type: str | None = None

    @field_validator("changes", mode="before")
    @classmethod
    def _ensure_mapping_or_callable(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return dict(value)
        if callable(value):
            return value
        raise InvalidChangeRequestError(
            f"change request must be a mapping or a callable, got {type(value).__name__}",
            request=value,
        )

    @classmethod
    def coerce(cls, request: Any, type: str | None = None) -> ChangeRequest:
        """Build a request from a mapping, a callable, or an existing request.

        An explicit ``type`` wins over a ``type`` key inside a literal mapping
        or a callable's result; without either the tag is ``set``.  The key
        never stays among the changes.
        """
        if isinstance(request, ChangeRequest):
            if type is None or type == request.type:
                return request
            return request.model_copy(update={"type": type})
        if isinstance(request, Mapping):
            changes = dict(request)
            embedded = changes.pop(TYPE_KEY, None)
            return cls(changes=changes, type=type or embedded)
        if callable(request):
            return cls(changes=request, type=type)
        raise InvalidChangeRequestError(
            f"change request must be a mapping or a callable, got {request.__class__.__name__}",
            request=request,
        )

    def resolve(self, state: Mapping[str, Any]) -> tuple[dict[str, Any], str]:
        """Resolve against *state*, returning ``(partial, type_tag)``."""
        if callable(self.changes):
            partial = _check_partial(self.changes(dict(state)), self)
        else:
            partial = dict(self.changes)
        embedded = partial.pop(TYPE_KEY, None)
        return partial, self.type or embedded or ChangeType.SET


class NoChange(BaseModel):
    """The reduce step produced nothing to apply."""

    model_config = ConfigDict(frozen=True)

    type: str


class Change(BaseModel):
    """A reduced, tag-stripped change ready to commit or surface."""

    model_config = ConfigDict(frozen=True)

    changes: dict[str, Any]
    type: str

    @field_validator("changes")
    @classmethod
    def _no_type_key(cls, value: dict[str, Any]) -> dict[str, Any]:
        if TYPE_KEY in value:
            raise ValueError("the type tag must be stripped before it reaches the state bag")
        if not value:
            raise ValueError("an empty change is NoChange")
        return value


StateChange = NoChange | Change


class Settlement(BaseModel):
    """What a settle callback observes once a transition is resolved."""

    model_config = ConfigDict(frozen=True)

    type: str
    state: dict[str, Any] = Field(default_factory=dict, description="Resolved state at settle time")
    changes: dict[str, Any] = Field(default_factory=dict, description="Resolved values of the affected keys")
    committed: tuple[str, ...] = ()
    notified: tuple[str, ...] = ()
    proposed: dict[str, Any] = Field(default_factory=dict, description="Reduced change without its type tag")
