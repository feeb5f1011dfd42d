"""pytoggle - Controllable state engine for interactive widgets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytoggle")
except PackageNotFoundError:
    __version__ = "0+local"
from pytoggle.config import EngineConfig, identity_reducer, run_now
from pytoggle.exceptions import (
    InvalidChangeRequestError,
    ToggleConfigError,
    ToggleError,
    UnknownPropGetterError,
    UnknownStateKeyError,
)
from pytoggle.handlers import call_all, is_handler_key
from pytoggle.props import PropGetter, merge_props
from pytoggle.state.changes import Change, ChangeRequest, ChangeType, NoChange, Settlement, StateChange
from pytoggle.state.store import StateEngine
from pytoggle.toggle import Toggle, ToggleHelpers

__all__ = [
    "__version__",
    "Change",
    "ChangeRequest",
    "ChangeType",
    "EngineConfig",
    "InvalidChangeRequestError",
    "NoChange",
    "PropGetter",
    "Settlement",
    "StateChange",
    "StateEngine",
    "Toggle",
    "ToggleConfigError",
    "ToggleError",
    "ToggleHelpers",
    "UnknownPropGetterError",
    "UnknownStateKeyError",
    "call_all",
    "identity_reducer",
    "is_handler_key",
    "merge_props",
    "run_now",
]
