from __future__ import annotations

import pytest

from pytoggle.config import EngineConfig, identity_reducer
from pytoggle.exceptions import ToggleConfigError


def test_defaults() -> None:
    config = EngineConfig(initial_state={"on": False})

    assert config.state_reducer is identity_reducer
    assert config.strict_keys is True
    assert dict(config.controlled) == {}


def test_empty_initial_state_rejected() -> None:
    with pytest.raises(ToggleConfigError):
        EngineConfig(initial_state={})


def test_reserved_key_rejected() -> None:
    with pytest.raises(ToggleConfigError, match="reserved"):
        EngineConfig(initial_state={"on": False, "type": "x"})


def test_controlled_and_handlers_must_name_known_keys() -> None:
    with pytest.raises(ToggleConfigError, match="controlled"):
        EngineConfig(initial_state={"on": False}, controlled={"off": True})

    with pytest.raises(ToggleConfigError, match="on_change"):
        EngineConfig(initial_state={"on": False}, on_change={"off": print})


def test_from_env_reads_strict_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYTOGGLE_STRICT_KEYS", "no")

    config = EngineConfig.from_env(initial_state={"on": False})

    assert config.strict_keys is False


def test_from_env_override_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYTOGGLE_STRICT_KEYS", "off")

    config = EngineConfig.from_env(initial_state={"on": False}, strict_keys=True)

    assert config.strict_keys is True


def test_from_env_ignores_unrecognised_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYTOGGLE_STRICT_KEYS", "maybe")

    assert EngineConfig.from_env(initial_state={"on": False}).strict_keys is True
