from __future__ import annotations

import pytest

from northstar_coach.config import Config


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("NORTHSTAR_LOG_FORMAT", "NORTHSTAR_LOG_LEVEL", "NORTHSTAR_ACTION_LIMIT"):
        monkeypatch.delenv(name, raising=False)


def test_config_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    cfg = Config.from_env()
    assert cfg == Config(log_format="json", log_level="INFO", action_limit=4)


def test_config_from_env_normalizes_values(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("NORTHSTAR_LOG_FORMAT", " Text ")
    monkeypatch.setenv("NORTHSTAR_LOG_LEVEL", "debug")
    monkeypatch.setenv("NORTHSTAR_ACTION_LIMIT", "2")

    cfg = Config.from_env()
    assert cfg.log_format == "text"
    assert cfg.log_level == "DEBUG"
    assert cfg.action_limit == 2


def test_config_from_env_rejects_unknown_log_format(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("NORTHSTAR_LOG_FORMAT", "xml")

    with pytest.raises(RuntimeError, match="NORTHSTAR_LOG_FORMAT must be 'json' or 'text'"):
        Config.from_env()


def test_config_from_env_rejects_non_integer_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("NORTHSTAR_ACTION_LIMIT", "many")

    with pytest.raises(RuntimeError, match="NORTHSTAR_ACTION_LIMIT must be an integer"):
        Config.from_env()


def test_config_from_env_rejects_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("NORTHSTAR_LOG_LEVEL", "chatty")

    with pytest.raises(RuntimeError, match="NORTHSTAR_LOG_LEVEL is not a log level: CHATTY"):
        Config.from_env()
