# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskpad.config import Settings
from taskpad.logging_setup import setup_logging


def test_defaults_follow_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TASKPAD_DATA_DIR", "TASKPAD_STORE_PATH", "TASKPAD_LOG_DIR",
                 "TASKPAD_LOG_LEVEL", "TASKPAD_ALT_SCREEN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))

    settings = Settings.from_env(dotenv_path=tmp_path / "missing.env")
    assert settings.data_dir == tmp_path / "data" / "taskpad"
    assert settings.store_path == settings.data_dir / "storage.json"
    assert settings.log_dir == tmp_path / "state" / "taskpad" / "logs"
    assert settings.log_level == "WARNING"
    assert settings.alt_screen is True


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKPAD_STORE_PATH", raising=False)
    monkeypatch.setenv("TASKPAD_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKPAD_ALT_SCREEN", "off")

    settings = Settings.from_env(dotenv_path=tmp_path / "missing.env")
    assert settings.store_path == tmp_path / "storage.json"
    assert settings.log_level == "DEBUG"
    assert settings.alt_screen is False


def test_dotenv_file_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # register the variable with monkeypatch so the value load_dotenv sets is undone
    monkeypatch.setenv("TASKPAD_STORE_PATH", "placeholder")
    monkeypatch.delenv("TASKPAD_STORE_PATH")
    env_file = tmp_path / ".env"
    env_file.write_text(f"TASKPAD_STORE_PATH={tmp_path / 'from-dotenv.json'}\n")

    settings = Settings.from_env(dotenv_path=env_file)
    assert settings.store_path == tmp_path / "from-dotenv.json"


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = setup_logging(tmp_path / "logs", "INFO")
    logging.getLogger("taskpad.test").debug("hello file")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert log_file.exists()
    assert "hello file" in log_file.read_text()
