# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from taskpad.storage import Storage
from taskpad.store import TaskStore


class FakeClock:
    """Deterministic epoch-ms clock; advances one second per call."""

    def __init__(self, start: int = 1_717_200_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        value = self.now
        self.now += 1000
        return value


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage(tmp_path: Path) -> Storage:
    return Storage(tmp_path / "storage.json")


@pytest.fixture()
def store(storage: Storage, clock: FakeClock) -> TaskStore:
    return TaskStore(storage=storage, clock=clock)


@pytest.fixture()
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[dict]:
    """Environment for CliRunner: isolated store and log directory, no colors."""
    env = {
        "TASKPAD_STORE_PATH": str(tmp_path / "cli-store.json"),
        "TASKPAD_LOG_DIR": str(tmp_path / "logs"),
        "TASKPAD_ALT_SCREEN": "0",
        "NO_COLOR": "1",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    yield env
