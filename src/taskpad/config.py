"""Settings loaded from environment variables (+ optional .env).

All variables use the TASKPAD_ prefix. Paths follow the XDG base directory
layout: data under $XDG_DATA_HOME/taskpad, logs under
$XDG_STATE_HOME/taskpad/logs.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKPAD"
APP_NAME = "taskpad"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _xdg(name: str, fallback: str) -> Path:
    return Path(os.environ.get(name) or Path.home() / fallback).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    store_path: Path
    log_dir: Path
    log_level: str
    alt_screen: bool

    @staticmethod
    def from_env(dotenv_path: Optional[Path] = None) -> "Settings":
        # .env is looked up from the working directory, not from this package
        load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True), override=False)

        data_dir = _env_path(_k("DATA_DIR"), _xdg("XDG_DATA_HOME", ".local/share") / APP_NAME)
        store_path = _env_path(_k("STORE_PATH"), data_dir / "storage.json")
        log_dir = _env_path(_k("LOG_DIR"), _xdg("XDG_STATE_HOME", ".local/state") / APP_NAME / "logs")
        log_level = (os.getenv(_k("LOG_LEVEL")) or "WARNING").upper()
        alt_screen = _env_bool(_k("ALT_SCREEN"), True)

        return Settings(
            data_dir=data_dir,
            store_path=store_path,
            log_dir=log_dir,
            log_level=log_level,
            alt_screen=alt_screen,
        )
