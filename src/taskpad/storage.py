"""Persistence helpers: a JSON key/value file standing in for local storage.

The file holds string-valued items. The task collection is one JSON array
serialized under the "tasks" key and fully overwritten on every save; the
theme preference lives under "theme".
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from taskpad.theme import THEMES, DEFAULT_THEME

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
THEME_KEY = "theme"

TaskRecord = Dict[str, Any]


class StorageError(Exception):
    """The store file could not be read, parsed or written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class Storage:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    # -------------------- raw items --------------------
    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Cannot read store %s: %s", self.path, exc)
            raise StorageError(self.path, str(exc)) from exc
        if not isinstance(data, dict):
            raise StorageError(self.path, "top-level value is not an object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # write beside the store, then swap it in so a failed dump leaves the old file
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=self.path.parent,
                                             prefix=self.path.name + '.', suffix='.tmp',
                                             delete=False) as f:
                tmp_name = f.name
                json.dump(data, f, indent=4)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.error("Cannot write store %s: %s", self.path, exc)
            raise StorageError(self.path, str(exc)) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)
        logger.debug("Wrote %s to %s", key, self.path)

    # -------------------- tasks --------------------
    def load_tasks(self) -> List[TaskRecord]:
        """Load the task collection; a missing file or key yields []."""
        saved = self.get_item(TASKS_KEY)
        if not saved:
            return []
        try:
            records = json.loads(saved)
        except json.JSONDecodeError as exc:
            raise StorageError(self.path, f"corrupt '{TASKS_KEY}' value: {exc}") from exc
        if not isinstance(records, list):
            raise StorageError(self.path, f"'{TASKS_KEY}' is not a list")
        return [r for r in records if isinstance(r, dict)]

    def save_tasks(self, records: List[TaskRecord]) -> None:
        self.set_item(TASKS_KEY, json.dumps(records))

    # -------------------- theme --------------------
    def load_theme(self) -> str:
        theme = self.get_item(THEME_KEY)
        return theme if theme in THEMES else DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        self.set_item(THEME_KEY, theme)
