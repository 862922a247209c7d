from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

LOG_FILENAME = "taskpad.log"


def setup_logging(log_dir: Union[str, Path], console_level: Union[int, str] = logging.WARNING) -> Path:
    """
    Configure root logging with:
    - File handler: everything, rotated at 1MB with 3 backups
    - Console handler (stderr): only the configured level and above, so the
      interactive screen stays clean

    Call this once, before the first log record.
    """
    if isinstance(console_level, str):
        console_level = getattr(logging, console_level.upper(), logging.WARNING)

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove pre-existing handlers to avoid duplicates on repeated setup.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    logging.captureWarnings(True)
    logging.getLogger(__name__).debug("Logging initialized; file: %s", log_file)
    return log_file
