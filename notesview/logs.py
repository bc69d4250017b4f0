"""Opt-in debug logging to a file under the user log directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

DEBUG_ENV_VAR = "NOTESVIEW_DEBUG"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def log_file_path() -> Path:
    return Path(user_log_dir("notesview")) / "notesview.log"


def configure_logging() -> Path | None:
    """Enable DEBUG logging when ``NOTESVIEW_DEBUG`` is set.

    The terminal belongs to the UI, so records go to a file. Returns the
    log file path, or ``None`` when logging stays off.
    """
    if not os.environ.get(DEBUG_ENV_VAR):
        return None
    path = log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(filename=str(path), level=logging.DEBUG, format=LOG_FORMAT)
    return path
