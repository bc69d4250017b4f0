"""Editor launch helper for external note edits.

Runs the user's editor while the screen is suspended out of TUI mode.
Returns an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

from .terminal import Screen

LOGGER = logging.getLogger(__name__)

DEFAULT_EDITOR = "vim"


def editor_command() -> list[str]:
    """Return the editor argv prefix from ``$VISUAL``/``$EDITOR`` (default ``vim``)."""
    for name in ("VISUAL", "EDITOR"):
        value = os.environ.get(name, "").strip()
        if value:
            cmd = shlex.split(value)
            if cmd:
                return cmd
    return [DEFAULT_EDITOR]


def launch_editor(target: Path, screen: Screen) -> str | None:
    cmd = [*editor_command(), str(target)]
    LOGGER.debug("launching editor: %s", cmd)
    with screen.suspend():
        try:
            completed = subprocess.run(cmd, check=False)
        except OSError as exc:
            return f"Failed to launch editor: {exc}"
    if completed.returncode != 0:
        return f"Editor exited with status {completed.returncode}"
    return None
