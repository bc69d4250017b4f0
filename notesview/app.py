"""Main interactive event loop and runtime wiring.

The loop owns the selection state and passes it explicitly to the
renderer and action handlers. Every action, successful or not, is followed
by a rescan of the notes tree.
"""

from __future__ import annotations

import logging
import signal
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .actions import ActionPrompts, handle_delete, handle_move, handle_new, handle_rename
from .editor import launch_editor
from .errors import NotesError
from .prompts import get_confirmation, get_user_input, show_error
from .render import render_frame
from .selection import SelectionController
from .terminal import Screen, TerminalController, reset_terminal
from .tree_model import FlatEntry

LOGGER = logging.getLogger(__name__)

QUIT_KEYS = {"q", "Q", "ESC", "CTRL_C"}
ActionHandler = Callable[[FlatEntry, Path, ActionPrompts], None]


@dataclass
class AppState:
    root: Path
    selection: SelectionController
    tree_start: int = 0


@dataclass(frozen=True)
class KeyContext:
    """Collaborators used by ``handle_key``."""

    state: AppState
    prompts: ActionPrompts
    report_error: Callable[[str], None]
    edit_path: Callable[[Path], str | None]


def _run_action(handler: ActionHandler, entry: FlatEntry, context: KeyContext) -> None:
    state = context.state
    try:
        handler(entry, state.root, context.prompts)
    except NotesError as exc:
        LOGGER.debug("%s failed: %s", handler.__name__, exc)
        context.report_error(str(exc))
    state.selection.rebuild(state.root)


def handle_key(key: str, context: KeyContext) -> bool:
    """Dispatch one key press. Returns ``True`` when the app should quit."""
    state = context.state
    if key in QUIT_KEYS:
        return True
    if key == "UP":
        state.selection.move(-1)
        return False
    if key == "DOWN":
        state.selection.move(1)
        return False

    entry = state.selection.selected
    if entry is None:
        return False

    lowered = key.lower() if len(key) == 1 else ""
    if lowered == "e":
        if entry.path.is_file():
            error = context.edit_path(entry.path)
            if error:
                context.report_error(error)
            state.selection.rebuild(state.root)
        elif entry.path.is_dir():
            _run_action(handle_rename, entry, context)
    elif lowered == "n":
        if entry.path.is_dir():
            _run_action(handle_new, entry, context)
    elif lowered == "r":
        _run_action(handle_rename, entry, context)
    elif lowered == "d":
        _run_action(handle_delete, entry, context)
    elif lowered == "m":
        _run_action(handle_move, entry, context)
    return False


def run_main_loop(screen: Screen, context: KeyContext) -> None:
    """Render, wait for input, dispatch; repeat until a quit key."""
    state = context.state
    while True:
        state.tree_start = render_frame(screen, state.selection, state.tree_start)
        event = screen.poll_event()
        if event.kind != "key":
            continue
        if handle_key(event.key, context):
            return


def _raise_system_exit(signum: int, _frame: object) -> None:
    LOGGER.debug("received signal %s, shutting down", signum)
    raise SystemExit(0)


def install_termination_handlers() -> None:
    """Turn SIGTERM/SIGHUP into ``SystemExit`` so cleanup handlers run."""
    signal.signal(signal.SIGTERM, _raise_system_exit)
    if hasattr(signal, "SIGHUP"):
        signal.signal(signal.SIGHUP, _raise_system_exit)


def build_key_context(state: AppState, screen: Screen) -> KeyContext:
    return KeyContext(
        state=state,
        prompts=ActionPrompts(
            ask=lambda prompt, default: get_user_input(screen, prompt, default),
            confirm=lambda prompt: get_confirmation(screen, prompt),
        ),
        report_error=lambda message: show_error(screen, message),
        edit_path=lambda path: launch_editor(path, screen),
    )


def run_app(root: Path) -> None:
    """Open the notes browser on ``root`` until the user quits.

    Raises ``TerminalInitError`` when stdin is not a usable terminal.
    """
    root = Path(root)
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    screen = Screen(terminal)
    state = AppState(root=root, selection=SelectionController.from_root(root))
    LOGGER.debug("starting on %s with %d entries", root, len(state.selection.flattened))

    install_termination_handlers()
    try:
        with screen.session():
            run_main_loop(screen, build_key_context(state, screen))
    finally:
        reset_terminal()
