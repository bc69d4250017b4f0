"""Filesystem-mutating actions: new, rename, move, delete.

Each handler checks its preconditions before touching the disk, asks for
input through ``ActionPrompts``, and performs a single mutation (moves may
first create missing parents, after confirmation). Handlers return ``None``
when the action finished or was cancelled, and raise ``NotesError``
subclasses otherwise. Callers rebuild the tree afterwards either way.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import (
    AlreadyExists,
    InvalidInput,
    IOFailure,
    RootProtected,
    SelfReferentialMove,
)
from .paths import is_same_or_descendant, relative_to_root, resolve_and_validate
from .tree_model import FlatEntry

LOGGER = logging.getLogger(__name__)

OVERWRITE_RENAME_PROMPT = "A file or directory with that name already exists. Overwrite? (y/N): "
OVERWRITE_MOVE_PROMPT = "Destination exists. Overwrite? (y/N): "
CREATE_PARENTS_PROMPT = "Directory does not exist. Create parent directories and move? (y/N): "


@dataclass(frozen=True)
class ActionPrompts:
    """User interaction required by action handlers.

    ``ask(prompt, default)`` returns the typed text or ``None`` on cancel;
    ``confirm(prompt)`` returns the yes/no answer.
    """

    ask: Callable[[str, str], str | None]
    confirm: Callable[[str], bool]


def _same_path(a: Path, b: Path) -> bool:
    return os.path.abspath(a) == os.path.abspath(b)


def handle_new(entry: FlatEntry, root: Path, prompts: ActionPrompts) -> None:
    """Create a file, or a directory when the input ends with ``/``."""
    if not entry.path.is_dir():
        raise InvalidInput(f"Cannot create new file or directory inside a file: {entry.path}")

    current = relative_to_root(entry.path, root)
    default = "" if current == "." else current + "/"
    name = prompts.ask("Enter new name: ", default)
    if not name:
        return

    target = resolve_and_validate(name, root)
    if target.exists():
        raise AlreadyExists(str(target))

    if name.endswith("/"):
        try:
            target.mkdir(parents=True)
        except OSError as exc:
            raise IOFailure(f"error creating directory {target}: {exc}") from exc
        LOGGER.debug("created directory %s", target)
        return

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure(f"error creating directory {target.parent}: {exc}") from exc
    try:
        with open(target, "x", encoding="utf-8"):
            pass
    except FileExistsError as exc:
        raise AlreadyExists(str(target)) from exc
    except OSError as exc:
        raise IOFailure(f"error creating file {target}: {exc}") from exc
    LOGGER.debug("created file %s", target)


def handle_rename(entry: FlatEntry, root: Path, prompts: ActionPrompts) -> None:
    """Rename the entry in place, keeping it in its parent directory."""
    if _same_path(entry.path, root):
        raise RootProtected("Cannot rename the root directory")

    current = entry.path.name
    new_name = prompts.ask("Enter new name: ", current)
    if not new_name or new_name == current:
        return
    if "/" in new_name or os.sep in new_name or new_name in {".", ".."}:
        raise InvalidInput(f"Invalid name: {new_name}")

    target = entry.path.parent / new_name
    if os.path.lexists(target) and not prompts.confirm(OVERWRITE_RENAME_PROMPT):
        return

    try:
        os.rename(entry.path, target)
    except OSError as exc:
        raise IOFailure(f"error renaming {entry.path} to {target}: {exc}") from exc
    LOGGER.debug("renamed %s to %s", entry.path, target)


def handle_move(entry: FlatEntry, root: Path, prompts: ActionPrompts) -> None:
    """Move the entry to a root-relative (or absolute in-root) destination."""
    if _same_path(entry.path, root):
        raise RootProtected("Cannot move the root directory")

    current = relative_to_root(entry.path, root)
    raw = prompts.ask("Enter new path: ", current)
    if not raw or raw == current:
        return

    target = resolve_and_validate(raw, root)
    if _same_path(target, entry.path):
        return
    if is_same_or_descendant(target, entry.path):
        raise SelfReferentialMove()

    if os.path.lexists(target) and not prompts.confirm(OVERWRITE_MOVE_PROMPT):
        return

    parent = target.parent
    if not parent.exists():
        if not prompts.confirm(CREATE_PARENTS_PROMPT):
            return
        try:
            parent.mkdir(parents=True)
        except OSError as exc:
            raise IOFailure(f"error creating parent directory {parent}: {exc}") from exc

    try:
        os.rename(entry.path, target)
    except OSError as exc:
        raise IOFailure(f"error moving {entry.path} to {target}: {exc}") from exc
    LOGGER.debug("moved %s to %s", entry.path, target)


def handle_delete(entry: FlatEntry, root: Path, prompts: ActionPrompts) -> None:
    """Delete the entry (directories recursively) after confirmation."""
    if _same_path(entry.path, root):
        raise RootProtected("Cannot delete the root directory")
    if not prompts.confirm(f"Are you sure you want to delete {entry.path}? (y/N): "):
        return

    path = entry.path
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise IOFailure(f"error deleting {path}: {exc}") from exc
    LOGGER.debug("deleted %s", path)
