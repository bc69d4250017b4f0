"""Resolve user-typed paths against the notes root.

Every create/move destination goes through :func:`resolve_and_validate`,
which canonicalizes textually (the target may not exist yet) and rejects
anything that lands outside the root.
"""

from __future__ import annotations

import os
from pathlib import Path

from .errors import BoundaryViolation


def expand_home(raw: str) -> str:
    """Expand a leading ``~`` to the current user's home directory."""
    if not raw.startswith("~"):
        return raw
    rest = raw[1:].lstrip("/" + os.sep)
    return os.path.join(str(Path.home()), rest)


def resolve_and_validate(raw: str, root: Path) -> Path:
    """Return the canonical absolute path for ``raw`` inside ``root``.

    Relative input is joined onto ``root``; absolute input is kept. ``.``
    and ``..`` segments are collapsed before the boundary check. Raises
    :class:`BoundaryViolation` when the result is not ``root`` or below it.
    """
    root_str = os.path.normpath(str(root))
    expanded = expand_home(raw)
    resolved = os.path.normpath(os.path.join(root_str, expanded))
    relative = os.path.relpath(resolved, root_str)
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        raise BoundaryViolation(raw)
    return Path(resolved)


def is_same_or_descendant(path: Path, ancestor: Path) -> bool:
    """Return whether ``path`` equals ``ancestor`` or lies beneath it.

    Compares absolute paths with a trailing-separator prefix test so that
    ``/notes/dir2`` is not considered inside ``/notes/dir``.
    """
    candidate = os.path.abspath(str(path))
    base = os.path.abspath(str(ancestor))
    if candidate == base:
        return True
    return candidate.startswith(base.rstrip(os.sep) + os.sep)


def relative_to_root(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` as typed in prompts (``"."`` for root)."""
    return os.path.relpath(os.path.abspath(str(path)), os.path.abspath(str(root)))
