"""Tree datatypes shared by the scanner, selection, and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TreeNode:
    """One scanned filesystem node with nested children (empty for files)."""

    display_name: str
    path: Path
    is_last: bool = True
    children: tuple["TreeNode", ...] = ()


@dataclass(frozen=True)
class FlatEntry:
    """One render-ready tree row.

    ``depth_prefixes`` holds one flag per ancestor level: ``True`` when the
    node on that level still has following siblings (continuing bar),
    ``False`` when it was the last child (corner).
    """

    display_name: str
    path: Path
    depth_prefixes: tuple[bool, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.depth_prefixes)
