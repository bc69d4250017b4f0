"""Selection state over the flattened notes tree."""

from __future__ import annotations

from pathlib import Path

from .tree_model import FlatEntry, build_tree, flatten_tree


def scan_flat_tree(root: Path) -> list[FlatEntry]:
    """Scan ``root`` and return its flattened rows, root first."""
    return flatten_tree(build_tree(root))


class SelectionController:
    """Own the flattened tree and the selected row index.

    The sequence is replaced, never edited, on :meth:`rebuild`; the index
    is clamped so it always points at a row while rows exist.
    """

    def __init__(self, flattened: list[FlatEntry] | None = None, index: int = 0) -> None:
        self.flattened: list[FlatEntry] = list(flattened or [])
        self.index = 0
        self._set_index(index)

    @classmethod
    def from_root(cls, root: Path) -> "SelectionController":
        return cls(scan_flat_tree(root))

    @property
    def is_empty(self) -> bool:
        return not self.flattened

    @property
    def selected(self) -> FlatEntry | None:
        if self.is_empty:
            return None
        return self.flattened[self.index]

    def _set_index(self, index: int) -> None:
        if self.is_empty:
            self.index = 0
            return
        self.index = max(0, min(index, len(self.flattened) - 1))

    def move(self, delta: int) -> bool:
        """Move the selection by ``delta`` rows without wrapping.

        Returns whether the index changed.
        """
        previous = self.index
        self._set_index(self.index + delta)
        return self.index != previous

    def rebuild(self, root: Path) -> None:
        """Rescan ``root`` from disk and clamp the index into the new rows."""
        self.flattened = scan_flat_tree(root)
        self._set_index(self.index)
