"""Formatting helpers for tree rows."""

from __future__ import annotations

from .types import FlatEntry

BRANCH_MORE = "├─ "
BRANCH_LAST = "└─ "
INDENT_BAR = "│  "
INDENT_BLANK = "   "


def format_tree_entry(entry: FlatEntry) -> str:
    """Render one flattened entry as its indented display line.

    Ancestor levels draw a bar when that ancestor has following siblings
    and blanks otherwise; the entry's own level draws a tee or a corner.
    The root (no prefixes) is just its name.
    """
    prefixes = entry.depth_prefixes
    if not prefixes:
        return entry.display_name
    parts = [INDENT_BAR if more else INDENT_BLANK for more in prefixes[:-1]]
    parts.append(BRANCH_MORE if prefixes[-1] else BRANCH_LAST)
    parts.append(entry.display_name)
    return "".join(parts)
