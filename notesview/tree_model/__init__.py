"""Notes tree model: scanning, flattening, and row formatting.

Defines ``TreeNode``/``FlatEntry`` and the helpers that build them from
the filesystem. Trees are rebuilt wholesale after every mutation.
"""

from __future__ import annotations

from .build import build_tree, flatten_tree
from .rendering import format_tree_entry
from .types import FlatEntry, TreeNode

__all__ = [
    "TreeNode",
    "FlatEntry",
    "build_tree",
    "flatten_tree",
    "format_tree_entry",
]
