"""Directory scanning and pre-order flattening."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .types import FlatEntry, TreeNode

LOGGER = logging.getLogger(__name__)


def _canonical(path: Path) -> str:
    try:
        return os.path.realpath(path)
    except OSError:
        return os.path.abspath(path)


def _scan_directory(
    directory: Path,
    display_name: str,
    is_last: bool,
    visited: set[str],
) -> TreeNode:
    """Scan ``directory`` recursively in OS listing order.

    Unreadable directories become childless nodes. A directory whose
    canonical path was already scanned is kept as a leaf.
    """
    key = _canonical(directory)
    if key in visited:
        LOGGER.debug("skipping already scanned directory %s", directory)
        return TreeNode(display_name, directory, is_last)
    visited.add(key)

    try:
        with os.scandir(directory) as it:
            listing = list(it)
    except OSError as exc:
        LOGGER.debug("cannot list %s: %s", directory, exc)
        return TreeNode(display_name, directory, is_last)

    children: list[TreeNode] = []
    last_index = len(listing) - 1
    for idx, child in enumerate(listing):
        child_path = Path(child.path)
        child_is_last = idx == last_index
        try:
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if is_dir:
            children.append(_scan_directory(child_path, child.name, child_is_last, visited))
        else:
            children.append(TreeNode(child.name, child_path, child_is_last))
    return TreeNode(display_name, directory, is_last, tuple(children))


def build_tree(root: Path) -> TreeNode:
    """Scan ``root`` into a ``TreeNode`` graph.

    Entries are kept in the order the filesystem lists them; nothing is
    sorted. The root node is named after its base name.
    """
    root = Path(root)
    return _scan_directory(root, root.name or str(root), True, set())


def flatten_tree(node: TreeNode, ancestor_prefixes: tuple[bool, ...] = ()) -> list[FlatEntry]:
    """Flatten ``node`` depth-first, parent before children.

    Each child's prefixes are its parent's plus one flag telling whether
    the child has following siblings.
    """
    entries = [FlatEntry(node.display_name, node.path, tuple(ancestor_prefixes))]
    last_index = len(node.children) - 1
    for idx, child in enumerate(node.children):
        entries.extend(flatten_tree(child, (*ancestor_prefixes, idx != last_index)))
    return entries
