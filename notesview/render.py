"""Frame rendering for the split tree/preview view.

Draws the tree pane, the separators, the Markdown preview of the selected
file, and the footer of key hints into a ``Screen`` back buffer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .ansi import DEFAULT_STYLE, StyledRun, TextStyle, char_display_width, parse_line
from .markdown import render_markdown
from .prompts import clear_area, render_text
from .selection import SelectionController
from .terminal import Screen
from .tree_model import format_tree_entry

LOGGER = logging.getLogger(__name__)

SELECTED_STYLE = TextStyle(foreground="white", background="blue")
FILE_HINT = "E: Edit | M: Move | R: Rename | D: Delete | Q: Quit"
DIR_HINT = "N: New | M: Move | R: Rename | D: Delete | Q: Quit"

MarkdownRenderer = Callable[[bytes, int], str]


@dataclass(frozen=True)
class Layout:
    """Screen geometry derived from the terminal size."""

    width: int
    height: int
    separator_x: int
    preview_x: int
    content_rows: int

    @property
    def preview_width(self) -> int:
        return max(1, self.width - self.preview_x)


def compute_layout(width: int, height: int) -> Layout:
    separator_x = width // 5
    return Layout(
        width=width,
        height=height,
        separator_x=separator_x,
        preview_x=separator_x + 3,
        content_rows=max(0, height - 2),
    )


def footer_hint(path: Path) -> str:
    return DIR_HINT if path.is_dir() else FILE_HINT


def scroll_tree_start(selected: int, tree_start: int, visible_rows: int, total: int) -> int:
    """Return a tree viewport start that keeps ``selected`` on screen."""
    if visible_rows <= 0:
        return 0
    if selected < tree_start:
        tree_start = selected
    elif selected >= tree_start + visible_rows:
        tree_start = selected - visible_rows + 1
    return max(0, min(tree_start, max(0, total - visible_rows)))


def paint_runs(screen: Screen, x: int, y: int, runs: list[StyledRun], max_x: int) -> None:
    """Paint styled runs left to right, advancing by each glyph's width."""
    col = x
    for run in runs:
        for ch in run.text:
            w = char_display_width(ch, col - x)
            if col + w > max_x:
                return
            if ch == "\t":
                for offset in range(w):
                    screen.set_cell(col + offset, y, " ", run.style)
            else:
                screen.set_cell(col, y, ch, run.style)
            col += w


def render_preview(
    screen: Screen,
    path: Path,
    layout: Layout,
    renderer: MarkdownRenderer = render_markdown,
) -> None:
    """Render the Markdown preview of ``path``; directories clear the pane."""
    clear_area(screen, layout.preview_x, 0, layout.width, layout.content_rows)
    if not path.is_file():
        return
    try:
        source = path.read_bytes()
    except OSError as exc:
        LOGGER.debug("cannot read %s for preview: %s", path, exc)
        return
    rendered = renderer(source, layout.preview_width)
    for row, line in enumerate(rendered.splitlines(), start=1):
        if row >= layout.content_rows:
            break
        paint_runs(screen, layout.preview_x, row, parse_line(line), layout.width)


def render_tree_pane(
    screen: Screen,
    selection: SelectionController,
    tree_start: int,
    layout: Layout,
) -> None:
    for row, idx in enumerate(range(tree_start, len(selection.flattened))):
        if row >= layout.content_rows:
            break
        entry = selection.flattened[idx]
        style = SELECTED_STYLE if idx == selection.index else DEFAULT_STYLE
        line = format_tree_entry(entry)
        paint_runs(screen, 0, row, [StyledRun(line, style)], layout.separator_x)


def render_frame(
    screen: Screen,
    selection: SelectionController,
    tree_start: int = 0,
    renderer: MarkdownRenderer = render_markdown,
) -> int:
    """Compose and show one full frame; returns the tree viewport start used."""
    screen.clear()
    width, height = screen.size()
    layout = compute_layout(width, height)

    for y in range(layout.content_rows):
        screen.set_cell(layout.separator_x, y, "│")

    tree_start = scroll_tree_start(
        selection.index,
        tree_start,
        layout.content_rows,
        len(selection.flattened),
    )
    selected = selection.selected
    if selected is not None:
        render_preview(screen, selected.path, layout, renderer)
    render_tree_pane(screen, selection, tree_start, layout)

    if height >= 2:
        for x in range(width):
            screen.set_cell(x, height - 2, "─")
    clear_area(screen, 0, height - 1, width, height)
    if selected is not None:
        render_text(screen, 0, height - 1, footer_hint(selected.path))
    screen.show()
    return tree_start
