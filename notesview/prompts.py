"""Bottom-row prompts: line input, yes/no confirmation, error banner."""

from __future__ import annotations

from .ansi import DEFAULT_STYLE, TextStyle, char_display_width, display_width
from .terminal import Screen

ERROR_STYLE = TextStyle(foreground="red")
CANCEL_KEYS = {"ESC", "CTRL_C"}


def clear_area(screen: Screen, x1: int, y1: int, x2: int, y2: int) -> None:
    """Blank the rectangle ``[x1, x2) x [y1, y2)``."""
    for y in range(y1, y2):
        for x in range(x1, x2):
            screen.set_cell(x, y, " ")


def render_text(screen: Screen, x: int, y: int, text: str, style: TextStyle = DEFAULT_STYLE) -> int:
    """Paint ``text`` from column ``x``; returns the column after the last glyph."""
    col = x
    for ch in text:
        screen.set_cell(col, y, ch, style)
        col += char_display_width(ch, col)
    return col


def _prompt_row(screen: Screen, text: str, style: TextStyle = DEFAULT_STYLE) -> int:
    width, height = screen.size()
    y = height - 1
    clear_area(screen, 0, y, width, height)
    render_text(screen, 0, y, text, style)
    return y


def get_user_input(screen: Screen, prompt: str, default: str = "") -> str | None:
    """Edit one line of text on the bottom row.

    Enter returns the text; Esc or Ctrl-C cancel with ``None``.
    """
    buf = list(default)
    cursor = len(buf)
    while True:
        y = _prompt_row(screen, prompt + "".join(buf))
        screen.show_cursor(display_width(prompt + "".join(buf[:cursor])), y)
        screen.show()

        event = screen.poll_event()
        if event.kind != "key":
            screen.clear()
            continue
        key = event.key
        if key in CANCEL_KEYS:
            screen.hide_cursor()
            return None
        if key == "ENTER":
            screen.hide_cursor()
            return "".join(buf)
        if key == "BACKSPACE":
            if cursor > 0:
                del buf[cursor - 1]
                cursor -= 1
        elif key == "DELETE":
            if cursor < len(buf):
                del buf[cursor]
        elif key == "LEFT":
            cursor = max(0, cursor - 1)
        elif key == "RIGHT":
            cursor = min(len(buf), cursor + 1)
        elif key == "HOME":
            cursor = 0
        elif key == "END":
            cursor = len(buf)
        elif len(key) == 1 and key.isprintable():
            buf.insert(cursor, key)
            cursor += 1


def get_confirmation(screen: Screen, prompt: str) -> bool:
    """Ask a yes/no question; anything but ``y`` ends as no."""
    while True:
        _prompt_row(screen, prompt)
        screen.show()
        event = screen.poll_event()
        if event.kind != "key":
            screen.clear()
            continue
        if event.key in {"y", "Y"}:
            return True
        if event.key in {"n", "N", "ENTER"} or event.key in CANCEL_KEYS:
            return False


def show_error(screen: Screen, message: str) -> None:
    """Show ``message`` in red on the bottom row and wait for any event."""
    _prompt_row(screen, f"Error: {message} (Press any key to continue)", ERROR_STYLE)
    screen.show()
    screen.poll_event()
