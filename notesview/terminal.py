"""Terminal control and cell-buffer screen for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, and frame output.
``Screen`` is the small driver the renderer paints through: a back buffer
of styled cells flushed as one ANSI frame per ``show()``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import signal
import subprocess
import termios
import tty
from collections.abc import Callable
from dataclasses import dataclass

from .ansi import COLOR_SGR, DEFAULT_STYLE, TextStyle, char_display_width
from .errors import TerminalInitError
from .input import read_key

LOGGER = logging.getLogger(__name__)

# Placeholder stored in the cell right of a double-width glyph.
WIDE_CONTINUATION = ""


@dataclass(frozen=True)
class Event:
    """One input event: ``kind`` is ``"key"`` or ``"resize"``."""

    kind: str
    key: str = ""


class TerminalController:
    """Manage terminal mode transitions for the TUI."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalInitError(f"Cannot initialize terminal: {exc}") from exc

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, restore the main screen buffer and tty state."""
        os.write(self.stdout_fd, b"\x1b[0m\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()


def reset_terminal() -> None:
    """Run ``stty sane`` on the controlling terminal, ignoring failures."""
    try:
        subprocess.run(["stty", "sane"], check=False)
    except OSError as exc:
        LOGGER.debug("stty sane failed: %s", exc)


def style_sgr(style: TextStyle) -> str:
    """Return the SGR sequence that switches the terminal to ``style``."""
    params = ["0"]
    if style.bold:
        params.append("1")
    if style.underline:
        params.append("4")
    if style.foreground is not None:
        params.append(str(COLOR_SGR[style.foreground]))
    if style.background is not None:
        params.append(str(COLOR_SGR[style.background] + 10))
    return "\x1b[" + ";".join(params) + "m"


def _printable(ch: str) -> str:
    if not ch or ord(ch[0]) < 32 or ord(ch[0]) == 127:
        return " "
    return ch


class Screen:
    """Cell-buffer screen driven by a ``TerminalController``."""

    def __init__(
        self,
        terminal: TerminalController,
        get_terminal_size: Callable[[tuple[int, int]], os.terminal_size] = shutil.get_terminal_size,
        key_reader: Callable[[int, int | None], str] = read_key,
    ) -> None:
        self.terminal = terminal
        self._get_terminal_size = get_terminal_size
        self._read_key = key_reader
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._cursor: tuple[int, int] | None = None
        self.width = 0
        self.height = 0
        self.cells: list[list[tuple[str, TextStyle]]] = []
        self.clear()

    def size(self) -> tuple[int, int]:
        term = self._get_terminal_size((80, 24))
        return max(1, term.columns), max(1, term.lines)

    def clear(self) -> None:
        """Blank the back buffer, re-reading the terminal size."""
        self.width, self.height = self.size()
        self.cells = [[(" ", DEFAULT_STYLE) for _ in range(self.width)] for _ in range(self.height)]

    def set_cell(self, x: int, y: int, ch: str, style: TextStyle = DEFAULT_STYLE) -> None:
        """Put ``ch`` at column ``x``, row ``y``; out-of-bounds writes are dropped."""
        if y < 0 or y >= self.height or x < 0 or x >= self.width:
            return
        row = self.cells[y]
        if char_display_width(ch, x) == 2 and ch != "\t":
            if x + 1 >= self.width:
                row[x] = (" ", style)
                return
            row[x] = (ch, style)
            row[x + 1] = (WIDE_CONTINUATION, style)
            return
        row[x] = (ch, style)

    def show_cursor(self, x: int, y: int) -> None:
        self._cursor = (x, y)

    def hide_cursor(self) -> None:
        self._cursor = None

    def compose_frame(self) -> str:
        """Build the ANSI text for the current back buffer."""
        out: list[str] = ["\x1b[?25l"]
        for y, row in enumerate(self.cells):
            out.append(f"\x1b[{y + 1};1H")
            current: TextStyle | None = None
            x = 0
            while x < len(row):
                ch, style = row[x]
                if style != current:
                    out.append(style_sgr(style))
                    current = style
                if ch == WIDE_CONTINUATION:
                    out.append(" ")
                    x += 1
                    continue
                out.append(_printable(ch))
                x += 2 if char_display_width(ch, x) == 2 else 1
        out.append("\x1b[0m")
        if self._cursor is not None:
            x, y = self._cursor
            out.append(f"\x1b[{y + 1};{x + 1}H\x1b[?25h")
        return "".join(out)

    def show(self) -> None:
        """Flush the back buffer to the terminal."""
        frame = self.compose_frame()
        os.write(self.terminal.stdout_fd, frame.encode("utf-8", errors="replace"))

    def poll_event(self) -> Event:
        """Block until the next key press or terminal resize."""
        while True:
            key = self._read_key(self.terminal.stdin_fd, self._wake_r)
            if key == "RESIZE":
                return Event("resize")
            if key:
                return Event("key", key)

    def _install_resize_wakeup(self) -> None:
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_r, False)
        os.set_blocking(self._wake_w, False)
        signal.signal(signal.SIGWINCH, lambda _signum, _frame: None)
        signal.set_wakeup_fd(self._wake_w)

    def _remove_resize_wakeup(self) -> None:
        signal.set_wakeup_fd(-1)
        signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                os.close(fd)
        self._wake_r = self._wake_w = None

    @contextlib.contextmanager
    def session(self):
        """Run the body in TUI mode with resize events wired up."""
        self._install_resize_wakeup()
        try:
            with self.terminal.raw_mode():
                yield self
        finally:
            self._remove_resize_wakeup()

    @contextlib.contextmanager
    def suspend(self):
        """Hand the terminal back to the shell for the body, then resume.

        TUI mode is re-entered even when the body raises.
        """
        self.terminal.disable_tui_mode()
        try:
            yield
        finally:
            self.terminal.enable_tui_mode()
            self.clear()
