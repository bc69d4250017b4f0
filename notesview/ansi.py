"""ANSI-aware text measurement and SGR parsing.

``parse_line`` turns one line of renderer output into styled runs for the
cell painter. It models a small SGR subset (reset, bold, underline and the
eight basic foreground colors) and ignores everything else.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, replace

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
CSI = "\x1b["
TAB_STOP = 8

# SGR 30..37 in order.
PALETTE: tuple[str, ...] = ("black", "maroon", "green", "olive", "navy", "purple", "teal", "silver")

# Foreground SGR codes for every named color the UI can paint.
COLOR_SGR: dict[str, int] = {
    **{name: 30 + idx for idx, name in enumerate(PALETTE)},
    "gray": 90,
    "red": 91,
    "lime": 92,
    "yellow": 93,
    "blue": 94,
    "fuchsia": 95,
    "aqua": 96,
    "white": 97,
}


@dataclass(frozen=True)
class TextStyle:
    """Cell attributes; ``None`` colors mean the terminal default."""

    bold: bool = False
    underline: bool = False
    foreground: str | None = None
    background: str | None = None


DEFAULT_STYLE = TextStyle()


@dataclass(frozen=True)
class StyledRun:
    """A stretch of text painted with one style."""

    text: str
    style: TextStyle = DEFAULT_STYLE


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return terminal column width for ANSI-styled text."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    col = 0
    for ch in plain:
        col += char_display_width(ch, col)
    return col


def apply_sgr(params: str, style: TextStyle) -> TextStyle:
    """Fold a ``;``-separated SGR parameter list into ``style``.

    Parameters are compared numerically so zero-padded codes (``01``) work.
    Unknown or non-numeric parameters are ignored.
    """
    for part in params.split(";"):
        if not part.isdigit():
            continue
        code = int(part)
        if code == 0:
            style = DEFAULT_STYLE
        elif code == 1:
            style = replace(style, bold=True)
        elif code == 4:
            style = replace(style, underline=True)
        elif 30 <= code <= 37:
            style = replace(style, foreground=PALETTE[code - 30])
    return style


def parse_line(line: str) -> list[StyledRun]:
    """Split ``line`` into styled runs, consuming SGR escape sequences.

    Text before an escape keeps the style that was active before it. An
    escape with no terminating ``m`` ends the scan; the rest of the line is
    dropped.
    """
    runs: list[StyledRun] = []
    style = DEFAULT_STYLE
    buf: list[str] = []
    i = 0
    n = len(line)
    while i < n:
        if line.startswith(CSI, i):
            if buf:
                runs.append(StyledRun("".join(buf), style))
                buf = []
            end = line.find("m", i)
            if end < 0:
                return runs
            style = apply_sgr(line[i + len(CSI):end], style)
            i = end + 1
            continue
        buf.append(line[i])
        i += 1
    if buf:
        runs.append(StyledRun("".join(buf), style))
    return runs


def _is_reset(seq: str) -> bool:
    params = seq[len(CSI):-1]
    return any(part.isdigit() and int(part) == 0 for part in params.split(";")) or params == ""


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Wrap a styled line into chunks that fit ``width`` display columns.

    Tabs are expanded to spaces. SGR sequences opened since the last reset
    are repeated at the start of each continuation chunk so every chunk can
    be parsed on its own.
    """
    if width <= 0 or not text:
        return [""]

    wrapped: list[str] = []
    chunk: list[str] = []
    active: list[str] = []
    col = 0
    i = 0
    n = len(text)

    def flush() -> None:
        nonlocal chunk, col
        wrapped.append("".join(chunk))
        chunk = list(active)
        col = 0

    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                chunk.append(seq)
                if seq.endswith("m"):
                    if _is_reset(seq):
                        active = []
                    else:
                        active.append(seq)
                i = match.end()
                continue

        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > width and col > 0:
            flush()
            w = char_display_width(ch, col)
        if ch == "\t":
            w = min(w, width)
            chunk.append(" " * w)
        else:
            chunk.append(ch)
        col += w
        i += 1

    wrapped.append("".join(chunk))
    return wrapped
