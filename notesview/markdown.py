"""Markdown-to-ANSI rendering for the preview pane.

Highlights with Pygments' Markdown lexer through ``TerminalFormatter``,
whose output sticks to the basic SGR colors ``ansi.parse_line`` models,
then wraps every line to the pane width.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers.markup import MarkdownLexer

from .ansi import wrap_ansi_line

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def decode_text(data: bytes) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def read_text(path: Path) -> str:
    return decode_text(Path(path).read_bytes())


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def render_markdown(source: bytes | str, width: int) -> str:
    """Render Markdown ``source`` as ANSI text wrapped to ``width`` columns."""
    text = decode_text(source) if isinstance(source, bytes) else source
    text = sanitize_terminal_text(text).replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        return ""
    highlighted = highlight(text, MarkdownLexer(), TerminalFormatter())
    lines: list[str] = []
    for line in highlighted.splitlines():
        lines.extend(wrap_ansi_line(line, width))
    return "\n".join(lines) + "\n"
