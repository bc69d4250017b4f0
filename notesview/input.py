"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, UTF-8 characters, and resize wakeups.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_SEQUENCE_BYTES = 32
# Token for escape sequences that map to no bound key (PageDown, F1, ...).
UNKNOWN_KEY = "UNKNOWN"
_PENDING_BYTES: list[bytes] = []

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}
_CSI_TILDE_KEYS = {
    b"1": "HOME",
    b"7": "HOME",
    b"3": "DELETE",
    b"4": "END",
    b"8": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_sequence_body(fd: int) -> bytes:
    """Read CSI/SS3 parameter bytes through the final byte (0x40-0x7E)."""
    body = b""
    while len(body) < MAX_SEQUENCE_BYTES:
        ch = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if ch is None:
            break
        body += ch
        if 0x40 <= ch[0] <= 0x7E:
            break
    return body


def _drain(fd: int) -> None:
    try:
        os.read(fd, 512)
    except BlockingIOError:
        pass


def read_key(fd: int, wake_fd: int | None = None) -> str:
    """Block until one key (or a resize wakeup) arrives and return its token.

    Printable input comes back as the character itself. Named keys use
    upper-case tokens such as ``UP``, ``ENTER`` or ``CTRL_C``. Escape sequences
    with no binding come back as ``UNKNOWN``; ``ESC`` is only a lone escape.
    A byte arriving on ``wake_fd`` returns ``RESIZE``.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        watched = [fd] if wake_fd is None else [fd, wake_fd]
        ready, _, _ = select.select(watched, [], [])
        if wake_fd is not None and wake_fd in ready:
            _drain(wake_fd)
            return "RESIZE"
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\x03":
        return "CTRL_C"
    if ch == b"\t":
        return "TAB"
    if ch in {b"\x08", b"\x7f"}:
        return "BACKSPACE"
    if ch in {b"\r", b"\n"}:
        return "ENTER"

    if ch != b"\x1b":
        needed = _utf8_length(ch[0]) - 1
        while needed > 0:
            more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if more is None:
                break
            ch += more
            needed -= 1
        return ch.decode("utf-8", errors="replace")

    # Escape / arrow key sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq not in {b"[", b"O"}:
        _PENDING_BYTES.append(seq)
        return "ESC"
    body = _read_sequence_body(fd)
    if not body:
        return "ESC"
    final = body[-1:]
    params = body[:-1]
    if final in _CSI_FINAL_KEYS and params in {b"", b"1"}:
        return _CSI_FINAL_KEYS[final]
    if final == b"~" and params in _CSI_TILDE_KEYS:
        return _CSI_TILDE_KEYS[params]
    return UNKNOWN_KEY
