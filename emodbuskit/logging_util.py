"""Level-filtered console logging and hex dumps in the Modbus library's style."""

from __future__ import annotations

import inspect
import os
import sys
import time
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """Log levels; a message is shown when the current level is at least its level."""

    NONE = 0
    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    VERBOSE = 6

    @property
    def letter(self) -> str:
        return "NCEWIDV"[self.value]


RED = "\x1b[1;31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[1;33m"
BLUE = "\x1b[34m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
NORM = "\x1b[0m"

_HEXDIGITS = "0123456789ABCDEF"
_LINE_LEN = 79
_ASC_OFFSET = 61
_LIMITER = "|"

_start = time.monotonic()
_level: int = LogLevel.ERROR


def _millis() -> int:
    return int((time.monotonic() - _start) * 1000)


def set_log_level(level: int) -> None:
    """Set the level up to which messages are shown."""
    global _level
    _level = int(level)


def get_log_level() -> int:
    """Return the level up to which messages are shown."""
    return _level


def file_name(path: str) -> str:
    """Return the part of ``path`` after the last slash or backslash."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


def _dump_line(offset: int, chunk: bytes) -> str:
    line = [" "] * _LINE_LEN
    line[60] = _LIMITER
    line[77] = _LIMITER
    line[78] = "\n"
    head = f"  {_LIMITER} {offset & 0xFFFF:04X}: "
    line[: len(head)] = head
    pos = len(head)
    for step, byte in enumerate(chunk):
        if step == 8:
            pos += 1
        line[pos] = _HEXDIGITS[byte >> 4]
        line[pos + 1] = _HEXDIGITS[byte & 0x0F]
        pos += 3
        line[_ASC_OFFSET + step] = chr(byte) if 32 <= byte <= 127 else "."
    return "".join(line)


def format_hex_dump(letter: str, label: str, data: bytes, address: int = 0) -> str:
    """Render ``data`` as a header line plus lines of 16 hex bytes with an ASCII column."""
    data = bytes(data)
    parts = [f"[{letter}] {label}: @{address:X}/{len(data) & 0xFFFFFFFF}:\n"]
    parts.extend(_dump_line(offset, data[offset:offset + 16]) for offset in range(0, len(data), 16))
    return "".join(parts)


def hex_dump(
    letter: str,
    label: str,
    data: bytes,
    level: int = LogLevel.NONE,
    stream: TextIO | None = None,
) -> bool:
    """Write a hex dump if ``level`` is enabled; return whether anything was written."""
    if _level < level:
        return False
    out = stream if stream is not None else sys.stdout
    out.write(format_hex_dump(letter, label, data, id(data)))
    return True


def log(level: int, message: str, stream: TextIO | None = None) -> bool:
    """Write ``message`` with a header naming time, file, line and function.

    Critical messages are red, errors yellow. Returns whether anything was written.
    """
    if _level < level:
        return False
    lvl = LogLevel(level)
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    if caller is not None:
        fname = file_name(caller.f_code.co_filename.replace(os.sep, "/"))
        line = caller.f_lineno
        func = caller.f_code.co_name
    else:
        fname, line, func = "?", 0, "?"
    del frame, caller
    text = f"[{lvl.letter}] {_millis()}| {fname:<20} [{line:4d}] {func}: {message}"
    if lvl == LogLevel.CRITICAL:
        text = RED + text + NORM
    elif lvl == LogLevel.ERROR:
        text = YELLOW + text + NORM
    out = stream if stream is not None else sys.stdout
    out.write(text)
    return True