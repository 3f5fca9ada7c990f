from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console

from .backends import Backend

logger = logging.getLogger(__name__)


@dataclass
class Position:
    x: int = 0
    y: int = 0


def byte_offset(text: str, position: int, encoding: str = "utf-8") -> int:
    """Byte offset of code point ``position`` in the encoded ``text``.

    Editing operations always clamp positions, so anything past the end of the
    text is a programming error.
    """
    offset = 0
    for index, ch in enumerate(text):
        if index == position:
            return offset
        offset += len(ch.encode(encoding))
    if position == len(text):
        return offset
    raise IndexError(f"code point position {position} outside of text range")


class Screen:
    """Cell-level drawing on top of a terminal backend.

    ``position`` is where the next cell lands. While the screen is closed all
    output goes to the process stream instead of the backend.
    """

    def __init__(self, backend: Backend | None = None, console: Console | None = None):
        self.backend = backend
        self.console = console or Console(highlight=False)
        self.position = Position()
        self.width = 80
        self.height = 24
        self.closed = True

    def open(self, backend: Backend) -> None:
        self.backend = backend
        self.width, self.height = backend.size()
        self.position = Position()
        self.closed = False
        logger.debug("screen opened %dx%d", self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        logger.debug("screen resized to %dx%d", width, height)

    def clear(self) -> None:
        if self.backend is not None and not self.closed:
            self.backend.clear()

    def clear_area(self, start: Position, end: Position) -> None:
        if end.y < start.y or end.x < 0 or self.backend is None:
            return
        last_column = self.width - 1
        for y in range(start.y, end.y + 1):
            first = start.x if y == start.y else 0
            stop = last_column if y < end.y else min(end.x, last_column)
            for x in range(first, stop + 1):
                self.backend.set_cell(x, y, " ")

    def draw_text(self, text: str, cursor: int = -1) -> None:
        """Draw ``text`` from the current position.

        ``\\r`` returns to column zero and ``\\n`` starts a new row. The hardware
        cursor is placed on the cell of code point ``cursor``; -1 leaves it alone.
        """
        backend = self.backend
        if backend is None:
            return
        pos = self.position
        drawn = 0
        for ch in text:
            if drawn == cursor:
                backend.set_cursor(pos.x, pos.y)
            if ch == "\r":
                pos.x = 0
                continue
            if ch == "\n":
                pos.x = 0
                pos.y += 1
                continue
            backend.set_cell(pos.x, pos.y, ch)
            pos.x += 1
            if pos.x >= self.width:
                pos.x = 0
                pos.y += 1
            drawn += 1
        if drawn == cursor:
            backend.set_cursor(pos.x, pos.y)
        backend.flush()

    def flush(self) -> None:
        if self.backend is not None and not self.closed:
            self.backend.flush()

    def write(self, text: str) -> None:
        if self.closed:
            self.console.file.write(text)
            self.console.file.flush()
        else:
            self.draw_text(text)

    def printf(self, fmt: str, *args: object) -> None:
        self.write(fmt % args if args else fmt)

    def println(self, *objects: object) -> None:
        self.write(" ".join(str(obj) for obj in objects) + "\n")
