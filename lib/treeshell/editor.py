from __future__ import annotations

import logging
from dataclasses import dataclass, field

from prompt_toolkit.keys import Keys

from .errors import NotRunningError
from .events import ErrorEvent, Event, KeyEvent, ResizeEvent
from .screen import Position, Screen

logger = logging.getLogger(__name__)


@dataclass
class EditorState:
    buffer: str = ""
    cursor: int = 0
    origin: Position = field(default_factory=Position)
    mask: str | None = None

    @property
    def display(self) -> str:
        if self.mask:
            return self.mask * len(self.buffer)
        return self.buffer


class LineEditor:
    """Single line editing with a redraw after every change.

    Cursor positions count code points. The line is drawn from ``origin`` and
    wraps at the screen width.
    """

    def __init__(self, screen: Screen):
        self.screen = screen
        self.state = EditorState()

    @property
    def buffer(self) -> str:
        return self.state.buffer

    @property
    def cursor(self) -> int:
        return self.state.cursor

    def load(
            self,
            text: str,
            cursor: int | None = None,
            origin: Position | None = None,
            mask: str | None = None,
    ) -> None:
        self.state.buffer = text
        self.state.cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))
        if origin is not None:
            self.state.origin = Position(origin.x, origin.y)
        self.state.mask = mask

    def redraw(self, clear: bool = False) -> None:
        if clear:
            self.screen.clear_area(self.state.origin, self.screen.position)
        self.screen.position = Position(self.state.origin.x, self.state.origin.y)
        self.screen.draw_text(self.state.display, self.state.cursor)

    def insert(self, ch: str) -> None:
        state = self.state
        state.buffer = state.buffer[: state.cursor] + ch + state.buffer[state.cursor:]
        state.cursor += len(ch)
        self.redraw()

    def delete_before(self) -> bool:
        state = self.state
        if not state.buffer or state.cursor == 0:
            return False
        state.buffer = state.buffer[: state.cursor - 1] + state.buffer[state.cursor:]
        state.cursor -= 1
        self.redraw(clear=True)
        return True

    def delete_at(self) -> bool:
        state = self.state
        if not state.buffer or state.cursor >= len(state.buffer):
            return False
        state.buffer = state.buffer[: state.cursor] + state.buffer[state.cursor + 1:]
        self.redraw(clear=True)
        return True

    def move_home(self) -> None:
        self.state.cursor = 0
        self.redraw()

    def move_end(self) -> None:
        self.state.cursor = len(self.state.buffer)
        self.redraw()

    def move_left(self) -> bool:
        if self.state.cursor == 0:
            return False
        self.state.cursor -= 1
        self.redraw()
        return True

    def move_right(self) -> bool:
        if self.state.cursor >= len(self.state.buffer):
            return False
        self.state.cursor += 1
        self.redraw()
        return True

    def handle_key(self, event: KeyEvent) -> None:
        if event.is_char:
            self.insert(event.char)
            return
        key = event.key
        if key in (Keys.Tab, Keys.End):
            self.move_end()
        elif key == Keys.Home:
            self.move_home()
        elif key == Keys.Left:
            self.move_left()
        elif key == Keys.Right:
            self.move_right()
        elif key == Keys.Delete:
            self.delete_at()
        elif key == Keys.Backspace:
            self.delete_before()

    def read_event(self) -> Event:
        """Wait for the next event and apply it to the line.

        Raises ``NotRunningError`` once the screen has been closed, so a driver
        can stop a pending read during shutdown.
        """
        if self.screen.closed or self.screen.backend is None:
            raise NotRunningError()
        event = self.screen.backend.poll_event()
        if isinstance(event, KeyEvent):
            self.handle_key(event)
        elif isinstance(event, ResizeEvent):
            self.screen.resize(event.width, event.height)
        elif isinstance(event, ErrorEvent):
            logger.debug("backend error: %s", event.error)
        return event
