from __future__ import annotations

import logging
import os
import selectors
import signal
from collections import deque
from typing import Iterable, TextIO

import pyte
from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.output import Output, create_output

from .events import ErrorEvent, Event, ResizeEvent, key_event_from_press

logger = logging.getLogger(__name__)

# How long to wait for the rest of an escape sequence before flushing a lone Esc.
ESCAPE_TIMEOUT_S = 0.05


class Backend:
    """Terminal capability required by the shell.

    Subclasses implement event polling and cell output; ``open``/``close`` are
    also available through the context manager protocol.
    """

    def open(self) -> None:  # pragma: no cover - interface
        ...

    def close(self) -> None:  # pragma: no cover - interface
        ...

    def poll_event(self) -> Event:  # pragma: no cover - interface
        raise NotImplementedError

    def set_cell(self, x: int, y: int, ch: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def set_cursor(self, x: int, y: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def size(self) -> tuple[int, int]:  # pragma: no cover - interface
        raise NotImplementedError

    def clear(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def flush(self) -> None:  # pragma: no cover - interface
        ...

    def __enter__(self) -> "Backend":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class TerminalBackend(Backend):
    """Process tty through prompt_toolkit's input parser and VT100 output."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None):
        self._input: Input = create_input(stdin)
        self._output: Output = create_output(stdout)
        self._pending: deque[Event] = deque()
        self._selector: selectors.BaseSelector | None = None
        self._raw_mode = None
        self._wakeup: tuple[int, int] | None = None
        self._previous_sigwinch = None
        self._cursor = (0, 0)

    def open(self) -> None:
        self._raw_mode = self._input.raw_mode()
        self._raw_mode.__enter__()
        self._output.enter_alternate_screen()
        self._output.erase_screen()
        self._output.flush()

        read_fd, write_fd = os.pipe()
        os.set_blocking(write_fd, False)
        self._wakeup = (read_fd, write_fd)
        self._previous_sigwinch = signal.signal(signal.SIGWINCH, self._on_resize)

        self._selector = selectors.DefaultSelector()
        self._selector.register(self._input.fileno(), selectors.EVENT_READ, "input")
        self._selector.register(read_fd, selectors.EVENT_READ, "resize")
        logger.debug("terminal backend opened")

    def close(self) -> None:
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        if self._wakeup is not None:
            signal.signal(signal.SIGWINCH, self._previous_sigwinch or signal.SIG_DFL)
            for fd in self._wakeup:
                os.close(fd)
            self._wakeup = None
        self._output.quit_alternate_screen()
        self._output.show_cursor()
        self._output.flush()
        if self._raw_mode is not None:
            self._raw_mode.__exit__(None, None, None)
            self._raw_mode = None
        logger.debug("terminal backend closed")

    def _on_resize(self, signum, frame) -> None:
        if self._wakeup is None:
            return
        try:
            os.write(self._wakeup[1], b"\0")
        except BlockingIOError:
            pass

    def _read_presses(self) -> list[KeyPress]:
        presses = self._input.read_keys()
        assert self._selector is not None
        ready = [key for key, _ in self._selector.select(timeout=ESCAPE_TIMEOUT_S) if key.data == "input"]
        if not ready:
            presses.extend(self._input.flush_keys())
        return presses

    def poll_event(self) -> Event:
        if self._selector is None:
            return ErrorEvent(RuntimeError("terminal backend is not open"))
        while not self._pending:
            try:
                ready = self._selector.select()
            except OSError as exc:
                return ErrorEvent(exc)
            for key, _ in ready:
                if key.data == "resize":
                    os.read(key.fd, 64)
                    width, height = self.size()
                    self._pending.append(ResizeEvent(width=width, height=height))
                    continue
                try:
                    presses = self._read_presses()
                except OSError as exc:
                    return ErrorEvent(exc)
                if self._input.closed:
                    return ErrorEvent(EOFError("terminal input closed"))
                for press in presses:
                    event = key_event_from_press(press)
                    if event is not None:
                        self._pending.append(event)
        return self._pending.popleft()

    def set_cell(self, x: int, y: int, ch: str) -> None:
        self._output.cursor_goto(y + 1, x + 1)
        self._output.write(ch)

    def set_cursor(self, x: int, y: int) -> None:
        self._cursor = (x, y)

    def size(self) -> tuple[int, int]:
        size = self._output.get_size()
        return size.columns, size.rows

    def clear(self) -> None:
        self._output.erase_screen()

    def flush(self) -> None:
        x, y = self._cursor
        self._output.cursor_goto(y + 1, x + 1)
        self._output.show_cursor()
        self._output.flush()


class VirtualBackend(Backend):
    """Headless backend drawing into a ``pyte.Screen``.

    Events come from a script; once it runs out ``poll_event`` reports an
    ``EOFError`` the same way a closed tty would.
    """

    def __init__(self, events: Iterable[Event] = (), width: int = 80, height: int = 24):
        self.screen = pyte.Screen(width, height)
        self.events: deque[Event] = deque(events)
        self.cursor = (0, 0)
        self.opened = False
        self.closed = False

    def feed(self, *events: Event) -> None:
        self.events.extend(events)

    def open(self) -> None:
        self.opened = True
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def poll_event(self) -> Event:
        if not self.events:
            return ErrorEvent(EOFError("event script exhausted"))
        event = self.events.popleft()
        if isinstance(event, ResizeEvent):
            self.screen.resize(event.height, event.width)
        return event

    def set_cell(self, x: int, y: int, ch: str) -> None:
        if not (0 <= x < self.screen.columns and 0 <= y < self.screen.lines):
            return
        self.screen.cursor_position(y + 1, x + 1)
        self.screen.draw(ch)

    def set_cursor(self, x: int, y: int) -> None:
        self.cursor = (x, y)

    def size(self) -> tuple[int, int]:
        return self.screen.columns, self.screen.lines

    def clear(self) -> None:
        self.screen.erase_in_display(2)

    @property
    def display(self) -> list[str]:
        return [line.rstrip() for line in self.screen.display]

    def text(self) -> str:
        lines = self.display
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)
