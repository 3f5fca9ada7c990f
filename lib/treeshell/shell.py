from __future__ import annotations

import logging
from typing import Mapping, Sequence

from prompt_toolkit.keys import Keys
from rich.console import Console

from .backends import Backend, TerminalBackend
from .commands import LIST_TOKEN, Command, resolve
from .editor import LineEditor
from .errors import TerminalError
from .events import ErrorEvent, KeyEvent, ResizeEvent
from .forms import Form
from .history import History
from .screen import Position, Screen
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "# "
NOT_FOUND_MESSAGE = "Command not found"
LISTING_GAP = 4


class ShellContext:
    """State handlers are allowed to change: active commands and prompt.

    ``enter`` switches to a submenu and ``leave`` returns to the menu that was
    active before it.
    """

    def __init__(self, shell: Shell, commands: Mapping[str, Command], prompt: str):
        self._shell = shell
        self.commands: Mapping[str, Command] = commands
        self.prompt = prompt
        self._stack: list[tuple[Mapping[str, Command], str]] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def history(self) -> list[str]:
        return self._shell.history.lines()

    def enter(self, commands: Mapping[str, Command], prompt: str | None = None) -> None:
        self._stack.append((self.commands, self.prompt))
        self.commands = commands
        if prompt is not None:
            self.prompt = prompt

    def leave(self) -> bool:
        if not self._stack:
            return False
        self.commands, self.prompt = self._stack.pop()
        return True

    def home(self) -> None:
        if self._stack:
            self.commands, self.prompt = self._stack[0]
            self._stack.clear()

    def close(self) -> None:
        self._shell.close()

    def printf(self, fmt: str, *args: object) -> None:
        self._shell.screen.printf(fmt, *args)

    def println(self, *objects: object) -> None:
        self._shell.screen.println(*objects)

    def execute(self, tokens: Sequence[str]) -> bool:
        return self._shell.execute(tokens)

    def fill(self, form: Form) -> bool:
        return form.fill(self._shell)


class Shell:
    def __init__(
            self,
            commands: Mapping[str, Command],
            prompt: str = DEFAULT_PROMPT,
            backend: Backend | None = None,
            console: Console | None = None,
    ):
        self.backend = backend
        self.screen = Screen(backend, console)
        self.editor = LineEditor(self.screen)
        self.history = History()
        self.context = ShellContext(self, commands, prompt)

    @property
    def prompt(self) -> str:
        return self.context.prompt

    @prompt.setter
    def prompt(self, value: str) -> None:
        self.context.prompt = value

    @property
    def commands(self) -> Mapping[str, Command]:
        return self.context.commands

    @commands.setter
    def commands(self, value: Mapping[str, Command]) -> None:
        self.context.commands = value

    @property
    def closed(self) -> bool:
        return self.screen.closed

    def close(self) -> None:
        """Ask the shell to stop before it reads the next event."""
        logger.debug("close requested")
        self.screen.closed = True

    def printf(self, fmt: str, *args: object) -> None:
        self.screen.printf(fmt, *args)

    def println(self, *objects: object) -> None:
        self.screen.println(*objects)

    def execute(self, tokens: Sequence[str]) -> bool:
        """Resolve ``tokens`` and run the matched handler.

        Returns True only when a handler ran. Unknown commands, ambiguous
        prefixes and argument count mismatches are reported on the screen.
        """
        resolution = resolve(self.context.commands, tokens)
        if resolution.is_empty:
            return False
        if resolution.not_found:
            self.println(NOT_FOUND_MESSAGE)
            return False

        single = resolution.single
        if single is not None and not resolution.force_list:
            name, command = single
            if command.handler is None:
                return False
            args = tokenize(resolution.arguments)
            if len(args) != len(command.arguments):
                self._print_usage(name, command)
                return False
            logger.debug("dispatch %r args=%r", name, args)
            command.handler(self.context, args)
            return True

        self._print_listing(resolution.matches or {})
        if single is not None and single[1].arguments and not single[1].children:
            self._print_usage(*single)
        return False

    def _print_usage(self, name: str, command: Command) -> None:
        self.printf("Usage: %s", name)
        for label in command.arguments:
            self.printf(" <%s>", label)
        self.printf("\n")

    def _print_listing(self, matches: Mapping[str, Command]) -> None:
        names = sorted(matches)
        width = max((len(name) for name in names), default=0) + LISTING_GAP
        for name in names:
            # Description is drawn first, then the name over the start of the row.
            self.printf("%s%s\r%s\n", " " * width, matches[name].description, name)

    def _draw_prompt(self, cursor: int) -> None:
        self.screen.position = Position(0, 0)
        self.screen.draw_text(self.context.prompt)
        origin = Position(self.screen.position.x, self.screen.position.y)
        self.editor.load(self.history.get(), cursor=cursor, origin=origin)
        self.editor.redraw()

    def _recall(self, moved: bool) -> None:
        if not moved:
            return
        self.screen.clear()
        self._draw_prompt(len(self.history.get()))

    def _submit(self) -> None:
        self.screen.clear()
        self.screen.position = Position(0, 1)
        line = self.history.get()
        cursor = self.editor.cursor
        if self.execute(line.strip(" ").split(" ")):
            if self.closed:
                return
            if not self.history.is_last():
                self.history.revert_and_add()
            self.history.start_new()
            cursor = 0
        self._draw_prompt(cursor)

    def _list(self) -> None:
        self.screen.clear()
        self.screen.position = Position(0, self.screen.position.y + 1)
        line = f"{self.history.get()} {LIST_TOKEN}".strip(" ")
        self.execute(line.split(" "))
        self._draw_prompt(self.editor.cursor)

    def _dispatch_key(self, event: KeyEvent) -> None:
        if event.is_char and self.history.is_last() and self.history.get() == "":
            # First character of a fresh line clears the previous command's output.
            self.screen.clear_area(self.screen.position, Position(self.screen.width - 1, self.screen.height - 1))
            self.screen.flush()
        self.history.set(self.editor.buffer)
        if event.key == Keys.Enter:
            self._submit()
        elif event.key == Keys.Tab:
            self._list()
        elif event.key == Keys.Up:
            self._recall(self.history.prev())
        elif event.key == Keys.Down:
            self._recall(self.history.next())
        elif event.key == Keys.ControlD and not self.editor.buffer:
            self.close()
        elif event.key == Keys.ControlC:
            self.close()

    def run(self) -> None:
        """Run the prompt loop until closed.

        A backend failure ends the session with ``TerminalError``. The backend
        is released on every exit path.
        """
        backend = self.backend or TerminalBackend()
        self.backend = backend
        with backend:
            self.screen.open(backend)
            try:
                self._loop()
            finally:
                self.screen.closed = True

    def _loop(self) -> None:
        self._draw_prompt(len(self.history.get()))
        while not self.closed:
            event = self.editor.read_event()
            if isinstance(event, KeyEvent):
                self._dispatch_key(event)
            elif isinstance(event, ResizeEvent):
                self.screen.clear()
                self._draw_prompt(self.editor.cursor)
            elif isinstance(event, ErrorEvent):
                raise TerminalError(event.error) from event.error
        logger.debug("shell loop finished")
