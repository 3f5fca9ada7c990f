from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prompt_toolkit.keys import Keys

from .errors import TerminalError
from .events import ErrorEvent, KeyEvent, ResizeEvent
from .screen import Position, Screen

if TYPE_CHECKING:
    from .shell import Shell

logger = logging.getLogger(__name__)

LABEL_GAP = 4


@dataclass
class Field:
    label: str
    value: str = ""
    mask: str | None = None
    pattern: str | None = None
    position: Position = field(default_factory=Position, repr=False)

    @property
    def display(self) -> str:
        return self.mask * len(self.value) if self.mask else self.value

    def is_valid(self) -> bool:
        if self.pattern is None:
            return True
        return re.fullmatch(self.pattern, self.value) is not None

    def draw(self, screen: Screen, label_width: int) -> None:
        if not self.label:
            return
        screen.printf("%s:%s", self.label, " " * (label_width - len(self.label) + LABEL_GAP))
        self.position = Position(screen.position.x, screen.position.y)
        screen.println(self.display)


class Form:
    """Labeled fields filled one after another with the shell's line editor.

    Enter, Tab and Down move to the next field, Up to the previous one; Enter
    on the last field submits.
    """

    def fields(self) -> list[Field]:  # pragma: no cover - interface
        raise NotImplementedError

    def draw(self, screen: Screen) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def invalid(self) -> list[Field]:
        return [f for f in self.fields() if not f.is_valid()]

    def fill(self, shell: Shell) -> bool:
        """Draw the form and collect input; returns True when every field is valid."""
        screen = shell.screen
        editor = shell.editor
        start = Position(screen.position.x, screen.position.y)
        fields = self.fields()

        def redraw_form() -> None:
            screen.clear()
            screen.position = Position(start.x, start.y)
            self.draw(screen)

        def focus(index: int, cursor: int | None = None) -> None:
            current = fields[index]
            editor.load(current.value, cursor=cursor, origin=current.position, mask=current.mask)
            editor.redraw()

        self.draw(screen)
        if fields:
            index = 0
            focus(index)
            while True:
                row = screen.position.y
                event = editor.read_event()
                if isinstance(event, ErrorEvent):
                    raise TerminalError(event.error) from event.error
                if isinstance(event, ResizeEvent):
                    redraw_form()
                    focus(index, editor.cursor)
                    continue
                if not isinstance(event, KeyEvent):
                    continue
                fields[index].value = editor.buffer
                if screen.position.y != row:
                    redraw_form()
                    focus(index, editor.cursor)
                if event.key == Keys.Enter and index == len(fields) - 1:
                    break
                if event.key in (Keys.Enter, Keys.Tab, Keys.Down) and index < len(fields) - 1:
                    index += 1
                    focus(index)
                elif event.key == Keys.Up and index > 0:
                    index -= 1
                    focus(index)

        screen.clear()
        screen.position = Position(0, 1)
        bad = self.invalid()
        if bad:
            logger.debug("form submitted with invalid fields: %s", [f.label for f in bad])
        return not bad


class FieldList(Form):
    def __init__(self, fields: list[Field] | None = None):
        self.items: list[Field] = list(fields or [])

    def fields(self) -> list[Field]:
        return list(self.items)

    def values(self) -> dict[str, str]:
        return {f.label: f.value for f in self.items}

    def draw(self, screen: Screen) -> None:
        width = max((len(f.label) for f in self.items), default=0)
        for f in self.items:
            f.draw(screen, width)


@dataclass
class FieldCategory:
    label: str
    fields: FieldList = field(default_factory=FieldList)


class FieldCategoryList(Form):
    def __init__(self, categories: list[FieldCategory] | None = None):
        self.categories: list[FieldCategory] = list(categories or [])

    def fields(self) -> list[Field]:
        return [f for category in self.categories for f in category.fields.items]

    def values(self) -> dict[str, dict[str, str]]:
        return {c.label: c.fields.values() for c in self.categories}

    def draw(self, screen: Screen) -> None:
        screen.position = Position(0, 0)
        for category in self.categories:
            screen.println(category.label)
            category.fields.draw(screen)
            screen.println()
