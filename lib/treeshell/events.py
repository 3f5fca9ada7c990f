from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

# Special keys the editor and the driver react to; everything else that is
# not a printable character is dropped by ``key_event_from_press``.
HANDLED_KEYS = frozenset(
    {
        Keys.Enter,
        Keys.Tab,
        Keys.Backspace,
        Keys.Delete,
        Keys.Home,
        Keys.End,
        Keys.Left,
        Keys.Right,
        Keys.Up,
        Keys.Down,
        Keys.ControlC,
        Keys.ControlD,
    }
)

_ALIASES = {
    Keys.ControlJ: Keys.Enter,
    Keys.ControlA: Keys.Home,
    Keys.ControlE: Keys.End,
}


@dataclass(frozen=True)
class KeyEvent:
    key: Keys | None = None
    char: str = ""

    @property
    def is_char(self) -> bool:
        return self.key is None and bool(self.char)


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class ErrorEvent:
    error: BaseException


Event = Union[KeyEvent, ResizeEvent, ErrorEvent]


def key_event_from_press(key_press: KeyPress) -> KeyEvent | None:
    key = key_press.key
    if isinstance(key, Keys):
        key = _ALIASES.get(key, key)
        if key in HANDLED_KEYS:
            return KeyEvent(key=key)
        return None
    if key.isprintable():
        return KeyEvent(char=key)
    return None


def press(name: Keys) -> KeyEvent:
    return KeyEvent(key=name)


def typed(data: str) -> list[KeyEvent]:
    """Key events typing ``data`` one character at a time."""
    return [KeyEvent(char=ch) for ch in data]
