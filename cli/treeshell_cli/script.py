from __future__ import annotations

import re

from prompt_toolkit.keys import Keys

from treeshell import KeyEvent
from treeshell.events import press, typed

KEY_MARKERS = {
    "<enter>": Keys.Enter,
    "<tab>": Keys.Tab,
    "<up>": Keys.Up,
    "<down>": Keys.Down,
    "<left>": Keys.Left,
    "<right>": Keys.Right,
    "<home>": Keys.Home,
    "<end>": Keys.End,
    "<bs>": Keys.Backspace,
    "<del>": Keys.Delete,
}

_MARKER_RE = re.compile(r"(<[a-z]+>)")


def parse_script(text: str) -> list[KeyEvent]:
    """Turn a keystroke script into key events.

    Each line is typed as is; ``<tab>``, ``<up>`` and the other markers press the
    matching key. A line that does not end with a marker is submitted with Enter.
    """
    events: list[KeyEvent] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = [part for part in _MARKER_RE.split(line) if part]
        for part in parts:
            marker = KEY_MARKERS.get(part)
            if marker is not None:
                events.append(press(marker))
            else:
                events.extend(typed(part))
        if parts[-1] not in KEY_MARKERS:
            events.append(press(Keys.Enter))
    return events
