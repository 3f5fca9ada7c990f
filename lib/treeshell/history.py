from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    original: str = ""
    edited: str = ""
    has_override: bool = False

    @property
    def text(self) -> str:
        return self.edited if self.has_override else self.original


class History:
    """Submitted lines plus a navigation cursor.

    Entries other than the newest one are never rewritten in place: editing a
    recalled line stores an override next to the original text, and
    ``revert_and_add`` turns that override into a new line at the end.
    The cursor equal to ``len(entries)`` means a new entry is being composed.
    """

    def __init__(self) -> None:
        self.entries: list[HistoryEntry] = []
        self.index = 0

    def __len__(self) -> int:
        return len(self.entries)

    def is_new(self) -> bool:
        return not self.entries or self.index == len(self.entries)

    def is_first(self) -> bool:
        return not self.entries or self.index == 0

    def is_last(self) -> bool:
        return not self.entries or self.index == len(self.entries) - 1

    def first(self) -> bool:
        if self.is_first():
            return False
        self.index = 0
        return True

    def last(self) -> bool:
        if self.is_last():
            return False
        self.index = len(self.entries) - 1
        return True

    def prev(self) -> bool:
        if self.is_first():
            return False
        self.index -= 1
        return True

    def next(self) -> bool:
        if self.is_last() or self.is_new():
            return False
        self.index += 1
        return True

    def start_new(self) -> None:
        self.last()
        if self.get() == "":
            return
        self.entries.append(HistoryEntry())
        self.index = len(self.entries) - 1
        logger.debug("history: started entry %d", self.index)

    def get(self) -> str:
        if self.is_new():
            return ""
        return self.entries[self.index].text

    def set(self, text: str) -> None:
        if self.is_new():
            self.entries.append(HistoryEntry(original=text))
            self.index = len(self.entries) - 1
            return
        entry = self.entries[self.index]
        if self.is_last():
            entry.original = text
        elif text == entry.original:
            entry.edited = ""
            entry.has_override = False
        else:
            entry.edited = text
            entry.has_override = True

    def revert(self) -> None:
        if self.is_new() or not self.entries[self.index].has_override:
            return
        entry = self.entries[self.index]
        entry.edited = ""
        entry.has_override = False

    def revert_and_add(self) -> None:
        if self.is_last() or self.is_new() or not self.entries[self.index].has_override:
            return
        edited = self.entries[self.index].edited
        self.entries[-1] = HistoryEntry(original=edited)
        self.revert()
        logger.debug("history: re-added edited entry %d as %r", self.index, edited)

    def lines(self) -> list[str]:
        return [entry.text for entry in self.entries if entry.text]
