from __future__ import annotations

from typing import Sequence


def tokenize(raw_args: Sequence[str]) -> list[str]:
    """Split raw argument words into logical arguments.

    The words are joined with single spaces and scanned once. A double quote
    toggles quoting, a backslash escapes the next character and is dropped,
    and an unquoted, unescaped space ends the current argument.
    """
    if not raw_args:
        return []

    args: list[str] = []
    current: list[str] | None = None
    in_quote = False
    escaped = False

    for ch in " ".join(raw_args):
        if ch == " " and not in_quote and not escaped:
            if current is not None:
                args.append("".join(current))
                current = None
            continue
        if current is None:
            current = []
        if ch == "\\":
            if escaped:
                current.append("\\")
                escaped = False
            else:
                escaped = True
        elif ch == '"':
            if escaped:
                current.append('"')
                escaped = False
            else:
                in_quote = not in_quote
        else:
            current.append(ch)
            escaped = False

    if current is not None:
        args.append("".join(current))
    return args
