from __future__ import annotations

import os


def expand_path(value: str | None) -> str:
    if not value:
        return ""
    return os.path.abspath(os.path.expandvars(os.path.expanduser(value.strip())))
