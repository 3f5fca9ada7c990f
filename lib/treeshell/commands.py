from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .shell import ShellContext

logger = logging.getLogger(__name__)

Handler = Callable[["ShellContext", list[str]], None]

LIST_TOKEN = "?"


@dataclass
class Command:
    """A node of the command tree.

    A node with children routes to them and must not declare arguments; this is
    checked when resolution reaches the node. ``Branch`` and ``Leaf`` build
    nodes that cannot break the rule.
    """

    description: str = ""
    arguments: list[str] = field(default_factory=list)
    handler: Handler | None = None
    children: dict[str, Command] = field(default_factory=dict)

    @property
    def is_branch(self) -> bool:
        return bool(self.children)


@dataclass
class Branch(Command):
    arguments: list[str] = field(default_factory=list, init=False)


@dataclass
class Leaf(Command):
    children: dict[str, Command] = field(default_factory=dict, init=False)


CommandList = dict[str, Command]


@dataclass
class Resolution:
    # None means there was nothing to resolve, {} means nothing matched.
    matches: dict[str, Command] | None = None
    arguments: list[str] = field(default_factory=list)
    force_list: bool = False

    @property
    def is_empty(self) -> bool:
        return self.matches is None

    @property
    def not_found(self) -> bool:
        return self.matches is not None and not self.matches

    @property
    def single(self) -> tuple[str, Command] | None:
        if not self.matches or len(self.matches) != 1:
            return None
        return next(iter(self.matches.items()))


def _join(prefix: str, name: str) -> str:
    return f"{prefix} {name}".lstrip(" ")


def resolve(commands: Mapping[str, Command], path: Sequence[str]) -> Resolution:
    """Resolve a token path against a command list.

    Each token selects a child by exact name, or by unique prefix. An ambiguous
    prefix stops descent and returns the candidates as a forced listing. A
    trailing ``?`` requests a listing of whatever the path reaches.
    """
    tokens = list(path or [])
    if not tokens or tokens == [""]:
        return Resolution()

    force_list = False
    if tokens[-1] == LIST_TOKEN:
        force_list = True
        tokens.pop()

    matches: dict[str, Command] = {}
    level: Mapping[str, Command] = commands
    current: Command | None = None
    prefix = ""
    consumed = 0

    for token in tokens:
        if not level:
            break
        if token == "":
            consumed += 1
            continue
        exact = level.get(token)
        if exact is not None:
            current = exact
            prefix = _join(prefix, token)
            matches = {prefix: current}
        else:
            candidates = {
                _join(prefix, name): item for name, item in level.items() if name.startswith(token)
            }
            if len(candidates) != 1:
                logger.debug("resolve %r: %d candidates for %r", path, len(candidates), token)
                if not candidates:
                    return Resolution(matches={}, arguments=tokens[consumed:], force_list=force_list)
                return Resolution(matches=candidates, arguments=tokens[consumed:], force_list=True)
            prefix, current = next(iter(candidates.items()))
            matches = {prefix: current}
        level = current.children
        consumed += 1

    if level:
        if current is not None and current.arguments:
            raise ConfigurationError(prefix)
        if force_list or current is None or current.handler is None:
            matches = {_join(prefix, name): item for name, item in level.items()}

    result = Resolution(matches=matches, arguments=tokens[consumed:], force_list=force_list)
    logger.debug("resolve %r -> %s", path, sorted(matches))
    return result
