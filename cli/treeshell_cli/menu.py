from __future__ import annotations

import string
import tomllib
from typing import Any

from treeshell import Branch, Command, CommandList, Field, FieldList, Leaf, MenuFileError, ShellContext

MENU_SOURCE = "<menu>"
RESERVED_KEYS = {"description", "arguments", "output", "prompt"}


def _print_output(template: str, labels: list[str]):
    def handler(ctx: ShellContext, args: list[str]) -> None:
        ctx.println(template.format(**dict(zip(labels, args))))

    return handler


def _check_template(qualified: str, template: str, labels: list[str]) -> None:
    try:
        fields = [name for _, name, _, _ in string.Formatter().parse(template) if name is not None]
    except ValueError as exc:
        raise MenuFileError(MENU_SOURCE, f"{qualified}: invalid output template", str(exc)) from exc
    unknown = [name for name in fields if name not in labels]
    if unknown:
        raise MenuFileError(MENU_SOURCE, f"{qualified}: unknown placeholder {unknown[0]!r} in output")
    try:
        template.format(**{label: "" for label in labels})
    except (ValueError, KeyError, IndexError, AttributeError) as exc:
        raise MenuFileError(MENU_SOURCE, f"{qualified}: invalid output template", str(exc)) from exc


def _enter_menu(children: CommandList, prompt: str):
    def handler(ctx: ShellContext, args: list[str]) -> None:
        ctx.enter(children, prompt)

    return handler


def _back(ctx: ShellContext, args: list[str]) -> None:
    ctx.leave()


def _exit(ctx: ShellContext, args: list[str]) -> None:
    ctx.close()


def _help(ctx: ShellContext, args: list[str]) -> None:
    ctx.execute(["?"])


def _history(ctx: ShellContext, args: list[str]) -> None:
    for number, line in enumerate(ctx.history, start=1):
        ctx.printf("%4d  %s\n", number, line)


def _build_command(path: str, name: str, table: dict[str, Any]) -> Command:
    qualified = f"{name}" if not path else f"{path}.{name}"
    description = table.get("description", "")
    if not isinstance(description, str):
        raise MenuFileError(MENU_SOURCE, f"{qualified}: description must be a string")
    arguments = table.get("arguments", [])
    if not isinstance(arguments, list) or not all(isinstance(a, str) for a in arguments):
        raise MenuFileError(MENU_SOURCE, f"{qualified}: arguments must be a list of strings")
    output = table.get("output")
    if output is not None and not isinstance(output, str):
        raise MenuFileError(MENU_SOURCE, f"{qualified}: output must be a string")
    if output is not None:
        _check_template(qualified, output, arguments)
    prompt = table.get("prompt")
    if prompt is not None and not isinstance(prompt, str):
        raise MenuFileError(MENU_SOURCE, f"{qualified}: prompt must be a string")

    children: CommandList = {}
    for key, value in table.items():
        if key in RESERVED_KEYS:
            continue
        if not isinstance(value, dict):
            raise MenuFileError(MENU_SOURCE, f"{qualified}: unknown key {key!r}")
        children[key] = _build_command(qualified, key, value)

    handler = None
    if prompt is not None and children:
        children.setdefault("back", Leaf(description="Return to the previous menu", handler=_back))
        handler = _enter_menu(children, prompt)
    elif output is not None:
        handler = _print_output(output, arguments)

    # The branch/arguments rule is checked by the resolver, not here.
    return Command(description=description, arguments=list(arguments), handler=handler, children=children)


def parse_menu(data: dict[str, Any]) -> CommandList:
    commands: CommandList = {}
    for name, table in data.items():
        if not isinstance(table, dict):
            raise MenuFileError(MENU_SOURCE, f"{name}: expected a table")
        commands[name] = _build_command("", name, table)
    return with_builtins(commands)


def load_menu(path: str) -> CommandList:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as exc:
        raise MenuFileError(path, "menu file not found") from exc
    except tomllib.TOMLDecodeError as exc:
        raise MenuFileError(path, "invalid TOML", str(exc)) from exc
    try:
        return parse_menu(data)
    except MenuFileError as exc:
        raise MenuFileError(path, exc.message, exc.details) from exc


def with_builtins(commands: CommandList) -> CommandList:
    commands.setdefault("help", Leaf(description="List available commands", handler=_help))
    commands.setdefault("history", Leaf(description="Show command history", handler=_history))
    commands.setdefault("exit", Leaf(description="Exit the shell", handler=_exit))
    return commands


def build_demo_tree(mask_char: str = "*") -> CommandList:
    settings: dict[str, str] = {"color": "auto", "pager": "off"}

    def echo(ctx: ShellContext, args: list[str]) -> None:
        ctx.println(args[0])

    def show(ctx: ShellContext, args: list[str]) -> None:
        width = max(len(key) for key in settings)
        for key in sorted(settings):
            ctx.printf("%s  %s\n", key.ljust(width), settings[key])

    def set_value(ctx: ShellContext, args: list[str]) -> None:
        key, value = args
        if key not in settings:
            ctx.println(f"Unknown setting: {key}")
            return
        settings[key] = value
        ctx.println(f"{key} = {value}")

    def login(ctx: ShellContext, args: list[str]) -> None:
        form = FieldList(
            [
                Field("Username", pattern=r"[A-Za-z0-9_.-]+"),
                Field("Password", mask=mask_char),
            ]
        )
        if not ctx.fill(form):
            ctx.println("Invalid username")
            return
        ctx.println(f"Logged in as {form.values()['Username']}")

    config_children: CommandList = {
        "show": Leaf(description="Show settings", handler=show),
        "set": Leaf(description="Change a setting", arguments=["key", "value"], handler=set_value),
        "back": Leaf(description="Return to the previous menu", handler=_back),
    }

    def enter_config(ctx: ShellContext, args: list[str]) -> None:
        ctx.enter(config_children, "config# ")

    commands: CommandList = {
        "echo": Leaf(description="Print the argument", arguments=["text"], handler=echo),
        "login": Leaf(description="Log in with a form", handler=login),
        "config": Branch(description="Settings menu", handler=enter_config, children=config_children),
    }
    return with_builtins(commands)
