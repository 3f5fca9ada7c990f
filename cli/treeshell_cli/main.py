from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.table import Table

from treeshell import (
    CommandList,
    ConfigurationError,
    Shell,
    ShellError,
    TerminalError,
    VirtualBackend,
    resolve,
)

from . import console
from .commands import settings_cmd
from .config import load_config, resolve_menu_file
from .logging_ import setup_logging
from .menu import build_demo_tree, load_menu
from .script import parse_script


def _load_commands(menu_file: str | None, mask_char: str) -> CommandList:
    if menu_file:
        return load_menu(menu_file)
    return build_demo_tree(mask_char)


def _quote_word(word: str) -> str:
    if " " not in word:
        return word
    escaped = word.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _fail(exc: ShellError) -> NoReturn:
    console.err(str(exc))
    raise typer.Exit(code=2 if isinstance(exc, ConfigurationError) else 1)


def _run_shell(
        menu_file: str | None = None,
        prompt: str | None = None,
        script: Path | None = None,
        width: int = 80,
        height: int = 24,
) -> None:
    cfg = load_config()
    try:
        commands = _load_commands(menu_file or resolve_menu_file(cfg), cfg.mask_char)
    except ShellError as exc:
        _fail(exc)

    backend = None
    if script is not None:
        backend = VirtualBackend(parse_script(script.read_text(encoding="utf-8")), width=width, height=height)
    shell = Shell(commands, prompt=prompt if prompt is not None else cfg.prompt, backend=backend)

    try:
        shell.run()
    except TerminalError as exc:
        # A replayed script ends the same way a closed tty does.
        if backend is None or not isinstance(exc.error, EOFError):
            _fail(exc)
    except ShellError as exc:
        _fail(exc)

    if backend is not None:
        console.write(backend.text() + "\n")


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="treeshell",
        help="treeshell interactive command shell",
        no_args_is_help=False,
    )
    app.add_typer(settings_cmd.app, name="settings")

    @app.callback(invoke_without_command=True)
    def _main(
            ctx: typer.Context,
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
            log_file: str | None = typer.Option(None, "--log-file", help="Write logs to this file."),
    ):
        setup_logging(verbose, log_file or load_config().log_file)
        if ctx.invoked_subcommand is None:
            _run_shell()
            raise typer.Exit(code=0)

    @app.command("run")
    def run(
            menu: str | None = typer.Option(None, "--menu", "-m", help="TOML menu file with the command tree."),
            prompt: str | None = typer.Option(None, "--prompt", help="Prompt text (overrides settings)."),
            script: Path | None = typer.Option(
                None,
                "--script",
                exists=True,
                dir_okay=False,
                help="Replay keystrokes from a file on a virtual screen and print it.",
            ),
            width: int = typer.Option(80, "--width", min=10, help="Virtual screen width for --script."),
            height: int = typer.Option(24, "--height", min=2, help="Virtual screen height for --script."),
    ):
        """Start the interactive shell."""
        _run_shell(menu_file=menu, prompt=prompt, script=script, width=width, height=height)

    @app.command("exec")
    def exec_command(
            words: list[str] = typer.Argument(..., help="Command path and arguments."),
            menu: str | None = typer.Option(None, "--menu", "-m", help="TOML menu file with the command tree."),
    ):
        """Run a single command line without the interactive editor."""
        cfg = load_config()
        try:
            commands = _load_commands(menu or resolve_menu_file(cfg), cfg.mask_char)
            shell = Shell(commands, prompt=cfg.prompt, console=console.console)
            line = " ".join(_quote_word(word) for word in words)
            executed = shell.execute(line.strip(" ").split(" "))
        except ShellError as exc:
            _fail(exc)
        if not executed:
            raise typer.Exit(code=1)

    @app.command("resolve")
    def resolve_command(
            words: list[str] = typer.Argument(..., help="Command path, optionally ending with '?'."),
            menu: str | None = typer.Option(None, "--menu", "-m", help="TOML menu file with the command tree."),
    ):
        """Show how a command path resolves against the command tree."""
        cfg = load_config()
        try:
            commands = _load_commands(menu or resolve_menu_file(cfg), cfg.mask_char)
            resolution = resolve(commands, words)
        except ShellError as exc:
            _fail(exc)

        if resolution.is_empty:
            console.info("Nothing to resolve.")
            return
        if resolution.not_found:
            console.warn("Command not found")
            raise typer.Exit(code=1)

        table = Table(title="Matches")
        table.add_column("command", style="bold")
        table.add_column("kind", no_wrap=True)
        table.add_column("arguments")
        table.add_column("description")
        for name in sorted(resolution.matches or {}):
            item = resolution.matches[name]
            kind = "branch" if item.is_branch else "leaf"
            table.add_row(name, kind, " ".join(f"<{a}>" for a in item.arguments) or "-", item.description)
        console.print(table)
        console.print(f"remaining: {resolution.arguments!r}  list: {resolution.force_list}", markup=False)

    return app


app = _build_app()
