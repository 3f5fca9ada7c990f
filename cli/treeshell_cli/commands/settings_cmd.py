from __future__ import annotations

import os

import typer

from .. import console
from ..config import (
    SETTING_KEYS,
    config_path,
    default_config,
    load_config,
    normalize_mask_char,
    save_config,
)
from ..path_utils import expand_path

app = typer.Typer(help="Manage local shell settings (~/.config/treeshell/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        prompt: str = typer.Option("# ", "--prompt", help="Prompt text shown before the input line."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.prompt = prompt
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    console.console.print(
        f"prompt={cfg.prompt!r} menu_file={cfg.menu_file or '-'} "
        f"mask_char={cfg.mask_char!r} log_file={cfg.log_file or '-'}",
        markup=False,
    )


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (prompt, menu_file, mask_char, log_file)."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k not in SETTING_KEYS:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    value = getattr(cfg, k)
    console.console.print(value if value is not None else "", markup=False)


@app.command("set")
def set_setting(
        prompt: str | None = typer.Option(None, "--prompt", help="Set the prompt text."),
        menu_file: str | None = typer.Option(None, "--menu-file", help="Set the menu file path (empty to clear)."),
        mask_char: str | None = typer.Option(None, "--mask-char", help="Set the character used for masked fields."),
        log_file: str | None = typer.Option(None, "--log-file", help="Set the log file path (empty to clear)."),
):
    cfg = load_config()
    if prompt is not None:
        cfg.prompt = prompt
    if menu_file is not None:
        cfg.menu_file = expand_path(menu_file) or None
    if mask_char is not None:
        if len(mask_char) != 1:
            console.err("Mask character must be a single character.")
            raise typer.Exit(code=2)
        cfg.mask_char = normalize_mask_char(mask_char)
    if log_file is not None:
        cfg.log_file = expand_path(log_file) or None
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
