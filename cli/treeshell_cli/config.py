from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from .path_utils import expand_path

APP_NAME = "treeshell"
CONFIG_FILENAME = "config.toml"
DEFAULT_PROMPT = "# "
DEFAULT_MASK_CHAR = "*"
ENV_MENU_FILE = "TREESHELL_MENU"

SETTING_KEYS = ("prompt", "menu_file", "mask_char", "log_file")


@dataclass
class AppConfig:
    prompt: str = DEFAULT_PROMPT
    menu_file: str | None = None
    mask_char: str = DEFAULT_MASK_CHAR
    log_file: str | None = None


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        prompt=DEFAULT_PROMPT,
        menu_file=None,
        mask_char=DEFAULT_MASK_CHAR,
        log_file=None,
    )


def normalize_mask_char(raw: str | None) -> str:
    value = (raw or "").strip()
    if len(value) != 1:
        return DEFAULT_MASK_CHAR
    return value


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return _prune_none(
        {
            "prompt": cfg.prompt,
            "menu_file": cfg.menu_file,
            "mask_char": cfg.mask_char,
            "log_file": cfg.log_file,
        }
    )


def _prune_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune_none(item) for item in value if item is not None]
    return value


def _optional_path(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return expand_path(value)


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    prompt = data.get("prompt")
    if isinstance(prompt, str):
        cfg.prompt = prompt
    cfg.menu_file = _optional_path(data.get("menu_file"))
    raw_mask = data.get("mask_char")
    cfg.mask_char = normalize_mask_char(raw_mask if isinstance(raw_mask, str) else None)
    cfg.log_file = _optional_path(data.get("log_file"))
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def resolve_menu_file(cfg: AppConfig) -> str | None:
    env_value = os.getenv(ENV_MENU_FILE, "").strip()
    if env_value:
        return expand_path(env_value)
    return cfg.menu_file or None


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
