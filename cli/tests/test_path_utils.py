import os

from treeshell_cli.path_utils import expand_path


def test_expand_path_home_and_vars(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("MENU_DIR", "menus")
    assert expand_path("~/$MENU_DIR/a.toml") == os.path.join(str(tmp_path), "menus", "a.toml")


def test_expand_path_relative_and_empty(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    assert expand_path(" menu.toml ") == os.path.join(str(tmp_path), "menu.toml")
    assert expand_path("") == ""
    assert expand_path(None) == ""
