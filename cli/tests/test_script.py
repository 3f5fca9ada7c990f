from prompt_toolkit.keys import Keys

from treeshell.events import press, typed
from treeshell_cli.script import parse_script


def test_parse_script_submits_plain_lines() -> None:
    assert parse_script("show\n\n") == typed("show") + [press(Keys.Enter)]


def test_parse_script_markers() -> None:
    events = parse_script("s<tab>\n<up><enter>\nab<left><bs>x\n")
    assert events == (
            typed("s") + [press(Keys.Tab)]
            + [press(Keys.Up), press(Keys.Enter)]
            + typed("ab") + [press(Keys.Left), press(Keys.Backspace)] + typed("x") + [press(Keys.Enter)]
    )


def test_parse_script_unknown_marker_is_typed() -> None:
    assert parse_script("<foo>") == typed("<foo>") + [press(Keys.Enter)]
