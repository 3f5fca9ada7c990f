from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

from treeshell.events import KeyEvent, key_event_from_press


def test_printable_characters_become_char_events() -> None:
    event = key_event_from_press(KeyPress("é"))
    assert event == KeyEvent(char="é")
    assert event.is_char


def test_special_keys_and_aliases() -> None:
    assert key_event_from_press(KeyPress(Keys.ControlM, "\r")) == KeyEvent(key=Keys.Enter)
    assert key_event_from_press(KeyPress(Keys.ControlJ, "\n")) == KeyEvent(key=Keys.Enter)
    assert key_event_from_press(KeyPress(Keys.ControlA)) == KeyEvent(key=Keys.Home)
    assert key_event_from_press(KeyPress(Keys.Left)) == KeyEvent(key=Keys.Left)
    assert not KeyEvent(key=Keys.Left).is_char


def test_unhandled_keys_are_dropped() -> None:
    assert key_event_from_press(KeyPress(Keys.F5)) is None
    assert key_event_from_press(KeyPress("\x1b")) is None
