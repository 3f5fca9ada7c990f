import pytest
from prompt_toolkit.keys import Keys

from treeshell import LineEditor, NotRunningError, Position, ResizeEvent, Screen, VirtualBackend, byte_offset
from treeshell.events import press, typed


def _editor(width: int = 20, events=()) -> tuple[LineEditor, VirtualBackend]:
    backend = VirtualBackend(events, width=width, height=5)
    screen = Screen()
    screen.open(backend)
    editor = LineEditor(screen)
    editor.load("", origin=Position(2, 0))
    return editor, backend


def test_insert_tracks_code_points_and_bytes() -> None:
    editor, backend = _editor()
    for ch in "héllo":
        editor.insert(ch)

    assert editor.buffer == "héllo"
    assert editor.cursor == 5
    assert byte_offset(editor.buffer, editor.cursor) == 6
    assert backend.display[0] == "  héllo"
    assert backend.cursor == (7, 0)


def test_insert_in_the_middle() -> None:
    editor, _ = _editor()
    for ch in "hello":
        editor.insert(ch)
    editor.move_left()
    editor.move_left()
    editor.insert("X")
    assert editor.buffer == "helXlo"
    assert editor.cursor == 4


def test_delete_at_clears_stale_cells() -> None:
    editor, backend = _editor()
    editor.load("abc", cursor=1)
    editor.redraw()

    assert editor.delete_at()
    assert editor.buffer == "ac"
    assert backend.display[0] == "  ac"


def test_delete_at_end_and_before_start_are_noops() -> None:
    editor, _ = _editor()
    assert not editor.delete_before()
    editor.load("ab")
    assert not editor.delete_at()
    editor.load("ab", cursor=0)
    assert not editor.delete_before()
    assert editor.buffer == "ab"


def test_backspace_across_wrapped_row() -> None:
    editor, backend = _editor(width=10)
    editor.load("abcdefghij")
    editor.redraw()
    assert backend.display[1] == "ij"

    assert editor.delete_before()
    assert editor.buffer == "abcdefghi"
    assert backend.display[0] == "  abcdefgh"
    assert backend.display[1] == "i"


def test_cursor_moves_are_clamped() -> None:
    editor, _ = _editor()
    editor.load("ab", cursor=99)
    assert editor.cursor == 2
    assert not editor.move_right()
    editor.move_home()
    assert editor.cursor == 0
    assert not editor.move_left()
    editor.move_end()
    assert editor.cursor == 2


def test_mask_hides_buffer() -> None:
    editor, backend = _editor()
    editor.load("secret", mask="*")
    editor.redraw()
    assert backend.display[0] == "  ******"
    assert editor.buffer == "secret"


def test_read_event_applies_keys() -> None:
    events = typed("ab") + [press(Keys.Left), press(Keys.Backspace), press(Keys.Tab)]
    editor, _ = _editor(events=events)
    for _ in range(4):
        editor.read_event()
    assert editor.buffer == "b"
    assert editor.cursor == 0

    editor.read_event()
    assert editor.cursor == 1


def test_read_event_applies_resize() -> None:
    editor, backend = _editor(events=[ResizeEvent(width=30, height=6)])
    event = editor.read_event()
    assert event == ResizeEvent(width=30, height=6)
    assert editor.screen.width == 30
    assert backend.size() == (30, 6)


def test_read_event_after_close_raises() -> None:
    editor, _ = _editor(events=typed("a"))
    editor.screen.closed = True
    with pytest.raises(NotRunningError):
        editor.read_event()
