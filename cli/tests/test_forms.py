import pytest
from prompt_toolkit.keys import Keys

from treeshell import (
    Field,
    FieldCategory,
    FieldCategoryList,
    FieldList,
    NotRunningError,
    Shell,
    TerminalError,
    VirtualBackend,
)
from treeshell.events import press, typed


def _open_shell(events) -> tuple[Shell, VirtualBackend]:
    backend = VirtualBackend(events, width=40, height=10)
    shell = Shell({}, backend=backend)
    shell.screen.open(backend)
    return shell, backend


def _login_form() -> FieldList:
    return FieldList([Field("User"), Field("Password", mask="*")])


def test_fill_collects_values() -> None:
    events = typed("bob") + [press(Keys.Enter)] + typed("pw") + [press(Keys.Enter)]
    shell, _ = _open_shell(events)
    form = _login_form()

    assert form.fill(shell)
    assert form.values() == {"User": "bob", "Password": "pw"}
    assert shell.screen.position.y == 1


def test_fill_draws_labels_and_masks_value() -> None:
    events = typed("bob") + [press(Keys.Tab)] + typed("pw")
    shell, backend = _open_shell(events)

    with pytest.raises(TerminalError):
        _login_form().fill(shell)

    assert backend.display[0] == "User:        bob"
    assert backend.display[1] == "Password:    **"


def test_fill_up_returns_to_previous_field() -> None:
    events = (
            typed("a") + [press(Keys.Down), press(Keys.Up)]
            + typed("b") + [press(Keys.Down), press(Keys.Enter)]
    )
    shell, _ = _open_shell(events)
    form = _login_form()

    assert form.fill(shell)
    assert form.values() == {"User": "ab", "Password": ""}


def test_fill_reports_invalid_fields() -> None:
    port = Field("Port", pattern=r"\d+")
    form = FieldList([port])
    shell, _ = _open_shell(typed("abc") + [press(Keys.Enter)])

    assert not form.fill(shell)
    assert form.invalid() == [port]


def test_field_validation() -> None:
    assert Field("Any").is_valid()
    assert Field("Port", value="8080", pattern=r"\d+").is_valid()
    assert not Field("Port", value="80a", pattern=r"\d+").is_valid()
    assert Field("Secret", value="abc", mask="#").display == "###"


def test_category_list_draws_sections() -> None:
    form = FieldCategoryList(
        [
            FieldCategory("Account", FieldList([Field("Name")])),
            FieldCategory("Server", FieldList([Field("Host")])),
        ]
    )
    events = typed("x") + [press(Keys.Enter)] + typed("y")
    shell, backend = _open_shell(events)

    with pytest.raises(TerminalError):
        form.fill(shell)

    assert backend.display[0] == "Account"
    assert backend.display[1] == "Name:    x"
    assert backend.display[3] == "Server"
    assert backend.display[4] == "Host:    y"
    assert form.values() == {"Account": {"Name": "x"}, "Server": {"Host": "y"}}


def test_fill_without_running_shell_raises(capsys) -> None:
    shell = Shell({})
    with pytest.raises(NotRunningError):
        _login_form().fill(shell)
