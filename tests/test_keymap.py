import curses

import pytest

from palette_picker.keymap import ALT, CTRL, KeyEvent, read_key, translate
from palette_picker.state import Action, Command, EditColorPage, MainPage, TheorySelectorPage


class FakeWindow:
    """Feeds queued keys to read_key; an empty queue in nodelay mode raises curses.error."""

    def __init__(self, *keys):
        self.keys = list(keys)
        self.delay_calls = []

    def get_wch(self):
        if not self.keys:
            raise curses.error("no input")
        return self.keys.pop(0)

    def nodelay(self, flag):
        self.delay_calls.append(flag)


def key(code, *mods):
    return KeyEvent(code, frozenset(mods))


@pytest.mark.parametrize(
    "event, action",
    [
        (key("q"), Action.QUIT),
        (key("left"), Action.CURSOR_LEFT),
        (key("right"), Action.CURSOR_RIGHT),
        (key("d"), Action.DELETE_SELECTED),
        (key("x"), Action.OPEN_THEORY_SELECTOR),
        (key("z"), Action.OPEN_EDIT_COLOR),
        (key("l"), Action.TOGGLE_LOCK_SELECTED),
        (key("c"), Action.COPY_SELECTED_HEX),
        (key(" "), Action.GENERATE),
    ],
)
def test_main_bindings(event, action):
    assert translate(MainPage(), event) == Command(action)


def test_alt_digit_locks_by_index():
    assert translate(MainPage(), key("3", ALT)) == Command(Action.TOGGLE_LOCK_BY_INDEX, 3)
    assert translate(MainPage(), key("3")) is None
    assert translate(MainPage(), key("0", ALT)) is None


def test_unbound_main_key():
    assert translate(MainPage(), key("k")) is None
    assert translate(MainPage(), key("up")) is None


@pytest.mark.parametrize(
    "code, action",
    [
        ("x", Action.CLOSE),
        ("q", Action.CLOSE),
        ("esc", Action.CLOSE),
        ("left", Action.FIRST),
        ("right", Action.LAST),
        ("up", Action.PREVIOUS),
        ("down", Action.NEXT),
        ("enter", Action.CONFIRM),
        (" ", Action.CONFIRM),
    ],
)
def test_selector_bindings(code, action):
    assert translate(TheorySelectorPage(), key(code)) == Command(action)


def test_edit_bindings():
    page = EditColorPage("12")
    assert translate(page, key("z")) == Command(Action.CLOSE)
    assert translate(page, key("q")) == Command(Action.CLOSE)
    assert translate(page, key("a")) == Command(Action.APPEND_HEX_CHAR, "a")
    assert translate(page, key("g")) == Command(Action.APPEND_HEX_CHAR, "g")
    assert translate(page, key("backspace")) == Command(Action.BACKSPACE)
    assert translate(page, key("backspace", CTRL)) == Command(Action.CLEAR_INPUT)
    assert translate(page, key("enter")) == Command(Action.COMMIT)
    assert translate(page, key("left")) is None


def test_read_plain_and_special_keys():
    assert read_key(FakeWindow("q")) == key("q")
    assert read_key(FakeWindow(" ")) == key(" ")
    assert read_key(FakeWindow("\n")) == key("enter")
    assert read_key(FakeWindow("\x7f")) == key("backspace")
    assert read_key(FakeWindow("\x08")) == key("backspace", CTRL)
    assert read_key(FakeWindow(curses.KEY_LEFT)) == key("left")
    assert read_key(FakeWindow(curses.KEY_BACKSPACE)) == key("backspace")
    assert read_key(FakeWindow(curses.KEY_RESIZE)) is None
    assert read_key(FakeWindow("\x01")) is None


def test_read_alt_sequence():
    window = FakeWindow("\x1b", "5")
    assert read_key(window) == key("5", ALT)
    assert window.delay_calls == [True, False]


def test_read_lone_escape():
    window = FakeWindow("\x1b")
    assert read_key(window) == key("esc")
    assert window.delay_calls == [True, False]
