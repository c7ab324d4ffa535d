"""
Key bindings.

``read_key`` turns raw curses input into a `KeyEvent`; ``translate`` maps a
`KeyEvent` onto a `Command` for the active page. Events that mean nothing
on the current page translate to ``None``.
"""

from __future__ import annotations

import curses
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

from .state import Action, Command, EditColorPage, MainPage, Page, TheorySelectorPage

ALT = "alt"
CTRL = "ctrl"

LEFT = "left"
RIGHT = "right"
UP = "up"
DOWN = "down"
ENTER = "enter"
ESC = "esc"
BACKSPACE = "backspace"

_CURSES_KEYS = {
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
}


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def alt(self) -> bool:
        return ALT in self.modifiers

    @property
    def ctrl(self) -> bool:
        return CTRL in self.modifiers


_MAIN = {
    "q": Action.QUIT,
    LEFT: Action.CURSOR_LEFT,
    RIGHT: Action.CURSOR_RIGHT,
    "d": Action.DELETE_SELECTED,
    "x": Action.OPEN_THEORY_SELECTOR,
    "z": Action.OPEN_EDIT_COLOR,
    "l": Action.TOGGLE_LOCK_SELECTED,
    "c": Action.COPY_SELECTED_HEX,
    " ": Action.GENERATE,
}

_SELECTOR = {
    "x": Action.CLOSE,
    "q": Action.CLOSE,
    ESC: Action.CLOSE,
    LEFT: Action.FIRST,
    RIGHT: Action.LAST,
    UP: Action.PREVIOUS,
    DOWN: Action.NEXT,
    ENTER: Action.CONFIRM,
    " ": Action.CONFIRM,
}


def _translate_main(event: KeyEvent) -> Optional[Command]:
    if event.alt and len(event.code) == 1 and event.code in "123456789":
        return Command(Action.TOGGLE_LOCK_BY_INDEX, int(event.code))
    action = _MAIN.get(event.code)
    return None if action is None else Command(action)


def _translate_edit(event: KeyEvent) -> Optional[Command]:
    code = event.code
    if code in ("z", "q", ESC):
        return Command(Action.CLOSE)
    if code == BACKSPACE:
        return Command(Action.CLEAR_INPUT if event.ctrl else Action.BACKSPACE)
    if code == ENTER:
        return Command(Action.COMMIT)
    if len(code) == 1:
        # validated (hex digit, max length) by the state machine
        return Command(Action.APPEND_HEX_CHAR, code)
    return None


def translate(page: Page, event: KeyEvent) -> Optional[Command]:
    if isinstance(page, MainPage):
        return _translate_main(event)
    if isinstance(page, TheorySelectorPage):
        action = _SELECTOR.get(event.code)
        return None if action is None else Command(action)
    if isinstance(page, EditColorPage):
        return _translate_edit(event)
    return None


def read_key(window: Any) -> Optional[KeyEvent]:
    """
    Block for one key press on a curses window.

    Terminals send Alt+key as ESC followed by the key, and Ctrl+Backspace
    as ^H; both are folded into modifiers here.
    """
    ch = window.get_wch()
    if isinstance(ch, int):
        code = _CURSES_KEYS.get(ch)
        return None if code is None else KeyEvent(code)
    if ch == "\x1b":
        window.nodelay(True)
        try:
            nxt = window.get_wch()
        except curses.error:
            nxt = None
        finally:
            window.nodelay(False)
        if isinstance(nxt, str) and nxt.isprintable():
            return KeyEvent(nxt, frozenset({ALT}))
        return KeyEvent(ESC)
    if ch in ("\n", "\r"):
        return KeyEvent(ENTER)
    if ch == "\x7f":
        return KeyEvent(BACKSPACE)
    if ch == "\x08":
        return KeyEvent(BACKSPACE, frozenset({CTRL}))
    if ch.isprintable():
        return KeyEvent(ch)
    return None


__all__ = ["ALT", "CTRL", "KeyEvent", "read_key", "translate"]
