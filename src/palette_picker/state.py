from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Tuple, Union

import numpy as np

from .blocks import ColorBlock, Palette, SelectionEmpty
from .clipboard import Clipboard, ClipboardUnavailable, SystemClipboard
from .colormath import HEX_LEN, RGB, InvalidDigit, hex_to_rgb, is_hex_digit
from .config import Settings
from .engine import THEORIES, Theory, make_rng, regenerate

log = logging.getLogger(__name__)


class Action(Enum):
    # main page
    QUIT = auto()
    CURSOR_LEFT = auto()
    CURSOR_RIGHT = auto()
    DELETE_SELECTED = auto()
    OPEN_THEORY_SELECTOR = auto()
    OPEN_EDIT_COLOR = auto()
    TOGGLE_LOCK_SELECTED = auto()
    COPY_SELECTED_HEX = auto()
    TOGGLE_LOCK_BY_INDEX = auto()
    GENERATE = auto()
    # popups
    CLOSE = auto()
    FIRST = auto()
    LAST = auto()
    PREVIOUS = auto()
    NEXT = auto()
    CONFIRM = auto()
    APPEND_HEX_CHAR = auto()
    BACKSPACE = auto()
    CLEAR_INPUT = auto()
    COMMIT = auto()


@dataclass(frozen=True)
class Command:
    action: Action
    arg: Union[int, str, None] = None


@dataclass(frozen=True)
class MainPage:
    pass


@dataclass(frozen=True)
class TheorySelectorPage:
    highlighted: int = 0


@dataclass(frozen=True)
class EditColorPage:
    hex_input: str = ""


Page = Union[MainPage, TheorySelectorPage, EditColorPage]


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the model handed to the renderer once per frame."""

    page: Page
    blocks: Tuple[ColorBlock, ...]
    cursor: int
    theory: Theory
    status: str
    title: str

    @property
    def hex_input(self) -> Optional[str]:
        return self.page.hex_input if isinstance(self.page, EditColorPage) else None

    @property
    def preview_rgb(self) -> Optional[RGB]:
        text = self.hex_input
        return None if text is None else hex_to_rgb(text)


class PaletteApp:
    """Page state machine: one `Command` in, one transition applied."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        clipboard: Optional[Clipboard] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.palette = Palette.initial(self.settings.block_count)
        self.theory = self.settings.theory
        self.page: Page = MainPage()
        self.status = ""
        self.running = True
        self.rng = rng if rng is not None else make_rng(self.settings.seed)
        self._clipboard = clipboard

    @property
    def clipboard(self) -> Clipboard:
        if self._clipboard is None:
            self._clipboard = SystemClipboard()
        return self._clipboard

    def snapshot(self) -> Snapshot:
        return Snapshot(
            page=self.page,
            blocks=tuple(replace(b) for b in self.palette.occupied()),
            cursor=self.palette.cursor,
            theory=self.theory,
            status=self.status,
            title=self.settings.title,
        )

    def dispatch(self, command: Command) -> None:
        if isinstance(self.page, MainPage):
            self._on_main(command)
        elif isinstance(self.page, TheorySelectorPage):
            self._on_theory_selector(self.page, command)
        else:
            self._on_edit_color(self.page, command)

    # ------------------------------ main -----------------------------------

    def _on_main(self, command: Command) -> None:
        action = command.action
        if action is Action.QUIT:
            self.running = False
        elif action is Action.CURSOR_LEFT:
            self.palette.move_cursor(-1)
        elif action is Action.CURSOR_RIGHT:
            self.palette.move_cursor(1)
        elif action is Action.DELETE_SELECTED:
            if not self.palette.delete_selected(self.settings.min_blocks):
                self.status = f"Cannot delete: keep at least {self.settings.min_blocks} blocks"
        elif action is Action.OPEN_THEORY_SELECTOR:
            self.page = TheorySelectorPage(highlighted=0)
        elif action is Action.OPEN_EDIT_COLOR:
            self.page = EditColorPage()
        elif action is Action.TOGGLE_LOCK_SELECTED:
            self._toggle_lock(None)
        elif action is Action.TOGGLE_LOCK_BY_INDEX:
            self._toggle_lock(command.arg)
        elif action is Action.COPY_SELECTED_HEX:
            self._copy_selected()
        elif action is Action.GENERATE:
            regenerate(self.palette, self.theory, self.rng, hue_mean=self.settings.hue_mean)
        else:
            log.debug("ignored %s on main page", action.name)

    def _toggle_lock(self, index: Union[int, str, None]) -> None:
        try:
            if index is None:
                locked = self.palette.toggle_lock_selected()
                block = self.palette.selected_block()
            else:
                n = int(index)
                locked = self.palette.toggle_lock_index(n)
                block = self.palette.slots[n - 1]
        except (SelectionEmpty, ValueError) as exc:
            log.debug("lock toggle ignored: %s", exc)
            return
        if block is not None:
            self.status = f"Block {block.id} {'locked' if locked else 'unlocked'}"

    def _copy_selected(self) -> None:
        block = self.palette.selected_block()
        if block is None:
            return
        text = block.to_hex()
        try:
            self.clipboard.set_text(text)
        except ClipboardUnavailable as exc:
            log.warning("clipboard write failed: %s", exc)
            self.status = f"Clipboard unavailable: {exc}"
            return
        self.status = f"Copied {text}"

    # ------------------------- theory selector -----------------------------

    def _on_theory_selector(self, page: TheorySelectorPage, command: Command) -> None:
        action = command.action
        last = len(THEORIES) - 1
        if action is Action.CLOSE:
            self.page = MainPage()
        elif action is Action.FIRST:
            self.page = TheorySelectorPage(0)
        elif action is Action.LAST:
            self.page = TheorySelectorPage(last)
        elif action is Action.PREVIOUS:
            self.page = TheorySelectorPage(max(0, page.highlighted - 1))
        elif action is Action.NEXT:
            self.page = TheorySelectorPage(min(last, page.highlighted + 1))
        elif action is Action.CONFIRM:
            self.theory = THEORIES[page.highlighted]
            self.page = MainPage()
            self.status = f"Theory: {self.theory.label}"
        else:
            log.debug("ignored %s in theory selector", action.name)

    # --------------------------- edit colour -------------------------------

    def _on_edit_color(self, page: EditColorPage, command: Command) -> None:
        action = command.action
        text = page.hex_input
        if action is Action.CLOSE:
            self.page = MainPage()
        elif action is Action.APPEND_HEX_CHAR:
            c = command.arg
            if isinstance(c, str) and is_hex_digit(c) and len(text) < HEX_LEN:
                self.page = EditColorPage(text + c)
        elif action is Action.BACKSPACE:
            self.page = EditColorPage(text[:-1])
        elif action is Action.CLEAR_INPUT:
            self.page = EditColorPage()
        elif action is Action.COMMIT:
            try:
                block = self.palette.set_selected_hex(text)
            except (InvalidDigit, SelectionEmpty) as exc:
                log.debug("commit ignored: %s", exc)
                return
            self.page = EditColorPage()
            self.status = f"Block {block.id} set to {block.to_hex()}"
        else:
            log.debug("ignored %s in colour editor", action.name)


__all__ = [
    "Action",
    "Command",
    "EditColorPage",
    "MainPage",
    "Page",
    "PaletteApp",
    "Snapshot",
    "TheorySelectorPage",
]
