from __future__ import annotations

import curses
import logging
from functools import lru_cache
from typing import Any, Dict, List, Tuple

import numpy as np

from .blocks import ColorBlock
from .colormath import RGB
from .engine import THEORIES
from .state import EditColorPage, Snapshot, TheorySelectorPage

log = logging.getLogger(__name__)

STATUS_BG: RGB = (36, 51, 66)
BLACK: RGB = (0, 0, 0)
WHITE: RGB = (255, 255, 255)
STATUS_ROWS = 3
HINTS = "←/→ select • space generate • l lock • c copy • x theory • z edit • d delete • q quit"

_DOUBLE = "╔╗╚╝═║"
_SINGLE = "┌┐└┘─│"

# -----------------------------------------------------------------------------
# Terminal colour lookup
# -----------------------------------------------------------------------------
_SYSTEM16 = [
    (0, 0, 0), (128, 0, 0), (0, 128, 0), (128, 128, 0),
    (0, 0, 128), (128, 0, 128), (0, 128, 128), (192, 192, 192),
    (128, 128, 128), (255, 0, 0), (0, 255, 0), (255, 255, 0),
    (0, 0, 255), (255, 0, 255), (0, 255, 255), (255, 255, 255),
]  # fmt: skip
_CUBE = (0, 95, 135, 175, 215, 255)


@lru_cache(None)
def xterm_palette() -> np.ndarray:
    """The 256 xterm colours as a 256×3 uint8 table."""
    cube = [(r, g, b) for r in _CUBE for g in _CUBE for b in _CUBE]
    grey = [(8 + 10 * i,) * 3 for i in range(24)]
    return np.array(_SYSTEM16 + cube + grey, dtype=np.uint8)


def nearest_color(rgb: RGB, n_colors: int = 256) -> int:
    """Index of the closest entry among the first `n_colors` xterm colours."""
    table = xterm_palette()[: max(1, min(int(n_colors), 256))].astype(np.int32)
    d = ((table - np.asarray(rgb, dtype=np.int32)) ** 2).sum(axis=1)
    return int(np.argmin(d))


def contrast_color(rgb: RGB) -> RGB:
    r, g, b = rgb
    return BLACK if 0.299 * r + 0.587 * g + 0.114 * b > 140 else WHITE


class ColorAllocator:
    """Hands out curses colour pairs for RGB fg/bg combinations, per frame."""

    def __init__(self) -> None:
        self.n_colors = curses.COLORS if curses.has_colors() else 0
        self.n_pairs = curses.COLOR_PAIRS if curses.has_colors() else 0
        self.truecolor = self.n_colors >= 256 and curses.can_change_color()
        self.reset()

    def reset(self) -> None:
        self._next_color = 16
        self._next_pair = 1
        self._colors: Dict[RGB, int] = {}
        self._pairs: Dict[Tuple[RGB, RGB], int] = {}

    def _color(self, rgb: RGB) -> int:
        if rgb in self._colors:
            return self._colors[rgb]
        if self.truecolor and self._next_color < self.n_colors:
            idx = self._next_color
            self._next_color += 1
            curses.init_color(idx, *(c * 1000 // 255 for c in rgb))
        else:
            idx = nearest_color(rgb, self.n_colors)
        self._colors[rgb] = idx
        return idx

    def attr(self, fg: RGB, bg: RGB) -> int:
        if self.n_colors == 0:
            return curses.A_NORMAL
        key = (fg, bg)
        if key not in self._pairs:
            if self._next_pair >= self.n_pairs:
                return curses.A_NORMAL
            pid = self._next_pair
            self._next_pair += 1
            curses.init_pair(pid, self._color(fg), self._color(bg))
            self._pairs[key] = pid
        return curses.color_pair(self._pairs[key])


# -----------------------------------------------------------------------------
# Layout
# -----------------------------------------------------------------------------


def split_columns(width: int, n: int) -> List[Tuple[int, int]]:
    """(x, width) for `n` columns filling `width`; leftmost columns take the remainder."""
    if n <= 0:
        return []
    base, extra = divmod(max(0, width), n)
    out: List[Tuple[int, int]] = []
    x = 0
    for i in range(n):
        w = base + (1 if i < extra else 0)
        out.append((x, w))
        x += w
    return out


def popup_rect(height: int, width: int) -> Tuple[int, int, int, int]:
    """(y, x, h, w) of a popup a third wide and a quarter tall, below centre."""
    h = min(height, max(6, height // 4))
    w = min(width, max(28, width // 3))
    y = min(height * 2 // 5, max(0, height - h))
    x = min(width // 3, max(0, width - w))
    return y, x, h, w


# -----------------------------------------------------------------------------
# Renderer
# -----------------------------------------------------------------------------


class Renderer:
    def __init__(self, stdscr: Any) -> None:
        self.stdscr = stdscr
        curses.curs_set(0)
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
        self.colors = ColorAllocator()
        log.info(
            "renderer: %d colours, %d pairs, truecolor=%s",
            self.colors.n_colors,
            self.colors.n_pairs,
            self.colors.truecolor,
        )

    def draw(self, snap: Snapshot) -> None:
        self.stdscr.erase()
        self.colors.reset()
        height, width = self.stdscr.getmaxyx()
        if height < STATUS_ROWS + 5 or width < 20:
            self._put(0, 0, "Terminal too small", curses.A_BOLD)
            self.stdscr.refresh()
            return

        self._header(snap, width)
        main_h = height - 1 - STATUS_ROWS
        for (x, w), block in zip(split_columns(width, len(snap.blocks)), snap.blocks):
            self._block(1, x, main_h, w, block)
        self._status(snap, height - STATUS_ROWS, width)

        if isinstance(snap.page, TheorySelectorPage):
            self._theory_popup(snap, snap.page.highlighted, *popup_rect(height, width))
        elif isinstance(snap.page, EditColorPage):
            self._edit_popup(snap, *popup_rect(height, width))
        self.stdscr.refresh()

    # ----------------------------- pieces ----------------------------------

    def _header(self, snap: Snapshot, width: int) -> None:
        title = snap.title.strip()
        self._put(0, max(0, (width - len(title)) // 2), title, curses.A_BOLD)
        theory = f"Theory: {snap.theory.label} "
        self._put(0, max(0, width - len(theory) - 1), theory, curses.A_DIM)

    def _block(self, top: int, x: int, h: int, w: int, block: ColorBlock) -> None:
        rgb = block.rgb()
        attr = self.colors.attr(contrast_color(rgb), rgb)
        self._fill(top, x, h, w, attr)
        if block.selected:
            self._box(top, x, h, w, attr, _DOUBLE)

        r, g, b = rgb
        lines = [
            f"RGB: {r}, {g}, {b}",
            block.to_hex(),
            "",
            "Locked" if block.locked else "Unlocked",
            f"(toggle with ALT+{block.id})",
            "",
            f"ID: {block.id}",
        ]
        start = top + h // 2 - (1 if block.selected else 0)
        start = max(top + 1, min(start, top + h - 1 - len(lines)))
        inner = max(0, w - 2)
        for i, line in enumerate(lines):
            line = line[:inner]
            self._put(start + i, x + 1 + (inner - len(line)) // 2, line, attr)

    def _status(self, snap: Snapshot, top: int, width: int) -> None:
        attr = self.colors.attr(WHITE, STATUS_BG)
        self._fill(top, 0, STATUS_ROWS, width, attr)
        self._put(top + 1, 1, snap.status or HINTS, attr)

    def _theory_popup(self, snap: Snapshot, highlighted: int, y: int, x: int, h: int, w: int) -> None:
        self._fill(y, x, h, w, curses.A_NORMAL)
        self._box(y, x, h, w, curses.A_NORMAL, _SINGLE, " Select Theory ")
        for i, theory in enumerate(THEORIES[: max(0, h - 2)]):
            marker = ">" if i == highlighted else " "
            current = " *" if theory is snap.theory else ""
            attr = curses.A_REVERSE if i == highlighted else curses.A_NORMAL
            self._put(y + 1 + i, x + 1, f"{marker}{theory.label}{current}"[: w - 2], attr)

    def _edit_popup(self, snap: Snapshot, y: int, x: int, h: int, w: int) -> None:
        self._fill(y, x, h, w, curses.A_NORMAL)
        self._box(y, x, h, w, curses.A_NORMAL, _SINGLE, " Edit Color ")
        self._put(y + 1, x + 1, f" Enter HEX: {snap.hex_input or ''}"[: w - 2], curses.A_NORMAL)

        rgb = snap.preview_rgb or BLACK
        half = (h - 2) // 2
        py, ph = y + 1 + half, h - 2 - half
        attr = self.colors.attr(contrast_color(rgb), rgb)
        self._fill(py, x + 1, ph, w - 2, attr)
        self._put(py, x + 1, "Overview:", attr | curses.A_REVERSE)

    # ---------------------------- primitives -------------------------------

    def _put(self, y: int, x: int, text: str, attr: int) -> None:
        height, width = self.stdscr.getmaxyx()
        if not (0 <= y < height and 0 <= x < width) or not text:
            return
        # the bottom-right cell cannot be written without scrolling
        room = width - x - (1 if y == height - 1 else 0)
        if room > 0:
            self.stdscr.addstr(y, x, text[:room], attr)

    def _fill(self, y: int, x: int, h: int, w: int, attr: int) -> None:
        for row in range(y, y + h):
            self._put(row, x, " " * w, attr)

    def _box(self, y: int, x: int, h: int, w: int, attr: int, chars: str, title: str = "") -> None:
        if h < 2 or w < 2:
            return
        tl, tr, bl, br, hz, vt = chars
        self._put(y, x, tl + hz * (w - 2) + tr, attr)
        for row in range(y + 1, y + h - 1):
            self._put(row, x, vt, attr)
            self._put(row, x + w - 1, vt, attr)
        self._put(y + h - 1, x, bl + hz * (w - 2) + br, attr)
        if title:
            self._put(y, x + 1, title[: w - 2], attr | curses.A_BOLD)


__all__ = [
    "ColorAllocator",
    "Renderer",
    "contrast_color",
    "nearest_color",
    "popup_rect",
    "split_columns",
    "xterm_palette",
]
