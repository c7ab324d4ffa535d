from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .colormath import RGB, hex_to_rgb, hsv_to_hex, hsv_to_rgb, normalize_hue, rgb_to_hsv

log = logging.getLogger(__name__)

CAPACITY = 9
DEFAULT_COUNT = 5


class SelectionEmpty(LookupError):
    """An operation addressed a palette slot that holds no block."""


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, float(x)))


@dataclass(frozen=True)
class HSV:
    hue: float = 0.0
    saturation: float = 0.0
    value: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "hue", normalize_hue(self.hue))
        object.__setattr__(self, "saturation", _clamp01(self.saturation))
        object.__setattr__(self, "value", _clamp01(self.value))


@dataclass
class ColorBlock:
    id: int
    color: HSV = field(default_factory=HSV)
    locked: bool = False
    selected: bool = False

    @classmethod
    def new(cls, block_id: int, h: float, s: float, v: float) -> "ColorBlock":
        if not 1 <= block_id <= CAPACITY:
            raise ValueError(f"block id must be in 1..{CAPACITY}, got {block_id}")
        return cls(id=block_id, color=HSV(h, s, v))

    def set_hsv(self, h: float, s: float, v: float) -> None:
        self.color = HSV(h, s, v)

    def set_color(self, color: HSV) -> None:
        self.color = color

    def toggle_lock(self) -> None:
        self.locked = not self.locked

    def rgb(self) -> RGB:
        return hsv_to_rgb(self.color.hue, self.color.saturation, self.color.value)

    def to_hex(self) -> str:
        return hsv_to_hex(self.color.hue, self.color.saturation, self.color.value)


class Palette:
    """
    Up to nine block slots plus the selection cursor.

    Slots keep their position when a block is deleted, so a palette can hold
    gaps. The cursor is an ordinal over the *occupied* slots (0..count-1) and
    therefore always points at an existing block.
    """

    def __init__(self, slots: Optional[List[Optional[ColorBlock]]] = None) -> None:
        slots = list(slots or [])
        if len(slots) > CAPACITY:
            raise ValueError(f"a palette holds at most {CAPACITY} blocks")
        self.slots: List[Optional[ColorBlock]] = slots + [None] * (CAPACITY - len(slots))
        self.cursor = 0
        self._sync_selection()

    @classmethod
    def initial(cls, count: int = DEFAULT_COUNT) -> "Palette":
        if not 1 <= count <= CAPACITY:
            raise ValueError(f"block count must be in 1..{CAPACITY}, got {count}")
        return cls([ColorBlock.new(i, 0.0, 0.0, 0.0) for i in range(1, count + 1)])

    # ----------------------------- queries ---------------------------------

    @property
    def count(self) -> int:
        return sum(1 for b in self.slots if b is not None)

    def occupied(self) -> List[ColorBlock]:
        return [b for b in self.slots if b is not None]

    def locked(self) -> List[ColorBlock]:
        return [b for b in self.occupied() if b.locked]

    def unlocked(self) -> List[ColorBlock]:
        return [b for b in self.occupied() if not b.locked]

    def selected_block(self) -> Optional[ColorBlock]:
        blocks = self.occupied()
        return blocks[self.cursor] if blocks else None

    def selected_slot(self) -> Optional[int]:
        occupied = [i for i, b in enumerate(self.slots) if b is not None]
        return occupied[self.cursor] if occupied else None

    # ---------------------------- mutations --------------------------------

    def move_cursor(self, delta: int) -> None:
        """Move the selection, saturating at both ends."""
        last = max(0, self.count - 1)
        self.cursor = max(0, min(last, self.cursor + delta))
        self._sync_selection()

    def delete_selected(self, min_count: int = 3) -> bool:
        """Clear the selected slot; refused unless more than `min_count` remain."""
        slot = self.selected_slot()
        if slot is None or self.count <= min_count:
            return False
        removed = self.slots[slot]
        self.slots[slot] = None
        self.cursor = 0
        self._sync_selection()
        log.debug("deleted block %s from slot %d", removed.id if removed else "?", slot)
        return True

    def toggle_lock_selected(self) -> bool:
        block = self.selected_block()
        if block is None:
            raise SelectionEmpty("palette is empty")
        block.toggle_lock()
        return block.locked

    def toggle_lock_index(self, n: int) -> bool:
        """Toggle the lock of slot ``n - 1`` (``n`` is the 1-based shortcut)."""
        if not 1 <= n <= CAPACITY:
            raise SelectionEmpty(f"no slot {n}")
        block = self.slots[n - 1]
        if block is None:
            raise SelectionEmpty(f"slot {n} is empty")
        block.toggle_lock()
        return block.locked

    def set_selected_hex(self, text: str) -> ColorBlock:
        block = self.selected_block()
        if block is None:
            raise SelectionEmpty("palette is empty")
        block.set_hsv(*rgb_to_hsv(*hex_to_rgb(text)))
        return block

    def _sync_selection(self) -> None:
        for i, block in enumerate(self.occupied()):
            block.selected = i == self.cursor


__all__ = ["CAPACITY", "ColorBlock", "DEFAULT_COUNT", "HSV", "Palette", "SelectionEmpty"]
