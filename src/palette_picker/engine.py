from __future__ import annotations

import logging
from enum import Enum
from typing import Literal, Optional, Sequence, Tuple

import numpy as np

from .blocks import HSV, Palette
from .colormath import normalize_hue

log = logging.getLogger(__name__)

HueMean = Literal["arithmetic", "circular"]

JITTER_DEG = 60.0
SEED_SV_RANGE: Tuple[float, float] = (0.5, 0.9)  # fresh random colours
CHAIN_SV_RANGE: Tuple[float, float] = (0.5, 0.8)  # blocks following a random seed


class Theory(str, Enum):
    """Hue relationship used when regenerating unlocked blocks."""

    ANALOGOUS = "analogous"
    COMPLEMENTARY = "complementary"
    RANDOM = "random"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Order shown in the theory selector; the first entry is preselected.
THEORIES: Tuple[Theory, ...] = tuple(Theory)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def random_hsv(
    rng: np.random.Generator, sv_range: Tuple[float, float] = SEED_SV_RANGE
) -> HSV:
    lo, hi = sv_range
    return HSV(
        float(rng.uniform(0.0, 360.0)),
        float(rng.uniform(lo, hi)),
        float(rng.uniform(lo, hi)),
    )


def hue_step(theory: Theory, rng: np.random.Generator) -> float:
    """Offset from the previous hue to the next one in the chain."""
    if theory is Theory.ANALOGOUS:
        return float(rng.uniform(0.0, JITTER_DEG))
    if theory is Theory.COMPLEMENTARY:
        return 180.0 + float(rng.uniform(-JITTER_DEG, JITTER_DEG))
    raise ValueError(f"theory {theory!r} has no hue step")


def average_hue(hues: Sequence[float], method: HueMean = "arithmetic") -> float:
    """
    Seed hue for a set of locked blocks.

    ``arithmetic`` is the plain mean of the degree values (350° and 10° give
    180°); ``circular`` averages unit vectors (350° and 10° give 0°).
    """
    if len(hues) == 0:
        raise ValueError("average of no hues")
    deg = np.asarray(hues, dtype=np.float64)
    if method == "circular":
        rad = np.deg2rad(deg)
        mean = np.rad2deg(np.arctan2(np.sin(rad).mean(), np.cos(rad).mean()))
        return normalize_hue(float(mean))
    if method == "arithmetic":
        return normalize_hue(float(deg.mean()))
    raise ValueError(f"unknown hue mean {method!r}")


def regenerate(
    palette: Palette,
    theory: Theory,
    rng: np.random.Generator,
    *,
    hue_mean: HueMean = "arithmetic",
) -> int:
    """
    Recolour every unlocked block of `palette` following `theory`.

    Locked blocks are never touched. With at least one locked block the
    chain starts from their average hue and each unlocked block keeps its
    own saturation/value. Without locks the first block gets a random
    colour and seeds the chain; followers get random saturation/value.
    Each new hue is offset from the hue assigned just before it.

    Returns the number of blocks recoloured.
    """
    locked = palette.locked()
    unlocked = palette.unlocked()
    if not unlocked:
        log.debug("regenerate(%s): every block is locked", theory.value)
        return 0

    if theory is Theory.RANDOM:
        for block in unlocked:
            block.set_color(random_hsv(rng))
        log.debug("regenerate(random): %d blocks", len(unlocked))
        return len(unlocked)

    if locked:
        last = average_hue([b.color.hue for b in locked], hue_mean)
        log.debug(
            "regenerate(%s): seed %.1f° from %d locked", theory.value, last, len(locked)
        )
        for block in unlocked:
            block.set_hsv(
                last + hue_step(theory, rng), block.color.saturation, block.color.value
            )
            last = block.color.hue
        return len(unlocked)

    seed, rest = unlocked[0], unlocked[1:]
    seed.set_color(random_hsv(rng))
    last = seed.color.hue
    log.debug("regenerate(%s): random seed %.1f° in block %d", theory.value, last, seed.id)
    lo, hi = CHAIN_SV_RANGE
    for block in rest:
        block.set_hsv(
            last + hue_step(theory, rng),
            float(rng.uniform(lo, hi)),
            float(rng.uniform(lo, hi)),
        )
        last = block.color.hue
    return len(unlocked)


__all__ = [
    "HueMean",
    "THEORIES",
    "Theory",
    "average_hue",
    "hue_step",
    "make_rng",
    "random_hsv",
    "regenerate",
]
