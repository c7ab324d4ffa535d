import numpy as np
import pytest

from palette_picker.blocks import HSV, Palette
from palette_picker.engine import (
    CHAIN_SV_RANGE,
    JITTER_DEG,
    SEED_SV_RANGE,
    THEORIES,
    Theory,
    average_hue,
    hue_step,
    make_rng,
    regenerate,
)


def hue_diff(a, b):
    """Signed shortest difference b - a in degrees, in [-180, 180)."""
    return ((b - a + 180.0) % 360.0) - 180.0


def colors(palette):
    return [b.color for b in palette.occupied()]


def test_theory_list_order():
    assert THEORIES[0] is Theory.ANALOGOUS
    assert THEORIES[1] is Theory.COMPLEMENTARY
    assert Theory.COMPLEMENTARY.label == "Complementary"


def test_complementary_from_black_palette():
    p = Palette.initial(5)
    assert regenerate(p, Theory.COMPLEMENTARY, make_rng(1)) == 5
    blocks = p.occupied()

    first = blocks[0].color
    assert SEED_SV_RANGE[0] <= first.saturation <= SEED_SV_RANGE[1]
    assert SEED_SV_RANGE[0] <= first.value <= SEED_SV_RANGE[1]

    for prev, cur in zip(blocks, blocks[1:]):
        assert abs(hue_diff(prev.color.hue + 180.0, cur.color.hue)) <= JITTER_DEG + 1e-9
        assert CHAIN_SV_RANGE[0] <= cur.color.saturation <= CHAIN_SV_RANGE[1]
        assert CHAIN_SV_RANGE[0] <= cur.color.value <= CHAIN_SV_RANGE[1]
        assert 0.0 <= cur.color.hue < 360.0


def test_analogous_drifts_forward():
    p = Palette.initial(9)
    regenerate(p, Theory.ANALOGOUS, make_rng(2))
    blocks = p.occupied()
    for prev, cur in zip(blocks, blocks[1:]):
        d = (cur.color.hue - prev.color.hue) % 360.0
        assert 0.0 <= d <= JITTER_DEG


@pytest.mark.parametrize("theory", list(Theory))
def test_locked_blocks_never_change(theory):
    rng = make_rng(3)
    for trial in range(20):
        p = Palette.initial(7)
        regenerate(p, Theory.RANDOM, rng)
        for slot in rng.choice(7, size=int(rng.integers(0, 8)), replace=False):
            p.toggle_lock_index(int(slot) + 1)
        before = {b.id: b.color for b in p.locked()}
        regenerate(p, theory, rng)
        assert {b.id: b.color for b in p.locked()} == before


def test_all_locked_is_noop():
    p = Palette.initial(4)
    for n in range(1, 5):
        p.toggle_lock_index(n)
    before = colors(p)
    for theory in Theory:
        assert regenerate(p, theory, make_rng(4)) == 0
    assert colors(p) == before


def test_locked_seed_keeps_saturation_and_value():
    p = Palette.initial(5)
    p.slots[0].set_hsv(100.0, 0.3, 0.4)
    p.slots[0].toggle_lock()
    p.slots[2].set_hsv(0.0, 0.25, 0.75)
    regenerate(p, Theory.ANALOGOUS, make_rng(5))

    b2 = p.slots[1].color
    assert 0.0 <= hue_diff(100.0, b2.hue) <= JITTER_DEG
    assert (b2.saturation, b2.value) == (0.0, 0.0)
    b3 = p.slots[2].color
    assert (b3.saturation, b3.value) == (0.25, 0.75)
    assert 0.0 <= hue_diff(b2.hue, b3.hue) <= JITTER_DEG


def test_complementary_wraps_negative_offset():
    class FixedRng:
        def uniform(self, lo, hi):
            return lo  # jitter -60

    p = Palette.initial(3)
    p.slots[0].set_hsv(10.0, 0.5, 0.5)
    p.slots[0].toggle_lock()
    regenerate(p, Theory.COMPLEMENTARY, FixedRng())
    # 10 + 180 - 60 = 130, then 130 + 120 = 250
    assert p.slots[1].color.hue == pytest.approx(130.0)
    assert p.slots[2].color.hue == pytest.approx(250.0)


def test_hue_normalised_for_negative_chain():
    class FixedRng:
        def uniform(self, lo, hi):
            return lo

    p = Palette.initial(2)
    p.slots[0].set_color(HSV(190.0, 0.5, 0.5))
    p.slots[0].toggle_lock()
    regenerate(p, Theory.COMPLEMENTARY, FixedRng())
    # 190 + 180 - 60 = 310
    assert p.slots[1].color.hue == pytest.approx(310.0)


def test_seed_is_first_occupied_slot():
    p = Palette.initial(5)
    p.delete_selected()
    regenerate(p, Theory.ANALOGOUS, make_rng(6))
    assert p.slots[0] is None
    first = p.slots[1].color
    assert SEED_SV_RANGE[0] <= first.saturation <= SEED_SV_RANGE[1]


def test_random_theory_ignores_locked_seed():
    p = Palette.initial(5)
    p.slots[2].toggle_lock()
    regenerate(p, Theory.RANDOM, make_rng(7))
    for block in p.unlocked():
        assert SEED_SV_RANGE[0] <= block.color.saturation <= SEED_SV_RANGE[1]
        assert SEED_SV_RANGE[0] <= block.color.value <= SEED_SV_RANGE[1]
    assert p.slots[2].color == HSV(0, 0, 0)


def test_seeded_generation_is_deterministic():
    a, b = Palette.initial(6), Palette.initial(6)
    regenerate(a, Theory.COMPLEMENTARY, make_rng(42))
    regenerate(b, Theory.COMPLEMENTARY, make_rng(42))
    assert colors(a) == colors(b)


def test_average_hue_arithmetic_and_circular():
    assert average_hue([350.0, 10.0]) == pytest.approx(180.0)
    assert abs(hue_diff(0.0, average_hue([350.0, 10.0], "circular"))) < 1e-9
    assert average_hue([90.0, 150.0], "circular") == pytest.approx(120.0)
    with pytest.raises(ValueError):
        average_hue([])
    with pytest.raises(ValueError):
        average_hue([1.0], "median")


def test_hue_step_bounds():
    rng = make_rng(8)
    steps = np.array([hue_step(Theory.COMPLEMENTARY, rng) for _ in range(500)])
    assert steps.min() >= 120.0 and steps.max() <= 240.0
    steps = np.array([hue_step(Theory.ANALOGOUS, rng) for _ in range(500)])
    assert steps.min() >= 0.0 and steps.max() <= 60.0
    with pytest.raises(ValueError):
        hue_step(Theory.RANDOM, rng)
