# colormath.py – hex / RGB / HSV conversions for palette blocks
#   - hex input is a *prefix* of RRGGBB, right-padded with '0'
#   - hue in degrees [0, 360), saturation and value in [0, 1]
#   - 8-bit channels use round-to-nearest and are clipped to [0, 255]

from __future__ import annotations

import string
from typing import Tuple

import numpy as np

RGB = Tuple[int, int, int]
HSVTuple = Tuple[float, float, float]

HEX_LEN = 6
HEX_DIGITS = frozenset(string.hexdigits)


class InvalidDigit(ValueError):
    """Raised when a hex code contains a character outside 0-9 / a-f / A-F."""

    def __init__(self, text: str, char: str) -> None:
        super().__init__(f"invalid hex digit {char!r} in {text!r}")
        self.text = text
        self.char = char


def is_hex_digit(c: str) -> bool:
    return len(c) == 1 and c in HEX_DIGITS


def normalize_hue(h: float) -> float:
    """Wrap any hue (negative or > 360) into [0, 360)."""
    h = float(h) % 360.0
    # -1e-20 % 360.0 rounds up to exactly 360.0
    return 0.0 if h >= 360.0 else h


def pad_hex(text: str) -> str:
    raw = text[1:] if text.startswith("#") else text
    return raw.ljust(HEX_LEN, "0")[:HEX_LEN]


def hex_to_rgb(text: str) -> RGB:
    """
    Parse a (possibly partial) hex code into an 8-bit RGB triple.

    ``"1A2B"`` is read as ``"1A2B00"``; anything past six digits is ignored.
    """
    raw = pad_hex(text)
    for c in raw:
        if c not in HEX_DIGITS:
            raise InvalidDigit(text, c)
    r, g, b = (int(raw[i : i + 2], 16) for i in (0, 2, 4))
    return r, g, b


def rgb_to_hsv(r: int, g: int, b: int) -> HSVTuple:
    rgb = np.clip(np.array([r, g, b], dtype=np.float64), 0.0, 255.0) / 255.0
    cmax = float(rgb.max())
    delta = cmax - float(rgb.min())

    if delta == 0.0:
        h = 0.0
    elif cmax == rgb[0]:
        h = 60.0 * (((rgb[1] - rgb[2]) / delta) % 6.0)
    elif cmax == rgb[1]:
        h = 60.0 * ((rgb[2] - rgb[0]) / delta + 2.0)
    else:
        h = 60.0 * ((rgb[0] - rgb[1]) / delta + 4.0)

    s = 0.0 if cmax == 0.0 else delta / cmax
    return normalize_hue(h), float(s), cmax


def hsv_to_rgb01(h: float, s: float, v: float) -> np.ndarray:
    """HSV → sRGB floats in [0, 1] (piecewise-linear hue ramps)."""
    h6 = normalize_hue(h) / 60.0
    s = float(np.clip(s, 0.0, 1.0))
    v = float(np.clip(v, 0.0, 1.0))
    base = np.clip(
        np.array([abs(h6 - 3.0) - 1.0, 2.0 - abs(h6 - 2.0), 2.0 - abs(h6 - 4.0)]),
        0.0,
        1.0,
    )
    return v * ((1.0 - s) + s * base)


def hsv_to_rgb(h: float, s: float, v: float) -> RGB:
    u8 = np.round(np.clip(hsv_to_rgb01(h, s, v) * 255.0, 0.0, 255.0)).astype(np.uint8)
    return int(u8[0]), int(u8[1]), int(u8[2])


def rgb_to_hex(r: int, g: int, b: int) -> str:
    u8 = np.clip(np.array([r, g, b]), 0, 255).astype(np.uint8)
    return f"#{u8[0]:02X}{u8[1]:02X}{u8[2]:02X}"


def hsv_to_hex(h: float, s: float, v: float) -> str:
    return rgb_to_hex(*hsv_to_rgb(h, s, v))


__all__ = [
    "InvalidDigit",
    "hex_to_rgb",
    "hsv_to_hex",
    "hsv_to_rgb",
    "hsv_to_rgb01",
    "is_hex_digit",
    "normalize_hue",
    "pad_hex",
    "rgb_to_hex",
    "rgb_to_hsv",
]
