"""
Runtime settings for the palette tool.

Defaults mirror the stock behaviour (five black blocks, analogous theory,
deletion allowed while more than three blocks remain). The command line in
``app.main`` overrides individual fields.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .blocks import CAPACITY, DEFAULT_COUNT
from .engine import HueMean, Theory

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
HUE_MEANS = ("arithmetic", "circular")


@dataclass
class Settings:
    block_count: int = DEFAULT_COUNT
    min_blocks: int = 3
    theory: Theory = Theory.ANALOGOUS
    seed: Optional[int] = None
    hue_mean: HueMean = "arithmetic"
    log_file: Optional[str] = None
    log_level: str = "WARNING"
    title: str = " Color Palette "

    def __post_init__(self) -> None:
        if not 1 <= self.block_count <= CAPACITY:
            raise ValueError(f"block count must be in 1..{CAPACITY}")
        if not 1 <= self.min_blocks <= CAPACITY:
            raise ValueError(f"minimum block count must be in 1..{CAPACITY}")
        if not isinstance(self.theory, Theory):
            self.theory = Theory(str(self.theory).lower())
        if self.hue_mean not in HUE_MEANS:
            raise ValueError(f"hue mean must be one of {', '.join(HUE_MEANS)}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")


def configure_logging(settings: Settings) -> None:
    """The terminal belongs to curses, so records go to a file or nowhere."""
    if settings.log_file:
        logging.basicConfig(
            filename=settings.log_file,
            level=settings.log_level,
            format="%(levelname)s: %(message)s",
        )
    else:
        logging.basicConfig(level=settings.log_level, handlers=[logging.NullHandler()])


__all__ = ["HUE_MEANS", "LOG_LEVELS", "Settings", "configure_logging"]
