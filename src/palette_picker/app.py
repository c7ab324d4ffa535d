from __future__ import annotations

import argparse
import curses
import locale
import logging
import os
from typing import Any, List, Optional

from .clipboard import Clipboard
from .config import HUE_MEANS, LOG_LEVELS, Settings, configure_logging
from .engine import Theory
from .keymap import read_key, translate
from .render import Renderer
from .state import PaletteApp

log = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, *, clipboard: Optional[Clipboard] = None
) -> PaletteApp:
    settings = settings or Settings()
    log.info(
        "starting with %d blocks, theory=%s, seed=%s",
        settings.block_count,
        settings.theory.value,
        settings.seed,
    )
    return PaletteApp(settings, clipboard=clipboard)


def run(stdscr: Any, app: PaletteApp) -> None:
    """Alternate between painting a snapshot and applying one key press."""
    renderer = Renderer(stdscr)
    try:
        while app.running:
            renderer.draw(app.snapshot())
            event = read_key(stdscr)
            if event is None:
                continue
            command = translate(app.page, event)
            if command is not None:
                app.dispatch(command)
    except Exception:
        log.exception("run loop failed")
        raise


# ----------------------------- command line -----------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="palette-picker",
        description="Build a colour palette in the terminal: generate, lock, edit and copy colours.",
    )
    parser.add_argument("--blocks", type=int, default=5, help="Number of colour blocks (1-9). Default 5.")
    parser.add_argument(
        "--theory",
        choices=[t.value for t in Theory],
        default=Theory.ANALOGOUS.value,
        help="Initial colour theory. Default analogous.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible palettes.")
    parser.add_argument(
        "--hue-mean",
        choices=HUE_MEANS,
        default="arithmetic",
        help="How locked hues are averaged into the seed hue. Default arithmetic.",
    )
    parser.add_argument("--log-file", default=None, help="Write log records to this file.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", type=str.upper)
    return parser


def settings_from_args(argv: Optional[List[str]] = None) -> Settings:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return Settings(
            block_count=args.blocks,
            theory=Theory(args.theory),
            seed=args.seed,
            hue_mean=args.hue_mean,
            log_file=args.log_file,
            log_level=args.log_level,
        )
    except ValueError as exc:
        parser.error(str(exc))
        raise  # unreachable, parser.error exits


def main(argv: Optional[List[str]] = None) -> int:
    settings = settings_from_args(argv)
    configure_logging(settings)
    locale.setlocale(locale.LC_ALL, "")
    # shorten the wait that tells a lone Esc apart from an Alt+key sequence
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(run, create_app(settings))
    return 0
