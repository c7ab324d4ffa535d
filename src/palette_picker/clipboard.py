from __future__ import annotations

import logging
from typing import Protocol

import pyperclip

log = logging.getLogger(__name__)


class ClipboardUnavailable(RuntimeError):
    """The system clipboard could not be written."""


class Clipboard(Protocol):
    def set_text(self, text: str) -> None: ...


class SystemClipboard:
    """pyperclip-backed clipboard (xclip/xsel/wl-copy/pbcopy/win32)."""

    def set_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardUnavailable(str(exc) or "no clipboard mechanism") from exc
        log.debug("copied %s to clipboard", text)


__all__ = ["Clipboard", "ClipboardUnavailable", "SystemClipboard"]
