"""Configuration data structures for QRCode Helper."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class AppConfig:
    """Static configuration options used across the application."""

    app_name: str = "QRCode Helper"
    app_version: str = "1.0"
    default_size: int = 320
    # Largest accepted canvas side; a 4096 px gray canvas is 16 MiB.
    max_render_size: int = 4_096
    debounce_ms: int = 300
    qr_error_correction: str = "L"
    qr_border: int = 4
    character_set: str = "utf-8"
    filename_prefix: str = "QRCode-Helper"
    image_extensions: Tuple[str, ...] = (".png", ".jpg", ".jpeg")
    text_extensions: Tuple[str, ...] = (".txt",)
    log_level: str = "INFO"

    def parse_size(self, text: str) -> int:
        """Return the render size described by ``text``.

        Only plain ASCII digits are accepted, so ``"1_000"`` and full-width
        digits are rejected the same way as signs or letters.  Anything that is
        not a positive integer within ``max_render_size`` resolves to
        ``default_size`` so that output always stays renderable.
        """

        stripped = text.strip() if isinstance(text, str) else ""
        if not (stripped.isascii() and stripped.isdigit()):
            return self.default_size
        size = int(stripped)
        if size <= 0 or size > self.max_render_size:
            return self.default_size
        return size


@dataclass(slots=True)
class StyleConfig:
    """Simple grouping of UI styling constants."""

    bg_primary: str = "#2E3440"
    bg_secondary: str = "#3B4252"
    fg_primary: str = "#D8DEE9"
    fg_secondary: str = "#ECEFF4"
    accent_primary: str = "#88C0D0"
    accent_secondary: str = "#5E81AC"
    border: str = "#4C566A"
    font_family: str = "Segoe UI, sans-serif"
    font_size: int = 14
    font_mono: str = "Courier New, monospace"
    preview_min_size: int = 320
    open_filter: str = "Images and text (*.png *.jpg *.jpeg *.txt)"
    save_filter: str = "PNG File (*.png);;JPG File (*.jpg *.jpeg)"


__all__ = ["AppConfig", "StyleConfig"]
