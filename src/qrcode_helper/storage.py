"""File persistence helpers for saving and loading QR artifacts."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import AppConfig
from .raster import LoadError, RasterImage, SaveError

logger = logging.getLogger(__name__)

_FORMAT_BY_SUFFIX = {".png": "png", ".jpg": "jpg", ".jpeg": "jpg"}


def suggested_filename(config: AppConfig, ext: str = "png", now: Optional[datetime] = None) -> str:
    """Return ``<prefix>_<YYYYMMDD>_<HHMMSS>.<ext>`` for a save dialog."""

    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{config.filename_prefix}_{stamp}.{ext.lstrip('.')}"


def image_format_for(path: Path | str) -> str:
    """Pick the output format from the suffix; unknown suffixes save as PNG."""

    return _FORMAT_BY_SUFFIX.get(Path(path).suffix.lower(), "png")


def with_default_suffix(path: Path | str, selected_filter: str = "") -> Path:
    """Append the extension of ``selected_filter`` when ``path`` has none.

    ``selected_filter`` is the dialog filter string, e.g. ``"JPG File (*.jpg *.jpeg)"``;
    anything that does not name a JPEG pattern falls back to ``.png``.
    """

    target = Path(path)
    if target.suffix:
        return target
    ext = ".jpg" if "*.jpg" in selected_filter.lower() else ".png"
    return target.with_name(target.name + ext)


def classify(config: AppConfig, path: Path | str) -> Optional[str]:
    """Return ``"image"``, ``"text"`` or ``None`` based on the file extension."""

    suffix = Path(path).suffix.lower()
    if suffix in config.image_extensions:
        return "image"
    if suffix in config.text_extensions:
        return "text"
    return None


def write_image(image: RasterImage, path: Path | str, fmt: Optional[str] = None) -> Path:
    """Encode ``image`` and write it to ``path``.

    Any failure is reported as :class:`SaveError`; a partially written file is
    left for the caller's file system to deal with.
    """

    target = Path(path)
    data = image.encode(fmt or image_format_for(target))
    try:
        with open(target, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise SaveError(f"{target.name}: {exc.strerror or exc}") from exc

    logger.info("Saved %dx%d image to %s", image.width, image.height, target)
    return target


def read_bytes(path: Path | str) -> bytes:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as exc:
        raise LoadError(f"{Path(path).name}: {exc.strerror or exc}") from exc


def read_text(path: Path | str, encoding: str = "utf-8") -> str:
    """Read a text file, dropping a leading byte order mark."""

    data = read_bytes(path)
    try:
        return data.decode("utf-8-sig" if encoding.lower() == "utf-8" else encoding)
    except UnicodeDecodeError as exc:
        raise LoadError(f"{Path(path).name} is not valid {encoding} text") from exc


__all__ = [
    "suggested_filename",
    "image_format_for",
    "with_default_suffix",
    "classify",
    "write_image",
    "read_bytes",
    "read_text",
]
