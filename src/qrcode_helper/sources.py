"""Normalise file, clipboard and drag-and-drop inputs into engine events."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config import AppConfig
from .events import ImageLoaded, InputEvent, LoadFailed, Noop, TextLoaded
from .raster import LoadError, RasterImage
from .storage import classify, read_bytes, read_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DataOffer:
    """The representations a clipboard or drag payload makes available.

    A single offer may carry several of them at once; :class:`InputSourceAdapter`
    decides which one wins.
    """

    bitmap: Optional[RasterImage] = None
    files: Sequence[Path] = field(default_factory=tuple)
    text: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.bitmap is None and not self.files and not self.text


class InputSourceAdapter:
    """Turn heterogeneous inputs into one canonical event each.

    Raw bitmap data takes precedence over file references, which take
    precedence over plain text.  A drag of an image file usually also offers
    its name or URL as text, and that text must never become the payload.
    """

    def __init__(self, dispatch: Callable[[InputEvent], None], config: Optional[AppConfig] = None):
        self._dispatch = dispatch
        self._config = config or AppConfig()

    def open_file(self, path: Path | str) -> InputEvent:
        return self._submit(self.from_file(path))

    def paste(self, offer: DataOffer) -> InputEvent:
        return self._submit(self.from_offer(offer), origin="clipboard")

    def drop(self, offer: DataOffer) -> InputEvent:
        return self._submit(self.from_offer(offer), origin="drop")

    def from_file(self, path: Path | str) -> InputEvent:
        path = Path(path)
        kind = classify(self._config, path)
        try:
            if kind == "image":
                return ImageLoaded(read_bytes(path), source=path.name)
            if kind == "text":
                return TextLoaded(read_text(path, self._config.character_set))
        except LoadError as exc:
            logger.warning("Loading %s failed: %s", path, exc)
            return LoadFailed(f"Load failed: {exc}")
        return Noop(f"unsupported file type {path.suffix or '<none>'}")

    def from_offer(self, offer: DataOffer) -> InputEvent:
        if offer.is_empty:
            return Noop("empty offer")

        if offer.bitmap is not None:
            return ImageLoaded(offer.bitmap, source="bitmap")

        if offer.files:
            for path in offer.files:
                if classify(self._config, path) is not None:
                    return self.from_file(path)
            return Noop("no supported file in offer")

        return TextLoaded(offer.text)

    def _submit(self, event: InputEvent, origin: str = "file") -> InputEvent:
        logger.debug("Input from %s normalised to %s", origin, type(event).__name__)
        self._dispatch(event)
        return event


__all__ = ["DataOffer", "InputSourceAdapter"]
