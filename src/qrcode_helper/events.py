"""Events consumed by :class:`~qrcode_helper.engine.SyncEngine`."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .raster import RasterImage


@dataclass(frozen=True, slots=True)
class TextChanged:
    """The user edited the text field."""

    text: str


@dataclass(frozen=True, slots=True)
class SizeChanged:
    """The user edited the size field; ``text`` is the raw field contents."""

    text: str


@dataclass(frozen=True, slots=True)
class TextLoaded:
    """Text arrived from a file, the clipboard or a drop."""

    text: str


@dataclass(frozen=True, slots=True)
class ImageLoaded:
    """An image arrived from a file, the clipboard or a drop.

    ``image`` is either a decoded pixel buffer or the raw contents of an image
    file that still has to be decompressed.
    """

    image: Union[RasterImage, bytes]
    source: str = ""


@dataclass(frozen=True, slots=True)
class Noop:
    """An input that carried nothing usable."""

    reason: str = ""


@dataclass(frozen=True, slots=True)
class LoadFailed:
    message: str


@dataclass(frozen=True, slots=True)
class SaveRequested:
    path: Path


@dataclass(frozen=True, slots=True)
class EncodeDue:
    """The debounce timer fired."""


InputEvent = Union[TextLoaded, ImageLoaded, Noop, LoadFailed]
Event = Union[TextChanged, SizeChanged, SaveRequested, EncodeDue, InputEvent]


__all__ = [
    "TextChanged",
    "SizeChanged",
    "TextLoaded",
    "ImageLoaded",
    "Noop",
    "LoadFailed",
    "SaveRequested",
    "EncodeDue",
    "InputEvent",
    "Event",
]
