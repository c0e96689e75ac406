from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import pytest

from qrcode_helper.config import AppConfig
from qrcode_helper.debounce import DebounceScheduler
from qrcode_helper.engine import SyncEngine
from qrcode_helper.raster import EncodeError, PixelFormat, RasterImage


class ManualTimer:
    """Single-shot timer driven by :meth:`advance` instead of an event loop."""

    def __init__(self) -> None:
        self.now = 0
        self.starts = 0
        self._deadline: Optional[int] = None
        self._callback = None

    @property
    def active(self) -> bool:
        return self._deadline is not None

    def set_callback(self, callback) -> None:
        self._callback = callback

    def start(self, delay_ms: int) -> None:
        self.starts += 1
        self._deadline = self.now + delay_ms

    def stop(self) -> None:
        self._deadline = None

    def advance(self, ms: int) -> None:
        self.now += ms
        if self._deadline is not None and self.now >= self._deadline:
            self._deadline = None
            self._callback()


class FakeCodec:
    def __init__(self) -> None:
        self.encoded: List[Tuple[str, int]] = []
        self.decoded: List[RasterImage] = []
        self.known: Dict[RasterImage, str] = {}
        self.too_large: set[str] = set()
        self.on_decode = None

    def encode(self, payload: str, size: int) -> RasterImage:
        self.encoded.append((payload, size))
        if payload in self.too_large:
            raise EncodeError("data too large")
        image = solid_image(size, len(payload) % 256)
        self.known[image] = payload
        return image

    def decode(self, image: RasterImage) -> Optional[str]:
        image.validate()
        self.decoded.append(image)
        if self.on_decode is not None:
            self.on_decode(image)
        return self.known.get(image)


class RecordingView:
    def __init__(self) -> None:
        self.commands: List[Tuple[str, object]] = []

    def display_image(self, image: RasterImage) -> None:
        self.commands.append(("display_image", image))

    def display_text(self, text: str) -> None:
        self.commands.append(("display_text", text))

    def clear_display(self) -> None:
        self.commands.append(("clear_display", None))

    def show_error(self, message: str) -> None:
        self.commands.append(("show_error", message))

    def show_status(self, message: str) -> None:
        self.commands.append(("show_status", message))

    def names(self) -> List[str]:
        return [name for name, _ in self.commands]


def solid_image(size: int, value: int = 255) -> RasterImage:
    return RasterImage(size, size, PixelFormat.GRAY8, bytes([value]) * (size * size))


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig()


@pytest.fixture()
def timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture()
def codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture()
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture()
def engine(view, config, codec, timer) -> SyncEngine:
    scheduler = DebounceScheduler(timer, default_delay_ms=config.debounce_ms)
    return SyncEngine(view, config, codec=codec, scheduler=scheduler)
