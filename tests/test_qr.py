from __future__ import annotations

import sys
import types

import numpy as np
import pytest

from qrcode_helper.config import AppConfig
from qrcode_helper.debounce import DebounceScheduler
from qrcode_helper.engine import SyncEngine
from qrcode_helper.events import ImageLoaded, TextChanged
from qrcode_helper.qr import QRCodeManager
from qrcode_helper.raster import DecodeError, EncodeError, PixelFormat, RasterImage

from conftest import solid_image


class DummyQR:
    """Ten module symbol whose only dark module is the top-left corner."""

    version = 1

    def matrix_iter(self, scale=1, border=None, verbose=False):
        for y in range(10):
            yield [x == 0 and y == 0 for x in range(10)]


@pytest.fixture()
def fake_segno(monkeypatch):
    made = []

    def fake_make(data, **kwargs):
        made.append((data, kwargs))
        if data == "overflow":
            raise ValueError("Data too large")
        return DummyQR()

    monkeypatch.setitem(sys.modules, "segno", types.SimpleNamespace(make=fake_make))
    return made


@pytest.fixture()
def fake_pyzbar(monkeypatch):
    seen = []
    answers = []

    def fake_decode(image, symbols=None):
        seen.append(image)
        return answers.pop(0) if answers else []

    module = types.SimpleNamespace(
        decode=fake_decode,
        ZBarSymbol=types.SimpleNamespace(QRCODE=64),
    )
    monkeypatch.setitem(sys.modules, "pyzbar", types.SimpleNamespace(pyzbar=module))
    return seen, answers


def test_encode_scales_and_fills_requested_size(fake_segno):
    manager = QRCodeManager(AppConfig())

    image = manager.encode("payload", 100)

    assert image.size == (100, 100)
    assert image.pixel_format is PixelFormat.GRAY8
    pixels = image.to_array()
    assert pixels[9, 9] == 0
    assert pixels[0, 10] == 255
    assert fake_segno[0][1]["encoding"] == "utf-8"
    assert fake_segno[0][1]["error"] == "L"


def test_encode_centres_symbol_in_leftover_space(fake_segno):
    pixels = QRCodeManager(AppConfig()).encode("payload", 105).to_array()

    assert pixels.shape == (105, 105)
    assert pixels[0, 0] == 255
    assert pixels[2, 2] == 0
    assert pixels[11, 11] == 0
    assert pixels[12, 12] == 255


def test_encode_never_shrinks_below_one_pixel_per_module(fake_segno):
    image = QRCodeManager(AppConfig()).encode("payload", 4)

    assert image.size == (10, 10)


def test_encode_is_deterministic(fake_segno):
    manager = QRCodeManager(AppConfig())

    assert manager.encode("same", 64) == manager.encode("same", 64)


def test_encode_overflow_raises_encode_error(fake_segno):
    with pytest.raises(EncodeError):
        QRCodeManager(AppConfig()).encode("overflow", 320)


def test_decode_tries_harder_before_giving_up(fake_pyzbar):
    seen, _answers = fake_pyzbar

    assert QRCodeManager(AppConfig()).decode(solid_image(40)) is None
    assert len(seen) == 5
    assert seen[-1].shape == (80, 80)


def test_decode_returns_text_from_later_pass(fake_pyzbar):
    seen, answers = fake_pyzbar
    answers.extend([[], [types.SimpleNamespace(data="grüße".encode("utf-8"))]])

    assert QRCodeManager(AppConfig()).decode(solid_image(40)) == "grüße"
    assert len(seen) == 2


def test_decode_converts_colour_to_gray(fake_pyzbar):
    seen, _answers = fake_pyzbar
    image = RasterImage.from_array(np.full((6, 8, 3), 128, dtype=np.uint8))

    QRCodeManager(AppConfig()).decode(image)

    assert seen[0].shape == (6, 8)


def test_decode_rejects_invalid_image(fake_pyzbar):
    with pytest.raises(DecodeError):
        QRCodeManager(AppConfig()).decode(RasterImage(0, 0, PixelFormat.GRAY8, b""))


def test_is_available_reflects_segno(fake_segno):
    assert QRCodeManager(AppConfig()).is_available()


def _require_zbar():
    """Skip unless pyzbar imports and its native zbar library actually decodes."""

    pyzbar = pytest.importorskip("pyzbar.pyzbar")
    try:
        pyzbar.decode(np.zeros((1, 1), dtype=np.uint8))
    except (ImportError, OSError) as exc:
        pytest.skip(f"zbar library unavailable: {exc}")


@pytest.mark.parametrize(
    "text",
    ["HELLO", "https://example.com", "line one\nline two", "grüße", "日本語", "emoji 😀"],
)
def test_roundtrip_with_real_libraries(text):
    pytest.importorskip("segno")
    _require_zbar()
    manager = QRCodeManager(AppConfig())

    image = manager.encode(text, 320)

    assert image.size == (320, 320)
    assert manager.decode(image) == text


def test_blank_image_is_not_found_with_real_libraries():
    _require_zbar()

    assert QRCodeManager(AppConfig()).decode(solid_image(200)) is None


def test_typing_a_url_renders_a_decodable_code(timer, view):
    pytest.importorskip("segno")
    _require_zbar()
    config = AppConfig()
    manager = QRCodeManager(config)
    engine = SyncEngine(view, config, codec=manager, scheduler=DebounceScheduler(timer))

    engine.dispatch(TextChanged("https://example.com"))
    timer.advance(300)

    name, image = view.commands[-1]
    assert name == "display_image"
    assert image.size == (320, 320)
    assert manager.decode(image) == "https://example.com"

    view.commands.clear()
    engine.dispatch(ImageLoaded(image))
    timer.advance(1_000)
    assert view.commands == [("display_image", image), ("display_text", "https://example.com")]
