"""QR code encode/decode adapter."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import cv2
import numpy as np

from .config import AppConfig
from .raster import DecodeError, EncodeError, RasterImage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QRCodeManager:
    """Generate QR codes with :mod:`segno` and read them with :mod:`pyzbar`."""

    config: AppConfig

    def is_available(self) -> bool:
        try:
            import segno  # type: ignore  # noqa: F401
        except Exception:
            return False
        return True

    def encode(self, payload: str, size: int) -> RasterImage:
        """Return a ``size`` x ``size`` grayscale image of ``payload``.

        The symbol, including its quiet zone, is scaled by the largest integer
        factor that fits and centred on a white canvas.  A symbol that does not
        fit even at one pixel per module is returned at its natural size.
        """

        try:
            import segno  # type: ignore
        except Exception as exc:
            raise RuntimeError("QR generation requires segno; install segno") from exc

        try:
            qr = segno.make(
                payload,
                error=self.config.qr_error_correction,
                encoding=self.config.character_set,
                micro=False,
            )
        except ValueError as exc:
            # segno.DataOverflowError is a ValueError subclass.
            raise EncodeError(str(exc)) from exc

        rows = list(qr.matrix_iter(scale=1, border=self.config.qr_border, verbose=False))
        dark = np.array([[bool(cell) for cell in row] for row in rows], dtype=bool)
        modules = dark.shape[0]

        scale = max(1, size // modules)
        symbol = np.where(dark, 0, 255).astype(np.uint8)
        symbol = np.kron(symbol, np.ones((scale, scale), dtype=np.uint8))

        extent = max(size, symbol.shape[0])
        canvas = np.full((extent, extent), 255, dtype=np.uint8)
        offset = (extent - symbol.shape[0]) // 2
        canvas[offset : offset + symbol.shape[0], offset : offset + symbol.shape[1]] = symbol

        logger.debug("Encoded %d characters as version %s at %dpx", len(payload), qr.version, extent)
        return RasterImage.from_array(canvas)

    def decode(self, image: RasterImage) -> Optional[str]:
        """Return the text of the first QR symbol in ``image`` or ``None``.

        :class:`DecodeError` is raised only when ``image`` is not a usable
        pixel buffer; an image without a symbol is not an error.
        """

        try:
            from pyzbar import pyzbar  # type: ignore
        except Exception as exc:
            raise RuntimeError("QR decoding requires pyzbar and the zbar library") from exc

        image.validate()
        try:
            gray = image.to_gray()
        except cv2.error as exc:
            raise DecodeError(f"Unusable image data: {exc}") from exc

        for processed in self._candidates(gray):
            decoded = pyzbar.decode(processed, symbols=[pyzbar.ZBarSymbol.QRCODE])
            if decoded:
                return bytes(decoded[0].data).decode(self.config.character_set, errors="replace")

        logger.debug("No QR symbol found in %dx%d image", image.width, image.height)
        return None

    def _candidates(self, gray: np.ndarray) -> Iterator[np.ndarray]:
        """Yield progressively more aggressive variants of ``gray``.

        Trying several preprocessing passes handles low contrast, noise,
        inverted symbols and codes that are only a few pixels per module.
        """

        yield gray
        yield cv2.GaussianBlur(gray, (5, 5), 0)
        otsu = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)[1]
        yield otsu
        yield cv2.bitwise_not(otsu)
        if max(gray.shape) < 1_000:
            yield cv2.resize(gray, None, fx=2, fy=2, interpolation=cv2.INTER_NEAREST)


__all__ = ["QRCodeManager"]
