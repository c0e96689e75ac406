"""Raster image value type and the error taxonomy shared by the codecs."""
from __future__ import annotations

import enum
from dataclasses import dataclass

import cv2
import numpy as np


class QRCodeHelperError(Exception):
    """Base class for recoverable QRCode Helper failures."""


class EncodeError(QRCodeHelperError):
    """The payload could not be turned into a QR symbol."""


class DecodeError(QRCodeHelperError):
    """The image data is structurally invalid."""


class SaveError(QRCodeHelperError):
    """Writing an image to disk failed."""


class LoadError(QRCodeHelperError):
    """Reading an input file failed."""


class PixelFormat(enum.Enum):
    GRAY8 = 1
    BGR888 = 3
    BGRA8888 = 4

    @property
    def channels(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class RasterImage:
    """An immutable rectangular pixel buffer.

    Instances are replaced wholesale whenever the displayed artifact changes;
    the ``data`` buffer is never shared with a mutable array.
    """

    width: int
    height: int
    pixel_format: PixelFormat
    data: bytes

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def validate(self) -> None:
        """Raise :class:`DecodeError` when the buffer does not describe an image."""

        if self.width <= 0 or self.height <= 0:
            raise DecodeError(f"Invalid image dimensions {self.width}x{self.height}")
        expected = self.width * self.height * self.pixel_format.channels
        if len(self.data) != expected:
            raise DecodeError(
                f"Image buffer length mismatch: expected {expected} bytes, got {len(self.data)}"
            )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Build an image from a ``uint8`` OpenCV style array."""

        if array.ndim == 2:
            pixel_format = PixelFormat.GRAY8
        elif array.ndim == 3 and array.shape[2] in (3, 4):
            pixel_format = PixelFormat.BGR888 if array.shape[2] == 3 else PixelFormat.BGRA8888
        else:
            raise DecodeError(f"Unsupported array shape {array.shape}")

        height, width = array.shape[:2]
        contiguous = np.ascontiguousarray(array, dtype=np.uint8)
        return cls(width, height, pixel_format, contiguous.tobytes())

    @classmethod
    def from_encoded(cls, data: bytes | bytearray) -> "RasterImage":
        """Decode PNG/JPEG (or any OpenCV readable) file contents."""

        if not data:
            raise DecodeError("Image data is empty")
        buffer = np.frombuffer(bytes(data), dtype=np.uint8)
        try:
            array = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        except cv2.error as exc:
            raise DecodeError(f"Unreadable image data: {exc}") from exc
        if array is None:
            raise DecodeError("Unreadable image data")
        if array.dtype != np.uint8:
            array = cv2.convertScaleAbs(array, alpha=255.0 / max(1, int(array.max())))
        return cls.from_array(array)

    def to_array(self) -> np.ndarray:
        """Return a read-only ``uint8`` view shaped for OpenCV."""

        self.validate()
        flat = np.frombuffer(self.data, dtype=np.uint8)
        if self.pixel_format is PixelFormat.GRAY8:
            return flat.reshape(self.height, self.width)
        return flat.reshape(self.height, self.width, self.pixel_format.channels)

    def to_gray(self) -> np.ndarray:
        array = self.to_array()
        if self.pixel_format is PixelFormat.BGR888:
            return cv2.cvtColor(array, cv2.COLOR_BGR2GRAY)
        if self.pixel_format is PixelFormat.BGRA8888:
            # Composite onto white so transparent regions read as quiet zone.
            alpha = array[:, :, 3:4].astype(np.float32) / 255.0
            colour = array[:, :, :3].astype(np.float32)
            flattened = (colour * alpha + 255.0 * (1.0 - alpha)).astype(np.uint8)
            return cv2.cvtColor(flattened, cv2.COLOR_BGR2GRAY)
        return array

    def encode(self, fmt: str) -> bytes:
        """Compress the image as ``png`` or ``jpg``."""

        extension = {"png": ".png", "jpg": ".jpg"}.get(fmt)
        if extension is None:
            raise SaveError(f"Unsupported image format: {fmt}")

        array = self.to_array()
        if fmt == "jpg" and self.pixel_format is PixelFormat.BGRA8888:
            array = cv2.cvtColor(array, cv2.COLOR_BGRA2BGR)

        try:
            ok, encoded = cv2.imencode(extension, array)
        except cv2.error as exc:
            raise SaveError(f"Image encoding failed: {exc}") from exc
        if not ok:
            raise SaveError("Image encoding failed")
        return encoded.tobytes()


__all__ = [
    "QRCodeHelperError",
    "EncodeError",
    "DecodeError",
    "SaveError",
    "LoadError",
    "PixelFormat",
    "RasterImage",
]
