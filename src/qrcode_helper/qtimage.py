"""Conversions between :class:`RasterImage` and Qt image types."""
from __future__ import annotations

import cv2
import numpy as np

from .raster import PixelFormat, RasterImage


def to_qimage(image: RasterImage):  # pragma: no cover - requires PyQt at runtime
    """Return a deep-copied ``QImage`` of ``image``."""

    try:
        from PyQt5.QtGui import QImage
    except Exception as exc:  # pragma: no cover - depends on environment
        raise RuntimeError("PyQt5 is required to display images") from exc

    array = image.to_array()
    if image.pixel_format is PixelFormat.GRAY8:
        qimage = QImage(image.data, image.width, image.height, image.width, QImage.Format_Grayscale8)
    elif image.pixel_format is PixelFormat.BGR888:
        rgb = np.ascontiguousarray(cv2.cvtColor(array, cv2.COLOR_BGR2RGB))
        qimage = QImage(rgb.data, image.width, image.height, 3 * image.width, QImage.Format_RGB888)
    else:
        rgba = np.ascontiguousarray(cv2.cvtColor(array, cv2.COLOR_BGRA2RGBA))
        qimage = QImage(rgba.data, image.width, image.height, 4 * image.width, QImage.Format_RGBA8888)

    # QImage does not own the numpy buffer.
    return qimage.copy()


def to_qpixmap(image: RasterImage):  # pragma: no cover - requires PyQt at runtime
    try:
        from PyQt5.QtGui import QPixmap
    except Exception as exc:  # pragma: no cover - depends on environment
        raise RuntimeError("PyQt5 is required to display images") from exc

    return QPixmap.fromImage(to_qimage(image))


def from_qimage(qimage) -> RasterImage:  # pragma: no cover - requires PyQt at runtime
    """Copy a clipboard or drop ``QImage`` into a :class:`RasterImage`."""

    try:
        from PyQt5.QtGui import QImage
    except Exception as exc:  # pragma: no cover - depends on environment
        raise RuntimeError("PyQt5 is required to read images") from exc

    converted = qimage.convertToFormat(QImage.Format_RGBA8888)
    width, height = converted.width(), converted.height()
    if width <= 0 or height <= 0:
        return RasterImage(width, height, PixelFormat.BGRA8888, b"")

    pointer = converted.constBits()
    pointer.setsize(converted.sizeInBytes())
    rows = np.frombuffer(pointer, dtype=np.uint8).reshape(height, converted.bytesPerLine())
    rgba = np.ascontiguousarray(rows[:, : width * 4]).reshape(height, width, 4)
    return RasterImage.from_array(cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA))


__all__ = ["to_qimage", "to_qpixmap", "from_qimage"]
