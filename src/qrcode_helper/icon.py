"""Application icon helpers."""
from __future__ import annotations

from .config import AppConfig
from .qr import QRCodeManager
from .qtimage import to_qpixmap


def create_icon(config: AppConfig, size: int = 64):  # pragma: no cover - requires PyQt at runtime
    """Create a :class:`~PyQt5.QtGui.QIcon` showing a QR code of the app name.

    The import is performed lazily so that automated tests do not require a
    graphical backend.
    """

    try:
        from PyQt5.QtGui import QIcon
    except Exception as exc:  # pragma: no cover - depends on environment
        raise RuntimeError("PyQt5 is required to generate the application icon") from exc

    image = QRCodeManager(config).encode(config.app_name, size)
    return QIcon(to_qpixmap(image))


__all__ = ["create_icon"]
