"""QRCode Helper package."""
from __future__ import annotations

from .config import AppConfig, StyleConfig
from .debounce import DebounceScheduler
from .engine import SyncEngine, SyncView
from .qr import QRCodeManager
from .raster import (
    DecodeError,
    EncodeError,
    LoadError,
    PixelFormat,
    QRCodeHelperError,
    RasterImage,
    SaveError,
)
from .sources import DataOffer, InputSourceAdapter
from .state import SessionState, SyncState

__all__ = [
    "AppConfig",
    "StyleConfig",
    "DebounceScheduler",
    "SyncEngine",
    "SyncView",
    "QRCodeManager",
    "QRCodeHelperError",
    "EncodeError",
    "DecodeError",
    "SaveError",
    "LoadError",
    "PixelFormat",
    "RasterImage",
    "DataOffer",
    "InputSourceAdapter",
    "SessionState",
    "SyncState",
]

__version__ = "1.0"
