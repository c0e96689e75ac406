"""Runtime state containers used by the synchronization engine."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .raster import RasterImage


class SyncState(enum.Enum):
    """Which side currently owns the displayed artifact."""

    IDLE = "idle"
    PENDING_ENCODE = "pending-encode"
    DECODING = "decoding"


@dataclass(slots=True)
class SessionState:
    """The single mutable record shared by the engine's transitions.

    ``image`` is either the encoding of ``payload`` at ``size`` or an image
    loaded from outside whose decode has finished.  It is only ever replaced,
    never modified.
    """

    payload: str = ""
    size: int = 320
    image: Optional[RasterImage] = None
    phase: SyncState = SyncState.IDLE


__all__ = ["SyncState", "SessionState"]
