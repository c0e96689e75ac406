"""State machine keeping the text field and the QR image in sync."""
from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Optional, Protocol

from .config import AppConfig
from .debounce import DebounceScheduler
from .events import (
    EncodeDue,
    Event,
    ImageLoaded,
    LoadFailed,
    Noop,
    SaveRequested,
    SizeChanged,
    TextChanged,
    TextLoaded,
)
from .qr import QRCodeManager
from .raster import DecodeError, EncodeError, RasterImage, SaveError
from .state import SessionState, SyncState
from .storage import image_format_for, write_image

logger = logging.getLogger(__name__)


class SyncView(Protocol):
    """Commands the engine issues to the presentation layer.

    ``display_text`` must update the text field without reporting the change
    back as a :class:`~qrcode_helper.events.TextChanged` event.
    """

    def display_image(self, image: RasterImage) -> None: ...

    def display_text(self, text: str) -> None: ...

    def clear_display(self) -> None: ...

    def show_error(self, message: str) -> None: ...

    def show_status(self, message: str) -> None: ...


class Codec(Protocol):
    def encode(self, payload: str, size: int) -> RasterImage: ...

    def decode(self, image: RasterImage) -> Optional[str]: ...


class SyncEngine:
    """Arbitrate whether the displayed image follows the text or an input image.

    Every input, including debounce timer fires, is queued through
    :meth:`dispatch` and handled one at a time in arrival order.  An event
    dispatched while another is being handled waits behind it.
    """

    NOT_FOUND_MESSAGE = "No QRCode detected"
    INVALID_IMAGE_MESSAGE = "Invalid image"

    def __init__(
        self,
        view: SyncView,
        config: Optional[AppConfig] = None,
        codec: Optional[Codec] = None,
        scheduler: Optional[DebounceScheduler] = None,
    ):
        self._config = config or AppConfig()
        self._view = view
        self._codec = codec if codec is not None else QRCodeManager(self._config)
        self._scheduler = (
            scheduler
            if scheduler is not None
            else DebounceScheduler(default_delay_ms=self._config.debounce_ms)
        )
        self._state = SessionState(size=self._config.default_size)
        self._inbox: Deque[Event] = deque()
        self._draining = False
        self._handlers: Dict[type, Callable[..., None]] = {
            TextChanged: self._on_text_changed,
            SizeChanged: self._on_size_changed,
            TextLoaded: self._on_text_loaded,
            ImageLoaded: self._on_image_loaded,
            EncodeDue: self._on_encode_due,
            SaveRequested: self._on_save_requested,
            LoadFailed: self._on_load_failed,
            Noop: self._on_noop,
        }

    @property
    def payload(self) -> str:
        return self._state.payload

    @property
    def size(self) -> int:
        return self._state.size

    @property
    def image(self) -> Optional[RasterImage]:
        return self._state.image

    @property
    def phase(self) -> SyncState:
        return self._state.phase

    def dispatch(self, event: Event) -> None:
        self._inbox.append(event)
        if self._draining:
            return

        self._draining = True
        try:
            while self._inbox:
                self._handle(self._inbox.popleft())
        finally:
            self._draining = False

    def _handle(self, event: Event) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {event!r}")
        logger.debug("Handling %s in state %s", type(event).__name__, self._state.phase.value)
        handler(event)

    # -- text side -------------------------------------------------------

    def _on_text_changed(self, event: TextChanged) -> None:
        self._state.payload = event.text
        self._request_encode()

    def _on_size_changed(self, event: SizeChanged) -> None:
        self._state.size = self._config.parse_size(event.text)
        self._request_encode()

    def _on_text_loaded(self, event: TextLoaded) -> None:
        self._scheduler.cancel()
        self._state.payload = event.text
        self._view.display_text(event.text)
        if not event.text:
            self._clear()
            return
        self._encode()

    def _request_encode(self) -> None:
        if not self._state.payload:
            self._clear()
            return
        self._state.phase = SyncState.PENDING_ENCODE
        self._scheduler.schedule(self._timer_fired)

    def _timer_fired(self) -> None:
        self.dispatch(EncodeDue())

    def _on_encode_due(self, _event: EncodeDue) -> None:
        # A load or clear may have superseded the edit after the timer fired.
        if self._state.phase is not SyncState.PENDING_ENCODE:
            return
        self._encode()

    def _encode(self) -> bool:
        try:
            image = self._codec.encode(self._state.payload, self._state.size)
        except EncodeError as exc:
            logger.warning("Encoding %d characters failed: %s", len(self._state.payload), exc)
            self._state.image = None
            self._state.phase = SyncState.IDLE
            self._view.clear_display()
            self._view.show_error(f"Unable to encode text: {exc}")
            return False
        except RuntimeError as exc:
            logger.error("QR generation unavailable: %s", exc)
            self._state.image = None
            self._state.phase = SyncState.IDLE
            self._view.clear_display()
            self._view.show_error(str(exc))
            return False

        self._state.image = image
        self._state.phase = SyncState.IDLE
        self._view.display_image(image)
        return True

    def _clear(self) -> None:
        self._scheduler.cancel()
        self._state.image = None
        self._state.phase = SyncState.IDLE
        self._view.clear_display()

    # -- image side ------------------------------------------------------

    def _on_image_loaded(self, event: ImageLoaded) -> None:
        had_pending_edit = self._scheduler.is_pending
        self._scheduler.cancel()
        self._state.phase = SyncState.DECODING

        try:
            image = (
                event.image
                if isinstance(event.image, RasterImage)
                else RasterImage.from_encoded(event.image)
            )
        except DecodeError as exc:
            self._reject_image(event, exc, had_pending_edit)
            return

        try:
            text = self._codec.decode(image)
        except DecodeError as exc:
            self._reject_image(event, exc, had_pending_edit)
            return
        except RuntimeError as exc:
            logger.error("QR decoding unavailable: %s", exc)
            self._state.image = image
            self._view.display_image(image)
            self._state.phase = SyncState.IDLE
            self._view.show_error(str(exc))
            return

        self._state.image = image
        self._view.display_image(image)
        self._state.phase = SyncState.IDLE

        if text is None:
            logger.info("No QR code found in %s", event.source or "loaded image")
            self._view.show_error(self.NOT_FOUND_MESSAGE)
            return

        logger.info("Decoded %d characters from %s", len(text), event.source or "loaded image")
        self._state.payload = text
        self._view.display_text(text)

    def _reject_image(self, event: ImageLoaded, exc: DecodeError, had_pending_edit: bool) -> None:
        logger.warning("Rejected image %s: %s", event.source or "<unnamed>", exc)
        self._state.phase = SyncState.IDLE
        self._view.show_error(self.INVALID_IMAGE_MESSAGE)
        if had_pending_edit:
            self._request_encode()

    # -- boundaries ------------------------------------------------------

    def _on_save_requested(self, event: SaveRequested) -> None:
        if self._scheduler.is_pending:
            self._scheduler.cancel()
            if not self._encode():
                return

        image = self._state.image
        if image is None:
            self._view.show_error("No QRCode to save")
            return

        try:
            target = write_image(image, event.path, image_format_for(event.path))
        except SaveError as exc:
            logger.warning("Saving to %s failed: %s", event.path, exc)
            self._view.show_error(f"Save failed: {exc}")
            return

        self._view.show_status(f"Saved {target.name}")

    def _on_load_failed(self, event: LoadFailed) -> None:
        self._view.show_error(event.message)

    def _on_noop(self, event: Noop) -> None:
        logger.debug("Ignoring input: %s", event.reason or "nothing usable")


__all__ = ["SyncEngine", "SyncView", "Codec"]
