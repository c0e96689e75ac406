"""Single-shot debounce scheduling."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Action = Callable[[], None]


class SingleShotTimer(Protocol):
    """Minimal timer interface the scheduler relies on."""

    def set_callback(self, callback: Action) -> None: ...

    def start(self, delay_ms: int) -> None: ...

    def stop(self) -> None: ...


class QtSingleShotTimer:  # pragma: no cover - requires Qt event loop
    """:class:`SingleShotTimer` backed by a ``QTimer`` on the GUI thread."""

    def __init__(self) -> None:
        try:
            from PyQt5.QtCore import QTimer
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RuntimeError("PyQt5 is required for the debounce timer") from exc

        self._timer = QTimer()
        self._timer.setSingleShot(True)

    def set_callback(self, callback: Action) -> None:
        self._timer.timeout.connect(callback)

    def start(self, delay_ms: int) -> None:
        # QTimer.start() restarts an active timer.
        self._timer.start(delay_ms)

    def stop(self) -> None:
        self._timer.stop()


class DebounceScheduler:
    """Coalesce repeated :meth:`schedule` calls into one deferred action.

    Each call replaces the pending action and restarts the quiet period, so
    only the most recent action runs, once, after ``delay_ms`` without further
    calls.
    """

    def __init__(self, timer: Optional[SingleShotTimer] = None, default_delay_ms: int = 300):
        self._timer = timer if timer is not None else QtSingleShotTimer()
        self._timer.set_callback(self._on_timeout)
        self._default_delay_ms = default_delay_ms
        self._action: Optional[Action] = None

    @property
    def is_pending(self) -> bool:
        return self._action is not None

    def schedule(self, action: Action, delay_ms: Optional[int] = None) -> None:
        delay = self._default_delay_ms if delay_ms is None else delay_ms
        self._timer.stop()
        self._action = action
        self._timer.start(delay)
        logger.debug("Debounce armed for %d ms", delay)

    def cancel(self) -> None:
        if self._action is None:
            return
        self._timer.stop()
        self._action = None
        logger.debug("Debounce cancelled")

    def _on_timeout(self) -> None:
        action, self._action = self._action, None
        if action is not None:
            action()


__all__ = ["DebounceScheduler", "QtSingleShotTimer", "SingleShotTimer"]
