from __future__ import annotations

import contextlib
import logging
import threading
import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class CancelledError(Exception):
    """Построение оверлея отменено вызывающей стороной."""


@runtime_checkable
class CancelToken(Protocol):
    """Anything that can answer "should the current build stop?"."""

    def is_cancelled(self) -> bool: ...


class EventCancelToken:
    """CancelToken backed by a threading (or multiprocessing) Event."""

    def __init__(self, event: threading.Event | None = None) -> None:
        self._event = event if event is not None else threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


# Глобальные колбэки для интеграции с оболочкой (опционально)
class _CbStore:
    progress: Callable[[int, int, str], None] | None = None
    cancel_event: threading.Event | CancelToken | None = None


def set_progress_callback(cb: Callable[[int, int, str], None] | None) -> None:
    """Устанавливает глобальный колбэк прогресса: (done, total, label)."""
    _CbStore.progress = cb


def set_cancel_event(event: threading.Event | CancelToken | None) -> None:
    """Регистрирует глобальный признак отмены (Event или CancelToken)."""
    _CbStore.cancel_event = event


def clear_cancel_event() -> None:
    _CbStore.cancel_event = None


def _is_set(source: threading.Event | CancelToken | None) -> bool:
    if source is None:
        return False
    if isinstance(source, CancelToken):
        return source.is_cancelled()
    return source.is_set()


def check_cancelled(token: CancelToken | None = None) -> None:
    """
    Raise CancelledError if either the given token or the global cancel event is set.

    Called between level iterations; a build never returns partial output.
    """
    if _is_set(token) or _is_set(_CbStore.cancel_event):
        msg = 'Построение оверлея отменено'
        raise CancelledError(msg)


def cleanup_all_progress_resources() -> None:
    """Сбрасывает глобальные колбэки (вызывается при закрытии оболочки)."""
    _CbStore.progress = None
    _CbStore.cancel_event = None


class ConsoleProgress:
    """Пошаговый прогресс: пересылает шаги в колбэк оболочки и в лог."""

    def __init__(self, total: int, label: str = 'Прогресс') -> None:
        self.total = max(1, int(total))
        self.done = 0
        self.start = time.monotonic()
        self.label = label
        self._lock = threading.Lock()
        self._render()  # показать 0%

    def _render(self) -> None:
        elapsed = max(1e-6, time.monotonic() - self.start)
        logger.debug(
            '%s: %d/%d (%.2fs)', self.label, self.done, self.total, elapsed
        )
        # Сообщаем оболочке о прогрессе
        if _CbStore.progress is not None:
            with contextlib.suppress(Exception):
                _CbStore.progress(self.done, self.total, self.label)

    def step_sync(self, n: int = 1) -> None:
        with self._lock:
            self.done = min(self.total, self.done + n)
            self._render()
