"""Shared utilities and helpers."""
from shared.progress import (
    CancelledError,
    CancelToken,
    ConsoleProgress,
    EventCancelToken,
    check_cancelled,
)

__all__ = [
    'CancelToken',
    'CancelledError',
    'ConsoleProgress',
    'EventCancelToken',
    'check_cancelled',
]
