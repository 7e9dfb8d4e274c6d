"""Tests for progress module."""

import threading
from unittest.mock import MagicMock

import pytest

import shared.progress as progress_module
from shared.progress import (
    CancelledError,
    CancelToken,
    ConsoleProgress,
    EventCancelToken,
    _CbStore,
    check_cancelled,
    cleanup_all_progress_resources,
    clear_cancel_event,
    set_cancel_event,
    set_progress_callback,
)


@pytest.fixture(autouse=True)
def _reset_store():
    yield
    cleanup_all_progress_resources()


class TestEventCancelToken:
    """Tests for EventCancelToken."""

    def test_initially_not_cancelled(self):
        assert EventCancelToken().is_cancelled() is False

    def test_cancel(self):
        token = EventCancelToken()
        token.cancel()
        assert token.is_cancelled() is True

    def test_wraps_existing_event(self):
        event = threading.Event()
        token = EventCancelToken(event)
        event.set()
        assert token.is_cancelled() is True

    def test_is_cancel_token(self):
        assert isinstance(EventCancelToken(), CancelToken)


class TestCheckCancelled:
    """Tests for check_cancelled()."""

    def test_no_sources(self):
        check_cancelled()
        check_cancelled(None)

    def test_token(self):
        token = EventCancelToken()
        check_cancelled(token)
        token.cancel()
        with pytest.raises(CancelledError):
            check_cancelled(token)

    def test_global_event(self):
        event = threading.Event()
        set_cancel_event(event)
        check_cancelled()
        event.set()
        with pytest.raises(CancelledError):
            check_cancelled()
        clear_cancel_event()
        check_cancelled()

    def test_global_token(self):
        token = EventCancelToken()
        token.cancel()
        set_cancel_event(token)
        with pytest.raises(CancelledError):
            check_cancelled(EventCancelToken())


class TestCallbackStore:
    """Tests for callback management functions."""

    def test_set_progress_callback(self):
        """Progress callback should be stored."""
        cb = MagicMock()
        set_progress_callback(cb)
        assert _CbStore.progress == cb
        set_progress_callback(None)
        assert _CbStore.progress is None

    def test_cleanup_resets_everything(self):
        set_progress_callback(MagicMock())
        set_cancel_event(threading.Event())
        cleanup_all_progress_resources()
        assert _CbStore.progress is None
        assert _CbStore.cancel_event is None


class TestConsoleProgress:
    """Tests for ConsoleProgress."""

    def test_reports_steps(self):
        cb = MagicMock()
        set_progress_callback(cb)
        progress = ConsoleProgress(total=3, label='Изолинии')
        progress.step_sync(1)
        progress.step_sync(1)
        cb.assert_called_with(2, 3, 'Изолинии')
        assert cb.call_count == 3

    def test_done_capped_at_total(self):
        progress = ConsoleProgress(total=2)
        progress.step_sync(5)
        assert progress.done == 2

    def test_zero_total(self):
        assert ConsoleProgress(total=0).total == 1

    def test_callback_errors_suppressed(self):
        set_progress_callback(MagicMock(side_effect=RuntimeError('boom')))
        progress = ConsoleProgress(total=1)
        progress.step_sync(1)
        assert progress.done == 1


class TestModuleSurface:
    """Tests for the public names of the progress module."""

    def test_reporting_goes_through_callback_only(self):
        assert not hasattr(progress_module, 'ProgressSink')
        assert callable(progress_module.set_progress_callback)
