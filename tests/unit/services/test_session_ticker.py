"""Tests for SessionTicker."""
from unittest.mock import MagicMock

from src.services.session_timing import SessionCountdown


class _App:
    """Minimal stand-in exposing app_context()."""

    def __init__(self):
        self.app_context = MagicMock()


class TestSessionTicker:
    """Tests for SessionTicker.tick_once()."""

    def test_passes_previous_remaining_between_ticks(self):
        from src.services.session_ticker import SessionTicker

        service = MagicMock()
        service.tick_active_sessions.side_effect = [
            {"s1": SessionCountdown(0, 301, 0)},
            {"s1": SessionCountdown(1, 300, 0)},
        ]
        ticker = SessionTicker(_App(), lambda: service)

        ticker.tick_once()
        ticker.tick_once()

        calls = service.tick_active_sessions.call_args_list
        assert calls[0].kwargs["previous"] == {}
        assert calls[1].kwargs["previous"] == {"s1": 301}

    def test_start_and_stop(self):
        from src.services.session_ticker import SessionTicker

        service = MagicMock()
        service.tick_active_sessions.return_value = {}
        ticker = SessionTicker(_App(), lambda: service, interval=0.01)

        ticker.start()
        assert ticker.is_running is True
        ticker.stop(timeout=1)

        assert ticker.is_running is False

    def test_failed_pass_does_not_stop_loop(self):
        from src.services.session_ticker import SessionTicker

        service = MagicMock()
        service.tick_active_sessions.side_effect = RuntimeError("db down")
        ticker = SessionTicker(_App(), lambda: service, interval=0.01)

        ticker.start()
        ticker._stop.wait(0.05)
        assert ticker.is_running is True
        ticker.stop(timeout=1)
