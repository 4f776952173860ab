"""Tests for the `flask sessions` commands."""
from decimal import Decimal


def _start(app):
    return app.container.session_ledger_service().start_session(
        model_id="model-1",
        model_name="Ana",
        location_kind="Sede",
        room="101",
        duration_category="30 minutos",
        base_price=Decimal("80000"),
        payment_method="Efectivo",
    )


class TestSessionsCli:
    """Tests for the sessions CLI group."""

    def test_tick_without_sessions(self, app):
        result = app.test_cli_runner().invoke(args=["sessions", "tick"])

        assert result.exit_code == 0
        assert "No active sessions." in result.output

    def test_tick_prints_remaining_time(self, app):
        session = _start(app)

        result = app.test_cli_runner().invoke(args=["sessions", "tick"])

        assert result.exit_code == 0
        assert str(session.id) in result.output
        assert "left" in result.output

    def test_list_active(self, app):
        _start(app)

        result = app.test_cli_runner().invoke(args=["sessions", "list-active"])

        assert result.exit_code == 0
        assert "Ana [101] 30 minutos total 80000.00" in result.output

    def test_run_ticker_uses_interval_option(self, app, mocker):
        ticker_cls = mocker.patch("src.services.session_ticker.SessionTicker")
        ticker_cls.return_value.is_running = False

        result = app.test_cli_runner().invoke(
            args=["sessions", "run-ticker", "--interval", "2.5"]
        )

        assert result.exit_code == 0
        assert "Ticking every 2.5s" in result.output
        assert ticker_cls.call_args.kwargs["interval"] == 2.5
        ticker_cls.return_value.start.assert_called_once()
