"""Service session CLI commands."""
import time

import click
from flask import current_app
from flask.cli import with_appcontext


@click.group("sessions")
def sessions_cli():
    """Service session commands."""
    pass


@sessions_cli.command("tick")
@with_appcontext
def tick_command():
    """Recompute all active sessions once and raise due warnings."""
    service = current_app.container.session_ledger_service()
    countdowns = service.tick_active_sessions()
    if not countdowns:
        click.echo("No active sessions.")
        return
    for session_id, countdown in countdowns.items():
        click.echo(_format_countdown(session_id, countdown))


@sessions_cli.command("run-ticker")
@click.option("--interval", type=float, default=None, help="Seconds between passes.")
@with_appcontext
def run_ticker_command(interval):
    """Run the countdown ticker in the foreground until interrupted."""
    from src.services.session_ticker import SessionTicker

    app = current_app._get_current_object()
    interval = interval or app.config.get("SESSION_TICK_INTERVAL_SECONDS", 1)
    ticker = SessionTicker(
        app, lambda: app.container.session_ledger_service(), interval=interval
    )
    click.echo(f"Ticking every {interval}s. Press Ctrl+C to stop.")
    ticker.start()
    try:
        while ticker.is_running:
            time.sleep(1)
    except KeyboardInterrupt:
        ticker.stop()


@sessions_cli.command("list-active")
@with_appcontext
def list_active_command():
    """List active sessions with their countdown."""
    service = current_app.container.session_ledger_service()
    sessions = service.list_active_sessions()
    if not sessions:
        click.echo("No active sessions.")
        return
    for session in sessions:
        countdown = service.tick(session)
        room = session.room or "-"
        click.echo(
            f"{session.model_name} [{room}] {session.duration_category} "
            f"total {service.compute_total(session)} | "
            + _format_countdown(str(session.id), countdown)
        )


def _format_countdown(session_id, countdown) -> str:
    if countdown.is_overtime:
        return f"{session_id}: overtime {_mmss(countdown.overtime_seconds)}"
    return f"{session_id}: {_mmss(countdown.remaining_seconds)} left"


def _mmss(seconds: int) -> str:
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"
