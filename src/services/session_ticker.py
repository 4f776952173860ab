"""Background countdown ticker for active service sessions."""
import logging
import threading
from typing import Callable, Dict, Optional

from src.services.session_timing import SessionCountdown

logger = logging.getLogger(__name__)


class SessionTicker:
    """
    Recomputes every active session once per interval.

    Keeps the remaining seconds seen on the previous pass so the ledger
    service can detect when a session crosses the expiry warning window.

    Usage:
        ticker = SessionTicker(app, lambda: app.container.session_ledger_service())
        ticker.start()
    """

    def __init__(self, app, service_factory: Callable, interval: float = 1.0):
        self._app = app
        self._service_factory = service_factory
        self._interval = interval
        self._previous: Dict[str, int] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def tick_once(self) -> Dict[str, SessionCountdown]:
        """Run a single pass inside the application context."""
        with self._app.app_context():
            service = self._service_factory()
            countdowns = service.tick_active_sessions(previous=self._previous)
        self._previous = {
            key: countdown.remaining_seconds for key, countdown in countdowns.items()
        }
        return countdowns

    def start(self) -> None:
        """Start the ticker thread (daemon)."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="session-ticker", daemon=True
        )
        self._thread.start()
        logger.info(f"Session ticker started (every {self._interval}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the thread to stop and wait for it."""
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
        logger.info("Session ticker stopped")

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.tick_once()
            except Exception as e:
                # The loop must survive a failed pass
                logger.error(f"Session tick failed: {e}")
            self._stop.wait(self._interval)
