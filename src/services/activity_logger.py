"""Activity logging service for the session audit trail."""
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Service for logging venue activity.

    Every entry goes to the standard logger. With ``keep_history`` the
    most recent entries are also kept in memory for inspection.
    """

    def __init__(self, keep_history: bool = False, history_size: int = 500):
        """
        Initialize activity logger.

        Args:
            keep_history: Whether to keep recent entries in memory
            history_size: Maximum number of entries kept
        """
        self._keep_history = keep_history
        self._history_size = history_size
        self._history: List[Dict[str, Any]] = []

    @property
    def history(self) -> List[Dict[str, Any]]:
        """Recent entries, oldest first."""
        return list(self._history)

    def log(
        self,
        action: str,
        session_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log an activity.

        Args:
            action: Action identifier (e.g., "session.finalized")
            session_id: Optional service session the action refers to
            metadata: Optional additional data to log

        Returns:
            The logged entry
        """
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "action": action,
            "session_id": session_id,
            "metadata": metadata or {}
        }

        logger.info(f"Activity: {action}", extra={"activity": log_entry})

        if self._keep_history:
            self._history.append(log_entry)
            if len(self._history) > self._history_size:
                self._history = self._history[-self._history_size:]

        return log_entry
