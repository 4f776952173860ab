"""Service session event handlers."""
import logging
from decimal import Decimal

from src.events.domain import IEventHandler, DomainEvent, EventResult
from src.events.session_events import SessionExpiryWarningEvent

logger = logging.getLogger(__name__)


class SessionExpiryNotificationHandler(IEventHandler):
    """
    Raises the five-minute warning for a running service.

    Reception staff watch the log stream and the activity trail; the
    handler writes to both.
    """

    def __init__(self, activity_logger):
        self._activity_logger = activity_logger

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can handle the event."""
        return isinstance(event, SessionExpiryWarningEvent)

    def handle(self, event: DomainEvent) -> EventResult:
        """Announce that the session is about to run out of time."""
        minutes = max(1, event.remaining_seconds // 60)
        where = f"room {event.room}" if event.room else "off-site"
        message = f"{event.model_name} ({where}) has {minutes} min left"

        logger.warning(message)
        self._activity_logger.log(
            action="session.expiry_warning",
            session_id=str(event.session_id),
            metadata={
                "model_id": event.model_id,
                "room": event.room,
                "remaining_seconds": event.remaining_seconds,
            },
        )
        return EventResult.success_result({"message": message})


class SessionAuditHandler(IEventHandler):
    """Writes every session event to the activity trail."""

    def __init__(self, activity_logger):
        self._activity_logger = activity_logger

    def can_handle(self, event: DomainEvent) -> bool:
        return event.name.startswith("session.")

    def handle(self, event: DomainEvent) -> EventResult:
        session_id = getattr(event, "session_id", None)
        entry = self._activity_logger.log(
            action=event.name,
            session_id=str(session_id) if session_id else None,
            metadata=_event_metadata(event),
        )
        return EventResult.success_result(entry)


def _event_metadata(event: DomainEvent) -> dict:
    skip = {"name", "timestamp", "metadata", "session_id"}
    data = {}
    for key, value in vars(event).items():
        if key in skip:
            continue
        data[key] = str(value) if isinstance(value, Decimal) else value
    return data


def register_session_handlers(dispatcher, activity_logger) -> None:
    """Subscribe the session handlers to a dispatcher."""
    dispatcher.register(
        "session.expiry_warning", SessionExpiryNotificationHandler(activity_logger)
    )
    dispatcher.register(dispatcher.WILDCARD, SessionAuditHandler(activity_logger))
