"""Domain events for the session ledger."""
from src.events.domain import DomainEvent, EventResult, IEventHandler, DomainEventDispatcher
from src.events.session_events import (
    SessionStartedEvent,
    SessionTimeExtendedEvent,
    SessionAddOnAddedEvent,
    BoutiqueConsumptionRecordedEvent,
    SessionExpiryWarningEvent,
    SessionFinalizedEvent,
    SessionEditedEvent,
)

__all__ = [
    "DomainEvent",
    "EventResult",
    "IEventHandler",
    "DomainEventDispatcher",
    "SessionStartedEvent",
    "SessionTimeExtendedEvent",
    "SessionAddOnAddedEvent",
    "BoutiqueConsumptionRecordedEvent",
    "SessionExpiryWarningEvent",
    "SessionFinalizedEvent",
    "SessionEditedEvent",
]
