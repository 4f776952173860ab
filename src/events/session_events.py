"""Service session domain events."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from src.events.domain import DomainEvent


@dataclass
class SessionStartedEvent(DomainEvent):
    """Event emitted when a model starts a service."""

    session_id: Optional[UUID] = None
    model_id: Optional[str] = None
    model_name: Optional[str] = None
    room: Optional[str] = None
    duration_minutes: int = 0
    base_price: Decimal = Decimal("0")

    def __post_init__(self):
        self.name = "session.started"
        super().__post_init__()


@dataclass
class SessionTimeExtendedEvent(DomainEvent):
    """Event emitted when time is purchased for a running service."""

    session_id: Optional[UUID] = None
    model_id: Optional[str] = None
    duration_label: Optional[str] = None
    minutes: int = 0
    cost: Decimal = Decimal("0")
    duration_minutes: int = 0

    def __post_init__(self):
        self.name = "session.time_extended"
        super().__post_init__()


@dataclass
class SessionAddOnAddedEvent(DomainEvent):
    """Event emitted when an add-on is charged to a service."""

    session_id: Optional[UUID] = None
    model_id: Optional[str] = None
    description: Optional[str] = None
    cost: Decimal = Decimal("0")

    def __post_init__(self):
        self.name = "session.add_on_added"
        super().__post_init__()


@dataclass
class BoutiqueConsumptionRecordedEvent(DomainEvent):
    """
    Event emitted after a boutique batch is processed.

    Lists the descriptions that were applied and those that failed.
    """

    session_id: Optional[UUID] = None
    model_id: Optional[str] = None
    applied: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    amount: Decimal = Decimal("0")

    def __post_init__(self):
        self.name = "session.boutique_consumption_recorded"
        super().__post_init__()


@dataclass
class SessionExpiryWarningEvent(DomainEvent):
    """Event emitted once when a service is about to run out of time."""

    session_id: Optional[UUID] = None
    model_id: Optional[str] = None
    model_name: Optional[str] = None
    room: Optional[str] = None
    remaining_seconds: int = 0

    def __post_init__(self):
        self.name = "session.expiry_warning"
        super().__post_init__()


@dataclass
class SessionFinalizedEvent(DomainEvent):
    """Event emitted when a service is closed."""

    session_id: Optional[UUID] = None
    model_id: Optional[str] = None
    total_cost: Decimal = Decimal("0")
    overtime_seconds: int = 0

    def __post_init__(self):
        self.name = "session.finalized"
        super().__post_init__()


@dataclass
class SessionEditedEvent(DomainEvent):
    """Event emitted when an administrator corrects a finalized service."""

    session_id: Optional[UUID] = None
    reason: Optional[str] = None

    def __post_init__(self):
        self.name = "session.edited"
        super().__post_init__()
