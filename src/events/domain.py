"""Domain event primitives and the synchronous dispatcher."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """
    Base domain event.

    Subclasses set ``name`` in ``__post_init__`` and call super().
    """

    name: str = ""
    timestamp: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            self.name = self.__class__.__name__


@dataclass
class EventResult:
    """Outcome of handling an event."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success_result(cls, data: Any = None) -> "EventResult":
        """Create a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def error_result(cls, error: str) -> "EventResult":
        """Create a failed result."""
        return cls(success=False, error=error)

    @classmethod
    def combine(cls, results: List["EventResult"]) -> "EventResult":
        """
        Merge results from several handlers.

        Succeeds only when every handler succeeded; errors are joined.
        """
        if not results:
            return cls.success_result([])
        errors = [r.error for r in results if not r.success and r.error]
        if errors:
            return cls.error_result("; ".join(errors))
        return cls.success_result([r.data for r in results])


class IEventHandler(ABC):
    """Interface for domain event handlers."""

    @abstractmethod
    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler handles the event."""

    @abstractmethod
    def handle(self, event: DomainEvent) -> EventResult:
        """Handle the event."""


class DomainEventDispatcher:
    """
    Synchronous dispatcher.

    Handlers are registered per event name; ``"*"`` subscribes to every
    event. A handler that raises is logged and reported as a failed result;
    it never interrupts the caller that emitted the event.
    """

    WILDCARD = "*"

    def __init__(self):
        self._handlers: Dict[str, List[IEventHandler]] = {}

    def register(self, event_name: str, handler: IEventHandler) -> None:
        """Subscribe a handler to an event name."""
        self._handlers.setdefault(event_name, []).append(handler)

    def has_handlers(self, event_name: str) -> bool:
        """Check if any handler listens to the event name."""
        return bool(self._handlers.get(event_name) or self._handlers.get(self.WILDCARD))

    def emit(self, event: DomainEvent) -> EventResult:
        """Run every matching handler and combine their results."""
        handlers = self._handlers.get(event.name, []) + self._handlers.get(self.WILDCARD, [])
        results = []
        for handler in handlers:
            if not handler.can_handle(event):
                continue
            try:
                results.append(handler.handle(event))
            except Exception as e:
                logger.error(
                    f"Handler {handler.__class__.__name__} failed for {event.name}: {e}"
                )
                results.append(EventResult.error_result(str(e)))
        return EventResult.combine(results)
