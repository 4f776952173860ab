"""Event handlers for domain events."""
from src.handlers.session_handlers import (
    SessionExpiryNotificationHandler,
    SessionAuditHandler,
    register_session_handlers,
)

__all__ = [
    "SessionExpiryNotificationHandler",
    "SessionAuditHandler",
    "register_session_handlers",
]
