"""Domain models package."""
from src.models.service_session import ServiceSession
from src.models.ledger_entry import LedgerEntry
from src.models.service_session_edit import ServiceSessionEdit
from src.models.inventory_item import InventoryItem
from src.models.enums import (
    SessionStatus,
    LocationKind,
    DurationCategory,
    ExtensionLabel,
    PaymentMethod,
    LedgerEntryType,
)

__all__ = [
    # Models
    "ServiceSession",
    "LedgerEntry",
    "ServiceSessionEdit",
    "InventoryItem",
    # Enums
    "SessionStatus",
    "LocationKind",
    "DurationCategory",
    "ExtensionLabel",
    "PaymentMethod",
    "LedgerEntryType",
]
