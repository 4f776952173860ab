"""Repository implementations."""
from src.repositories.base import BaseRepository
from src.repositories.service_session_repository import ServiceSessionRepository
from src.repositories.inventory_item_repository import InventoryItemRepository
from src.repositories.service_session_edit_repository import ServiceSessionEditRepository

__all__ = [
    "BaseRepository",
    "ServiceSessionRepository",
    "InventoryItemRepository",
    "ServiceSessionEditRepository",
]
