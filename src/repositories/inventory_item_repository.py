"""InventoryItem repository implementation."""
from typing import Optional, Union
from uuid import UUID
from src.repositories.base import BaseRepository
from src.models import InventoryItem


class InventoryItemRepository(BaseRepository[InventoryItem]):
    """Repository for boutique inventory."""

    def __init__(self, session):
        super().__init__(session=session, model=InventoryItem)

    def find_live(self, item_id: Union[UUID, str]) -> Optional[InventoryItem]:
        """
        Load an item bypassing the identity map.

        Stock checks must see the stored value, not a copy cached
        earlier in the same session.
        """
        uid = self._coerce_id(item_id)
        if uid is None:
            return None
        return self._session.get(InventoryItem, uid, populate_existing=True)

    def find_by_name(self, name: str) -> Optional[InventoryItem]:
        """Find item by exact name."""
        return (
            self._session.query(InventoryItem)
            .filter(InventoryItem.name == name)
            .first()
        )

    def decrement_stock(self, item: InventoryItem, quantity: int) -> InventoryItem:
        """
        Stage a stock decrement in the current transaction.

        Read-then-write: no version check is made against concurrent
        decrements of the same item.
        """
        item.stock = item.stock - quantity
        return self.add(item)
