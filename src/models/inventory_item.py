"""InventoryItem domain model - boutique products."""
from src.extensions import db
from src.models.base import BaseModel


class InventoryItem(BaseModel):
    """
    Boutique product.

    Carries two prices: the regular counter price and the price charged
    when the product is consumed during a service.
    """

    __tablename__ = "inventory_item"

    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=True, index=True)
    image_url = db.Column(db.Text, nullable=True)

    # Pricing
    regular_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    service_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    stock = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_inventory_item_stock_non_negative"),
    )

    def has_stock(self, quantity: int) -> bool:
        """Check if the requested quantity is available."""
        return self.stock >= quantity

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "name": self.name,
            "category": self.category,
            "image_url": self.image_url,
            "regular_price": str(self.regular_price),
            "service_price": str(self.service_price),
            "stock": self.stock,
            "is_active": self.is_active,
        }

    def __repr__(self) -> str:
        return f"<InventoryItem(name='{self.name}', stock={self.stock})>"
