"""LedgerEntry domain model."""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Uuid
from src.extensions import db
from src.models.base import BaseModel
from src.models.enums import LedgerEntryType


class LedgerEntry(BaseModel):
    """
    Append-only charge recorded against a service session.

    One table holds the three ledgers of a session, told apart by
    ``entry_type``:

    - TIME_EXTENSION: purchased time (duration_label, minutes, cost, proof)
    - ADD_ON: free-form extras and boutique purchases (description, cost, proof)
    - CONSUMPTION: detailed consumption (description, unit cost, quantity)

    ``quantity`` is 1 for extensions and add-ons, so the line total is
    always ``cost * quantity``.
    """

    __tablename__ = "service_ledger_entry"

    session_id = db.Column(
        Uuid(as_uuid=True),
        db.ForeignKey("service_session.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entry_type = db.Column(
        db.Enum(LedgerEntryType, name="ledgerentrytype", native_enum=False),
        nullable=False,
        index=True,
    )
    description = db.Column(db.String(255), nullable=False)
    cost = db.Column(db.Numeric(12, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    # Time extensions only
    duration_label = db.Column(db.String(50), nullable=True)
    minutes = db.Column(db.Integer, nullable=True)

    # Boutique purchases only
    product_id = db.Column(Uuid(as_uuid=True), nullable=True, index=True)

    proof_ref = db.Column(db.Text, nullable=True)
    recorded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    session = db.relationship("ServiceSession", back_populates="entries")

    @property
    def line_total(self) -> Decimal:
        """Amount this entry adds to the session total."""
        return Decimal(self.cost) * (self.quantity or 1)

    @property
    def is_boutique(self) -> bool:
        """Check if this entry came from a boutique purchase."""
        return self.entry_type == LedgerEntryType.ADD_ON and self.product_id is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result = {
            "id": str(self.id) if self.id else None,
            "type": self.entry_type.value,
            "description": self.description,
            "cost": str(self.cost),
            "quantity": self.quantity or 1,
            "line_total": str(self.line_total),
            "proof_ref": self.proof_ref,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }
        if self.entry_type == LedgerEntryType.TIME_EXTENSION:
            result["duration_label"] = self.duration_label
            result["minutes"] = self.minutes
        if self.product_id:
            result["product_id"] = str(self.product_id)
        return result

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry(type={self.entry_type.value}, "
            f"description='{self.description}', total={self.line_total})>"
        )
