"""ServiceSession domain model - one timed, billed service."""
from datetime import datetime
from decimal import Decimal
from typing import List
from sqlalchemy import text
from src.extensions import db
from src.models.base import BaseModel
from src.models.enums import SessionStatus, LedgerEntryType


class ServiceSession(BaseModel):
    """
    ServiceSession model represents one model-client encounter.

    A session:
    - Starts with a base duration category and a base price
    - Grows its duration when time extensions are purchased
    - Accumulates add-ons, boutique purchases and detailed consumption
    - Is finalized exactly once

    Lifecycle:
    1. ACTIVE ("activo"): running countdown, charges may be appended
    2. FINALIZED ("finalizado"): terminal, end time and closing notes frozen

    Remaining and overtime seconds are derived from ``started_at`` and
    ``duration_minutes``; the total is derived from the ledger entries.
    Neither is stored.
    """

    __tablename__ = "service_session"

    # Model (staff) reference
    model_id = db.Column(db.String(255), nullable=False, index=True)
    model_name = db.Column(db.String(255), nullable=False)

    # Client
    client_id = db.Column(db.String(255), nullable=True, index=True)
    client_name = db.Column(db.String(255), nullable=True)
    client_phone = db.Column(db.String(50), nullable=True)

    # Classification
    location_kind = db.Column(db.String(20), nullable=False)
    room = db.Column(db.String(20), nullable=True, index=True)
    duration_category = db.Column(db.String(50), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)

    # Money
    base_price = db.Column(db.Numeric(12, 2), nullable=False)
    payment_method = db.Column(db.String(20), nullable=False)
    payment_proof_ref = db.Column(db.Text, nullable=True)

    # State
    status = db.Column(
        db.String(20),
        nullable=False,
        default=SessionStatus.ACTIVE.value,
        index=True,
    )
    started_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    ended_at = db.Column(db.DateTime, nullable=True)

    service_notes = db.Column(db.Text, nullable=True)
    closing_notes = db.Column(db.Text, nullable=True)

    expiry_warning_sent = db.Column(db.Boolean, nullable=False, default=False)
    edited_by_admin = db.Column(db.Boolean, nullable=False, default=False)

    entries = db.relationship(
        "LedgerEntry",
        back_populates="session",
        order_by="LedgerEntry.recorded_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    edits = db.relationship(
        "ServiceSessionEdit",
        back_populates="session",
        order_by="ServiceSessionEdit.created_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # At most one active session per model
    __table_args__ = (
        db.Index(
            "uq_service_session_active_model",
            "model_id",
            unique=True,
            sqlite_where=text("status = 'activo'"),
            postgresql_where=text("status = 'activo'"),
        ),
    )

    @property
    def is_active(self) -> bool:
        """Check if the session still accepts charges."""
        return self.status == SessionStatus.ACTIVE.value

    def _entries_of(self, entry_type: LedgerEntryType) -> List:
        return [e for e in self.entries if e.entry_type == entry_type]

    @property
    def time_extensions(self) -> List:
        """Time-extension ledger."""
        return self._entries_of(LedgerEntryType.TIME_EXTENSION)

    @property
    def add_ons(self) -> List:
        """Add-on ledger (boutique purchases included)."""
        return self._entries_of(LedgerEntryType.ADD_ON)

    @property
    def detailed_consumptions(self) -> List:
        """Detailed-consumption ledger."""
        return self._entries_of(LedgerEntryType.CONSUMPTION)

    @property
    def total_cost(self) -> Decimal:
        """Base price plus every ledger line, recomputed on each read."""
        total = Decimal(self.base_price or 0)
        for entry in self.entries:
            total += entry.line_total
        return total

    def to_dict(self) -> dict:
        """Convert ServiceSession to dictionary for API response."""
        return {
            "id": str(self.id) if self.id else None,
            "model_id": self.model_id,
            "model_name": self.model_name,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "client_phone": self.client_phone,
            "location_kind": self.location_kind,
            "room": self.room,
            "duration_category": self.duration_category,
            "duration_minutes": self.duration_minutes,
            "base_price": str(self.base_price),
            "payment_method": self.payment_method,
            "payment_proof_ref": self.payment_proof_ref,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "service_notes": self.service_notes,
            "closing_notes": self.closing_notes,
            "edited_by_admin": bool(self.edited_by_admin),
            "time_extensions": [e.to_dict() for e in self.time_extensions],
            "add_ons": [e.to_dict() for e in self.add_ons],
            "detailed_consumptions": [e.to_dict() for e in self.detailed_consumptions],
            "total_cost": str(self.total_cost),
        }

    def __repr__(self) -> str:
        return f"<ServiceSession(model_id='{self.model_id}', status='{self.status}')>"
