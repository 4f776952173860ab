"""ServiceSessionEdit domain model - administrative corrections."""
from sqlalchemy import Uuid
from src.extensions import db
from src.models.base import BaseModel


class ServiceSessionEdit(BaseModel):
    """
    History row for an administrative correction of a finalized session.

    Stores the classification and base price before and after the edit,
    together with the mandatory reason.
    """

    __tablename__ = "service_session_edit"

    session_id = db.Column(
        Uuid(as_uuid=True),
        db.ForeignKey("service_session.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reason = db.Column(db.Text, nullable=False)

    previous_location_kind = db.Column(db.String(20), nullable=False)
    previous_duration_category = db.Column(db.String(50), nullable=False)
    previous_base_price = db.Column(db.Numeric(12, 2), nullable=False)

    new_location_kind = db.Column(db.String(20), nullable=False)
    new_duration_category = db.Column(db.String(50), nullable=False)
    new_base_price = db.Column(db.Numeric(12, 2), nullable=False)

    session = db.relationship("ServiceSession", back_populates="edits")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": str(self.id) if self.id else None,
            "session_id": str(self.session_id) if self.session_id else None,
            "reason": self.reason,
            "previous": {
                "location_kind": self.previous_location_kind,
                "duration_category": self.previous_duration_category,
                "base_price": str(self.previous_base_price),
            },
            "new": {
                "location_kind": self.new_location_kind,
                "duration_category": self.new_duration_category,
                "base_price": str(self.new_base_price),
            },
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<ServiceSessionEdit(session_id={self.session_id}, reason='{self.reason}')>"
