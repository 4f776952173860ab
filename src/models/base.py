"""Base model with common columns."""
from datetime import datetime
from uuid import uuid4
from sqlalchemy import Uuid
from src.extensions import db


class BaseModel(db.Model):
    """
    Abstract base for all domain models.

    Provides a UUID primary key and created/updated timestamps.
    """

    __abstract__ = True

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
