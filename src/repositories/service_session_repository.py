"""ServiceSession repository implementation."""
from datetime import datetime
from typing import List, Optional, Tuple
from src.repositories.base import BaseRepository
from src.models import ServiceSession, SessionStatus


class ServiceSessionRepository(BaseRepository[ServiceSession]):
    """Repository for ServiceSession aggregate operations."""

    def __init__(self, session):
        super().__init__(session=session, model=ServiceSession)

    def find_active_by_model(self, model_id: str) -> Optional[ServiceSession]:
        """Find the active session of a model."""
        return (
            self._session.query(ServiceSession)
            .filter(
                ServiceSession.model_id == model_id,
                ServiceSession.status == SessionStatus.ACTIVE.value,
            )
            .first()
        )

    def find_active_by_room(self, room: str) -> Optional[ServiceSession]:
        """Find the active session occupying a room."""
        return (
            self._session.query(ServiceSession)
            .filter(
                ServiceSession.room == room,
                ServiceSession.status == SessionStatus.ACTIVE.value,
            )
            .first()
        )

    def find_active(self) -> List[ServiceSession]:
        """Find all active sessions, oldest first."""
        return (
            self._session.query(ServiceSession)
            .filter(ServiceSession.status == SessionStatus.ACTIVE.value)
            .order_by(ServiceSession.started_at.asc())
            .all()
        )

    def find_finalized_between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        model_id: Optional[str] = None,
    ) -> List[ServiceSession]:
        """
        Find sessions finalized in [start, end).

        Either bound may be omitted; model_id narrows to one model.
        """
        query = self._session.query(ServiceSession).filter(
            ServiceSession.status == SessionStatus.FINALIZED.value
        )
        if start is not None:
            query = query.filter(ServiceSession.ended_at >= start)
        if end is not None:
            query = query.filter(ServiceSession.ended_at < end)
        if model_id:
            query = query.filter(ServiceSession.model_id == model_id)
        return query.order_by(ServiceSession.ended_at.asc()).all()

    def find_finalized_paginated(
        self,
        limit: int = 20,
        offset: int = 0,
        model_id: Optional[str] = None,
    ) -> Tuple[List[ServiceSession], int]:
        """
        Find finalized sessions with pagination.

        Args:
            limit: Maximum number of results.
            offset: Number of results to skip.
            model_id: Optional model filter.

        Returns:
            Tuple of (sessions list, total count).
        """
        query = self._session.query(ServiceSession).filter(
            ServiceSession.status == SessionStatus.FINALIZED.value
        )

        if model_id:
            query = query.filter(ServiceSession.model_id == model_id)

        total = query.count()

        sessions = (
            query.order_by(ServiceSession.ended_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

        return sessions, total
