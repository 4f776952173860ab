"""ServiceSessionEdit repository implementation."""
from typing import List, Union
from uuid import UUID
from src.repositories.base import BaseRepository
from src.models import ServiceSessionEdit


class ServiceSessionEditRepository(BaseRepository[ServiceSessionEdit]):
    """Repository for administrative edit history."""

    def __init__(self, session):
        super().__init__(session=session, model=ServiceSessionEdit)

    def find_by_session(self, session_id: Union[UUID, str]) -> List[ServiceSessionEdit]:
        """Find edits of a session, oldest first."""
        uid = self._coerce_id(session_id)
        if uid is None:
            return []
        return (
            self._session.query(ServiceSessionEdit)
            .filter(ServiceSessionEdit.session_id == uid)
            .order_by(ServiceSessionEdit.created_at.asc())
            .all()
        )
