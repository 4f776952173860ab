"""Generic repository base."""
from typing import Generic, List, Optional, Type, TypeVar, Union
from uuid import UUID

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic repository over a SQLAlchemy session.

    ``save`` commits; ``add`` only flushes, so several changes can share
    one transaction (see ``src.utils.transaction``).
    """

    def __init__(self, session, model: Type[T]):
        self._session = session
        self._model = model

    @property
    def session(self):
        """Underlying SQLAlchemy session."""
        return self._session

    @staticmethod
    def _coerce_id(entity_id: Union[UUID, str]) -> Optional[UUID]:
        if isinstance(entity_id, UUID):
            return entity_id
        try:
            return UUID(str(entity_id))
        except (ValueError, TypeError):
            return None

    def find_by_id(self, entity_id: Union[UUID, str]) -> Optional[T]:
        """Find entity by ID. Malformed IDs resolve to None."""
        uid = self._coerce_id(entity_id)
        if uid is None:
            return None
        return self._session.get(self._model, uid)

    def find_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Find all entities with pagination."""
        return self._session.query(self._model).offset(offset).limit(limit).all()

    def count(self) -> int:
        """Count all entities."""
        return self._session.query(self._model).count()

    def add(self, entity: T) -> T:
        """Stage entity in the current transaction without committing."""
        self._session.add(entity)
        self._session.flush()
        return entity

    def save(self, entity: T) -> T:
        """Persist entity and commit."""
        self._session.add(entity)
        self._session.commit()
        return entity

    def delete(self, entity_id: Union[UUID, str]) -> bool:
        """
        Delete entity by ID.

        Returns:
            True if deleted, False if not found
        """
        entity = self.find_by_id(entity_id)
        if not entity:
            return False
        self._session.delete(entity)
        self._session.commit()
        return True
