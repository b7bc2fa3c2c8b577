from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session, Query

from lootledger.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def name_key(value: Optional[str]) -> Optional[str]:
    """Vergleichsschlüssel für case-insensitive Eindeutigkeit (Unicode, z.B. Ö/ö)."""
    if not value:
        return None
    return value.strip().casefold()


class BaseRepository(Generic[ModelType]):
    """CRUD-Basis für alle Repositories.

    Repositories schreiben nur per ``flush()``. Commit/Rollback und Locks
    liegen beim aufrufenden Service, damit zusammengesetzte Operationen
    (z.B. Drop löschen inkl. Verkauf und Anteilen) eine Transaktion bilden.
    """

    def __init__(self, model_class: Type[ModelType], db: Session):
        self.model_class = model_class
        self.db = db

    def query(self) -> Query:
        return self.db.query(self.model_class)

    def get(self, entity_id: int) -> Optional[ModelType]:
        return self.db.get(self.model_class, entity_id)

    def list(self, query=None) -> List[ModelType]:
        return self.query().order_by(self.model_class.id).all()

    def create(self, data: Dict[str, Any]) -> ModelType:
        entity = self.model_class(**data)
        self.db.add(entity)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def update(self, entity_id: int, data: Dict[str, Any]) -> Optional[ModelType]:
        entity = self.get(entity_id)
        if entity is None:
            return None
        for field, value in data.items():
            setattr(entity, field, value)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def remove(self, entity_id: int) -> bool:
        entity = self.get(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.flush()
        return True

    @staticmethod
    def _paginate(q: Query, limit: Optional[int], offset: int) -> Query:
        if offset:
            q = q.offset(offset)
        if limit:
            q = q.limit(limit)
        return q
