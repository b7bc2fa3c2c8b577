from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from lootledger.exceptions import ConflictError
from lootledger.models.item import Item, Boss
from lootledger.repositories.base import BaseRepository, name_key
from lootledger.schemas.item import ItemQuery, BossQuery


class _NamedRepository(BaseRepository):
    """Gemeinsame Namens-Eindeutigkeit für Items und Bosse."""
    label = "Eintrag"

    def find_by_name(self, name: str):
        return self.query().filter(self.model_class.name_key == name_key(name)).first()

    def create(self, data: Dict[str, Any]):
        self._check_unique_name(data.get("name"))
        return super().create(self._with_key(data))

    def update(self, entity_id: int, data: Dict[str, Any]):
        if self.get(entity_id) is None:
            return None
        self._check_unique_name(data.get("name"), exclude_id=entity_id)
        return super().update(entity_id, self._with_key(data))

    @staticmethod
    def _with_key(data: Dict[str, Any]) -> Dict[str, Any]:
        if "name" not in data:
            return data
        return {**data, "name_key": name_key(data["name"])}

    def _check_unique_name(self, name: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not name:
            return
        existing = self.find_by_name(name)
        if existing and existing.id != exclude_id:
            raise ConflictError(f"{self.label} '{name}' existiert bereits")


class ItemRepository(_NamedRepository):
    label = "Item"

    def __init__(self, db: Session):
        super().__init__(Item, db)

    def list(self, query: Optional[ItemQuery] = None) -> List[Item]:
        query = query or ItemQuery()
        q = self.query()

        if query.search:
            pattern = f"%{name_key(query.search)}%"
            q = q.filter(or_(
                Item.name_key.like(pattern),
                func.lower(Item.sub_type).like(pattern),
            ))
        if query.category is not None:
            q = q.filter(Item.category == query.category)
        if query.tradeable is not None:
            q = q.filter(Item.tradeable == query.tradeable)

        q = q.order_by(Item.created_at.desc(), Item.id.desc())
        return self._paginate(q, query.limit, query.offset).all()


class BossRepository(_NamedRepository):
    label = "Boss"

    def __init__(self, db: Session):
        super().__init__(Boss, db)

    def list(self, query: Optional[BossQuery] = None) -> List[Boss]:
        query = query or BossQuery()
        q = self.query()

        if query.search:
            pattern = f"%{name_key(query.search)}%"
            q = q.filter(or_(
                Boss.name_key.like(pattern),
                func.lower(Boss.location).like(pattern),
            ))

        q = q.order_by(Boss.name)
        return self._paginate(q, query.limit, query.offset).all()
