from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from lootledger.models.drop import Drop
from lootledger.models.enums import DropStatus, FinanceStatus
from lootledger.models.item import Item
from lootledger.repositories.base import BaseRepository, name_key
from lootledger.schemas.drop import DropQuery


class DropRepository(BaseRepository[Drop]):
    def __init__(self, db: Session):
        super().__init__(Drop, db)

    def list(self, query: Optional[DropQuery] = None) -> List[Drop]:
        query = query or DropQuery()
        q = self.query()

        if query.search:
            q = q.join(Item, Drop.item_id == Item.id).filter(
                Item.name_key.like(f"%{name_key(query.search)}%")
            )
        if query.drop_status is not None:
            q = q.filter(Drop.drop_status == query.drop_status)
        if query.finance_status is not None:
            q = q.filter(Drop.finance_status == query.finance_status)
        if query.item_id is not None:
            q = q.filter(Drop.item_id == query.item_id)
        if query.boss_id is not None:
            q = q.filter(Drop.boss_id == query.boss_id)
        if query.start_date is not None:
            q = q.filter(Drop.drop_date >= query.start_date)
        if query.end_date is not None:
            q = q.filter(Drop.drop_date <= query.end_date)

        # Neueste zuerst: drop_date, ersatzweise Erstellungszeitpunkt
        q = q.order_by(
            func.coalesce(Drop.drop_date, func.date(Drop.created_at)).desc(),
            Drop.id.desc(),
        )
        return self._paginate(q, query.limit, query.offset).all()

    def count(self) -> int:
        return self.query().count()

    def count_by_drop_status(self) -> Dict[DropStatus, int]:
        rows = self.db.query(Drop.drop_status, func.count(Drop.id)).group_by(Drop.drop_status).all()
        return {drop_status: count for drop_status, count in rows}

    def count_by_finance_status(self) -> Dict[FinanceStatus, int]:
        rows = self.db.query(Drop.finance_status, func.count(Drop.id)).group_by(Drop.finance_status).all()
        return {finance_status: count for finance_status, count in rows}

    def count_by_item_id(self, item_id: int) -> int:
        return self.query().filter(Drop.item_id == item_id).count()

    def count_by_boss_id(self, boss_id: int) -> int:
        return self.query().filter(Drop.boss_id == boss_id).count()
