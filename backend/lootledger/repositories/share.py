from decimal import Decimal
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from lootledger.money import round2
from lootledger.models.enums import PaidStatus
from lootledger.models.share import Share
from lootledger.repositories.base import BaseRepository
from lootledger.schemas.share import ShareQuery, ShareStats


class ShareRepository(BaseRepository[Share]):
    def __init__(self, db: Session):
        super().__init__(Share, db)

    def list(self, query: Optional[ShareQuery] = None) -> List[Share]:
        query = query or ShareQuery()
        q = self.query().options(joinedload(Share.player))

        if query.drop_id is not None:
            q = q.filter(Share.drop_id == query.drop_id)
        if query.player_id is not None:
            q = q.filter(Share.player_id == query.player_id)
        if query.paid_status is not None:
            q = q.filter(Share.paid_status == query.paid_status)

        return q.order_by(Share.created_at, Share.id).all()

    def list_by_drop_id(self, drop_id: int) -> List[Share]:
        return self.list(ShareQuery(drop_id=drop_id))

    def remove_by_drop_id(self, drop_id: int) -> int:
        deleted = self.query().filter(Share.drop_id == drop_id).delete(synchronize_session="fetch")
        self.db.flush()
        return deleted

    def count_by_player_id(self, player_id: int) -> int:
        return self.query().filter(Share.player_id == player_id).count()

    def sum_by_drop_id(self, drop_id: int) -> Decimal:
        total = self.db.query(func.coalesce(func.sum(Share.amount), 0)).filter(
            Share.drop_id == drop_id
        ).scalar()
        return round2(total)

    def get_stats(self, player_id: Optional[int] = None) -> ShareStats:
        """Gesamt-, offene und ausgezahlte Beträge - global oder pro Spieler."""
        q = self.db.query(
            func.coalesce(func.sum(Share.amount), 0),
            func.coalesce(func.sum(case((Share.paid_status == PaidStatus.WAIT, Share.amount), else_=0)), 0),
            func.coalesce(func.sum(case((Share.paid_status == PaidStatus.PAID, Share.amount), else_=0)), 0),
        )
        if player_id is not None:
            q = q.filter(Share.player_id == player_id)
        total, unpaid, paid = q.one()
        return ShareStats(
            total_amount=round2(total),
            unpaid_amount=round2(unpaid),
            paid_amount=round2(paid),
        )
