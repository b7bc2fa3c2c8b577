from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from lootledger.money import round2
from lootledger.models.sale import Sale
from lootledger.repositories.base import BaseRepository
from lootledger.schemas.sale import SaleStats


class SaleRepository(BaseRepository[Sale]):
    def __init__(self, db: Session):
        super().__init__(Sale, db)

    def get_by_drop_id(self, drop_id: int) -> Optional[Sale]:
        return self.query().filter(Sale.drop_id == drop_id).first()

    def remove_by_drop_id(self, drop_id: int) -> bool:
        deleted = self.query().filter(Sale.drop_id == drop_id).delete(synchronize_session="fetch")
        self.db.flush()
        return deleted > 0

    def get_stats(self) -> SaleStats:
        """Summen werden bei jedem Aufruf aus der Tabelle berechnet."""
        total, count = self.db.query(
            func.coalesce(func.sum(Sale.net_amount), 0),
            func.count(Sale.id),
        ).one()
        return SaleStats(total_sales=round2(total), sale_count=count)

    def get_totals(self) -> dict:
        price, fee, net = self.db.query(
            func.coalesce(func.sum(Sale.sale_price), 0),
            func.coalesce(func.sum(Sale.fee_amount), 0),
            func.coalesce(func.sum(Sale.net_amount), 0),
        ).one()
        return {
            "total_sale_price": round2(price),
            "total_fee": round2(fee),
            "total_net": round2(net),
        }
