"""Auswertungen - alle Summen werden bei jedem Aufruf neu berechnet."""
from typing import Optional

from sqlalchemy.orm import Session

from lootledger.exceptions import NotFoundError
from lootledger.models.enums import DropStatus, FinanceStatus
from lootledger.money import round2
from lootledger.repositories import DropRepository, PlayerRepository, SaleRepository, ShareRepository
from lootledger.schemas.auth import Identity
from lootledger.schemas.dashboard import AdminStats, DashboardResponse, SummaryResponse, SummaryStats
from lootledger.schemas.drop import DropQuery
from lootledger.schemas.share import ShareStats
from lootledger.services.base import BaseService
from lootledger.services.ledger import LedgerService

DASHBOARD_RECENT_DROPS = 5
SUMMARY_RECENT_DROPS = 20


class StatsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.drops = DropRepository(db)
        self.sales = SaleRepository(db)
        self.shares = ShareRepository(db)
        self.players = PlayerRepository(db)

    def player_stats(self, player_id: Optional[int] = None) -> ShareStats:
        """Summen der Anteile eines Spielers, ohne ``player_id`` global."""
        if player_id is not None and self.players.get(player_id) is None:
            raise NotFoundError("Spieler nicht gefunden", {"player_id": player_id})
        return self.shares.get_stats(player_id)

    def admin_stats(self) -> AdminStats:
        sale_stats = self.sales.get_stats()
        share_stats = self.shares.get_stats()
        return AdminStats(
            total_sales=sale_stats.total_sales,
            total_drops=self.drops.count(),
            total_unpaid_shares=share_stats.unpaid_amount,
            total_paid_shares=share_stats.paid_amount,
        )

    def summary(self, recent_limit: int = SUMMARY_RECENT_DROPS) -> SummaryResponse:
        by_drop_status = self.drops.count_by_drop_status()
        by_finance_status = self.drops.count_by_finance_status()

        status_counts = {status.value: by_finance_status.get(status, 0) for status in FinanceStatus}
        status_counts[DropStatus.NOT_DROPPED.value] = by_drop_status.get(DropStatus.NOT_DROPPED, 0)

        totals = self.sales.get_totals()
        stats = SummaryStats(
            total_drops=sum(by_drop_status.values()),
            dropped_drops=by_drop_status.get(DropStatus.DROPPED, 0),
            total_sale_price=totals["total_sale_price"],
            total_fee=totals["total_fee"],
            total_net=totals["total_net"],
            status_counts=status_counts,
        )
        recent = LedgerService(self.db).list_drop_details(DropQuery(limit=recent_limit))
        return SummaryResponse(stats=stats, recent_drops=recent)

    def dashboard(self, identity: Identity) -> DashboardResponse:
        """Eigene Anteile (Spieler über den Username), letzte Drops und für
        Admins zusätzlich die globalen Zahlen."""
        player = self.players.find_by_username(identity.subject)
        if player:
            my_stats = self.shares.get_stats(player.id)
        elif identity.is_admin:
            # Admin aus der Umgebung hat keinen Spieler-Eintrag
            zero = round2(0)
            my_stats = ShareStats(total_amount=zero, unpaid_amount=zero, paid_amount=zero)
        else:
            raise NotFoundError("Spieler nicht gefunden", {"username": identity.subject})

        recent = LedgerService(self.db).list_drop_details(DropQuery(limit=DASHBOARD_RECENT_DROPS))
        return DashboardResponse(
            is_admin=identity.is_admin,
            my_stats=my_stats,
            admin_stats=self.admin_stats() if identity.is_admin else None,
            recent_drops=recent,
        )
