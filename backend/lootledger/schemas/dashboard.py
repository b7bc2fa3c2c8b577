from pydantic import BaseModel
from typing import Dict, List, Optional

from lootledger.schemas.common import Money
from lootledger.schemas.drop import DropDetailResponse
from lootledger.schemas.share import ShareStats


class AdminStats(BaseModel):
    total_sales: Money         # Summe Netto aller Verkäufe
    total_drops: int
    total_unpaid_shares: Money
    total_paid_shares: Money


class DashboardResponse(BaseModel):
    is_admin: bool
    my_stats: ShareStats
    admin_stats: Optional[AdminStats] = None
    recent_drops: List[DropDetailResponse]


class SummaryStats(BaseModel):
    total_drops: int
    dropped_drops: int
    total_sale_price: Money
    total_fee: Money
    total_net: Money
    status_counts: Dict[str, int]  # WAIT / PAID / PERSONAL / NOT_DROPPED


class SummaryResponse(BaseModel):
    stats: SummaryStats
    recent_drops: List[DropDetailResponse]
