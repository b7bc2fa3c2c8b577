from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from lootledger.models.enums import DropStatus, FinanceStatus
from lootledger.schemas.item import ItemResponse, BossResponse
from lootledger.schemas.sale import SaleResponse
from lootledger.schemas.share import ShareWithPlayerResponse, Reconciliation


class DropCreate(BaseModel):
    item_id: int
    boss_id: Optional[int] = None
    drop_date: Optional[date] = None
    quantity: int = Field(default=1, ge=1)
    participant_count: int = Field(ge=1)
    drop_status: DropStatus = DropStatus.DROPPED
    finance_status: FinanceStatus = FinanceStatus.WAIT
    note: Optional[str] = None


class DropUpdate(BaseModel):
    item_id: Optional[int] = None
    boss_id: Optional[int] = None
    drop_date: Optional[date] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    participant_count: Optional[int] = Field(default=None, ge=1)
    drop_status: Optional[DropStatus] = None
    finance_status: Optional[FinanceStatus] = None
    note: Optional[str] = None


class FinanceStatusUpdate(BaseModel):
    finance_status: FinanceStatus


class DropResponse(BaseModel):
    id: int
    item_id: int
    boss_id: Optional[int] = None
    drop_date: Optional[date] = None
    quantity: int
    participant_count: int
    drop_status: DropStatus
    finance_status: FinanceStatus
    note: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DropDetailResponse(DropResponse):
    item: Optional[ItemResponse] = None
    boss: Optional[BossResponse] = None
    sale: Optional[SaleResponse] = None
    shares: List[ShareWithPlayerResponse] = []
    reconciliation: Optional[Reconciliation] = None


class DropQuery(BaseModel):
    search: Optional[str] = None  # Item-Name
    drop_status: Optional[DropStatus] = None
    finance_status: Optional[FinanceStatus] = None
    item_id: Optional[int] = None
    boss_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)