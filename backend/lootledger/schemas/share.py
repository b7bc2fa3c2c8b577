from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from lootledger.models.enums import ShareType, PaidStatus
from lootledger.schemas.common import Money
from lootledger.schemas.player import PlayerResponse


class ShareCreate(BaseModel):
    """Manueller Anteil - amount ist maßgeblich, percent nur informativ."""
    player_id: int
    share_type: ShareType = ShareType.AUTO
    percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    amount: Decimal = Field(ge=0)
    paid_status: PaidStatus = PaidStatus.WAIT
    remark: Optional[str] = None


class ShareUpdate(BaseModel):
    # drop_id ist nicht änderbar
    player_id: Optional[int] = None
    share_type: Optional[ShareType] = None
    percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    paid_status: Optional[PaidStatus] = None
    remark: Optional[str] = None


class PaidStatusUpdate(BaseModel):
    paid_status: PaidStatus


class EqualSplitRequest(BaseModel):
    """Gleichmäßige Aufteilung - ersetzt alle bisherigen Anteile des Drops."""
    player_ids: List[int] = Field(min_length=1)
    net_amount: Optional[Decimal] = Field(default=None, ge=0)  # Abweichender Betrag, z.B. Rest nach Buy-Out


class BuyOutRequest(BaseModel):
    """Ein Spieler kauft einen festen Prozentsatz heraus, der Rest wird gleich verteilt."""
    buyer_id: int
    player_ids: List[int] = []  # Empfänger des Rests (ohne Käufer)
    percent: Decimal = Field(default=Decimal("50"), gt=0, le=100)


class ShareResponse(BaseModel):
    id: int
    drop_id: int
    player_id: int
    share_type: ShareType
    percent: Optional[Money] = None
    amount: Money
    paid_status: PaidStatus
    remark: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShareWithPlayerResponse(ShareResponse):
    player: Optional[PlayerResponse] = None


class ShareQuery(BaseModel):
    drop_id: Optional[int] = None
    player_id: Optional[int] = None
    paid_status: Optional[PaidStatus] = None


class ShareStats(BaseModel):
    total_amount: Money
    unpaid_amount: Money
    paid_amount: Money


class Reconciliation(BaseModel):
    """Abgleich Nettoerlös gegen verteilte Anteile, immer live berechnet."""
    drop_id: int
    has_sale: bool
    net_amount: Money
    allocated: Money
    remaining: Money  # > 0 unterverteilt, < 0 überverteilt
    share_count: int
