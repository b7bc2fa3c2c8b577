from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from lootledger.schemas.common import Money


class SaleCreate(BaseModel):
    sale_price: Decimal = Field(ge=0)
    fee_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)  # None = Standardgebühr aus den Settings
    sale_date: Optional[date] = None
    platform: Optional[str] = None


class SaleUpdate(BaseModel):
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    fee_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    sale_date: Optional[date] = None
    platform: Optional[str] = None


class SaleResponse(BaseModel):
    id: int
    drop_id: int
    sale_price: Money
    fee_percent: Money
    fee_amount: Money
    net_amount: Money
    sale_date: Optional[date] = None
    platform: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SaleStats(BaseModel):
    total_sales: Money  # Summe aller Nettobeträge
    sale_count: int
