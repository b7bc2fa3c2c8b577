from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from lootledger.models.enums import ItemCategory


class ItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: ItemCategory
    sub_type: Optional[str] = None
    tradeable: bool = True
    note: Optional[str] = None


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[ItemCategory] = None
    sub_type: Optional[str] = None
    tradeable: Optional[bool] = None
    note: Optional[str] = None


class ItemResponse(BaseModel):
    id: int
    name: str
    category: ItemCategory
    sub_type: Optional[str] = None
    tradeable: bool
    note: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemQuery(BaseModel):
    search: Optional[str] = None  # Name oder Sub-Typ
    category: Optional[ItemCategory] = None
    tradeable: Optional[bool] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


class BossCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    location: Optional[str] = None


class BossUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location: Optional[str] = None


class BossResponse(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BossQuery(BaseModel):
    search: Optional[str] = None  # Name oder Ort
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
