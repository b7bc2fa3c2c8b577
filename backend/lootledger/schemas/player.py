from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from lootledger.models.enums import PlayerRole


class PlayerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    discord_id: Optional[str] = None
    # Leere Strings gelten als "nicht angegeben" (Formular-Eingaben)
    username: Optional[str] = None
    password: Optional[str] = None
    role: PlayerRole = PlayerRole.MEMBER
    active: bool = True


class PlayerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    discord_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[PlayerRole] = None
    active: Optional[bool] = None


class PlayerResponse(BaseModel):
    id: int
    name: str
    discord_id: Optional[str] = None
    username: Optional[str] = None
    role: PlayerRole
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PlayerQuery(BaseModel):
    search: Optional[str] = None  # Name oder Discord-ID
    active: Optional[bool] = None
    role: Optional[PlayerRole] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
