from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean
from sqlalchemy.sql import func
from lootledger.database import Base
from lootledger.models.enums import PlayerRole


class Player(Base):
    """Gildenmitglied - optional mit Login (username/password_hash)."""
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, index=True)
    name_key = Column(String(50), nullable=False, unique=True, index=True)  # casefold(name), setzt das Repository
    discord_id = Column(String(32), nullable=True)
    username = Column(String(100), nullable=True, index=True)  # Nur wenn der Spieler sich einloggen kann
    username_key = Column(String(100), nullable=True, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)  # bcrypt Hash
    role = Column(Enum(PlayerRole), default=PlayerRole.MEMBER, nullable=False)
    active = Column(Boolean, default=True, nullable=False)  # Soft-Delete

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def is_admin(self) -> bool:
        return self.role == PlayerRole.ADMIN
