from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean, Text
from sqlalchemy.sql import func
from lootledger.database import Base
from lootledger.models.enums import ItemCategory


class Item(Base):
    """Item-Katalog (was droppen kann)."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    name_key = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(Enum(ItemCategory), nullable=False)
    sub_type = Column(String(100), nullable=True)
    tradeable = Column(Boolean, default=True, nullable=False)
    note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Boss(Base):
    """Boss, bei dem ein Drop angefallen ist."""
    __tablename__ = "bosses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    name_key = Column(String(100), nullable=False, unique=True, index=True)
    location = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
