from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from lootledger.database import Base
from lootledger.models.enums import DropStatus, FinanceStatus


class Drop(Base):
    """Ein Loot-Ereignis.

    Verkauf und Anteile hängen am Drop, werden aber nicht per FK-Cascade
    gelöscht - das übernimmt der LedgerService in fester Reihenfolge.
    """
    __tablename__ = "drops"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    boss_id = Column(Integer, ForeignKey("bosses.id"), nullable=True, index=True)
    drop_date = Column(Date, nullable=True)
    quantity = Column(Integer, default=1, nullable=False)
    participant_count = Column(Integer, default=1, nullable=False)  # Nur informativ, nicht maßgeblich für die Aufteilung
    drop_status = Column(Enum(DropStatus), default=DropStatus.DROPPED, nullable=False)
    finance_status = Column(Enum(FinanceStatus), default=FinanceStatus.WAIT, nullable=False)
    note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    item = relationship("Item")
    boss = relationship("Boss")
