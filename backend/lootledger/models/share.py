from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from lootledger.database import Base
from lootledger.models.enums import ShareType, PaidStatus


class Share(Base):
    """Anteil eines Spielers am Nettoerlös eines Drops.

    ``amount`` ist maßgeblich, ``percent`` nur informativ und wird nicht
    gegen ``amount`` geprüft.
    """
    __tablename__ = "shares"

    id = Column(Integer, primary_key=True, index=True)
    drop_id = Column(Integer, ForeignKey("drops.id"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    share_type = Column(Enum(ShareType), default=ShareType.AUTO, nullable=False)
    percent = Column(Numeric(5, 2), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    paid_status = Column(Enum(PaidStatus), default=PaidStatus.WAIT, nullable=False)
    remark = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    player = relationship("Player")
