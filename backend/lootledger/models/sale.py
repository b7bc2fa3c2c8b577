from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from lootledger.database import Base


class Sale(Base):
    """Verkauf eines Drops (höchstens einer pro Drop)."""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    drop_id = Column(Integer, ForeignKey("drops.id"), nullable=False, unique=True, index=True)
    sale_price = Column(Numeric(12, 2), nullable=False)
    fee_percent = Column(Numeric(5, 2), nullable=False, default=5)
    fee_amount = Column(Numeric(12, 2), nullable=False)  # Abgeleitet: round2(price * fee% / 100)
    net_amount = Column(Numeric(12, 2), nullable=False)  # Abgeleitet: round2(price - fee)
    sale_date = Column(Date, nullable=True)
    platform = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
