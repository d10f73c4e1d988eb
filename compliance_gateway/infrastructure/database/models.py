"""SQLAlchemy ORM models for synced BAS snapshots"""

import uuid
from sqlalchemy import Column, Boolean, DateTime, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(14, 2)


class BASSnapshot(Base):
    """One normalized BAS summary as returned by a sync"""

    __tablename__ = "bas_snapshot"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    source = Column(Text, nullable=False)  # xero | myob
    source_id = Column(Text, nullable=False, index=True)  # Xero tenant id / MYOB company file id
    period = Column(Text, nullable=False)
    total_sales = Column(Money, nullable=False)
    gst_on_sales = Column(Money, nullable=False)
    total_purchases = Column(Money, nullable=False)
    gst_on_purchases = Column(Money, nullable=False)
    capital_purchases = Column(Money, nullable=True)
    gst_on_capital = Column(Money, nullable=True)
    payg_withheld = Column(Money, nullable=False)
    net_payable = Column(Money, nullable=False)
    refund = Column(Boolean, nullable=False)
    synced_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
