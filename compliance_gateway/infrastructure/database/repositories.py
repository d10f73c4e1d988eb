"""Data access layer for BAS snapshots"""

from datetime import datetime
from typing import List
from sqlalchemy.orm import Session
from compliance_gateway.infrastructure.database.models import BASSnapshot
from compliance_gateway.domain.models import BASSummary


class BASSnapshotRepository:
    """Repository for synced BAS summaries"""

    def __init__(self, db: Session):
        self.db = db

    def create_snapshot(self, source_id: str, summary: BASSummary, synced_at: datetime) -> BASSnapshot:
        """Persist a BAS summary to database"""
        db_snapshot = BASSnapshot(
            source=summary.source.value,
            source_id=source_id,
            period=summary.period,
            total_sales=summary.total_sales,
            gst_on_sales=summary.gst_on_sales,
            total_purchases=summary.total_purchases,
            gst_on_purchases=summary.gst_on_purchases,
            capital_purchases=summary.capital_purchases,
            gst_on_capital=summary.gst_on_capital,
            payg_withheld=summary.payg_withheld,
            net_payable=summary.net_payable,
            refund=summary.refund,
            synced_at=synced_at,
        )
        self.db.add(db_snapshot)
        self.db.flush()  # Get ID without committing
        return db_snapshot

    def get_snapshots_by_source(self, source_id: str, limit: int = 10) -> List[BASSnapshot]:
        """Fetch recent snapshots for a tenant / company file"""
        return (
            self.db.query(BASSnapshot)
            .filter(BASSnapshot.source_id == source_id)
            .order_by(BASSnapshot.synced_at.desc())
            .limit(limit)
            .all()
        )
