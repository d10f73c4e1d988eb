"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from compliance_gateway.domain.models import BASSummary, RankedClient, RiskResult, RiskSignals


class ConnectResponse(BaseModel):
    """Response for GET /v1/{platform}/connect"""

    url: str
    state: str


class SyncRequest(BaseModel):
    """Optional body for POST /v1/{platform}/sync/bas/{id}"""

    period: Optional[str] = Field(None, description="Reporting period label; when omitted Xero uses the report's own range, MYOB derives it from from_date")
    from_date: Optional[date] = Field(None, description="MYOB only; Xero reports the period it chooses")
    to_date: Optional[date] = None

    @model_validator(mode="after")
    def check_range(self) -> "SyncRequest":
        if self.from_date and self.to_date and self.to_date < self.from_date:
            raise ValueError("to_date must not be before from_date")
        return self


class BASSummarySchema(BaseModel):
    """Canonical BAS figures"""

    total_sales: Decimal
    gst_on_sales: Decimal
    total_purchases: Decimal
    gst_on_purchases: Decimal
    capital_purchases: Optional[Decimal] = None
    gst_on_capital: Optional[Decimal] = None
    payg_withheld: Decimal
    net_payable: Decimal
    refund: bool

    @classmethod
    def from_domain(cls, summary: BASSummary) -> "BASSummarySchema":
        return cls(
            total_sales=summary.total_sales,
            gst_on_sales=summary.gst_on_sales,
            total_purchases=summary.total_purchases,
            gst_on_purchases=summary.gst_on_purchases,
            capital_purchases=summary.capital_purchases,
            gst_on_capital=summary.gst_on_capital,
            payg_withheld=summary.payg_withheld,
            net_payable=summary.net_payable,
            refund=summary.refund,
        )


class SyncResponse(BaseModel):
    """Response for POST /v1/{platform}/sync/bas/{id}"""

    snapshot_id: str
    source: str
    source_id: str
    period: str
    rows: Dict[str, Union[bool, Decimal]]
    summary: BASSummarySchema
    note: Optional[str] = None
    last_synced: str


class HistoryItem(BaseModel):
    """Single stored BAS snapshot"""

    snapshot_id: str
    source: str
    period: str
    net_payable: Decimal
    refund: bool
    synced_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/bas/history"""

    source_id: str
    snapshots: List[HistoryItem]


class RiskSignalsSchema(BaseModel):
    """Risk signals for one client; absent fields take the scoring defaults"""

    days_until_next_deadline: Optional[int] = Field(999, description="Negative when overdue")
    open_obligations_count: int = Field(0, ge=0)
    employee_count: int = Field(0, ge=0)
    has_ignored_recent_reminder: bool = False
    late_lodgement_history_count: int = Field(0, ge=0)

    def to_domain(self) -> RiskSignals:
        return RiskSignals(**self.model_dump())


class RiskResultSchema(BaseModel):
    """Response for POST /v1/risk/score"""

    score: int = Field(..., ge=0, le=100)
    level: str
    label: str
    reasons: List[str]

    @classmethod
    def from_domain(cls, result: RiskResult) -> "RiskResultSchema":
        return cls(score=result.score, level=result.level.value, label=result.label, reasons=list(result.reasons))


class RankClientItem(BaseModel):
    client_id: str = Field(..., min_length=1)
    signals: RiskSignalsSchema = Field(default_factory=RiskSignalsSchema)


class RankRequest(BaseModel):
    """Request body for POST /v1/risk/rank"""

    clients: List[RankClientItem]


class RankedClientSchema(BaseModel):
    client_id: str
    risk: RiskResultSchema

    @classmethod
    def from_domain(cls, ranked: RankedClient) -> "RankedClientSchema":
        return cls(client_id=ranked.client_id, risk=RiskResultSchema.from_domain(ranked.risk))


class RankResponse(BaseModel):
    """Response for POST /v1/risk/rank, highest risk first"""

    clients: List[RankedClientSchema]
