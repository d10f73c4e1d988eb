"""Client compliance risk endpoints"""

import time
from fastapi import APIRouter, Request

from compliance_gateway.api.v1.schemas import (
    RankedClientSchema,
    RankRequest,
    RankResponse,
    RiskResultSchema,
    RiskSignalsSchema,
)
from compliance_gateway.api.dependencies import get_request_id
from compliance_gateway.domain.models import RiskLevel
from compliance_gateway.domain.risk import rank_clients_by_risk, score_client_risk
from compliance_gateway.infrastructure.observability.metrics import record_risk_levels
from compliance_gateway.infrastructure.observability.logging import log_risk_ranking

router = APIRouter()


@router.post("/risk/score", response_model=RiskResultSchema)
def score_risk(signals: RiskSignalsSchema):
    """Score one client's compliance risk (0-100, higher = more likely to miss a deadline)"""
    result = score_client_risk(signals.to_domain())
    record_risk_levels([result.level.value])
    return RiskResultSchema.from_domain(result)


@router.post("/risk/rank", response_model=RankResponse)
def rank_risk(request_body: RankRequest, request: Request):
    """
    Score every client and return them highest risk first.

    Clients with equal scores keep the order they were submitted in.
    """
    start_time = time.time()
    ranked = rank_clients_by_risk(
        (item.client_id, item.signals.to_domain()) for item in request_body.clients
    )

    record_risk_levels(c.risk.level.value for c in ranked)
    log_risk_ranking(
        get_request_id(request),
        client_count=len(ranked),
        high_risk_count=sum(1 for c in ranked if c.risk.level == RiskLevel.HIGH),
        duration_ms=(time.time() - start_time) * 1000,
    )

    return RankResponse(clients=[RankedClientSchema.from_domain(c) for c in ranked])
