"""BAS sync endpoints - fetch platform data, normalize, persist a snapshot"""

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from compliance_gateway.api.v1.schemas import (
    BASSummarySchema,
    ConnectResponse,
    HistoryItem,
    HistoryResponse,
    SyncRequest,
    SyncResponse,
)
from compliance_gateway.api.dependencies import get_myob_client, get_request_id, get_xero_client
from compliance_gateway.infrastructure.database.session import get_db
from compliance_gateway.infrastructure.database.repositories import BASSnapshotRepository
from compliance_gateway.infrastructure.clients.xero import XeroClient
from compliance_gateway.infrastructure.clients.myob import MYOBClient
from compliance_gateway.domain.bas import normalize_bas
from compliance_gateway.domain.exceptions import AccountingAPIError, MalformedSourceData
from compliance_gateway.domain.models import BASSource
from compliance_gateway.infrastructure.observability.metrics import record_bas_sync, vendor_fetch_failures_counter
from compliance_gateway.infrastructure.observability.logging import log_bas_sync
from compliance_gateway.utils.date_utils import bas_quarter_label

router = APIRouter()

UNREADABLE_PERIOD = "Unable to read data for this period"


def _period_label(body: SyncRequest) -> Optional[str]:
    if body.period:
        return body.period
    if body.from_date:
        return bas_quarter_label(body.from_date, body.to_date)
    return None


async def _sync(
    source: BASSource,
    source_id: str,
    fetch: Awaitable[Any],
    period: Optional[str],
    request: Request,
    db: Session,
) -> SyncResponse:
    """
    Shared sync flow for both platforms.

    Flow:
    1. Fetch raw platform data
    2. Normalize into a BASSummary
    3. Persist snapshot
    4. Return rows + canonical summary stamped with the sync time
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        raw = await fetch
        summary = normalize_bas(source, raw, period=period)

        synced_at = datetime.now(timezone.utc)
        snapshot = BASSnapshotRepository(db).create_snapshot(source_id, summary, synced_at)
        db.commit()

    except AccountingAPIError as e:
        vendor_fetch_failures_counter.labels(source=source.value).inc()
        record_bas_sync(source.value, "vendor_error")
        db.rollback()
        logging.error(f"{source.value} API error: {e}", extra={"request_id": request_id, "source_id": source_id})
        raise HTTPException(status_code=503, detail=f"{source.value.upper()} service unavailable")

    except MalformedSourceData as e:
        record_bas_sync(source.value, "malformed")
        db.rollback()
        logging.warning(f"Malformed {source.value} data: {e}", extra={"request_id": request_id, "source_id": source_id})
        raise HTTPException(status_code=422, detail=UNREADABLE_PERIOD)

    except Exception as e:
        record_bas_sync(source.value, "error")
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "source_id": source_id})
        raise HTTPException(status_code=500, detail="BAS sync failed")

    duration_ms = (time.time() - start_time) * 1000
    record_bas_sync(source.value, "success", refund=summary.refund)
    log_bas_sync(
        request_id,
        source.value,
        source_id,
        summary.period,
        str(summary.net_payable),
        summary.refund,
        duration_ms,
    )

    return SyncResponse(
        snapshot_id=str(snapshot.id),
        source=source.value,
        source_id=source_id,
        period=summary.period,
        rows=summary.to_rows(),
        summary=BASSummarySchema.from_domain(summary),
        note=summary.note,
        last_synced=synced_at.isoformat(),
    )


@router.get("/xero/connect", response_model=ConnectResponse)
def connect_xero():
    """Authorization URL for connecting a Xero organisation"""
    state = secrets.token_hex(16)
    return ConnectResponse(url=XeroClient.authorization_url(state), state=state)


@router.get("/myob/connect", response_model=ConnectResponse)
def connect_myob():
    """Authorization URL for connecting a MYOB company file"""
    state = secrets.token_hex(16)
    return ConnectResponse(url=MYOBClient.authorization_url(state), state=state)


@router.post("/xero/sync/bas/{tenant_id}", response_model=SyncResponse)
async def sync_xero_bas(
    tenant_id: str,
    request: Request,
    body: Optional[SyncRequest] = None,
    db: Session = Depends(get_db),
    xero_client: XeroClient = Depends(get_xero_client),
):
    """
    Fetch the BASorGST report for a Xero organisation and normalize it.

    Xero decides the period the report covers, so from_date / to_date are not
    used here; the label comes from the body or from the report titles.
    """
    period = body.period if body else None
    return await _sync(BASSource.XERO, tenant_id, xero_client.get_bas_report(tenant_id), period, request, db)


@router.post("/myob/sync/bas/{company_file_id}", response_model=SyncResponse)
async def sync_myob_bas(
    company_file_id: str,
    request: Request,
    body: Optional[SyncRequest] = None,
    db: Session = Depends(get_db),
    myob_client: MYOBClient = Depends(get_myob_client),
):
    """Fetch MYOB sales, purchases and payroll for the period and compute BAS from them"""
    body = body or SyncRequest()
    fetch = myob_client.get_bas_inputs(company_file_id, body.from_date, body.to_date)
    return await _sync(BASSource.MYOB, company_file_id, fetch, _period_label(body), request, db)


@router.get("/bas/history", response_model=HistoryResponse)
def get_bas_history(
    source_id: str = Query(..., description="Xero tenant id or MYOB company file id"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent BAS snapshots for one tenant / company file.

    Returns:
        Snapshots newest first
    """
    snapshots = BASSnapshotRepository(db).get_snapshots_by_source(source_id, limit=20)

    return HistoryResponse(
        source_id=source_id,
        snapshots=[
            HistoryItem(
                snapshot_id=str(s.id),
                source=s.source,
                period=s.period,
                net_payable=s.net_payable,
                refund=s.refund,
                synced_at=s.synced_at.isoformat(),
            )
            for s in snapshots
        ],
    )
