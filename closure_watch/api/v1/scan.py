"""Scan endpoints - manual and scheduled runs, latest persisted result"""

import time
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from closure_watch.api.dependencies import get_ledger_client, get_notifier, get_request_id, get_scan_policy
from closure_watch.api.v1.schemas import AlertRecordSchema, LatestScanResponse, ScanResponse
from closure_watch.domain.exceptions import UpstreamError, UpstreamProtocolError
from closure_watch.domain.models import ScanPolicy
from closure_watch.domain.orchestrator import ScanOrchestrator
from closure_watch.infrastructure.clients.ledger import LedgerClient
from closure_watch.infrastructure.clients.webhook import WebhookNotifier
from closure_watch.infrastructure.database.repositories import ScanSnapshotRepository
from closure_watch.infrastructure.database.session import get_db
from closure_watch.infrastructure.observability.logging import log_scan_summary
from closure_watch.infrastructure.observability.metrics import record_scan, record_scan_failure

router = APIRouter()


async def _execute_scan(
    trigger: str,
    notify: bool,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session,
    ledger_client: LedgerClient,
    notifier: Optional[WebhookNotifier],
    policy: ScanPolicy,
) -> ScanResponse:
    """
    Flow:
    1. Page through negative-balance accounts
    2. Estimate dormancy per account, assemble alerts past the threshold
    3. Overwrite and commit the latest snapshot
    4. Schedule the webhook notification (if enabled and anything was flagged)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    orchestrator = ScanOrchestrator(
        ledger=ledger_client,
        result_store=ScanSnapshotRepository(db),
        notifier=notifier,
        policy=policy,
    )

    try:
        result = await orchestrator.run_scan(notify=False)
        db.commit()
    except (UpstreamError, UpstreamProtocolError):
        db.rollback()
        record_scan_failure()
        raise

    if notify and notifier is not None and result.count > 0:
        background_tasks.add_task(orchestrator.notify, result)

    duration_ms = (time.time() - start_time) * 1000
    record_scan(result)
    log_scan_summary(request_id, trigger, result, duration_ms)

    return ScanResponse(
        success=True,
        results=[AlertRecordSchema.from_record(alert) for alert in result.alerts],
        timestamp=result.scanned_at,
        count=result.count,
        candidates_evaluated=result.candidates_evaluated,
        failed_account_ids=list(result.failed_account_ids),
        message=f"Found {result.count} account(s) requiring attention",
    )


@router.post("/scan", response_model=ScanResponse)
async def run_manual_scan(
    request: Request,
    background_tasks: BackgroundTasks,
    notify: bool = Query(False, description="Also send the alert webhook"),
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    notifier: Optional[WebhookNotifier] = Depends(get_notifier),
    policy: ScanPolicy = Depends(get_scan_policy),
):
    """Operator-triggered scan. Persists the result; notifies only on request."""
    return await _execute_scan("manual", notify, request, background_tasks, db, ledger_client, notifier, policy)


@router.api_route("/cron", methods=["GET", "POST"], response_model=ScanResponse)
async def run_scheduled_scan(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    notifier: Optional[WebhookNotifier] = Depends(get_notifier),
    policy: ScanPolicy = Depends(get_scan_policy),
):
    """Daily scheduled scan. Persists the result and sends the alert webhook."""
    response = await _execute_scan("cron", True, request, background_tasks, db, ledger_client, notifier, policy)
    response.message = f"Daily scan completed. Found {response.count} account(s) requiring attention."
    return response


@router.get("/scan/latest", response_model=LatestScanResponse)
def get_latest_scan(db: Session = Depends(get_db)):
    """Most recent persisted scan result"""
    payload = ScanSnapshotRepository(db).get_latest()
    if payload is None:
        return LatestScanResponse(results=[], message="No scan results available yet")

    return LatestScanResponse(
        results=[AlertRecordSchema(**item) for item in payload.get("results", [])],
        timestamp=payload.get("timestamp"),
        count=payload.get("count", 0),
    )
