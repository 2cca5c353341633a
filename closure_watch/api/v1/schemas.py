"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from pydantic import BaseModel
from typing import List, Optional

from closure_watch.domain.models import AlertRecord


class AlertRecordSchema(BaseModel):
    """Single account approaching closure"""

    account_id: str
    customer_id: str
    customer_name: str
    balance: str
    days_inactive: int
    inactive_since: datetime

    @classmethod
    def from_record(cls, record: AlertRecord) -> "AlertRecordSchema":
        return cls(
            account_id=record.account_id,
            customer_id=record.customer_id,
            customer_name=record.customer_name,
            balance=record.balance,
            days_inactive=record.days_inactive,
            inactive_since=record.inactive_since,
        )


class ScanResponse(BaseModel):
    """Response for POST /v1/scan and /v1/cron"""

    success: bool
    results: List[AlertRecordSchema]
    timestamp: datetime
    count: int
    candidates_evaluated: int
    failed_account_ids: List[str]
    message: str


class LatestScanResponse(BaseModel):
    """Response for GET /v1/scan/latest"""

    results: List[AlertRecordSchema]
    timestamp: Optional[datetime] = None
    count: int = 0
    message: Optional[str] = None


class ConnectionResponse(BaseModel):
    """Response for GET /v1/connection"""

    success: bool
    message: str
    account_count: int
    first_account_id: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
