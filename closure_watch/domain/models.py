"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from closure_watch.utils.money_utils import format_cents


@dataclass(frozen=True)
class Account:
    """Ledger account snapshot, fetched once per scan"""

    account_id: str
    balance_cents: int
    status: str
    customer_id: Optional[str]  # weak reference, resolved lazily


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction; amount is signed (debits negative)"""

    transaction_id: str
    account_id: str
    amount_cents: int
    created_at: datetime


@dataclass(frozen=True)
class Customer:
    """Account holder identity"""

    customer_id: str
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or "Unknown"


@dataclass(frozen=True)
class ScanPolicy:
    """Tunable constants for a scan"""

    threshold_days: int = 50
    page_size: int = 100
    max_pages: int = 50
    transaction_history_limit: int = 50
    fallback_days: int = 7
    max_concurrency: int = 5


class DormancySource(str, Enum):
    """Which signal produced a dormancy estimate"""

    LATEST_TRANSACTION = "latest_transaction"
    BALANCE_RECONSTRUCTION = "balance_reconstruction"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class DormancyResult:
    """How long an account has been inactive or negative"""

    inactive_since: datetime
    days_inactive: int
    source: DormancySource


@dataclass(frozen=True)
class AlertRecord:
    """One account at risk of closure"""

    account_id: str
    customer_id: str
    customer_name: str
    balance_cents: int
    days_inactive: int
    inactive_since: datetime

    @property
    def balance(self) -> str:
        return format_cents(self.balance_cents)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "balance": self.balance,
            "days_inactive": self.days_inactive,
            "inactive_since": self.inactive_since.isoformat(),
        }


class OutcomeKind(str, Enum):
    """Result of processing one candidate account"""

    QUALIFIED = "qualified"
    BELOW_THRESHOLD = "below_threshold"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class AccountOutcome:
    """Per-account unit of work result; failures are values, not raised"""

    account_id: str
    kind: OutcomeKind
    alert: Optional[AlertRecord] = None
    dormancy: Optional[DormancyResult] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ScanResult:
    """Alerts from one scan, in ascending balance order"""

    alerts: Tuple[AlertRecord, ...]
    scanned_at: datetime
    pages_fetched: int = 0
    candidates_evaluated: int = 0
    failed_account_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.alerts)

    @property
    def total_balance_at_risk_cents(self) -> int:
        return sum(abs(alert.balance_cents) for alert in self.alerts)

    def to_payload(self) -> Dict[str, Any]:
        """Serialized form stored as the latest scan snapshot"""
        return {
            "results": [alert.to_dict() for alert in self.alerts],
            "timestamp": self.scanned_at.isoformat(),
            "count": self.count,
        }
