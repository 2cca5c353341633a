"""Collaborator interfaces consumed by the scan pipeline"""

from datetime import datetime
from typing import List, Optional, Protocol

from closure_watch.domain.models import Account, Customer, ScanResult, Transaction


class LedgerGateway(Protocol):
    """
    Read-only view of the upstream ledger.

    Implementations raise UpstreamError for non-success responses and
    UpstreamProtocolError for malformed payloads.
    """

    async def list_accounts_sorted_by_balance(self, page_size: int, offset: int) -> List[Account]:
        ...

    async def list_recent_transactions(self, account_id: str, limit: int) -> List[Transaction]:
        ...

    async def get_latest_transaction_timestamp(self, account_id: str) -> Optional[datetime]:
        ...

    async def get_customer(self, customer_id: str) -> Customer:
        ...


class ResultStore(Protocol):
    """Overwrite-only store for the latest scan"""

    def save(self, result: ScanResult) -> None:
        ...


class AlertNotifier(Protocol):
    """Outbound sink for non-empty scan results"""

    async def send_alert(self, result: ScanResult) -> None:
        ...
