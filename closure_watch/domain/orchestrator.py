"""End-to-end scan: scanner -> dormancy -> alerts -> persist/notify"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from closure_watch.domain.alerts import AlertAssembler
from closure_watch.domain.dormancy import DormancyEvaluator
from closure_watch.domain.exceptions import (
    CustomerLookupError,
    NotificationError,
    UpstreamError,
    UpstreamProtocolError,
)
from closure_watch.domain.models import Account, AccountOutcome, OutcomeKind, ScanPolicy, ScanResult
from closure_watch.domain.ports import AlertNotifier, LedgerGateway, ResultStore
from closure_watch.domain.scanner import BalanceScanner
from closure_watch.utils.date_utils import utc_now

logger = logging.getLogger(__name__)

# Failures isolated to a single account; anything else aborts the scan
ACCOUNT_ERRORS = (UpstreamError, UpstreamProtocolError, CustomerLookupError)


class ScanOrchestrator:
    """Runs one scan and hands the result to the store and notifier"""

    def __init__(
        self,
        ledger: LedgerGateway,
        result_store: ResultStore,
        notifier: Optional[AlertNotifier] = None,
        policy: ScanPolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.policy = policy or ScanPolicy()
        self.result_store = result_store
        self.notifier = notifier
        self.clock = clock
        self.scanner = BalanceScanner(ledger, self.policy.page_size, self.policy.max_pages)
        self.evaluator = DormancyEvaluator(
            ledger, self.policy.transaction_history_limit, self.policy.fallback_days
        )
        self.assembler = AlertAssembler(ledger, self.policy.threshold_days)

    async def run_scan(self, notify: bool = True) -> ScanResult:
        """
        Execute a full scan.

        Raises:
            UpstreamError, UpstreamProtocolError: If account pagination fails
        """
        now = self.clock()
        balance_scan = await self.scanner.scan()
        outcomes = await self.process_candidates(balance_scan.accounts, now)

        result = ScanResult(
            alerts=tuple(o.alert for o in outcomes if o.kind is OutcomeKind.QUALIFIED),
            scanned_at=now,
            pages_fetched=balance_scan.pages_fetched,
            candidates_evaluated=len(outcomes),
            failed_account_ids=tuple(o.account_id for o in outcomes if o.kind is OutcomeKind.FAILED),
        )

        self.result_store.save(result)

        if notify:
            await self.notify(result)

        return result

    async def notify(self, result: ScanResult) -> None:
        """Send a non-empty result to the notifier; delivery failures are logged, not raised"""
        if self.notifier is None or result.count == 0:
            return
        try:
            await self.notifier.send_alert(result)
        except NotificationError as e:
            logger.error(f"Alert notification failed: {e}", extra={"alert_count": result.count})

    async def process_candidates(self, accounts: List[Account], now: datetime) -> List[AccountOutcome]:
        """Evaluate candidates on a bounded pool; output order matches input order"""
        semaphore = asyncio.Semaphore(max(1, self.policy.max_concurrency))

        async def bounded(account: Account) -> AccountOutcome:
            async with semaphore:
                return await self.process_account(account, now)

        return list(await asyncio.gather(*(bounded(account) for account in accounts)))

    async def process_account(self, account: Account, now: datetime) -> AccountOutcome:
        try:
            dormancy = await self.evaluator.evaluate(account, now)
            if dormancy is None:
                return AccountOutcome(account.account_id, OutcomeKind.SKIPPED)
            if not self.assembler.qualifies(dormancy):
                return AccountOutcome(account.account_id, OutcomeKind.BELOW_THRESHOLD, dormancy=dormancy)

            alert = await self.assembler.assemble(account, dormancy)
        except ACCOUNT_ERRORS as e:
            logger.warning(
                f"Error processing account: {e}",
                extra={"account_id": account.account_id, "error_type": type(e).__name__},
            )
            return AccountOutcome(account.account_id, OutcomeKind.FAILED, error=str(e))

        logger.info(
            "Account flagged",
            extra={
                "account_id": account.account_id,
                "days_inactive": dormancy.days_inactive,
                "dormancy_source": dormancy.source.value,
            },
        )
        return AccountOutcome(account.account_id, OutcomeKind.QUALIFIED, alert=alert, dormancy=dormancy)
