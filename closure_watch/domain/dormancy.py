"""Dormancy evaluation - how long a negative account has been idle"""

import logging
from datetime import datetime
from typing import List, Optional

from closure_watch.domain.exceptions import UpstreamError, UpstreamProtocolError
from closure_watch.domain.models import Account, DormancyResult, DormancySource, Transaction
from closure_watch.domain.ports import LedgerGateway
from closure_watch.utils.date_utils import days_ago, days_between, utc_now

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_FALLBACK_DAYS = 7


def find_negative_since(balance_cents: int, transactions: List[Transaction]) -> Optional[datetime]:
    """
    Infer when the balance crossed below zero.

    Walks transactions newest-to-oldest, undoing each one from a running
    balance seeded at the current balance. The first transaction after
    which the running balance is non-negative is the one that pushed the
    account negative.

    Returns None when the balance is not negative or no crossing is found
    within the given history.
    """
    if balance_cents >= 0:
        return None

    running = balance_cents
    for txn in transactions:
        running -= txn.amount_cents
        if running >= 0:
            return txn.created_at
    return None


class DormancyEvaluator:
    """Estimates days inactive using the best available signal"""

    def __init__(
        self,
        ledger: LedgerGateway,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        fallback_days: int = DEFAULT_FALLBACK_DAYS,
    ):
        self.ledger = ledger
        self.history_limit = history_limit
        self.fallback_days = fallback_days

    async def evaluate(self, account: Account, now: datetime | None = None) -> Optional[DormancyResult]:
        """
        Evaluate one account. Returns None (skip) when the account cannot be dormant.

        Signal order:
        1. Latest transaction timestamp. No transactions at all -> skip.
        2. If that lookup fails upstream: reconstruct the negative crossing
           from recent transactions. Empty history -> skip.
        3. History present but no crossing found: assume negative for
           fallback_days.

        Raises:
            UpstreamError, UpstreamProtocolError: If the transaction history
                fetch in step 2 fails as well
        """
        if account.balance_cents >= 0:
            return None

        now = now or utc_now()

        try:
            latest = await self.ledger.get_latest_transaction_timestamp(account.account_id)
        except (UpstreamError, UpstreamProtocolError) as e:
            logger.warning(
                f"Latest transaction lookup failed, reconstructing from history: {e}",
                extra={"account_id": account.account_id},
            )
            return await self._evaluate_from_history(account, now)

        if latest is None:
            logger.info("Account has no transactions, skipping", extra={"account_id": account.account_id})
            return None

        return DormancyResult(
            inactive_since=latest,
            days_inactive=days_between(now, latest),
            source=DormancySource.LATEST_TRANSACTION,
        )

    async def _evaluate_from_history(self, account: Account, now: datetime) -> Optional[DormancyResult]:
        transactions = await self.ledger.list_recent_transactions(account.account_id, self.history_limit)
        if not transactions:
            return None

        negative_since = find_negative_since(account.balance_cents, transactions)
        if negative_since is not None:
            return DormancyResult(
                inactive_since=negative_since,
                days_inactive=days_between(now, negative_since),
                source=DormancySource.BALANCE_RECONSTRUCTION,
            )

        logger.info(
            "No negative crossing in recent history, using fallback",
            extra={"account_id": account.account_id, "fallback_days": self.fallback_days},
        )
        return DormancyResult(
            inactive_since=days_ago(now, self.fallback_days),
            days_inactive=self.fallback_days,
            source=DormancySource.FALLBACK,
        )
