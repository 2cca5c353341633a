"""Alert assembly for accounts past the dormancy threshold"""

from closure_watch.domain.exceptions import CustomerLookupError, UpstreamError, UpstreamProtocolError
from closure_watch.domain.models import Account, AlertRecord, DormancyResult
from closure_watch.domain.ports import LedgerGateway

THRESHOLD_DAYS = 50


class AlertAssembler:
    """Joins a qualifying account with its customer identity"""

    def __init__(self, ledger: LedgerGateway, threshold_days: int = THRESHOLD_DAYS):
        self.ledger = ledger
        self.threshold_days = threshold_days

    def qualifies(self, dormancy: DormancyResult) -> bool:
        return dormancy.days_inactive >= self.threshold_days

    async def assemble(self, account: Account, dormancy: DormancyResult) -> AlertRecord:
        """
        Build the alert record for one account.

        Raises:
            ValueError: If the account does not qualify (caller bug)
            CustomerLookupError: If the customer id is missing or the lookup fails
        """
        if account.balance_cents >= 0:
            raise ValueError(f"Account {account.account_id} has a non-negative balance")
        if not self.qualifies(dormancy):
            raise ValueError(
                f"Account {account.account_id} inactive {dormancy.days_inactive}d, "
                f"below threshold {self.threshold_days}d"
            )

        if not account.customer_id:
            raise CustomerLookupError("Account has no customer relationship", account.account_id)

        try:
            customer = await self.ledger.get_customer(account.customer_id)
        except (UpstreamError, UpstreamProtocolError) as e:
            raise CustomerLookupError(
                f"Customer {account.customer_id} lookup failed: {e}", account.account_id
            ) from e

        return AlertRecord(
            account_id=account.account_id,
            customer_id=customer.customer_id,
            customer_name=customer.display_name,
            balance_cents=account.balance_cents,
            days_inactive=dormancy.days_inactive,
            inactive_since=dormancy.inactive_since,
        )
