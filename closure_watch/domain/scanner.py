"""Sorted-pagination scan for negative-balance accounts"""

import logging
from dataclasses import dataclass
from typing import List

from closure_watch.domain.models import Account
from closure_watch.domain.ports import LedgerGateway

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 50


@dataclass(frozen=True)
class BalanceScan:
    """Negative-balance accounts plus the number of pages it took to find them"""

    accounts: List[Account]
    pages_fetched: int


class BalanceScanner:
    """Walks ledger pages sorted ascending by balance"""

    def __init__(
        self,
        ledger: LedgerGateway,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        if page_size <= 0 or max_pages <= 0:
            raise ValueError("page_size and max_pages must be positive")
        self.ledger = ledger
        self.page_size = page_size
        self.max_pages = max_pages

    async def collect_negative_balance_accounts(self) -> List[Account]:
        return (await self.scan()).accounts

    async def scan(self) -> BalanceScan:
        """
        Collect every account with balance < 0, in page order.

        Stop conditions:
        - a page with no negative balances (ascending sort means none follow)
        - an empty or short page (end of data)
        - the page ceiling (max_pages), which is not an error

        Raises:
            UpstreamError, UpstreamProtocolError: From any page fetch. The
                whole scan is aborted since pagination order is no longer
                trustworthy.
        """
        negatives: List[Account] = []
        pages_fetched = 0

        for page_index in range(self.max_pages):
            offset = page_index * self.page_size
            page = await self.ledger.list_accounts_sorted_by_balance(self.page_size, offset)
            pages_fetched += 1

            if not page:
                logger.info("End of account data", extra={"offset": offset})
                break

            if not _is_ascending(page):
                logger.warning(
                    "Account page not sorted by balance; early exit may miss accounts",
                    extra={"offset": offset},
                )

            page_negatives = [account for account in page if account.balance_cents < 0]
            negatives.extend(page_negatives)

            if not page_negatives:
                break
            if len(page) < self.page_size:
                break
        else:
            logger.warning(
                "Page ceiling reached, stopping scan",
                extra={"max_pages": self.max_pages, "collected": len(negatives)},
            )

        logger.info(
            "Balance scan complete",
            extra={"pages_fetched": pages_fetched, "negative_accounts": len(negatives)},
        )
        return BalanceScan(accounts=negatives, pages_fetched=pages_fetched)


def _is_ascending(page: List[Account]) -> bool:
    return all(a.balance_cents <= b.balance_cents for a, b in zip(page, page[1:]))
