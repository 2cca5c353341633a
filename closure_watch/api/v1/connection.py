"""GET /v1/connection - Ledger API connectivity check"""

import logging
from fastapi import APIRouter, Depends

from closure_watch.api.dependencies import get_ledger_client
from closure_watch.api.v1.schemas import ConnectionResponse
from closure_watch.infrastructure.clients.ledger import LedgerClient

router = APIRouter()

SAMPLE_SIZE = 5


@router.get("/connection", response_model=ConnectionResponse)
async def check_connection(ledger_client: LedgerClient = Depends(get_ledger_client)):
    """
    Fetch a handful of accounts to confirm the token and base URL work.

    Upstream failures are rendered by the registered error handlers.
    """
    logging.info("Testing ledger API connection")
    accounts = await ledger_client.list_accounts_sorted_by_balance(SAMPLE_SIZE, 0)

    return ConnectionResponse(
        success=True,
        message="Ledger API connection successful",
        account_count=len(accounts),
        first_account_id=accounts[0].account_id if accounts else None,
    )
