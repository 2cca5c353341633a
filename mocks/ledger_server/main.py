"""Mock ledger API serving a small in-memory portfolio for local runs and e2e tests"""

from datetime import datetime, timedelta, timezone
from fastapi import FastAPI, Header, HTTPException, Query

MOCK_TOKEN = "mock-token"

app = FastAPI(title="Mock Ledger Server", version="1.0.0")

# account_id -> (balance_cents, customer_id, [(days_ago, amount_cents, direction)])
PORTFOLIO = {
    "acc_dormant": (-12550, "cust_ada", [(60, 12550, "Debit"), (75, 3000, "Credit")]),
    "acc_no_history": (-500, "cust_grace", []),
    "acc_recent": (-2000, "cust_alan", [(10, 2500, "Debit")]),
    "acc_orphaned": (-7500, "cust_missing", [(70, 7500, "Debit")]),
    "acc_positive": (100, "cust_ada", [(90, 100, "Credit")]),
    "acc_healthy": (250000, "cust_alan", [(2, 50000, "Credit")]),
}

CUSTOMERS = {
    "cust_ada": {"firstName": "Ada", "lastName": "Lovelace"},
    "cust_grace": {"fullName": {"first": "Grace", "last": "Hopper"}},
    "cust_alan": {"firstName": "Alan", "lastName": "Turing"},
}


def _check_auth(authorization: str | None) -> None:
    if authorization != f"Bearer {MOCK_TOKEN}":
        raise HTTPException(status_code=401, detail="invalid token")


def _account_resource(account_id: str) -> dict:
    balance, customer_id, _ = PORTFOLIO[account_id]
    return {
        "type": "depositAccount",
        "id": account_id,
        "attributes": {"balance": balance, "status": "Open"},
        "relationships": {"customer": {"data": {"type": "customer", "id": customer_id}}},
    }


def _transactions(account_id: str) -> list[dict]:
    now = datetime.now(timezone.utc)
    _, _, history = PORTFOLIO[account_id]
    resources = [
        {
            "type": "transaction",
            "id": f"{account_id}_txn_{i}",
            "attributes": {
                "amount": amount,
                "direction": direction,
                "createdAt": (now - timedelta(days=days)).isoformat(),
            },
            "relationships": {"account": {"data": {"type": "account", "id": account_id}}},
        }
        for i, (days, amount, direction) in enumerate(history)
    ]
    return sorted(resources, key=lambda r: r["attributes"]["createdAt"], reverse=True)


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/accounts")
def list_accounts(
    limit: int = Query(100, alias="page[limit]"),
    offset: int = Query(0, alias="page[offset]"),
    sort: str | None = None,
    authorization: str | None = Header(None),
):
    _check_auth(authorization)
    ids = list(PORTFOLIO)
    if sort == "balance":
        ids.sort(key=lambda account_id: PORTFOLIO[account_id][0])
    return {"data": [_account_resource(account_id) for account_id in ids[offset:offset + limit]]}


@app.get("/transactions")
def list_transactions(
    account_id: str = Query(..., alias="filter[accountId]"),
    limit: int = Query(100, alias="page[limit]"),
    authorization: str | None = Header(None),
):
    _check_auth(authorization)
    if account_id not in PORTFOLIO:
        raise HTTPException(status_code=404, detail="account not found")
    return {"data": _transactions(account_id)[:limit]}


@app.get("/customers/{customer_id}")
def get_customer(customer_id: str, authorization: str | None = Header(None)):
    _check_auth(authorization)
    if customer_id not in CUSTOMERS:
        raise HTTPException(status_code=404, detail="customer not found")
    return {"data": {"type": "individualCustomer", "id": customer_id, "attributes": CUSTOMERS[customer_id]}}
