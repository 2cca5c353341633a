"""Ledger API HTTP client (JSON:API) for accounts, transactions and customers"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from closure_watch.config import settings
from closure_watch.domain.exceptions import ConfigurationError, UpstreamError, UpstreamProtocolError
from closure_watch.domain.models import Account, Customer, Transaction
from closure_watch.infrastructure.observability.metrics import ledger_request_failures_counter
from closure_watch.utils.date_utils import parse_timestamp
from closure_watch.utils.money_utils import parse_cents

logger = logging.getLogger(__name__)

JSON_API_CONTENT_TYPE = "application/vnd.api+json"


class LedgerClient:
    """Client for the upstream ledger API"""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.ledger_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self._token = token or settings.ledger_api_token
        self._transport = transport

        if not self._token:
            raise ConfigurationError("LEDGER_API_TOKEN environment variable is required")

    def __repr__(self) -> str:
        return f"LedgerClient(base_url={self.base_url!r})"

    async def list_accounts_sorted_by_balance(self, page_size: int, offset: int) -> List[Account]:
        """Fetch one page of accounts, ascending by balance"""
        payload = await self._get(
            "/accounts",
            params={"page[limit]": page_size, "page[offset]": offset, "sort": "balance"},
            operation="list_accounts",
        )
        return [_parse_account(resource) for resource in _data_list(payload)]

    async def list_recent_transactions(self, account_id: str, limit: int) -> List[Transaction]:
        """Fetch the newest transactions for an account, newest first"""
        payload = await self._get(
            "/transactions",
            params={"filter[accountId]": account_id, "page[limit]": limit, "sort": "-createdAt"},
            operation="list_transactions",
        )
        return [_parse_transaction(resource, account_id) for resource in _data_list(payload)]

    async def get_latest_transaction_timestamp(self, account_id: str) -> Optional[datetime]:
        """Timestamp of the newest transaction, or None if the account has none"""
        payload = await self._get(
            "/transactions",
            params={"filter[accountId]": account_id, "page[limit]": 1, "sort": "-createdAt"},
            operation="latest_transaction",
        )
        data = _data_list(payload)
        if not data:
            return None
        return _parse_transaction(data[0], account_id).created_at

    async def get_customer(self, customer_id: str) -> Customer:
        """
        Fetch a customer by id.

        Raises:
            UpstreamError: If the customer does not exist (404) or the call fails
        """
        payload = await self._get(f"/customers/{customer_id}", operation="get_customer")
        resource = payload.get("data")
        if not isinstance(resource, dict):
            raise UpstreamProtocolError(f"Customer {customer_id} response has no data object")
        return _parse_customer(resource)

    async def _get(self, path: str, params: Dict[str, Any] | None = None, operation: str = "request") -> Dict[str, Any]:
        """
        Issue an authenticated GET and decode the JSON body.

        Raises:
            UpstreamError: On timeout, network failure, or non-2xx status
            UpstreamProtocolError: On an empty, non-JSON, or non-object body
        """
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": JSON_API_CONTENT_TYPE,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params, headers=headers)
                response.raise_for_status()
            except httpx.TimeoutException as e:
                ledger_request_failures_counter.labels(operation=operation).inc()
                raise UpstreamError(f"Ledger API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                ledger_request_failures_counter.labels(operation=operation).inc()
                status = e.response.status_code
                logger.error(
                    f"Ledger API error ({status})",
                    extra={"path": path, "status_code": status, "body": e.response.text[:500]},
                )
                raise UpstreamError(f"Ledger API error ({status})", status_code=status) from e
            except httpx.RequestError as e:
                ledger_request_failures_counter.labels(operation=operation).inc()
                raise UpstreamError(f"Ledger API unreachable: {e}") from e

        if not response.text.strip():
            raise UpstreamProtocolError("Empty response from ledger API")
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamProtocolError(f"Invalid JSON response from ledger API: {e}") from e
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("Ledger API response is not a JSON object")
        return payload


def _data_list(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    data = payload.get("data", [])
    if data is None:
        return []
    if not isinstance(data, list):
        raise UpstreamProtocolError("Expected a list under 'data'")
    return data


def _relationship_id(resource: Dict[str, Any], name: str) -> Optional[str]:
    relationship = (resource.get("relationships") or {}).get(name) or {}
    data = relationship.get("data")
    if isinstance(data, list):
        data = data[0] if data else None
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    return None


def _parse_account(resource: Dict[str, Any]) -> Account:
    try:
        attributes = resource["attributes"]
        return Account(
            account_id=str(resource["id"]),
            balance_cents=parse_cents(attributes.get("balance", 0)),
            status=str(attributes.get("status", "Unknown")),
            customer_id=_relationship_id(resource, "customer") or _relationship_id(resource, "customers"),
        )
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise UpstreamProtocolError(f"Invalid account data from ledger: {e}") from e


def _parse_transaction(resource: Dict[str, Any], account_id: str) -> Transaction:
    try:
        attributes = resource["attributes"]
        amount = abs(parse_cents(attributes["amount"]))
        # Amounts are unsigned upstream; direction carries the sign
        if str(attributes.get("direction", "Credit")).lower() == "debit":
            amount = -amount
        return Transaction(
            transaction_id=str(resource["id"]),
            account_id=_relationship_id(resource, "account") or account_id,
            amount_cents=amount,
            created_at=parse_timestamp(attributes["createdAt"]),
        )
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise UpstreamProtocolError(f"Invalid transaction data from ledger: {e}") from e


def _parse_customer(resource: Dict[str, Any]) -> Customer:
    try:
        attributes = resource.get("attributes") or {}
        full_name = attributes.get("fullName") or {}
        first = attributes.get("firstName") or full_name.get("first") or ""
        last = attributes.get("lastName") or full_name.get("last") or ""
        if not first and not last:
            # business customers carry a single name
            first = attributes.get("name") or ""
        return Customer(customer_id=str(resource["id"]), first_name=str(first), last_name=str(last))
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise UpstreamProtocolError(f"Invalid customer data from ledger: {e}") from e
