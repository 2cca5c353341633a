"""Alert webhook client with exponential backoff retry logic"""

import asyncio
from typing import Any, Dict

import httpx

from closure_watch.config import settings
from closure_watch.domain.exceptions import NotificationError
from closure_watch.domain.models import ScanResult
from closure_watch.infrastructure.observability.metrics import webhook_failure_counter, webhook_latency_histogram
from closure_watch.utils.money_utils import format_cents


def build_alert_message(result: ScanResult, threshold_days: int) -> Dict[str, Any]:
    """Slack block-kit message summarizing a scan"""
    count = result.count
    at_risk = format_cents(result.total_balance_at_risk_cents)
    message: Dict[str, Any] = {
        "text": f"Account Close Alert: {count} account(s) approaching closure",
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        f"*Account Close Alert*\n{count} account(s) have been negative for "
                        f"{threshold_days}+ days. Total balance at risk: ${at_risk}"
                    ),
                },
            },
            {"type": "divider"},
        ],
    }

    for alert in result.alerts:
        message["blocks"].append(
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        f"*{alert.customer_name}*\n"
                        f"• Customer ID: `{alert.customer_id}`\n"
                        f"• Account ID: `{alert.account_id}`\n"
                        f"• Balance: ${alert.balance}\n"
                        f"• Days Inactive: {alert.days_inactive}"
                    ),
                },
            }
        )

    return message


class WebhookNotifier:
    """Posts scan alerts to a chat webhook"""

    def __init__(
        self,
        webhook_url: str,
        threshold_days: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.threshold_days = settings.threshold_days if threshold_days is None else threshold_days
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base
        self._transport = transport

    async def send_alert(self, result: ScanResult) -> None:
        """
        Send the scan summary with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base^attempt)
        - Retries on 5xx responses and network failures
        - Client errors (4xx) fail on the first attempt
        - Tracks latency histogram and failure counter

        Raises:
            NotificationError: On a 4xx response or after the final failed attempt
        """
        payload = build_alert_message(result, self.threshold_days)
        attempt = 0
        async with httpx.AsyncClient(transport=self._transport) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=10.0,
                        )
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500:
                        raise NotificationError(f"Webhook rejected the alert: {e}") from e

                    if attempt >= self.max_retries:
                        raise NotificationError(f"Webhook delivery failed after {attempt} attempts: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
