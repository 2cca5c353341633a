"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Request
from closure_watch.config import settings
from closure_watch.domain.models import ScanPolicy
from closure_watch.infrastructure.clients.ledger import LedgerClient
from closure_watch.infrastructure.clients.webhook import WebhookNotifier


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_client() -> LedgerClient:
    """
    Provide Ledger API client instance.

    Raises ConfigurationError when no token is configured; the registered
    error handler turns it into a failure response.
    """
    return LedgerClient()


def get_notifier() -> Optional[WebhookNotifier]:
    """Provide the alert webhook notifier, if a webhook is configured"""
    if not settings.slack_webhook_url:
        return None
    return WebhookNotifier(settings.slack_webhook_url)


def get_scan_policy() -> ScanPolicy:
    return settings.scan_policy()
