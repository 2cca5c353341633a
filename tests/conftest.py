"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from closure_watch.api.dependencies import get_ledger_client, get_notifier
from closure_watch.api.main import create_app
from closure_watch.domain.exceptions import UpstreamError
from closure_watch.domain.models import Account, Customer, ScanResult, Transaction
from closure_watch.infrastructure.database.models import Base
from closure_watch.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeLedger:
    """In-memory ledger honouring the LedgerGateway contract"""

    def __init__(self, now: datetime = NOW):
        self.now = now
        self.accounts: List[Account] = []
        self.latest: Dict[str, Optional[datetime]] = {}
        self.transactions: Dict[str, List[Transaction]] = {}
        self.customers: Dict[str, Customer] = {}
        self.failing_latest: set = set()
        self.failing_history: set = set()
        self.page_error: Optional[Exception] = None
        self.page_requests: List[tuple] = []
        self.evaluated_accounts: List[str] = []
        self.customer_requests: List[str] = []

    def add_account(
        self,
        account_id: str,
        balance_cents: int,
        customer_id: Optional[str] = "cust_1",
        inactive_days: Optional[int] = None,
    ) -> Account:
        account = Account(account_id, balance_cents, "Open", customer_id)
        self.accounts.append(account)
        if inactive_days is not None:
            self.latest[account_id] = self.now - timedelta(days=inactive_days)
        return account

    def add_customer(self, customer_id: str, first_name: str = "", last_name: str = "") -> Customer:
        customer = Customer(customer_id, first_name, last_name)
        self.customers[customer_id] = customer
        return customer

    async def list_accounts_sorted_by_balance(self, page_size: int, offset: int) -> List[Account]:
        self.page_requests.append((page_size, offset))
        if self.page_error is not None:
            raise self.page_error
        ordered = sorted(self.accounts, key=lambda a: a.balance_cents)
        return ordered[offset:offset + page_size]

    async def list_recent_transactions(self, account_id: str, limit: int) -> List[Transaction]:
        if account_id in self.failing_history:
            raise UpstreamError("Ledger API error (503)", status_code=503)
        return self.transactions.get(account_id, [])[:limit]

    async def get_latest_transaction_timestamp(self, account_id: str) -> Optional[datetime]:
        self.evaluated_accounts.append(account_id)
        if account_id in self.failing_latest:
            raise UpstreamError("Ledger API error (500)", status_code=500)
        if account_id in self.latest:
            return self.latest[account_id]
        history = self.transactions.get(account_id)
        return history[0].created_at if history else None

    async def get_customer(self, customer_id: str) -> Customer:
        self.customer_requests.append(customer_id)
        if customer_id not in self.customers:
            raise UpstreamError("Ledger API error (404)", status_code=404)
        return self.customers[customer_id]


class InMemoryResultStore:
    def __init__(self):
        self.saved: List[ScanResult] = []

    def save(self, result: ScanResult) -> None:
        self.saved.append(result)


class RecordingNotifier:
    def __init__(self, error: Optional[Exception] = None):
        self.sent: List[ScanResult] = []
        self.error = error

    async def send_alert(self, result: ScanResult) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(result)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for deterministic dormancy math"""
    return NOW


@pytest.fixture
def fake_ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def result_store() -> InMemoryResultStore:
    return InMemoryResultStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, fake_ledger: FakeLedger, notifier: RecordingNotifier) -> TestClient:
    """Create FastAPI test client with test database and fake collaborators"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    # API scans use the real clock
    fake_ledger.now = datetime.now(timezone.utc)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ledger_client] = lambda: fake_ledger
    app.dependency_overrides[get_notifier] = lambda: notifier
    return TestClient(app)
