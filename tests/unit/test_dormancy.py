"""Unit tests for dormancy evaluation"""

import pytest
from datetime import timedelta
from closure_watch.domain.dormancy import DormancyEvaluator, find_negative_since
from closure_watch.domain.exceptions import UpstreamError
from closure_watch.domain.models import Account, DormancySource, Transaction


def _txn(account_id, amount_cents, created_at, n=0):
    return Transaction(f"txn_{n}", account_id, amount_cents, created_at)


async def test_latest_transaction_sixty_days_ago(fake_ledger, now):
    """Test latest transaction sixty days ago"""
    account = fake_ledger.add_account("acc_1", -500, inactive_days=60)

    result = await DormancyEvaluator(fake_ledger).evaluate(account, now)

    assert result.days_inactive == 60
    assert result.inactive_since == now - timedelta(days=60)
    assert result.source is DormancySource.LATEST_TRANSACTION


async def test_no_transactions_ever_is_skipped(fake_ledger, now):
    """Test no transactions ever is skipped"""
    account = fake_ledger.add_account("acc_1", -500)

    assert await DormancyEvaluator(fake_ledger).evaluate(account, now) is None


async def test_non_negative_balance_is_skipped_without_upstream_calls(fake_ledger, now):
    """Test non-negative balance is skipped without upstream calls"""
    account = fake_ledger.add_account("acc_1", 100, inactive_days=90)

    assert await DormancyEvaluator(fake_ledger).evaluate(account, now) is None
    assert fake_ledger.evaluated_accounts == []


async def test_evaluation_is_deterministic(fake_ledger, now):
    """Test evaluation is deterministic"""
    account = fake_ledger.add_account("acc_1", -500, inactive_days=73)
    evaluator = DormancyEvaluator(fake_ledger)

    first = await evaluator.evaluate(account, now)
    second = await evaluator.evaluate(account, now)

    assert first == second


async def test_reconstructs_crossing_when_latest_lookup_fails(fake_ledger, now):
    """Test reconstructs crossing when latest lookup fails"""
    account = fake_ledger.add_account("acc_1", -1000)
    fake_ledger.failing_latest.add("acc_1")
    crossed_at = now - timedelta(days=55)
    fake_ledger.transactions["acc_1"] = [
        _txn("acc_1", -300, now - timedelta(days=20), 1),  # running -700
        _txn("acc_1", -900, crossed_at, 2),  # running +200 -> crossing
        _txn("acc_1", 5000, now - timedelta(days=80), 3),
    ]

    result = await DormancyEvaluator(fake_ledger).evaluate(account, now)

    assert result.inactive_since == crossed_at
    assert result.days_inactive == 55
    assert result.source is DormancySource.BALANCE_RECONSTRUCTION


async def test_falls_back_when_history_has_no_crossing(fake_ledger, now):
    """Test falls back when history has no crossing"""
    account = fake_ledger.add_account("acc_1", -10000)
    fake_ledger.failing_latest.add("acc_1")
    fake_ledger.transactions["acc_1"] = [_txn("acc_1", -200, now - timedelta(days=90))]

    result = await DormancyEvaluator(fake_ledger, fallback_days=7).evaluate(account, now)

    assert result.days_inactive == 7
    assert result.inactive_since == now - timedelta(days=7)
    assert result.source is DormancySource.FALLBACK


async def test_empty_history_after_failed_lookup_is_skipped(fake_ledger, now):
    """Test empty history after failed lookup is skipped"""
    account = fake_ledger.add_account("acc_1", -500)
    fake_ledger.failing_latest.add("acc_1")

    assert await DormancyEvaluator(fake_ledger).evaluate(account, now) is None


async def test_both_signals_failing_raises(fake_ledger, now):
    """Test both signals failing raises"""
    account = fake_ledger.add_account("acc_1", -500)
    fake_ledger.failing_latest.add("acc_1")
    fake_ledger.failing_history.add("acc_1")

    with pytest.raises(UpstreamError):
        await DormancyEvaluator(fake_ledger).evaluate(account, now)


def test_find_negative_since_first_crossing_wins(now):
    """Test find negative since first crossing wins"""
    newest = now - timedelta(days=1)
    older = now - timedelta(days=2)
    transactions = [
        _txn("acc_1", -600, newest, 1),  # -100 + 600 = 500 >= 0
        _txn("acc_1", -50, older, 2),
    ]

    assert find_negative_since(-100, transactions) == newest


def test_find_negative_since_exact_zero_counts_as_crossing(now):
    """Test find negative since exact zero counts as crossing"""
    crossed = now - timedelta(days=3)
    assert find_negative_since(-250, [_txn("acc_1", -250, crossed)]) == crossed


def test_find_negative_since_ignores_non_negative_balance(now):
    """Test find negative since ignores non-negative balance"""
    assert find_negative_since(0, [_txn("acc_1", -250, now)]) is None


def test_account_is_unchanged_by_evaluation():
    """Test account is unchanged by evaluation"""
    account = Account("acc_1", -500, "Open", "cust_1")
    with pytest.raises(AttributeError):
        account.balance_cents = 0
