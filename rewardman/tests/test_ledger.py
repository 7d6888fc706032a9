"""Tests for the balance ledger."""

import random
import threading
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from rewardman.exceptions import RewardmanError
from rewardman.models import Account, Direction, LedgerEntry
from rewardman.services.ledger import (
    MAX_POINTS,
    BalanceLedger,
    parse_amount,
    points_from_raw,
)
from rewardman.signals import points_credited, points_debited


pytestmark = pytest.mark.django_db


# ═══════════════════════════════════════════════════════════════════
# Amount parsing
# ═══════════════════════════════════════════════════════════════════


class TestParseAmount:
    @pytest.mark.parametrize("value", [0, -1, "0", "-0.5", "abc", None, True, "NaN", "Infinity"])
    def test_invalid(self, value):
        with pytest.raises(RewardmanError) as exc:
            parse_amount(value)
        assert exc.value.code == "INVALID_AMOUNT"

    def test_fractional(self):
        assert parse_amount("0.4") == Decimal("0.4000")
        assert parse_amount(12.5) == Decimal("12.5")

    def test_points_from_raw_divides(self):
        assert points_from_raw(100) == Decimal("4")
        assert points_from_raw(10) == Decimal("0.4")

    def test_points_from_raw_divisor_setting(self, settings):
        settings.REWARDMAN = {"POINT_CONVERSION_DIVISOR": 10}
        assert points_from_raw(55) == Decimal("5.5")

    @pytest.mark.parametrize("value", ["10000000000", "9999999999.99995", "1e30"])
    def test_beyond_column_size(self, value):
        with pytest.raises(RewardmanError, match="INVALID_AMOUNT"):
            parse_amount(value)

    def test_largest_storable(self):
        assert parse_amount(MAX_POINTS) == MAX_POINTS


# ═══════════════════════════════════════════════════════════════════
# Credit / debit
# ═══════════════════════════════════════════════════════════════════


class TestCredit:
    def test_credit_updates_balance_and_logs(self, account):
        entry = BalanceLedger.credit("U1", "2.5", actor="E1", note="Lunch")

        account.refresh_from_db()
        assert account.balance == Decimal("102.5")
        assert entry.direction == Direction.CREDIT
        assert entry.amount == Decimal("2.5")
        assert entry.balance_after == Decimal("102.5")
        assert entry.account_handle == "U1"
        assert entry.actor == "E1"

    def test_credit_zero_rejected(self, account):
        with pytest.raises(RewardmanError, match="INVALID_AMOUNT"):
            BalanceLedger.credit("U1", 0, actor="E1", note="nothing")
        assert LedgerEntry.objects.filter(account_handle="U1").count() == 1

    def test_credit_unknown_account(self, db):
        with pytest.raises(RewardmanError) as exc:
            BalanceLedger.credit("NOPE", 5, actor="E1", note="x")
        assert exc.value.code == "ACCOUNT_NOT_FOUND"

    def test_credit_inactive_account(self, account):
        Account.objects.filter(pk=account.pk).update(is_active=False)
        with pytest.raises(RewardmanError, match="ACCOUNT_NOT_FOUND"):
            BalanceLedger.credit("U1", 5, actor="E1", note="x")

    def test_credit_past_max_balance_rejected(self, account):
        with pytest.raises(RewardmanError) as exc:
            BalanceLedger.credit("U1", MAX_POINTS - 50, actor="E1", note="x")

        assert exc.value.code == "INVALID_AMOUNT"
        assert BalanceLedger.get_balance("U1") == Decimal("100")
        assert LedgerEntry.objects.filter(account_handle="U1").count() == 1

    def test_credit_up_to_max_balance(self, account):
        BalanceLedger.credit("U1", MAX_POINTS - 100, actor="E1", note="x")
        assert BalanceLedger.get_balance("U1") == MAX_POINTS

    def test_signal_sent_on_commit(self, account, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, account, entry, **kwargs):
            received.append(entry)

        points_credited.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                entry = BalanceLedger.credit("U1", 1, actor="E1", note="x")
        finally:
            points_credited.disconnect(receiver)

        assert received == [entry]


class TestDebit:
    def test_debit_updates_balance_and_logs(self, account):
        entry = BalanceLedger.debit("U1", 40, actor="SYSTEM", note="Coupon")

        account.refresh_from_db()
        assert account.balance == Decimal("60")
        assert entry.direction == Direction.DEBIT
        assert entry.signed_amount == Decimal("-40")
        assert entry.balance_after == Decimal("60")

    def test_debit_entire_balance(self, account):
        BalanceLedger.debit("U1", 100, actor="SYSTEM", note="All in")
        assert BalanceLedger.get_balance("U1") == Decimal("0")

    def test_insufficient_balance_leaves_state(self, account):
        with pytest.raises(RewardmanError) as exc:
            BalanceLedger.debit("U1", "100.0001", actor="SYSTEM", note="Too much")

        assert exc.value.code == "INSUFFICIENT_BALANCE"
        assert Decimal(exc.value.data["available"]) == Decimal("100")
        assert BalanceLedger.get_balance("U1") == Decimal("100")
        assert not LedgerEntry.objects.filter(direction=Direction.DEBIT).exists()

    def test_negative_debit_rejected(self, account):
        with pytest.raises(RewardmanError, match="INVALID_AMOUNT"):
            BalanceLedger.debit("U1", -5, actor="SYSTEM", note="x")

    def test_signal_sent_on_commit(self, account, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, entry, **kwargs):
            received.append(entry.amount)

        points_debited.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                BalanceLedger.debit("U1", 10, actor="SYSTEM", note="x")
        finally:
            points_debited.disconnect(receiver)

        assert received == [Decimal("10")]


class TestBalanceNeverNegative:
    """Random interleavings of credits and debits keep balance >= 0."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_random_interleaving(self, empty_account, seed):
        rng = random.Random(seed)
        expected = Decimal("0")

        for _ in range(60):
            amount = Decimal(rng.randint(1, 4000)) / Decimal(100)
            if rng.random() < 0.5:
                BalanceLedger.credit("U2", amount, actor="E1", note="earn")
                expected += amount
            elif amount > expected:
                with pytest.raises(RewardmanError, match="INSUFFICIENT_BALANCE"):
                    BalanceLedger.debit("U2", amount, actor="SYSTEM", note="spend")
            else:
                BalanceLedger.debit("U2", amount, actor="SYSTEM", note="spend")
                expected -= amount

            balance = BalanceLedger.get_balance("U2")
            assert balance >= 0
            assert balance == expected

        # Every committed mutation has exactly one entry
        history = BalanceLedger.history("U2", limit=1000)
        assert history.total_points == expected


class TestConcurrentDebits:
    """Two debits of 60 against a balance of 100: exactly one succeeds."""

    def test_sequential(self, account):
        BalanceLedger.debit("U1", 60, actor="SYSTEM", note="first")
        with pytest.raises(RewardmanError, match="INSUFFICIENT_BALANCE"):
            BalanceLedger.debit("U1", 60, actor="SYSTEM", note="second")
        assert BalanceLedger.get_balance("U1") == Decimal("40")

    @pytest.mark.django_db(transaction=True)
    def test_threads(self):
        Account.objects.create(handle="U9", external_id="line-u9")
        BalanceLedger.credit("U9", 100, actor="SEED", note="Opening balance")

        barrier = threading.Barrier(2)
        outcomes = []

        def spend():
            from django.db import connection as thread_connection

            try:
                barrier.wait()
                BalanceLedger.debit("U9", 60, actor="SYSTEM", note="race")
                outcomes.append("ok")
            except RewardmanError as e:
                outcomes.append(e.code)
            finally:
                thread_connection.close()

        threads = [threading.Thread(target=spend) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["INSUFFICIENT_BALANCE", "ok"]
        assert BalanceLedger.get_balance("U9") == Decimal("40")


# ═══════════════════════════════════════════════════════════════════
# History
# ═══════════════════════════════════════════════════════════════════


class TestHistory:
    def test_pagination(self, account):
        for i in range(4):
            BalanceLedger.credit("U1", 1, actor="E1", note=f"visit {i}")

        page = BalanceLedger.history("U1", page=2, limit=2)

        assert page.total == 5
        assert page.total_pages == 3
        assert len(page.entries) == 2
        assert page.has_next is True
        assert page.has_prev is True
        assert page.total_points == Decimal("104")

    def test_newest_first(self, account):
        BalanceLedger.credit("U1", 1, actor="E1", note="latest")
        page = BalanceLedger.history("U1")
        assert page.entries[0].description == "latest"

    def test_period_filter(self, account):
        future = timezone.now() + timedelta(days=1)
        assert BalanceLedger.history("U1", start=future).total == 0
        assert BalanceLedger.history("U1", end=future).total == 1

    def test_non_positive_limit_clamped(self, account):
        BalanceLedger.credit("U1", 1, actor="E1", note="visit")
        page = BalanceLedger.history("U1", limit=-5)
        assert page.limit == 1
        assert len(page.entries) == 1
        assert page.total_pages == 2

    def test_net_points_subtract_debits(self, account):
        BalanceLedger.debit("U1", 30, actor="SYSTEM", note="spend")
        assert BalanceLedger.history("U1").total_points == Decimal("70")

    def test_summary_across_accounts(self, account, empty_account):
        BalanceLedger.credit("U2", 5, actor="E1", note="earn")
        summary = BalanceLedger.summary()
        assert summary.total_records == 2
        assert summary.total_points == Decimal("105")
