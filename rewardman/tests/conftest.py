"""Pytest fixtures for Rewardman tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from rewardman.models import Account, Coupon, Employee
from rewardman.services.ledger import BalanceLedger


@pytest.fixture
def account(db):
    """Account U1 holding 100 points (seeded through the ledger)."""
    acc = Account.objects.create(
        handle="U1",
        external_id="line-u1",
        phone="0812345678",
        display_name="Niran",
    )
    BalanceLedger.credit("U1", 100, actor="SEED", note="Opening balance")
    acc.refresh_from_db()
    return acc


@pytest.fixture
def empty_account(db):
    """Account U2 with zero balance."""
    return Account.objects.create(
        handle="U2",
        external_id="line-u2",
        display_name="Malee",
    )


@pytest.fixture
def employee(db):
    """Staff member E1."""
    return Employee.objects.create(
        code="E1",
        first_name="Somchai",
        last_name="Dee",
    )


@pytest.fixture
def coupon(account):
    """Valid coupon for U1, created without touching the balance."""
    now = timezone.now()
    return Coupon.objects.create(
        account_handle=account.handle,
        reward_id="MENU-1",
        reward_name="Thai Tea",
        title="Coupon for Thai Tea",
        point_cost=30,
        code="TEA001",
        issued_at=now,
        expires_at=now + timedelta(days=7),
    )


@pytest.fixture
def expired_coupon(account):
    """Coupon for U1 that expired yesterday but is still flagged valid."""
    issued = timezone.now() - timedelta(days=8)
    return Coupon.objects.create(
        account_handle=account.handle,
        reward_id="MENU-2",
        reward_name="Mango Sticky Rice",
        title="Coupon for Mango Sticky Rice",
        point_cost=50,
        code="OLD001",
        issued_at=issued,
        expires_at=issued + timedelta(days=7),
    )
