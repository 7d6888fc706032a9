"""
Rewardman public API.

USE CASES:
    RedemptionService.exchange(request)          - Spend points on a coupon
    RedemptionService.redeem_at_pos(code, staff)  - Staff marks a coupon used
    RedemptionService.add_points(info, raw, staff) - Staff credits points

CONVENIENCE (helpers):
    RedemptionService.delete_coupon(coupon_id)   - Remove an expired coupon
    RedemptionService.coupons(handle)            - Valid/expired coupons

Every use case returns a result object. Domain errors never escape: they are
reported as ``ok=False`` with a stable ``error_code`` and a human ``message``.
Nothing is retried here; STORE_UNAVAILABLE is the only code worth retrying
by the caller.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import DatabaseError

from rewardman.exceptions import RewardmanError
from rewardman.models import Coupon, LedgerEntry, RedemptionRecord
from rewardman.services import accounts, employees
from rewardman.services.coupons import CouponLifecycle, CouponListing
from rewardman.services.ledger import BalanceLedger, points_from_raw

logger = logging.getLogger(__name__)


@dataclass
class ExchangeRequest:
    """Payload of a points-for-coupon exchange."""

    reward_id: str
    reward_name: str
    point_cost: str | Decimal | int | float | None
    external_id: str
    account_handle: str
    reward_image: str = ""


@dataclass
class ExchangeResult:
    ok: bool
    coupon: Coupon | None = None
    error_code: str | None = None
    message: str | None = None


@dataclass
class RedemptionResult:
    ok: bool
    record: RedemptionRecord | None = None
    error_code: str | None = None
    message: str | None = None


@dataclass
class CreditResult:
    ok: bool
    entry: LedgerEntry | None = None
    balance_before: Decimal | None = None
    error_code: str | None = None
    message: str | None = None


@dataclass
class DeletionResult:
    ok: bool
    error_code: str | None = None
    message: str | None = None


class RedemptionService:
    """
    Rewardman public API.

    Uses @classmethod for extensibility (consistent with other services).

    Each use case is one round-trip: the lower services open a single
    atomic block, so a reported error always means nothing was written.
    """

    # ======================================================================
    # USE CASES
    # ======================================================================

    @classmethod
    def exchange(cls, request: ExchangeRequest) -> ExchangeResult:
        """
        Exchange points for a coupon.

        Requires reward_id, reward_name, point_cost, external_id and
        account_handle; handle and external id must name the same account.
        """
        missing = [
            name
            for name in ("reward_id", "reward_name", "point_cost", "external_id", "account_handle")
            if getattr(request, name) in (None, "")
        ]
        if missing:
            return cls._failure(ExchangeResult, RewardmanError("MISSING_FIELDS", fields=missing))

        try:
            account = accounts.get(accounts.IdentifierKind.HANDLE, request.account_handle)
            if account.external_id != request.external_id:
                raise RewardmanError(
                    "ACCOUNT_NOT_FOUND",
                    account_handle=request.account_handle,
                    external_id=request.external_id,
                )
            coupon = CouponLifecycle.issue(
                account.handle,
                reward_id=request.reward_id,
                reward_name=request.reward_name,
                point_cost=request.point_cost,
                image_ref=request.reward_image,
            )
        except RewardmanError as e:
            return cls._failure(ExchangeResult, e)
        except DatabaseError:
            return cls._store_failure(ExchangeResult, "exchange")

        return ExchangeResult(ok=True, coupon=coupon)

    @classmethod
    def redeem_at_pos(cls, code: str, staff_actor: str | None) -> RedemptionResult:
        """Redeem a coupon code on behalf of an authenticated employee."""
        if not code or not staff_actor:
            return cls._failure(
                RedemptionResult,
                RewardmanError(
                    "MISSING_FIELDS",
                    message="Coupon code and staff actor are required",
                ),
            )

        try:
            record = CouponLifecycle.redeem_by_code(code, staff_actor)
        except RewardmanError as e:
            return cls._failure(RedemptionResult, e)
        except DatabaseError:
            return cls._store_failure(RedemptionResult, "redeem_at_pos")

        return RedemptionResult(ok=True, record=record)

    @classmethod
    def add_points(
        cls,
        customer_info: str,
        raw_amount,
        staff_actor: str | None,
        note: str = "",
    ) -> CreditResult:
        """
        Credit points converted from raw staff input.

        ``customer_info`` may be a handle, an external id or a phone number.
        """
        if not customer_info or not staff_actor:
            return cls._failure(
                CreditResult,
                RewardmanError(
                    "MISSING_FIELDS",
                    message="Customer identifier and staff actor are required",
                ),
            )

        try:
            employee = employees.get(staff_actor)
            if employee is None:
                raise RewardmanError("EMPLOYEE_NOT_FOUND", staff_actor=staff_actor)

            points = points_from_raw(raw_amount)
            account, kind = accounts.resolve(customer_info)
            entry = BalanceLedger.credit(
                account.handle,
                points,
                actor=employee.code,
                actor_name=employee.name,
                note=note or "Points added by staff",
                lookup_input=customer_info,
                lookup_kind=kind.value,
            )
        except RewardmanError as e:
            return cls._failure(CreditResult, e)
        except DatabaseError:
            return cls._store_failure(CreditResult, "add_points")

        return CreditResult(
            ok=True,
            entry=entry,
            balance_before=entry.balance_after - entry.amount,
        )

    # ======================================================================
    # CONVENIENCE
    # ======================================================================

    @classmethod
    def delete_coupon(cls, coupon_id) -> DeletionResult:
        """Delete a coupon; only expired coupons can be deleted."""
        try:
            CouponLifecycle.delete(coupon_id)
        except RewardmanError as e:
            return cls._failure(DeletionResult, e)
        except DatabaseError:
            return cls._store_failure(DeletionResult, "delete_coupon")
        return DeletionResult(ok=True)

    @classmethod
    def coupons(cls, account_handle: str) -> CouponListing:
        """Valid coupons of an account split into redeemable and expired."""
        return CouponLifecycle.list_for_account(account_handle)

    # ======================================================================
    # INTERNAL
    # ======================================================================

    @classmethod
    def _failure(cls, result_cls, error: RewardmanError):
        logger.warning("%s: %s %s", result_cls.__name__, error.code, error.data)
        return result_cls(ok=False, error_code=error.code, message=error.message)

    @classmethod
    def _store_failure(cls, result_cls, operation: str):
        logger.exception("Store failure during %s", operation)
        error = RewardmanError("STORE_UNAVAILABLE", operation=operation)
        return result_cls(ok=False, error_code=error.code, message=error.message)
