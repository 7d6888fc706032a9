"""Coupon lifecycle - issuance, redemption, expiry and deletion.

Expiry is derived: a coupon with valid=True and expires_at < now is expired
for every read and redemption path, without a stored state change. Expired
coupons leave storage through delete() or purge_expired().
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from rewardman.conf import rewardman_settings
from rewardman.exceptions import RewardmanError
from rewardman.models import Coupon, CouponUsage, RedemptionRecord
from rewardman.services import employees
from rewardman.services.codes import CodeGenerator
from rewardman.services.ledger import BalanceLedger, parse_amount
from rewardman.signals import coupon_issued, coupon_redeemed

logger = logging.getLogger(__name__)

USED_STATUS_LABEL = "used"


@dataclass
class CouponListing:
    """Valid coupons of one account, split by expiry."""

    valid: list[Coupon] = field(default_factory=list)
    expired: list[Coupon] = field(default_factory=list)


class CouponLifecycle:
    """
    Service for coupon state transitions.

    Uses @classmethod for extensibility (consistent with other services).
    Every transition runs inside transaction.atomic().
    """

    @classmethod
    def issue(
        cls,
        account_handle: str,
        reward_id: str,
        reward_name: str,
        point_cost,
        image_ref: str = "",
    ) -> Coupon:
        """
        Exchange points for a new coupon.

        Debit, code generation and insert share one transaction: if any step
        fails, the debit is rolled back.

        Args:
            account_handle: Account handle
            reward_id: Reward (menu item) identifier
            reward_name: Reward display name
            point_cost: Points to spend (must be positive)
            image_ref: Reward image reference

        Returns:
            Created Coupon (valid, expiring after COUPON_VALIDITY_DAYS)

        Raises:
            RewardmanError: INVALID_AMOUNT, ACCOUNT_NOT_FOUND,
                INSUFFICIENT_BALANCE, GENERATION_EXHAUSTED
        """
        cost = parse_amount(point_cost)

        with transaction.atomic():
            BalanceLedger.debit(
                account_handle,
                cost,
                actor=rewardman_settings.SYSTEM_ACTOR,
                actor_name=rewardman_settings.SYSTEM_ACTOR_NAME,
                note=f"Coupon exchange: {reward_name}",
            )

            issued_at = timezone.now()
            coupon = Coupon.objects.create(
                account_handle=account_handle,
                reward_id=reward_id,
                reward_name=reward_name,
                title=f"Coupon for {reward_name}",
                image_ref=image_ref,
                point_cost=cost,
                code=CodeGenerator.coupon_code(),
                issued_at=issued_at,
                expires_at=issued_at + timedelta(days=rewardman_settings.COUPON_VALIDITY_DAYS),
            )
            transaction.on_commit(lambda: coupon_issued.send(sender=Coupon, coupon=coupon))

        logger.info(
            "Issued coupon %s to %s for %s (%s pts)",
            coupon.code,
            account_handle,
            reward_name,
            cost,
        )
        return coupon

    @classmethod
    def redeem_by_code(cls, code: str, staff_actor: str) -> RedemptionRecord:
        """
        Mark a coupon used at the point of sale.

        The coupon row is locked; the valid flag flip, the usage history row
        and the receipt are written in one transaction.

        Args:
            code: Coupon code presented by the customer
            staff_actor: Code of the redeeming employee

        Returns:
            Created RedemptionRecord

        Raises:
            RewardmanError: COUPON_NOT_FOUND, ALREADY_USED, EXPIRED,
                EMPLOYEE_NOT_FOUND
        """
        code = (code or "").strip().upper()

        with transaction.atomic():
            try:
                coupon = Coupon.objects.select_for_update().get(code=code)
            except Coupon.DoesNotExist:
                raise RewardmanError("COUPON_NOT_FOUND", code=code)

            if not coupon.valid:
                raise RewardmanError("ALREADY_USED", code=code)
            if coupon.is_expired():
                raise RewardmanError(
                    "EXPIRED", code=code, expires_at=coupon.expires_at.isoformat()
                )

            employee = employees.get(staff_actor)
            if employee is None:
                raise RewardmanError("EMPLOYEE_NOT_FOUND", staff_actor=staff_actor)

            coupon.valid = False
            coupon.save(update_fields=["valid"])

            CouponUsage.objects.create(
                coupon_id=coupon.id,
                staff_actor=employee.code,
                account_handle=coupon.account_handle,
                reward_name=coupon.reward_name,
                unit=coupon.unit,
                description=f"Coupon used by employee {employee.code}",
            )
            record = RedemptionRecord.objects.create(
                coupon_id=coupon.id,
                code=coupon.code,
                staff_actor=employee.code,
                staff_name=employee.name,
                account_handle=coupon.account_handle,
                reward_name=coupon.reward_name,
                point_cost=coupon.point_cost,
                unit=coupon.unit,
                status_label=USED_STATUS_LABEL,
            )
            transaction.on_commit(
                lambda: coupon_redeemed.send(sender=Coupon, coupon=coupon, record=record)
            )

        logger.info("Redeemed coupon %s by %s", coupon.code, employee.code)
        return record

    @classmethod
    def list_for_account(cls, account_handle: str, now: datetime | None = None) -> CouponListing:
        """
        Split the account's valid coupons into redeemable and expired.

        Read-only: expired coupons keep valid=True in storage.
        """
        now = now or timezone.now()
        listing = CouponListing()
        for coupon in Coupon.objects.filter(account_handle=account_handle, valid=True):
            if coupon.is_expired(now):
                listing.expired.append(coupon)
            else:
                listing.valid.append(coupon)
        return listing

    @classmethod
    def delete(cls, coupon_id) -> None:
        """
        Delete an expired coupon.

        Raises:
            RewardmanError: COUPON_NOT_FOUND, NOT_EXPIRED
        """
        with transaction.atomic():
            try:
                coupon = Coupon.objects.select_for_update().get(pk=coupon_id)
            except (Coupon.DoesNotExist, ValidationError):
                raise RewardmanError("COUPON_NOT_FOUND", coupon_id=str(coupon_id))

            if coupon.expires_at > timezone.now():
                raise RewardmanError(
                    "NOT_EXPIRED",
                    coupon_id=str(coupon_id),
                    expires_at=coupon.expires_at.isoformat(),
                )
            coupon.delete()

        logger.info("Deleted expired coupon %s (%s)", coupon.code, coupon_id)

    @classmethod
    def purge_expired(cls, now: datetime | None = None) -> int:
        """Delete every expired coupon. Returns the number deleted."""
        now = now or timezone.now()
        deleted, _ = Coupon.objects.filter(expires_at__lte=now).delete()
        if deleted:
            logger.info("Purged %d expired coupons", deleted)
        return deleted

    @classmethod
    def usage_history(cls, limit: int = 50) -> list[CouponUsage]:
        """Coupon usage log across all accounts (most recent first)."""
        return list(CouponUsage.objects.all()[:limit])

    @classmethod
    def receipts_for_account(cls, account_handle: str) -> list[RedemptionRecord]:
        """Redemption receipts of one account (most recent first)."""
        return list(RedemptionRecord.objects.filter(account_handle=account_handle))
