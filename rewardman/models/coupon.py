"""Coupon models - vouchers, usage history and redemption receipts.

Lifecycle:
    valid=True, expires_at >= now   -> redeemable
    valid=True, expires_at < now    -> expired (derived at read time, not stored)
    valid=False                     -> used (terminal, never back to True)

Coupon, CouponUsage and RedemptionRecord reference the account by handle only,
so history survives changes to the account row.
"""

import uuid as uuid_lib

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from rewardman.models.base import AppendOnlyModel


class Coupon(models.Model):
    """One point-for-reward exchange."""

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)
    account_handle = models.CharField(_("account"), max_length=32, db_index=True)

    # Reward snapshot at exchange time
    reward_id = models.CharField(_("reward id"), max_length=50)
    reward_name = models.CharField(_("reward name"), max_length=150)
    title = models.CharField(_("title"), max_length=200)
    image_ref = models.CharField(_("image"), max_length=500, blank=True)
    point_cost = models.DecimalField(_("point cost"), max_digits=14, decimal_places=4)
    unit = models.PositiveIntegerField(_("unit"), default=1)

    code = models.CharField(
        _("code"),
        max_length=20,
        unique=True,
        help_text=_("Code presented at the point of sale"),
    )
    issued_at = models.DateTimeField(_("issued at"), default=timezone.now)
    expires_at = models.DateTimeField(_("expires at"), db_index=True)
    valid = models.BooleanField(_("valid"), default=True)

    class Meta:
        db_table = "rewardman_coupon"
        verbose_name = _("coupon")
        verbose_name_plural = _("coupons")
        ordering = ["-issued_at"]
        indexes = [
            models.Index(
                fields=["account_handle", "valid"],
                name="rewardman_coupon_acct_idx",
            ),
        ]

    def __str__(self):
        return f"{self.code} ({self.reward_name})"

    def is_expired(self, now=None) -> bool:
        """True once ``expires_at`` has passed."""
        return self.expires_at < (now or timezone.now())

    def save(self, *args, **kwargs):
        # A used coupon never becomes valid again
        if not self._state.adding and self.valid:
            if Coupon.objects.filter(pk=self.pk, valid=False).exists():
                from rewardman.exceptions import RewardmanError

                raise RewardmanError("IMMUTABLE_RECORD", model="Coupon", pk=str(self.pk))
        super().save(*args, **kwargs)


class CouponUsage(AppendOnlyModel):
    """Usage history row written when staff redeem a coupon."""

    coupon_id = models.UUIDField(_("coupon"), db_index=True)
    staff_actor = models.CharField(_("staff"), max_length=50)
    account_handle = models.CharField(_("account"), max_length=32, db_index=True)
    reward_name = models.CharField(_("reward name"), max_length=150)
    unit = models.PositiveIntegerField(_("unit"), default=1)
    description = models.CharField(_("description"), max_length=255)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "rewardman_coupon_usage"
        verbose_name = _("coupon usage")
        verbose_name_plural = _("coupon usages")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.reward_name} by {self.staff_actor}"


class RedemptionRecord(AppendOnlyModel):
    """
    Receipt for a redeemed coupon.

    Snapshots the reward and staff data at redemption time. Written in the
    same transaction that flips Coupon.valid, so a used coupon always has
    exactly one receipt.
    """

    coupon_id = models.UUIDField(_("coupon"), unique=True)
    code = models.CharField(_("code"), max_length=20)
    staff_actor = models.CharField(_("staff"), max_length=50)
    staff_name = models.CharField(_("staff name"), max_length=150, blank=True)
    account_handle = models.CharField(_("account"), max_length=32, db_index=True)
    reward_name = models.CharField(_("reward name"), max_length=150)
    point_cost = models.DecimalField(_("point cost"), max_digits=14, decimal_places=4)
    unit = models.PositiveIntegerField(_("unit"), default=1)
    status_label = models.CharField(_("status"), max_length=30, default="used")
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "rewardman_redemption_record"
        verbose_name = _("redemption record")
        verbose_name_plural = _("redemption records")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.code}: {self.reward_name} ({self.status_label})"
