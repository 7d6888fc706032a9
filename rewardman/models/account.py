"""Account model - customer loyalty profile and point balance."""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Account(models.Model):
    """
    Customer loyalty account.

    ``handle`` is the public identifier printed on member cards and used as the
    weak reference from coupons, ledger entries and receipts. ``external_id``
    is the identifier of the login provider (e.g. a LINE user id).

    ``balance`` is owned by the ledger: only BalanceLedger.credit/debit
    write it, always together with a LedgerEntry.
    """

    handle = models.CharField(
        _("handle"),
        max_length=32,
        unique=True,
        help_text=_("Public account handle (uid)"),
    )
    external_id = models.CharField(
        _("external id"),
        max_length=100,
        unique=True,
        help_text=_("Login provider identifier"),
    )
    phone = models.CharField(_("phone"), max_length=20, blank=True, db_index=True)
    display_name = models.CharField(_("display name"), max_length=150, blank=True)
    picture_url = models.URLField(_("picture"), max_length=500, blank=True)

    balance = models.DecimalField(
        _("point balance"),
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
    )

    is_active = models.BooleanField(_("active"), default=True, db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "rewardman_account"
        verbose_name = _("account")
        verbose_name_plural = _("accounts")
        ordering = ["handle"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name="rewardman_account_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.handle}: {self.balance}pts"
