"""LedgerEntry model - append-only log of balance changes."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from rewardman.models.base import AppendOnlyModel


class Direction(models.TextChoices):
    """Direction of a balance change."""

    CREDIT = "credit", _("Credit")
    DEBIT = "debit", _("Debit")


class LedgerEntry(AppendOnlyModel):
    """
    Immutable record of one balance change.

    Created only by BalanceLedger, inside the same transaction as the balance
    write it describes. Entries are append-only: never modified or deleted.
    ``direction`` is nullable so that neutral (informational) entries can be
    told apart from credits and debits.
    """

    account_handle = models.CharField(_("account"), max_length=32, db_index=True)

    actor = models.CharField(
        _("actor"),
        max_length=50,
        help_text=_("Employee code or SYSTEM"),
    )
    actor_name = models.CharField(_("actor name"), max_length=150, blank=True)

    # How staff located the account (raw input + matched identifier kind)
    lookup_input = models.CharField(_("lookup input"), max_length=100, blank=True)
    lookup_kind = models.CharField(_("lookup kind"), max_length=20, blank=True)

    amount = models.DecimalField(_("points"), max_digits=14, decimal_places=4)
    direction = models.CharField(
        _("direction"),
        max_length=10,
        choices=Direction.choices,
        null=True,
        blank=True,
    )
    balance_after = models.DecimalField(
        _("balance after"),
        max_digits=14,
        decimal_places=4,
    )

    description = models.CharField(_("description"), max_length=255)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "rewardman_ledger_entry"
        verbose_name = _("ledger entry")
        verbose_name_plural = _("ledger entries")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["account_handle", "-created_at"],
                name="rewardman_ledger_acct_idx",
            ),
        ]

    def __str__(self):
        sign = {Direction.CREDIT: "+", Direction.DEBIT: "-"}.get(self.direction, "")
        return f"{sign}{self.amount}pts - {self.description}"

    @property
    def signed_amount(self):
        """Amount with the sign implied by ``direction``."""
        if self.direction == Direction.DEBIT:
            return -self.amount
        return self.amount
