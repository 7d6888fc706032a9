"""Employee model - staff allowed to credit points and redeem coupons."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Employee(models.Model):
    """
    Staff member.

    ``code`` is minted by the code generator and is the staff actor recorded
    on ledger entries and receipts. Credentials live in the auth layer.
    """

    code = models.CharField(_("code"), max_length=20, unique=True)
    first_name = models.CharField(_("first name"), max_length=100)
    last_name = models.CharField(_("last name"), max_length=100, blank=True)
    display_name = models.CharField(_("display name"), max_length=150, blank=True)
    email = models.EmailField(_("email"), blank=True, db_index=True)
    phone = models.CharField(_("phone"), max_length=20, blank=True, db_index=True)

    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "rewardman_employee"
        verbose_name = _("employee")
        verbose_name_plural = _("employees")
        ordering = ["code"]

    def __str__(self):
        return f"{self.name} ({self.code})"

    @property
    def name(self) -> str:
        """Display name, falling back to first + last."""
        return self.display_name or f"{self.first_name} {self.last_name}".strip()
