from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RewardmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rewardman"
    verbose_name = _("Rewardman - Loyalty & Coupons")
