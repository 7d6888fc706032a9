"""
Rewardman configuration.

Usage in settings.py:
    REWARDMAN = {
        "COUPON_VALIDITY_DAYS": 7,
        "POINT_CONVERSION_DIVISOR": 25,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class RewardmanSettings:
    """Rewardman configuration settings."""

    # Coupon lifecycle
    COUPON_VALIDITY_DAYS: int = 7
    COUPON_CODE_LENGTH: int = 6

    # Code generation
    EMPLOYEE_CODE_LENGTH: int = 5
    ACCOUNT_HANDLE_LENGTH: int = 10
    CODE_MAX_ATTEMPTS: int = 5

    # Raw staff input units per stored point
    POINT_CONVERSION_DIVISOR: int = 25

    # Actor recorded on ledger entries written by the exchange flow
    SYSTEM_ACTOR: str = "SYSTEM"
    SYSTEM_ACTOR_NAME: str = "Coupon exchange"

    # Ledger history pagination
    HISTORY_PAGE_SIZE: int = 20


def get_rewardman_settings() -> RewardmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "REWARDMAN", {})
    return RewardmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_rewardman_settings(), name)


rewardman_settings = _LazySettings()
