"""Rewardman models.

- Account: customer profile holding the point balance
- LedgerEntry: append-only log of balance changes
- Coupon: point-for-reward voucher
- CouponUsage / RedemptionRecord: history and receipt written at redemption
- Employee: staff actor
"""

from rewardman.models.account import Account
from rewardman.models.ledger import LedgerEntry, Direction
from rewardman.models.coupon import Coupon, CouponUsage, RedemptionRecord
from rewardman.models.employee import Employee

__all__ = [
    "Account",
    # Ledger
    "LedgerEntry",
    "Direction",
    # Coupons
    "Coupon",
    "CouponUsage",
    "RedemptionRecord",
    # Staff
    "Employee",
]
