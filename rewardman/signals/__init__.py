"""
Rewardman signals - public event API.

Emitted signals (sent via transaction.on_commit, so only for committed work):
- points_credited: Emitted by BalanceLedger.credit()
- points_debited: Emitted by BalanceLedger.debit()
- coupon_issued: Emitted by CouponLifecycle.issue()
- coupon_redeemed: Emitted by CouponLifecycle.redeem_by_code()
"""

from django.dispatch import Signal

# Ledger signals
points_credited = Signal()  # sender=Account, entry=LedgerEntry
points_debited = Signal()  # sender=Account, entry=LedgerEntry

# Coupon signals
coupon_issued = Signal()  # sender=Coupon, coupon=Coupon
coupon_redeemed = Signal()  # sender=Coupon, coupon=Coupon, record=RedemptionRecord
