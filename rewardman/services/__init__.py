"""Rewardman services.

- codes: CodeGenerator (unique coupon codes, employee codes, handles)
- ledger: BalanceLedger (credit/debit + ledger history)
- coupons: CouponLifecycle (issue, redeem, list, delete)
- accounts: typed account lookup and enrollment
- employees: staff registration and lookup

The public use-case API is rewardman.service.RedemptionService.
"""

from rewardman.services import codes
from rewardman.services import ledger
from rewardman.services import accounts
from rewardman.services import employees
from rewardman.services import coupons

__all__ = ["codes", "ledger", "accounts", "employees", "coupons"]
