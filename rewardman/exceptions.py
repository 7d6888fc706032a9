"""Rewardman exceptions."""


class RewardmanError(Exception):
    """
    Structured exception for ledger and coupon operations.

    Carries a stable ``code``, a human ``message`` and free-form ``data``.

    Usage:
        try:
            CouponLifecycle.redeem_by_code("X7KQ2P", "E1A2B")
        except RewardmanError as e:
            if e.code == "ALREADY_USED":
                handle_already_used()
    """

    _default_messages = {
        "INVALID_AMOUNT": "Point amount must be greater than zero",
        "INSUFFICIENT_BALANCE": "Not enough points for this exchange",
        "COUPON_NOT_FOUND": "Coupon not found",
        "ALREADY_USED": "Coupon has already been used",
        "EXPIRED": "Coupon has expired",
        "NOT_EXPIRED": "Coupon has not expired yet and cannot be deleted",
        "GENERATION_EXHAUSTED": "Could not generate a unique code",
        "STORE_UNAVAILABLE": "Storage is temporarily unavailable, please retry",
        "ACCOUNT_NOT_FOUND": "Account not found",
        "EMPLOYEE_NOT_FOUND": "Employee not found",
        "MISSING_FIELDS": "Required fields are missing",
        "DUPLICATE_EMPLOYEE": "Email or phone already registered",
        "IMMUTABLE_RECORD": "Audit records cannot be modified",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}
