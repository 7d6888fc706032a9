"""
Django Rewardman - Loyalty points ledger and coupon redemption.

Usage:
    from rewardman import RedemptionService, ExchangeRequest

    result = RedemptionService.exchange(
        ExchangeRequest(
            reward_id="MENU-7",
            reward_name="Iced Latte",
            point_cost="40",
            external_id="U4af4980629",
            account_handle="K2Q9ZD1M0A",
        )
    )
    if result.ok:
        print(result.coupon.code)

    RedemptionService.redeem_at_pos("X7KQ2P", staff_actor="E1A2B")
"""


def __getattr__(name):
    if name == "RedemptionService":
        from rewardman.service import RedemptionService

        return RedemptionService
    if name == "ExchangeRequest":
        from rewardman.service import ExchangeRequest

        return ExchangeRequest
    if name == "RewardmanError":
        from rewardman.exceptions import RewardmanError

        return RewardmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["RedemptionService", "ExchangeRequest", "RewardmanError"]
__version__ = "0.1.0"
