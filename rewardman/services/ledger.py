"""Balance ledger - every point balance mutation, paired with its log entry.

All mutations use transaction.atomic() + select_for_update() on the account
row, so concurrent debits against one account serialize and cannot
over-spend.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Q, Sum

from rewardman.conf import rewardman_settings
from rewardman.exceptions import RewardmanError
from rewardman.models import Account, Direction, LedgerEntry
from rewardman.signals import points_credited, points_debited

logger = logging.getLogger(__name__)

POINT_QUANTUM = Decimal("0.0001")

# Largest value a DecimalField(max_digits=14, decimal_places=4) column holds
MAX_POINTS = Decimal("9999999999.9999")


@dataclass
class LedgerPage:
    """One page of an account's ledger history."""

    entries: list[LedgerEntry]
    total: int
    page: int
    limit: int
    total_pages: int
    total_points: Decimal

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass
class LedgerSummary:
    """Totals across all accounts."""

    total_records: int
    total_points: Decimal


def parse_amount(value) -> Decimal:
    """
    Coerce a point amount to a positive Decimal (4 places).

    Raises:
        RewardmanError: INVALID_AMOUNT if not a number, not > 0 or
            larger than MAX_POINTS
    """
    if value is None or isinstance(value, bool):
        raise RewardmanError("INVALID_AMOUNT", amount=value)
    try:
        amount = Decimal(str(value)).quantize(POINT_QUANTUM, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise RewardmanError("INVALID_AMOUNT", amount=str(value))
    if not amount.is_finite() or amount <= 0 or amount > MAX_POINTS:
        raise RewardmanError("INVALID_AMOUNT", amount=str(value))
    return amount


def points_from_raw(raw) -> Decimal:
    """
    Convert raw staff input (e.g. spend) to stored points.

    points = raw / POINT_CONVERSION_DIVISOR, fractional results kept.
    """
    raw_amount = parse_amount(raw)
    divisor = Decimal(rewardman_settings.POINT_CONVERSION_DIVISOR)
    return parse_amount(raw_amount / divisor)


class BalanceLedger:
    """
    Service for point balance mutations and ledger queries.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def get_balance(cls, account_handle: str) -> Decimal:
        """Current balance. Raises ACCOUNT_NOT_FOUND if unknown."""
        try:
            return Account.objects.get(handle=account_handle, is_active=True).balance
        except Account.DoesNotExist:
            raise RewardmanError("ACCOUNT_NOT_FOUND", account_handle=account_handle)

    @classmethod
    def credit(
        cls,
        account_handle: str,
        amount,
        actor: str,
        note: str,
        actor_name: str = "",
        lookup_input: str = "",
        lookup_kind: str = "",
    ) -> LedgerEntry:
        """
        Add points to an account.

        Args:
            account_handle: Account handle
            amount: Points to add (must be positive, may be fractional)
            actor: Employee code or SYSTEM
            note: Reason for the credit
            actor_name: Actor display name snapshot
            lookup_input: Raw identifier staff used to find the account
            lookup_kind: Identifier kind that matched

        Returns:
            Created LedgerEntry

        Raises:
            RewardmanError: INVALID_AMOUNT, ACCOUNT_NOT_FOUND
        """
        points = parse_amount(amount)

        with transaction.atomic():
            account = cls._get_account_for_update(account_handle)

            if account.balance + points > MAX_POINTS:
                raise RewardmanError(
                    "INVALID_AMOUNT",
                    message="Credit would exceed the maximum point balance",
                    available=str(account.balance),
                    requested=str(points),
                )

            account.balance += points
            account.save(update_fields=["balance", "updated_at"])

            entry = LedgerEntry.objects.create(
                account_handle=account.handle,
                actor=actor,
                actor_name=actor_name,
                lookup_input=lookup_input,
                lookup_kind=lookup_kind,
                amount=points,
                direction=Direction.CREDIT,
                balance_after=account.balance,
                description=note,
            )
            transaction.on_commit(
                lambda: points_credited.send(sender=Account, account=account, entry=entry)
            )

        logger.info(
            "Credited %s pts to %s by %s (balance=%s)",
            points,
            account.handle,
            actor,
            account.balance,
        )
        return entry

    @classmethod
    def debit(
        cls,
        account_handle: str,
        amount,
        actor: str,
        note: str,
        actor_name: str = "",
    ) -> LedgerEntry:
        """
        Remove points from an account. Never partially applied.

        Args:
            account_handle: Account handle
            amount: Points to remove (must be positive)
            actor: Employee code or SYSTEM
            note: What the points were spent on
            actor_name: Actor display name snapshot

        Returns:
            Created LedgerEntry

        Raises:
            RewardmanError: INVALID_AMOUNT, ACCOUNT_NOT_FOUND, INSUFFICIENT_BALANCE
        """
        points = parse_amount(amount)

        with transaction.atomic():
            account = cls._get_account_for_update(account_handle)

            if account.balance < points:
                raise RewardmanError(
                    "INSUFFICIENT_BALANCE",
                    available=str(account.balance),
                    requested=str(points),
                )

            account.balance -= points
            account.save(update_fields=["balance", "updated_at"])

            entry = LedgerEntry.objects.create(
                account_handle=account.handle,
                actor=actor,
                actor_name=actor_name,
                amount=points,
                direction=Direction.DEBIT,
                balance_after=account.balance,
                description=note,
            )
            transaction.on_commit(
                lambda: points_debited.send(sender=Account, account=account, entry=entry)
            )

        logger.info(
            "Debited %s pts from %s by %s (balance=%s)",
            points,
            account.handle,
            actor,
            account.balance,
        )
        return entry

    @classmethod
    def history(
        cls,
        account_handle: str,
        page: int = 1,
        limit: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> LedgerPage:
        """
        Paginated ledger history for one account (newest first).

        Args:
            account_handle: Account handle
            page: 1-based page number
            limit: Page size (defaults to HISTORY_PAGE_SIZE)
            start: Only entries created at or after this instant
            end: Only entries created at or before this instant
        """
        limit = max(1, limit or rewardman_settings.HISTORY_PAGE_SIZE)
        page = max(1, page)

        qs = cls._filter_period(
            LedgerEntry.objects.filter(account_handle=account_handle), start, end
        )
        total = qs.count()
        offset = (page - 1) * limit

        return LedgerPage(
            entries=list(qs[offset:offset + limit]),
            total=total,
            page=page,
            limit=limit,
            total_pages=(total + limit - 1) // limit,
            total_points=cls._net_points(qs),
        )

    @classmethod
    def summary(
        cls,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> LedgerSummary:
        """Entry count and net points across all accounts."""
        qs = cls._filter_period(LedgerEntry.objects.all(), start, end)
        return LedgerSummary(total_records=qs.count(), total_points=cls._net_points(qs))

    @classmethod
    def _filter_period(cls, qs, start, end):
        if start:
            qs = qs.filter(created_at__gte=start)
        if end:
            qs = qs.filter(created_at__lte=end)
        return qs

    @classmethod
    def _net_points(cls, qs) -> Decimal:
        """Credits minus debits; neutral entries are ignored."""
        totals = qs.aggregate(
            credited=Sum("amount", filter=Q(direction=Direction.CREDIT)),
            debited=Sum("amount", filter=Q(direction=Direction.DEBIT)),
        )
        return (totals["credited"] or Decimal("0")) - (totals["debited"] or Decimal("0"))

    @classmethod
    def _get_account_for_update(cls, account_handle: str) -> Account:
        """
        Get active account with row-level lock for mutation.

        MUST be called inside transaction.atomic().
        Prevents lost-update and over-debit on concurrent mutations.
        """
        try:
            return Account.objects.select_for_update().get(
                handle=account_handle,
                is_active=True,
            )
        except Account.DoesNotExist:
            raise RewardmanError("ACCOUNT_NOT_FOUND", account_handle=account_handle)
