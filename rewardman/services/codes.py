"""Code generator - random identifiers unique within a queryset scope.

One generator serves coupon codes, employee codes and account handles:
draw a candidate, probe the scope, redraw on collision, give up after a
bounded number of attempts.

The probe is read-only. Callers insert the code inside their own
transaction; the unique constraints on the target columns catch the
remaining probe/insert race.
"""

import logging
import secrets
import string

from django.db.models import QuerySet

from rewardman.conf import rewardman_settings
from rewardman.exceptions import RewardmanError

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = string.ascii_uppercase + string.digits


class CodeGenerator:
    """
    Bounded-retry unique code generator.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def generate(
        cls,
        scope: QuerySet,
        field: str,
        length: int,
        alphabet: str = DEFAULT_ALPHABET,
        max_attempts: int | None = None,
    ) -> str:
        """
        Generate a code not yet present in ``scope``.

        Args:
            scope: Queryset defining the uniqueness scope
            field: Column holding the codes
            length: Number of symbols
            alphabet: Symbols to draw from
            max_attempts: Retry bound (defaults to CODE_MAX_ATTEMPTS)

        Returns:
            A code unused within the scope

        Raises:
            RewardmanError: GENERATION_EXHAUSTED when every attempt collided
        """
        if max_attempts is None:
            max_attempts = rewardman_settings.CODE_MAX_ATTEMPTS

        for _attempt in range(max_attempts):
            candidate = cls._draw(length, alphabet)
            if not scope.filter(**{field: candidate}).exists():
                return candidate

        logger.warning(
            "Code generation exhausted: model=%s field=%s length=%d attempts=%d",
            scope.model.__name__,
            field,
            length,
            max_attempts,
        )
        raise RewardmanError(
            "GENERATION_EXHAUSTED",
            model=scope.model.__name__,
            field=field,
            attempts=max_attempts,
        )

    @classmethod
    def coupon_code(cls) -> str:
        """Coupon code, unique across all coupons."""
        from rewardman.models import Coupon

        return cls.generate(
            Coupon.objects.all(), "code", rewardman_settings.COUPON_CODE_LENGTH
        )

    @classmethod
    def employee_code(cls) -> str:
        """Employee code, unique across all employees."""
        from rewardman.models import Employee

        return cls.generate(
            Employee.objects.all(), "code", rewardman_settings.EMPLOYEE_CODE_LENGTH
        )

    @classmethod
    def account_handle(cls) -> str:
        """Public account handle, unique across all accounts."""
        from rewardman.models import Account

        return cls.generate(
            Account.objects.all(), "handle", rewardman_settings.ACCOUNT_HANDLE_LENGTH
        )

    @classmethod
    def _draw(cls, length: int, alphabet: str) -> str:
        return "".join(secrets.choice(alphabet) for _ in range(length))
