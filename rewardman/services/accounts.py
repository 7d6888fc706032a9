"""Account service - typed lookup and enrollment.

Staff can locate a customer by handle, external login id or phone. Lookups
take an explicit IdentifierKind; resolve() tries every kind in order.
"""

import logging

from django.db import IntegrityError, models, transaction
from django.utils.translation import gettext_lazy as _

from rewardman.exceptions import RewardmanError
from rewardman.models import Account
from rewardman.services.codes import CodeGenerator

logger = logging.getLogger(__name__)


class IdentifierKind(models.TextChoices):
    """Identifier an account can be looked up by."""

    HANDLE = "handle", _("Handle")
    EXTERNAL_ID = "external_id", _("External id")
    PHONE = "phone", _("Phone")


# Lookup order for resolve(): most specific first
_RESOLVE_ORDER = [IdentifierKind.HANDLE, IdentifierKind.EXTERNAL_ID, IdentifierKind.PHONE]


def find(kind: str, value: str) -> Account | None:
    """Get active account by one identifier kind."""
    kind = IdentifierKind(kind)
    value = (value or "").strip()
    if not value:
        return None
    return Account.objects.filter(**{kind.value: value}, is_active=True).first()


def get(kind: str, value: str) -> Account:
    """Like find(), but raises ACCOUNT_NOT_FOUND."""
    account = find(kind, value)
    if account is None:
        raise RewardmanError("ACCOUNT_NOT_FOUND", kind=str(kind), value=value)
    return account


def resolve(value: str) -> tuple[Account, IdentifierKind]:
    """
    Find an account by any identifier kind.

    Returns:
        Tuple of (Account, matched IdentifierKind)

    Raises:
        RewardmanError: ACCOUNT_NOT_FOUND
    """
    for kind in _RESOLVE_ORDER:
        account = find(kind, value)
        if account is not None:
            return account, kind
    raise RewardmanError("ACCOUNT_NOT_FOUND", value=value)


def enroll(
    external_id: str,
    display_name: str,
    picture_url: str = "",
    phone: str = "",
) -> tuple[Account, bool]:
    """
    Get the account for an external login id, creating it if missing.

    Idempotent. New accounts get a freshly minted handle and zero balance.

    Returns:
        Tuple of (Account, created: bool)
    """
    existing = Account.objects.filter(external_id=external_id).first()
    if existing:
        return existing, False

    try:
        with transaction.atomic():
            account = Account.objects.create(
                handle=CodeGenerator.account_handle(),
                external_id=external_id,
                display_name=display_name,
                picture_url=picture_url,
                phone=phone,
            )
    except IntegrityError:
        # Concurrent enrollment for the same external id won the insert
        return Account.objects.get(external_id=external_id), False

    logger.info("Enrolled account %s for %s", account.handle, external_id)
    return account, True
