"""Employee service - staff registration and lookup."""

import logging

from django.db import transaction
from django.db.models import Q

from rewardman.exceptions import RewardmanError
from rewardman.models import Employee
from rewardman.services.codes import CodeGenerator

logger = logging.getLogger(__name__)


def get(code: str) -> Employee | None:
    """Get active employee by code."""
    try:
        return Employee.objects.get(code=code, is_active=True)
    except Employee.DoesNotExist:
        return None


def register(
    first_name: str,
    last_name: str = "",
    display_name: str = "",
    email: str = "",
    phone: str = "",
) -> Employee:
    """
    Register a staff member under a freshly minted code.

    Raises:
        RewardmanError: DUPLICATE_EMPLOYEE if email or phone is taken,
            GENERATION_EXHAUSTED if no free code was found
    """
    email = email.lower().strip()
    phone = phone.strip()

    clash = Q()
    if email:
        clash |= Q(email=email)
    if phone:
        clash |= Q(phone=phone)
    if clash and Employee.objects.filter(clash).exists():
        raise RewardmanError("DUPLICATE_EMPLOYEE", email=email, phone=phone)

    with transaction.atomic():
        employee = Employee.objects.create(
            code=CodeGenerator.employee_code(),
            first_name=first_name,
            last_name=last_name,
            display_name=display_name,
            email=email,
            phone=phone,
        )

    logger.info("Registered employee %s", employee.code)
    return employee
