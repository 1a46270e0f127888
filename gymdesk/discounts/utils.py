"""Pure helpers for discount codes and discount arithmetic."""

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from gymdesk.core.constants import DISCOUNT_CODE_MIN_LENGTH
from gymdesk.discounts.models.discount import Discount, DiscountStatus, DiscountType

CENTS = Decimal("0.01")
ZERO = Decimal("0")

_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class DiscountAmounts(NamedTuple):
    discount_amount: Decimal
    final_amount: Decimal


def format_discount_code(code: str) -> str:
    """Normalize a code for storage and lookup: trimmed and upper-case."""
    return code.strip().upper()


def is_valid_discount_code_format(code: str) -> bool:
    trimmed = code.strip()
    if len(trimmed) < DISCOUNT_CODE_MIN_LENGTH:
        return False
    return bool(_CODE_PATTERN.match(trimmed))


def _plain_number(value: Decimal | int | str) -> str:
    number = Decimal(value)
    if number == number.to_integral_value():
        return str(number.to_integral_value())
    return str(number.quantize(CENTS, rounding=ROUND_HALF_UP))


def format_discount_display(
    discount_type: DiscountType | str, value: Decimal | int | str, currency_symbol: str = "$"
) -> str:
    """
    Short label for a discount.

    Example:
        format_discount_display(DiscountType.PERCENTAGE, Decimal("20"))  # "20% OFF"
        format_discount_display(DiscountType.FIXED_AMOUNT, Decimal("7.5"))  # "$7.50 OFF"
    """
    if DiscountType(discount_type) is DiscountType.PERCENTAGE:
        return f"{_plain_number(value)}% OFF"
    return f"{currency_symbol}{_plain_number(value)} OFF"


def calculate_savings_percentage(
    original_amount: Decimal | int | str, final_amount: Decimal | int | str
) -> int:
    """Whole-number percentage saved; 0 when the original amount is not positive."""
    original = Decimal(original_amount)
    if original <= 0:
        return 0
    saved = (original - Decimal(final_amount)) / original * 100
    return int(saved.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_discount_amount(
    discount_type: DiscountType | str,
    value: Decimal | int | str,
    amount: Decimal | int | str,
) -> DiscountAmounts:
    """Discount and resulting price for ``amount``.

    Percentages are rounded to cents. A fixed amount never exceeds the total,
    and the final amount never drops below zero.
    """
    amount = Decimal(amount)
    if DiscountType(discount_type) is DiscountType.PERCENTAGE:
        discount = (amount * Decimal(value) / 100).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        discount = min(Decimal(value), amount)
    discount = max(discount, ZERO)
    return DiscountAmounts(discount, max(ZERO, amount - discount))


def effective_status(discount: Discount, now: datetime) -> DiscountStatus:
    """Status a discount has at ``now``, derived from its flags, dates and usage.

    A code whose start date is still ahead counts as Active.
    """
    if not discount.is_active or discount.status is DiscountStatus.DISABLED:
        return DiscountStatus.DISABLED
    if discount.end_date is not None and now > discount.end_date:
        return DiscountStatus.EXPIRED
    if discount.max_uses and discount.current_uses >= discount.max_uses:
        return DiscountStatus.USED_UP
    return DiscountStatus.ACTIVE
