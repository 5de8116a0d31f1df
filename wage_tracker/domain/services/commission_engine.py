"""
COMMISSION ENGINE
Convert a day's sales amount → commission amount

RULES (LOCKED):
❌ No rounding (formatting is the client's job)
❌ No hidden state
✅ Inclusive lower bounds, highest tier checked first
✅ Non-positive sales earn nothing
"""

from decimal import Decimal
from typing import Tuple

from wage_tracker.utils.money import Amount, to_decimal

# (inclusive lower bound, rate in percent), highest tier first
COMMISSION_TIERS: Tuple[Tuple[Decimal, Decimal], ...] = (
    (Decimal('10000'), Decimal('4')),
    (Decimal('8500'), Decimal('3')),
    (Decimal('7500'), Decimal('2')),
    (Decimal('6000'), Decimal('1.5')),
)
BASE_RATE = Decimal('1')


def commission_rate(sales: Amount) -> Decimal:
    """
    Rate (in percent) applying to a sales amount.

    Returns 0 for sales <= 0.
    """
    amount = to_decimal(sales)
    if amount <= Decimal('0'):
        return Decimal('0')

    for lower_bound, rate in COMMISSION_TIERS:
        if amount >= lower_bound:
            return rate
    return BASE_RATE


def calculate_commission(sales: Amount) -> Decimal:
    """
    Commission earned on a sales amount.

    Args:
        sales: Day's sales; Decimal, int, float or numeric string

    Returns:
        sales * rate / 100, unrounded

    Raises:
        ValueError: sales is not a finite number
    """
    amount = to_decimal(sales)
    if amount <= Decimal('0'):
        return Decimal('0')
    return amount * commission_rate(amount) / Decimal('100')
