"""
Unit Tests for the commission engine

Tier boundaries are inclusive on the lower side.
"""

from decimal import Decimal

import pytest

from wage_tracker.domain.services.commission_engine import (
    COMMISSION_TIERS,
    calculate_commission,
    commission_rate,
)


@pytest.mark.parametrize(
    "sales, expected",
    [
        (0, Decimal("0")),
        (-100, Decimal("0")),
        (5999, Decimal("59.99")),
        (6000, Decimal("90")),
        (7499.99, Decimal("112.49985")),
        (7500, Decimal("150")),
        (8499.99, Decimal("169.9998")),
        (8500, Decimal("255")),
        (9999.99, Decimal("299.9997")),
        (10000, Decimal("400")),
    ],
)
def test_commission_exact_values(sales, expected):
    assert calculate_commission(sales) == expected


def test_commission_accepts_decimal_and_string():
    assert calculate_commission(Decimal("9000")) == Decimal("270")
    assert calculate_commission("6500") == Decimal("97.5")


def test_commission_is_not_rounded():
    # 1.5% of 6000.01 has five decimal places
    assert calculate_commission(Decimal("6000.01")) == Decimal("90.00015")


@pytest.mark.parametrize(
    "sales, rate",
    [
        (1, Decimal("1")),
        (5999.99, Decimal("1")),
        (6000, Decimal("1.5")),
        (7500, Decimal("2")),
        (8500, Decimal("3")),
        (10000, Decimal("4")),
        (250000, Decimal("4")),
        (0, Decimal("0")),
    ],
)
def test_commission_rate_tiers(sales, rate):
    assert commission_rate(sales) == rate


def test_commission_is_non_negative_and_monotonic():
    samples = [Decimal(n) / Decimal("4") for n in range(-400, 48000, 7)]
    # Include every boundary and the value just below it
    for lower_bound, _ in COMMISSION_TIERS:
        samples.extend([lower_bound - Decimal("0.01"), lower_bound])
    samples.sort()

    previous = Decimal("0")
    for sales in samples:
        commission = calculate_commission(sales)
        assert commission >= 0
        assert commission >= previous, f"commission dropped at sales={sales}"
        previous = commission


def test_commission_is_deterministic():
    assert calculate_commission(8765.43) == calculate_commission(8765.43)


@pytest.mark.parametrize("bad", ["abc", "", "NaN", "Infinity", True])
def test_commission_rejects_non_numbers(bad):
    with pytest.raises(ValueError):
        calculate_commission(bad)
