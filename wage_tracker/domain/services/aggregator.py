"""
AGGREGATOR
Reduce a record set to summary totals.

Single pass, order-independent. Missing amounts on a partially written
record count as zero.
"""

from decimal import Decimal
from typing import Iterable

from wage_tracker.domain.models import Record, Totals


def aggregate(records: Iterable[Record]) -> Totals:
    wage = Decimal('0')
    commission = Decimal('0')
    sales = Decimal('0')

    for record in records:
        wage += record.wage or Decimal('0')
        commission += record.commission or Decimal('0')
        sales += record.sales or Decimal('0')

    return Totals(wage=wage, commission=commission, sales=sales)
