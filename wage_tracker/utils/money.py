"""Currency helpers."""

from decimal import Decimal, InvalidOperation
from typing import Union

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """
    Coerce a numeric input to Decimal via str() so floats keep their
    shortest repr (7499.99 stays 7499.99, not its binary expansion).

    Raises:
        ValueError: value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result
