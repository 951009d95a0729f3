"""Money helper

Every monetary value is a Decimal with two fractional digits, rounded
half-to-even at each multiplication or subtraction boundary. Floats are
refused outright so cent drift cannot creep in through repeated partial
payments.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a NUMERIC(19, 2) column holds
MAX_MONEY = Decimal("99999999999999999.99")

MoneyInput = Union[Decimal, int, str]


def _as_decimal(value: MoneyInput) -> Decimal:
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats")
    if isinstance(value, Decimal):
        return value
    return Decimal(value)


def to_money(value: MoneyInput) -> Decimal:
    """Quantize ``value`` to cents using banker's rounding."""
    return _as_decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def money_sum(values: Iterable[MoneyInput]) -> Decimal:
    total = Decimal(0)
    for value in values:
        total += _as_decimal(value)
    return to_money(total)


def multiply(quantity: MoneyInput, unit_price: MoneyInput) -> Decimal:
    return to_money(_as_decimal(quantity) * _as_decimal(unit_price))


def subtract(minuend: MoneyInput, subtrahend: MoneyInput) -> Decimal:
    return to_money(_as_decimal(minuend) - _as_decimal(subtrahend))


def has_cent_precision(value: Decimal) -> bool:
    """True when ``value`` carries no more than two fractional digits."""
    return value == value.quantize(CENT)


def within_money_range(value: Decimal) -> bool:
    """True when ``value`` fits a money column. Checked before quantizing."""
    return value.is_finite() and abs(value) <= MAX_MONEY
