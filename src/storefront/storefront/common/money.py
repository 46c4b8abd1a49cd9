from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

CENT = Decimal("0.01")


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price: Decimal, quantity: int) -> Decimal:
    return quantize(Decimal(price) * int(quantity))


def sum_lines(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Sum of price x quantity over (price, quantity) pairs, rounded to cents."""
    total = Decimal("0")
    for price, quantity in lines:
        total += Decimal(price) * int(quantity)
    return quantize(total)


def to_cents(amount: Decimal) -> int:
    return int((quantize(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return quantize(Decimal(int(cents)) / 100)
