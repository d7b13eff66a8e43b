"""Integer-cents money arithmetic.

Amounts are whole minor units ("cents") typed as :data:`Cents`. Every
operation re-validates its result through :func:`cents`, so overflow or a
non-finite intermediate surfaces immediately as :class:`InvalidAmount`.
"""

from __future__ import annotations

import math
from typing import Iterable, NewType

Cents = NewType("Cents", int)

# Largest integer a double represents exactly; amounts are exchanged with
# clients that store them as IEEE-754 numbers.
MAX_SAFE_CENTS = 2**53 - 1


class InvalidAmount(ValueError):
    """Raised when a value cannot be represented as whole cents."""

    def __init__(self, value: object, reason: str | None = None):
        self.value = value
        self.reason = reason
        detail = f"Invalid cents value: {value!r}"
        if reason:
            detail += f" ({reason})"
        super().__init__(detail)


def cents(value: int | float) -> Cents:
    """Validate *value* as a safe integer amount of cents.

    Integral floats (``500.0``) are accepted and coerced; fractional,
    non-finite, boolean and out-of-range values raise :class:`InvalidAmount`.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidAmount(value, "not a number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmount(value, "not finite")
        if not value.is_integer():
            raise InvalidAmount(value, "not an integer")
        value = int(value)
    if abs(value) > MAX_SAFE_CENTS:
        raise InvalidAmount(value, "exceeds safe integer range")
    return Cents(value)


def non_negative_cents(value: int | float) -> Cents:
    """Like :func:`cents` but also rejects negative amounts."""
    amount = cents(value)
    if amount < 0:
        raise InvalidAmount(value, "must be non-negative")
    return amount


def round_half_away(value: float) -> Cents:
    """Round to the nearest whole cent, halves away from zero.

    This is the only rounding rule used when scaling money.
    """
    if not math.isfinite(value):
        raise InvalidAmount(value, "not finite")
    magnitude = abs(value)
    # Compare the fraction instead of adding 0.5, which is inexact near 2**53.
    rounded = math.floor(magnitude)
    if magnitude - rounded >= 0.5:
        rounded += 1
    return cents(rounded if value >= 0 else -rounded)


# --- Conversions ---


def dollars_to_cents(dollars: float) -> Cents:
    """Convert a dollar amount to cents."""
    return round_half_away(dollars * 100)


def cents_to_dollars(amount: int) -> float:
    """Convert cents to dollars."""
    return amount / 100


# --- Arithmetic ---


def add_money(a: Cents, b: Cents) -> Cents:
    return cents(a + b)


def subtract_money(a: Cents, b: Cents) -> Cents:
    return cents(a - b)


def multiply_money(amount: Cents, factor: float) -> Cents:
    return round_half_away(amount * factor)


def divide_money(amount: Cents, divisor: float) -> Cents:
    if divisor == 0:
        raise InvalidAmount(amount, "division by zero")
    return round_half_away(amount / divisor)


def percent_of(amount: Cents, percent: float) -> Cents:
    """Return *percent* % of *amount*, rounded to the nearest cent."""
    return round_half_away(amount * (percent / 100))


def sum_money(amounts: Iterable[Cents]) -> Cents:
    total = cents(0)
    for amount in amounts:
        total = add_money(total, amount)
    return total
