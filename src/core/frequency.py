"""Conversion of periodic amounts to and from a monthly equivalent.

Round-tripping through :func:`normalize_to_monthly` and
:func:`denormalize_from_monthly` lands within one cent of the original for
periods of a quarter or shorter. Annual amounts can drift by up to six cents,
since the monthly rounding error is multiplied by twelve on the way back.
"""

from src.core.money import Cents, multiply_money
from src.models.schemas import Frequency

MONTHLY_FACTORS: dict[Frequency, float] = {
    Frequency.WEEKLY: 52 / 12,
    Frequency.BIWEEKLY: 26 / 12,
    Frequency.SEMIMONTHLY: 2,
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 1 / 3,
    Frequency.ANNUAL: 1 / 12,
}


def normalize_to_monthly(amount: Cents, frequency: Frequency) -> Cents:
    """Convert an amount paid every *frequency* period to a monthly amount."""
    return multiply_money(amount, MONTHLY_FACTORS[Frequency(frequency)])


def denormalize_from_monthly(monthly_amount: Cents, target_frequency: Frequency) -> Cents:
    """Convert a monthly amount to the equivalent amount per *target_frequency* period."""
    return multiply_money(monthly_amount, 1 / MONTHLY_FACTORS[Frequency(target_frequency)])
