"""Monthly tax estimate.

A deliberately simple model: either one flat effective rate, or the plain
sum of itemized component rates. No brackets, no deductions, and itemized
rates are never compounded (state is not applied after federal).
"""

from src.core.money import Cents, percent_of
from src.models.schemas import Plan, TaxComponent, TaxMode


def combined_rate(tax_components: list[TaxComponent] | tuple[TaxComponent, ...]) -> float:
    """Unweighted sum of component rates, in percent."""
    return sum((c.rate_percent for c in tax_components), 0.0)


def compute_tax(
    gross_monthly: Cents,
    plan: Plan,
    tax_components: list[TaxComponent] | tuple[TaxComponent, ...],
) -> Cents:
    """Monthly tax in cents for *gross_monthly* income.

    ``simple`` mode applies ``plan.tax_effective_rate`` (0 when unset);
    ``itemized`` mode applies :func:`combined_rate` of *tax_components*.
    """
    if plan.tax_mode == TaxMode.SIMPLE:
        return percent_of(gross_monthly, plan.tax_effective_rate or 0)
    return percent_of(gross_monthly, combined_rate(tax_components))
