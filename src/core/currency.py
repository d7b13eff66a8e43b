"""Currency conversion against a single-base exchange rate table.

Conversion is best effort: a missing rate never raises. Amounts pass through
unchanged and a warning is logged, so a budget still renders.
"""

from __future__ import annotations

import logging

from src.core.money import Cents, round_half_away
from src.models.results import ConversionResult
from src.models.schemas import CurrencyCode, ExchangeRates, ExpenseItem, ExpenseSplit

logger = logging.getLogger(__name__)


def _code(currency: str) -> str:
    return currency.value if isinstance(currency, CurrencyCode) else str(currency)


def _direct_rate(
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates,
) -> float | None:
    """Rate for a single leg where one side is the base currency."""
    base = _code(rates.base_currency)
    table = {_code(code): rate for code, rate in rates.rates.items()}
    if from_currency == base:
        rate = table.get(to_currency)
        return rate if rate else None
    if to_currency == base:
        rate = table.get(from_currency)
        return 1 / rate if rate else None
    return None


def resolve_rate(
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates | None,
) -> float | None:
    """Return the multiplier converting *from_currency* into *to_currency*.

    Resolves a direct leg when either side is the table's base currency,
    otherwise composes ``from -> base -> to``. Returns ``None`` when no table
    is given or any leg is missing.
    """
    from_currency, to_currency = _code(from_currency), _code(to_currency)
    if from_currency == to_currency:
        return 1.0
    if rates is None:
        return None

    base = _code(rates.base_currency)
    if from_currency == base or to_currency == base:
        return _direct_rate(from_currency, to_currency, rates)

    to_base = _direct_rate(from_currency, base, rates)
    from_base = _direct_rate(base, to_currency, rates)
    if to_base is None or from_base is None:
        return None
    return to_base * from_base


def convert_cents(
    amount: Cents,
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates | None = None,
) -> Cents:
    """Convert *amount* between currencies, or return it unchanged if no rate resolves."""
    return convert_cents_tagged(amount, from_currency, to_currency, rates).amount


def convert_cents_tagged(
    amount: Cents,
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates | None = None,
) -> ConversionResult:
    """Like :func:`convert_cents` but reports whether a real rate was used.

    Same-currency conversion counts as converted.
    """
    rate = resolve_rate(from_currency, to_currency, rates)
    if rate is None:
        logger.warning(
            "Missing exchange rate for %s -> %s; returning original amount",
            _code(from_currency),
            _code(to_currency),
        )
        return ConversionResult(amount=amount, converted=False)
    return ConversionResult(amount=round_half_away(amount * rate), converted=True)


# --- Expense conversion ---


def _convert_splits(
    splits: tuple[ExpenseSplit, ...] | None,
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates | None,
) -> tuple[ExpenseSplit, ...] | None:
    if splits is None:
        return None
    return tuple(
        s.model_copy(update={"amount_cents": convert_cents(s.amount_cents, from_currency, to_currency, rates)})
        for s in splits
    )


def convert_expense_to_base(
    expense: ExpenseItem,
    base_currency: CurrencyCode,
    rates: ExchangeRates | None = None,
) -> ExpenseItem:
    """Return *expense* (and its splits) expressed in *base_currency*.

    Expenses without a currency code are already in the base currency.
    """
    from_currency = expense.currency_code or base_currency
    if from_currency == base_currency:
        return expense

    return expense.model_copy(
        update={
            "amount_cents": convert_cents(expense.amount_cents, from_currency, base_currency, rates),
            "splits": _convert_splits(expense.splits, from_currency, base_currency, rates),
        }
    )


def convert_expenses_to_base(
    expenses: list[ExpenseItem] | tuple[ExpenseItem, ...],
    base_currency: CurrencyCode,
    rates: ExchangeRates | None = None,
) -> list[ExpenseItem]:
    return [convert_expense_to_base(e, base_currency, rates) for e in expenses]
