"""Pydantic models for budget plan records.

Records arrive from the persistence layer as camelCase JSON
(``grossIncomeCents``, ``yearMonth``); attributes are snake_case. All records
are frozen: they are replaced wholesale, never mutated.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from src.core.money import cents, non_negative_cents

# Whole cents, validated by the money constructors.
CentsValue = Annotated[int, AfterValidator(cents)]
NonNegativeCentsValue = Annotated[int, AfterValidator(non_negative_cents)]

YEAR_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# --- Enums ---

class Frequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class TaxMode(str, Enum):
    SIMPLE = "simple"
    ITEMIZED = "itemized"


class BucketMode(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class ExpenseCategory(str, Enum):
    HOUSING = "housing"
    UTILITIES = "utilities"
    TRANSPORTATION = "transportation"
    GROCERIES = "groceries"
    HEALTHCARE = "healthcare"
    INSURANCE = "insurance"
    DEBT_PAYMENT = "debt_payment"
    SAVINGS = "savings"
    ENTERTAINMENT = "entertainment"
    DINING = "dining"
    PERSONAL = "personal"
    SUBSCRIPTIONS = "subscriptions"
    OTHER = "other"


class CurrencyCode(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"


DEFAULT_CURRENCY = CurrencyCode.USD


class BucketStatus(str, Enum):
    UNDER = "under"
    ON_TARGET = "on_target"
    OVER = "over"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# --- Records ---

class Record(BaseModel):
    """Base for persisted records: frozen, camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Plan(Record):
    id: str
    name: str = Field(..., min_length=1, max_length=100)
    gross_income_cents: NonNegativeCentsValue
    income_frequency: Frequency
    tax_mode: TaxMode = TaxMode.SIMPLE
    tax_effective_rate: Optional[float] = Field(None, ge=0, le=100)  # simple mode only
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: int = Field(default=0, ge=0)


class PercentageTarget(Record):
    mode: Literal["percentage"] = "percentage"
    target_percentage: float = Field(..., ge=0, le=100)


class FixedTarget(Record):
    mode: Literal["fixed"] = "fixed"
    target_amount_cents: NonNegativeCentsValue


BucketTarget = Annotated[
    Union[PercentageTarget, FixedTarget], Field(discriminator="mode")
]


class BucketAllocation(Record):
    id: str
    plan_id: str
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(default="#6366F1", pattern=HEX_COLOR_PATTERN)
    target: BucketTarget
    sort_order: int = Field(default=0, ge=0)
    created_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_target(cls, data: Any) -> Any:
        """Accept the flat storage shape (``mode`` + ``targetPercentage`` or
        ``targetAmountCents``) and fold it into :attr:`target`."""
        if not isinstance(data, dict) or "target" in data:
            return data
        data = dict(data)
        mode = data.pop("mode", None)
        percentage = data.pop("targetPercentage", data.pop("target_percentage", None))
        amount = data.pop("targetAmountCents", data.pop("target_amount_cents", None))

        if mode == BucketMode.PERCENTAGE:
            if percentage is None:
                raise ValueError("percentage bucket requires targetPercentage")
            if amount is not None:
                raise ValueError("percentage bucket must not set targetAmountCents")
            data["target"] = {"mode": "percentage", "target_percentage": percentage}
        elif mode == BucketMode.FIXED:
            if amount is None:
                raise ValueError("fixed bucket requires targetAmountCents")
            if percentage is not None:
                raise ValueError("fixed bucket must not set targetPercentage")
            data["target"] = {"mode": "fixed", "target_amount_cents": amount}
        else:
            raise ValueError(f"Unknown bucket mode: {mode!r}")
        return data

    @model_serializer(mode="wrap")
    def _flatten_target(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        """Dump :attr:`target` back into the flat storage shape."""
        data = handler(self)
        target = data.pop("target", None)
        if isinstance(target, dict):
            data.update(target)
        return data

    @property
    def mode(self) -> BucketMode:
        return BucketMode(self.target.mode)

    @property
    def target_percentage(self) -> Optional[float]:
        if isinstance(self.target, PercentageTarget):
            return self.target.target_percentage
        return None

    @property
    def target_amount_cents(self) -> Optional[int]:
        if isinstance(self.target, FixedTarget):
            return self.target.target_amount_cents
        return None


class TaxComponent(Record):
    id: str
    plan_id: str
    name: str = Field(..., min_length=1, max_length=50)  # "Federal", "State", "FICA"
    rate_percent: float = Field(..., ge=0, le=100)
    sort_order: int = Field(default=0, ge=0)


class ExpenseSplit(Record):
    bucket_id: str = ""
    category: ExpenseCategory
    amount_cents: NonNegativeCentsValue
    notes: Optional[str] = Field(None, max_length=500)


class ExpenseItem(Record):
    id: str
    plan_id: str
    bucket_id: str = ""  # "" means unassigned
    name: str = Field(..., min_length=1, max_length=100)
    amount_cents: NonNegativeCentsValue
    frequency: Frequency = Frequency.MONTHLY
    category: ExpenseCategory = ExpenseCategory.OTHER
    is_fixed: bool = False
    currency_code: Optional[CurrencyCode] = None  # None means plan base currency
    notes: Optional[str] = Field(None, max_length=500)
    transaction_date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    is_split: bool = False
    splits: Optional[tuple[ExpenseSplit, ...]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @model_validator(mode="after")
    def _check_splits(self) -> "ExpenseItem":
        if not self.is_split:
            return self
        if not self.splits or len(self.splits) < 2:
            raise ValueError("Split expenses must have at least 2 splits")
        total = sum(s.amount_cents for s in self.splits)
        if total != self.amount_cents:
            raise ValueError(
                f"Splits sum to {total} cents but the expense is {self.amount_cents} cents"
            )
        return self


class BucketSummary(Record):
    bucket_id: str
    bucket_name: str
    allocated_cents: CentsValue
    spent_cents: CentsValue
    remaining_cents: CentsValue


class MonthlySnapshot(Record):
    id: str
    plan_id: str
    year_month: str = Field(..., pattern=YEAR_MONTH_PATTERN)  # "2026-01"
    gross_income_cents: CentsValue
    net_income_cents: CentsValue
    total_expenses_cents: CentsValue
    bucket_summaries: tuple[BucketSummary, ...] = ()
    created_at: Optional[str] = None


class ExchangeRates(Record):
    base_currency: CurrencyCode
    rates: dict[CurrencyCode, float] = {}  # units of currency per one base unit
    updated_at: Optional[str] = None

    @field_validator("rates")
    @classmethod
    def _positive_rates(cls, v: dict[CurrencyCode, float]) -> dict[CurrencyCode, float]:
        for code, rate in v.items():
            if rate <= 0:
                raise ValueError(f"Exchange rate for {code.value} must be positive")
        return v


class PlanBundle(Record):
    """Everything stored for one plan: the unit read and written by the plan store."""
    plan: Plan
    buckets: tuple[BucketAllocation, ...] = ()
    tax_components: tuple[TaxComponent, ...] = ()
    expenses: tuple[ExpenseItem, ...] = ()
    snapshots: tuple[MonthlySnapshot, ...] = ()
    exchange_rates: Optional[ExchangeRates] = None
    base_currency: CurrencyCode = DEFAULT_CURRENCY


# --- MCP Tool Input Models ---


class SummaryInput(BaseModel):
    """Input for tools that compute the plan summary for a month."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    year_month: Optional[str] = Field(
        None,
        description="Period to label the summary with (YYYY-MM). Defaults to the current month.",
        pattern=YEAR_MONTH_PATTERN,
    )


class SnapshotInput(BaseModel):
    """Input for creating a monthly snapshot."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    year_month: Optional[str] = Field(
        None, description="Snapshot period (YYYY-MM). Defaults to the current month.",
        pattern=YEAR_MONTH_PATTERN,
    )
    save: bool = Field(
        default=False,
        description="If False, returns a preview. If True, stores the snapshot, replacing any for the same month.",
    )


class RollingAveragesInput(BaseModel):
    """Input for rolling expense averages."""
    model_config = ConfigDict(extra="forbid")

    months: Literal[3, 6, 12] = Field(
        default=3, description="Number of most recent monthly snapshots to average"
    )


class ConvertAmountInput(BaseModel):
    """Input for converting an amount between currencies."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    amount: float = Field(..., description="Amount in major units (e.g. dollars)")
    from_currency: CurrencyCode = Field(..., description="Currency of the amount")
    to_currency: CurrencyCode = Field(..., description="Currency to convert into")


class NormalizeAmountInput(BaseModel):
    """Input for converting a periodic amount to its monthly equivalent."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    amount: float = Field(..., description="Amount in major units per period", ge=0)
    frequency: Frequency = Field(..., description="How often the amount recurs")
