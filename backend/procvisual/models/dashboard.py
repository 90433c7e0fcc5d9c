"""Derived dashboard models (recomputed per request, never persisted)."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from procvisual.models.transaction import TransactionKind, TransactionRecord
from procvisual.utils.money import MAX_AMOUNT


class _MoneyModel(BaseModel):
    """Serializes Decimal money fields as JSON numbers."""

    @field_serializer(
        "income", "expense", "balance", "total", "cumulative_balance", "previous_total",
        "max_amount", "average", "monthly_target", "target", "realized", "contribution",
        "value", "monthly_saving", "final_total",
        when_used="json",
        check_fields=False,
    )
    def _serialize_money(self, value: Decimal) -> float:
        return float(value)


class PeriodStats(_MoneyModel):
    """Totals over the filtered transaction set."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    percent_spent: int = Field(default=0, description="round(expense / income * 100), 0 without income")


class CategoryBucket(_MoneyModel):
    """Per-category total used for pie and detail breakdowns."""

    category: str
    total: Decimal
    color: str


class TimeSeriesPoint(_MoneyModel):
    """One day (month view) or one month (year view) of the evolution chart."""

    label: str
    index: int = Field(..., description="Day of month (1-based) or month index (0-based)")
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    cumulative_balance: Decimal = Decimal("0")


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


class Alert(BaseModel):
    """Human-readable insight generated from the period stats."""

    key: str = Field(..., description="Stable key: rule id plus salient parameter")
    rule: str
    severity: AlertSeverity
    title: str
    description: str


class MonthlyContribution(_MoneyModel):
    month: int
    balance: Decimal
    contribution: Decimal


class GoalProgress(_MoneyModel):
    """Monthly savings goal against realized monthly balances."""

    year: int
    monthly_target: Decimal
    target: Decimal
    realized: Decimal
    percent: int
    monthly: List[MonthlyContribution] = Field(default_factory=list)


class DashboardResponse(BaseModel):
    """Everything the dashboard view renders for the active period."""

    month: int
    year: int
    stats: PeriodStats
    categories: List[CategoryBucket] = Field(default_factory=list)
    time_series: List[TimeSeriesPoint] = Field(default_factory=list)
    alerts: List[Alert] = Field(default_factory=list)
    goal: Optional[GoalProgress] = None
    transaction_count: int = 0


class EvolutionPoint(_MoneyModel):
    label: str
    month: int
    value: Decimal


class KindDetail(_MoneyModel):
    """Income or expense detail view for the active period."""

    kind: TransactionKind
    month: int
    year: int
    total: Decimal
    previous_total: Decimal
    variation: float = Field(..., description="Percent change against the previous month")
    count: int
    max_amount: Decimal
    average: Decimal
    burn_rate: float = Field(default=0.0, description="Expense as a percent of income (expense view)")
    categories: List[CategoryBucket] = Field(default_factory=list)
    evolution: List[EvolutionPoint] = Field(default_factory=list)
    transactions: List[TransactionRecord] = Field(default_factory=list)


class ProjectionPoint(_MoneyModel):
    label: str
    value: Decimal


class ProjectionRequest(BaseModel):
    monthly_saving: Decimal = Field(default=Decimal("500"), ge=0, le=MAX_AMOUNT)
    annual_rate_percent: Decimal = Field(default=Decimal("10"), ge=0, le=100)
    months: int = Field(default=12, ge=1, le=600)


class ProjectionResponse(_MoneyModel):
    monthly_saving: Decimal
    final_total: Decimal
    points: List[ProjectionPoint] = Field(default_factory=list)
