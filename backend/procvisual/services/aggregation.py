"""Aggregations over filtered transaction sets."""
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from procvisual.models.dashboard import (
    CategoryBucket,
    EvolutionPoint,
    KindDetail,
    PeriodStats,
    TimeSeriesPoint,
)
from procvisual.models.transaction import TransactionKind, TransactionRecord
from procvisual.services.filters import ALL, PeriodFilter, filter_transactions, resolve_year
from procvisual.utils.dates import days_in_month, previous_month
from procvisual.utils.money import round_half_up

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

DASHBOARD_COLORS = ["#10b981", "#3b82f6", "#f59e0b", "#6366f1", "#f43f5e", "#8b5cf6", "#ec4899"]
INCOME_COLORS = ["#10b981", "#34d399", "#059669", "#065f46", "#064e3b"]
EXPENSE_COLORS = ["#ef4444", "#f97316", "#f59e0b", "#dc2626", "#991b1b"]

ZERO = Decimal("0")


def percent_of(part: Decimal, whole: Decimal) -> int:
    """round(part / whole * 100), 0 when whole is not positive."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def summarize(transactions: Iterable[TransactionRecord]) -> PeriodStats:
    """
    Sum income and expense over a transaction set.

    Returns:
        PeriodStats with balance = income - expense and percent_spent
        guarded to 0 when there is no income
    """
    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.kind == TransactionKind.INCOME:
            income += tx.amount
        else:
            expense += tx.amount

    return PeriodStats(
        income=income,
        expense=expense,
        balance=income - expense,
        percent_spent=percent_of(expense, income),
    )


def category_breakdown(
    transactions: Iterable[TransactionRecord],
    kind: TransactionKind = TransactionKind.EXPENSE,
    order: str = "first_seen",
    palette: Optional[List[str]] = None,
) -> List[CategoryBucket]:
    """
    Group records of one kind by category, summing amounts.

    Args:
        transactions: Filtered transactions
        kind: Which records to group (expenses for the dashboard pie)
        order: "first_seen" keeps the order in which categories first appear
            (dashboard pie); "magnitude" sorts by total, largest first
            (income/expense detail views)
        palette: Colors assigned by position in the returned ordering

    Returns:
        List of CategoryBucket
    """
    if order not in ("first_seen", "magnitude"):
        raise ValueError(f"Unknown category order: {order!r}")
    palette = palette or DASHBOARD_COLORS

    groups: "OrderedDict[str, Decimal]" = OrderedDict()
    for tx in transactions:
        if tx.kind != kind:
            continue
        groups[tx.category] = groups.get(tx.category, ZERO) + tx.amount

    items = list(groups.items())
    if order == "magnitude":
        items.sort(key=lambda item: item[1], reverse=True)

    return [
        CategoryBucket(category=name, total=total, color=palette[i % len(palette)])
        for i, (name, total) in enumerate(items)
    ]


def _carry(
    labels: List[str],
    indexes: List[int],
    income: Dict[int, Decimal],
    expense: Dict[int, Decimal],
) -> List[TimeSeriesPoint]:
    points = []
    running = ZERO
    for label, idx in zip(labels, indexes):
        inc = income.get(idx, ZERO)
        exp = expense.get(idx, ZERO)
        running += inc - exp
        points.append(TimeSeriesPoint(label=label, index=idx, income=inc, expense=exp, cumulative_balance=running))
    return points


def time_series(
    transactions: Iterable[TransactionRecord],
    period: PeriodFilter,
    today: Optional[date] = None,
) -> List[TimeSeriesPoint]:
    """
    Build the evolution series for the active period.

    A selected month yields one point per day of that month; "all months"
    yields one point per calendar month of the selected (or current) year.
    Buckets without transactions still appear, carrying the cumulative
    balance forward.

    The day count comes from the resolved year. With "all years" selected
    that is the current year, so a February view outside a leap year has 28
    points and records dated Feb 29 of earlier years are left out of the
    series (they still count in the period stats).

    Args:
        transactions: Transactions already narrowed by the period filter
        period: Active period
        today: Reference date for "current year" defaults

    Returns:
        Ordered list of TimeSeriesPoint
    """
    year = resolve_year(period, today)
    income: Dict[int, Decimal] = {}
    expense: Dict[int, Decimal] = {}

    if period.month != ALL:
        n_days = days_in_month(year, period.month)
        for tx in transactions:
            if tx.date.month - 1 != period.month:
                continue
            bucket = income if tx.kind == TransactionKind.INCOME else expense
            bucket[tx.date.day] = bucket.get(tx.date.day, ZERO) + tx.amount
        days = list(range(1, n_days + 1))
        return _carry([str(d) for d in days], days, income, expense)

    for tx in transactions:
        if tx.date.year != year:
            continue
        idx = tx.date.month - 1
        bucket = income if tx.kind == TransactionKind.INCOME else expense
        bucket[idx] = bucket.get(idx, ZERO) + tx.amount
    return _carry(MONTH_LABELS, list(range(12)), income, expense)


def monthly_balances(transactions: Iterable[TransactionRecord], year: int) -> List[Decimal]:
    """Income minus expense for each of the 12 months of a year."""
    balances = [ZERO] * 12
    for tx in transactions:
        if tx.date.year != year:
            continue
        sign = 1 if tx.kind == TransactionKind.INCOME else -1
        balances[tx.date.month - 1] += sign * tx.amount
    return balances


def kind_detail(
    transactions: List[TransactionRecord],
    kind: TransactionKind,
    period: PeriodFilter,
    today: Optional[date] = None,
) -> KindDetail:
    """
    Income or expense detail view.

    Compares the period total with the previous month, lists categories by
    magnitude, and builds the 12-month evolution of this kind for the
    selected (or current) year.

    Args:
        transactions: All of the owner's transactions (unfiltered)
        kind: Income or expense
        period: Active period
        today: Reference date for "current year" defaults

    Returns:
        KindDetail
    """
    of_kind = [tx for tx in transactions if tx.kind == kind]
    current = filter_transactions(of_kind, PeriodFilter(month=period.month, year=period.year))

    # Previous-month comparison only applies to a concrete month and year
    if period.month != ALL and period.year != ALL:
        prev_month, prev_year = previous_month(period.month, period.year)
        previous = filter_transactions(of_kind, PeriodFilter(month=prev_month, year=prev_year))
    else:
        previous = []

    total = sum((tx.amount for tx in current), ZERO)
    previous_total = sum((tx.amount for tx in previous), ZERO)
    variation = float((total - previous_total) / previous_total * 100) if previous_total > 0 else 0.0

    burn_rate = 0.0
    if kind == TransactionKind.EXPENSE:
        period_income = sum(
            (
                tx.amount
                for tx in filter_transactions(transactions, PeriodFilter(month=period.month, year=period.year))
                if tx.kind == TransactionKind.INCOME
            ),
            ZERO,
        )
        burn_rate = float(total / period_income * 100) if period_income > 0 else 0.0

    year = resolve_year(period, today)
    evolution = []
    for i, label in enumerate(MONTH_LABELS):
        value = sum((tx.amount for tx in of_kind if tx.date.year == year and tx.date.month - 1 == i), ZERO)
        evolution.append(EvolutionPoint(label=label, month=i, value=value))

    palette = INCOME_COLORS if kind == TransactionKind.INCOME else EXPENSE_COLORS
    return KindDetail(
        kind=kind,
        month=period.month,
        year=period.year,
        total=total,
        previous_total=previous_total,
        variation=round(variation, 1),
        count=len(current),
        max_amount=max((tx.amount for tx in current), default=ZERO),
        average=(total / len(current)) if current else ZERO,
        burn_rate=round(burn_rate, 1),
        categories=category_breakdown(current, kind=kind, order="magnitude", palette=palette),
        evolution=evolution,
        transactions=sorted(current, key=lambda tx: tx.amount, reverse=True),
    )
