"""Savings goal tracking and savings projection."""
from decimal import Decimal
from typing import Iterable

from procvisual.models.dashboard import (
    GoalProgress,
    MonthlyContribution,
    ProjectionPoint,
    ProjectionResponse,
)
from procvisual.models.transaction import TransactionRecord
from procvisual.services.aggregation import monthly_balances, percent_of
from procvisual.utils.money import round_half_up

ZERO = Decimal("0")


def goal_progress(
    transactions: Iterable[TransactionRecord],
    monthly_target: Decimal,
    year: int,
) -> GoalProgress:
    """
    Compare a monthly savings target with the realized monthly balances.

    Each month contributes its balance clamped to [0, monthly_target], so a
    deficit month counts as zero and a surplus beyond the target does not
    carry over.

    Args:
        transactions: The owner's transactions (any period)
        monthly_target: Desired savings per month
        year: Year to evaluate

    Returns:
        GoalProgress with percent capped at 100
    """
    monthly_target = max(Decimal(monthly_target), ZERO)
    balances = monthly_balances(transactions, year)

    realized = ZERO
    monthly = []
    for month, balance in enumerate(balances):
        contribution = min(max(ZERO, balance), monthly_target)
        realized += contribution
        monthly.append(MonthlyContribution(month=month, balance=balance, contribution=contribution))

    target = monthly_target * 12
    return GoalProgress(
        year=year,
        monthly_target=monthly_target,
        target=target,
        realized=realized,
        percent=min(100, percent_of(realized, target)),
        monthly=monthly,
    )


def savings_projection(
    monthly_saving: Decimal,
    annual_rate_percent: Decimal,
    months: int = 12,
) -> ProjectionResponse:
    """
    Project savings with monthly deposits and monthly compounding.

    Point 0 is "Today" with nothing saved; each following month adds the
    deposit and then applies a twelfth of the annual rate.
    """
    monthly = max(Decimal(monthly_saving), ZERO)
    rate = Decimal(annual_rate_percent) / 100 / 12

    points = []
    total = ZERO
    for i in range(months + 1):
        label = "Today" if i == 0 else f"{i}m"
        points.append(ProjectionPoint(label=label, value=Decimal(round_half_up(total))))
        total = (total + monthly) * (1 + rate)

    return ProjectionResponse(
        monthly_saving=monthly,
        final_total=points[-1].value,
        points=points,
    )
