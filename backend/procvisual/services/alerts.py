"""Alert and insight rules evaluated over the period stats."""
import logging
from decimal import Decimal
from typing import Iterable, List, Sequence

from procvisual.models.dashboard import Alert, AlertSeverity, CategoryBucket, PeriodStats
from procvisual.utils.money import round_half_up

logger = logging.getLogger(__name__)

CATEGORY_SHARE_THRESHOLD = Decimal("0.40")
SPENDING_LIMIT_PERCENT = 80
MAX_ALERTS = 3


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


class AlertEngine:
    """
    Deterministic rule evaluation. Rules run in a fixed order and the
    accumulated list is truncated to ``max_alerts``, so many category
    warnings can crowd out the balance and spending-limit alerts.
    """

    def __init__(
        self,
        category_threshold: Decimal = CATEGORY_SHARE_THRESHOLD,
        spending_limit_percent: int = SPENDING_LIMIT_PERCENT,
        max_alerts: int = MAX_ALERTS,
    ):
        self.category_threshold = category_threshold
        self.spending_limit_percent = spending_limit_percent
        self.max_alerts = max_alerts

    def evaluate(
        self,
        total_transaction_count: int,
        stats: PeriodStats,
        buckets: Sequence[CategoryBucket],
    ) -> List[Alert]:
        """
        Generate alerts for the active period.

        Args:
            total_transaction_count: Number of the owner's transactions before
                any filtering; zero short-circuits to the welcome alert
            stats: Period stats of the filtered set
            buckets: Expense category buckets of the filtered set

        Returns:
            At most ``max_alerts`` alerts, in rule order
        """
        if total_transaction_count == 0:
            return [
                Alert(
                    key="welcome",
                    rule="welcome",
                    severity=AlertSeverity.INFO,
                    title="Welcome to ProcVisual!",
                    description="Add your first transaction to start seeing insights.",
                )
            ]

        alerts: List[Alert] = []

        if stats.expense > 0:
            for bucket in buckets:
                share = bucket.total / stats.expense
                if share > self.category_threshold:
                    percent = round_half_up(share * 100)
                    alerts.append(
                        Alert(
                            key=f"category_concentration:{bucket.category}",
                            rule="category_concentration",
                            severity=AlertSeverity.WARNING,
                            title=f"{percent}% of your spending went to {bucket.category}",
                            description="This category takes a large share of your expenses.",
                        )
                    )

        if stats.balance > 0:
            alerts.append(
                Alert(
                    key="positive_balance",
                    rule="positive_balance",
                    severity=AlertSeverity.SUCCESS,
                    title="Positive balance!",
                    description=f"You saved {_money(stats.balance)} in this period.",
                )
            )
        elif stats.balance < 0:
            alerts.append(
                Alert(
                    key="negative_balance",
                    rule="negative_balance",
                    severity=AlertSeverity.WARNING,
                    title="Expenses exceeded income",
                    description=f"You spent {_money(-stats.balance)} more than you earned in this period.",
                )
            )

        if stats.percent_spent > self.spending_limit_percent:
            alerts.append(
                Alert(
                    key="spending_limit",
                    rule="spending_limit",
                    severity=AlertSeverity.WARNING,
                    title="Approaching your spending limit",
                    description=f"You have already spent {stats.percent_spent}% of your income.",
                )
            )

        if len(alerts) > self.max_alerts:
            logger.debug("Truncating alerts", extra={"generated": len(alerts), "kept": self.max_alerts})
        return alerts[: self.max_alerts]


def without_dismissed(alerts: Iterable[Alert], dismissed_keys: Iterable[str]) -> List[Alert]:
    """Drop alerts the user dismissed during the current session."""
    dismissed = set(dismissed_keys)
    return [alert for alert in alerts if alert.key not in dismissed]
