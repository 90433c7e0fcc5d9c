"""Dashboard pipeline: filter, aggregate, alert, track goal."""
import logging
from datetime import date
from typing import List, Optional

from procvisual.models.dashboard import DashboardResponse
from procvisual.models.transaction import TransactionKind, TransactionRecord
from procvisual.services.aggregation import category_breakdown, summarize, time_series
from procvisual.services.alerts import AlertEngine, without_dismissed
from procvisual.services.auth import SessionContext
from procvisual.services.filters import PeriodFilter, filter_transactions, resolve_year
from procvisual.services.goals import goal_progress

logger = logging.getLogger(__name__)


class DashboardService:
    """Derives everything the dashboard shows from the owner's transactions."""

    def __init__(self, alert_engine: Optional[AlertEngine] = None):
        self.alert_engine = alert_engine or AlertEngine()

    def build(
        self,
        transactions: List[TransactionRecord],
        period: PeriodFilter,
        session: SessionContext,
        today: Optional[date] = None,
    ) -> DashboardResponse:
        """
        Run the pipeline for one request.

        Args:
            transactions: All of the session owner's transactions
            period: Active period and search filter
            session: Session context (dismissed alerts, savings goal)
            today: Reference date for "current year" defaults

        Returns:
            DashboardResponse
        """
        filtered = filter_transactions(transactions, period)
        stats = summarize(filtered)
        buckets = category_breakdown(filtered, kind=TransactionKind.EXPENSE, order="first_seen")
        series = time_series(filtered, period, today)

        alerts = self.alert_engine.evaluate(len(transactions), stats, buckets)
        alerts = without_dismissed(alerts, session.dismissed_alerts)

        year = resolve_year(period, today)
        goal = None
        if session.monthly_goal is not None:
            goal = goal_progress(transactions, session.monthly_goal, year)

        logger.debug(
            "Dashboard built",
            extra={
                "month": period.month,
                "year": period.year,
                "total": len(transactions),
                "filtered": len(filtered),
                "alerts": len(alerts),
            },
        )
        return DashboardResponse(
            month=period.month,
            year=period.year,
            stats=stats,
            categories=buckets,
            time_series=series,
            alerts=alerts,
            goal=goal,
            transaction_count=len(filtered),
        )
