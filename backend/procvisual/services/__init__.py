from .installments import InstallmentExpander
from .filters import PeriodFilter, filter_transactions, resolve_year
from .aggregation import (
    summarize,
    category_breakdown,
    time_series,
    monthly_balances,
    kind_detail,
)
from .alerts import AlertEngine, without_dismissed
from .goals import goal_progress, savings_projection
from .auth import AuthService, PasswordHasher, SessionContext, SessionRegistry
from .dashboard import DashboardService
from .notifications import NotificationService
from .payments import CheckoutService

__all__ = [
    "InstallmentExpander",
    "PeriodFilter",
    "filter_transactions",
    "resolve_year",
    "summarize",
    "category_breakdown",
    "time_series",
    "monthly_balances",
    "kind_detail",
    "AlertEngine",
    "without_dismissed",
    "goal_progress",
    "savings_projection",
    "AuthService",
    "PasswordHasher",
    "SessionContext",
    "SessionRegistry",
    "DashboardService",
    "NotificationService",
    "CheckoutService",
]
