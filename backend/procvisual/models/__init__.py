from .transaction import (
    CATEGORIES,
    TransactionKind,
    TransactionCreate,
    TransactionRecordCreate,
    TransactionRecord,
    TransactionBatchResponse,
)
from .dashboard import (
    PeriodStats,
    CategoryBucket,
    TimeSeriesPoint,
    AlertSeverity,
    Alert,
    MonthlyContribution,
    GoalProgress,
    DashboardResponse,
    EvolutionPoint,
    KindDetail,
    ProjectionPoint,
    ProjectionRequest,
    ProjectionResponse,
)
from .auth import (
    SignupRequest,
    LoginRequest,
    PasswordResetRequest,
    UserPublic,
    LoginResponse,
    MessageResponse,
    UserProfile,
    UserDataPayload,
    DismissAlertRequest,
    GoalRequest,
    CheckoutResponse,
)

__all__ = [
    "CATEGORIES",
    "TransactionKind",
    "TransactionCreate",
    "TransactionRecordCreate",
    "TransactionRecord",
    "TransactionBatchResponse",
    "PeriodStats",
    "CategoryBucket",
    "TimeSeriesPoint",
    "AlertSeverity",
    "Alert",
    "MonthlyContribution",
    "GoalProgress",
    "DashboardResponse",
    "EvolutionPoint",
    "KindDetail",
    "ProjectionPoint",
    "ProjectionRequest",
    "ProjectionResponse",
    "SignupRequest",
    "LoginRequest",
    "PasswordResetRequest",
    "UserPublic",
    "LoginResponse",
    "MessageResponse",
    "UserProfile",
    "UserDataPayload",
    "DismissAlertRequest",
    "GoalRequest",
    "CheckoutResponse",
]
