"""FastAPI main application."""
import logging
import sqlite3
from datetime import date
from typing import List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from procvisual.config import settings
from procvisual.exceptions import (
    NotAuthenticatedError,
    PaywallError,
    ProcVisualError,
    TransactionNotFoundError,
)
from procvisual.logging_config import configure_logging
from procvisual.models.auth import (
    CheckoutResponse,
    DismissAlertRequest,
    GoalRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordResetRequest,
    SignupRequest,
    UserDataPayload,
    UserPublic,
)
from procvisual.models.dashboard import (
    DashboardResponse,
    GoalProgress,
    KindDetail,
    ProjectionRequest,
    ProjectionResponse,
)
from procvisual.models.transaction import (
    CATEGORIES,
    TransactionBatchResponse,
    TransactionCreate,
    TransactionKind,
    TransactionRecord,
)
from procvisual.services.aggregation import kind_detail
from procvisual.services.auth import AuthService, SessionContext, SessionRegistry
from procvisual.services.dashboard import DashboardService
from procvisual.services.filters import PeriodFilter, filter_transactions, resolve_year
from procvisual.services.goals import goal_progress, savings_projection
from procvisual.services.installments import InstallmentExpander
from procvisual.services.notifications import NotificationService
from procvisual.services.payments import CheckoutService
from procvisual.storage.database import get_db
from procvisual.utils.privacy import mask_email, obfuscate_transactions

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
sessions = SessionRegistry(ttl_hours=settings.session_ttl_hours)
auth_service = AuthService(sessions)
dashboard_service = DashboardService()
notification_service = NotificationService()
checkout_service = CheckoutService()
installment_expander = InstallmentExpander(amount_mode=settings.installment_amount_mode)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Request logging."""
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(ProcVisualError)
async def procvisual_error_handler(request: Request, exc: ProcVisualError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


def get_session(authorization: Optional[str] = Header(None)) -> SessionContext:
    """Resolve the bearer token to the caller's session."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise NotAuthenticatedError()
    return sessions.get(authorization[7:].strip())


def get_period(
    month: int = Query(-1, ge=-1, le=11, description="0-based month, -1 for all months"),
    year: int = Query(-1, ge=-1, description="Year, -1 for all years"),
    search: str = Query("", max_length=200, description="Case-insensitive text search"),
) -> PeriodFilter:
    return PeriodFilter(month=month, year=year, search=search)


def require_access(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Paywall: the dashboard needs lifetime access when the flag is enforced."""
    if settings.require_lifetime_access and not session.lifetime_access:
        raise PaywallError()
    return session


@app.get("/api/health")
async def health():
    """Health check."""
    return {"status": "ok", "app": settings.app_name}


# ---------------------------------------------------------------------------
# Auth endpoints
# ---------------------------------------------------------------------------

@app.post("/api/auth/signup", response_model=MessageResponse)
async def signup(request: SignupRequest, background_tasks: BackgroundTasks):
    """Register a user and send the welcome email in the background."""
    user_store, _ = get_db()
    user = auth_service.signup(user_store, request)
    background_tasks.add_task(notification_service.send_welcome, user.email, user.name)
    return MessageResponse(message="User registered successfully")


@app.post("/api/auth/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    user_store, _ = get_db()
    session = auth_service.login(user_store, request.email, request.password)
    return LoginResponse(
        token=session.token,
        user=UserPublic(name=session.name, email=session.owner_id),
        lifetime_access=session.lifetime_access,
    )


@app.post("/api/auth/logout", response_model=MessageResponse)
async def logout(session: SessionContext = Depends(get_session)):
    auth_service.logout(session.token)
    return MessageResponse(message="Logged out")


@app.post("/api/auth/password-reset", response_model=MessageResponse)
async def password_reset(request: PasswordResetRequest, background_tasks: BackgroundTasks):
    """
    Send a password-reset notice.

    Always answers success so the endpoint does not reveal which emails
    are registered.
    """
    user_store, _ = get_db()
    email = request.email.strip().lower()
    if user_store.get_by_email(email) is not None:
        background_tasks.add_task(notification_service.send_password_reset, email)
    else:
        logger.info("Password reset for unknown email", extra={"email": mask_email(email)})
    return MessageResponse(message="If the email is registered, a reset link is on its way")


# ---------------------------------------------------------------------------
# Transaction endpoints
# ---------------------------------------------------------------------------

@app.get("/api/categories")
async def list_categories():
    """Category vocabulary per transaction kind."""
    return {kind.value: names for kind, names in CATEGORIES.items()}


@app.get("/api/transactions", response_model=List[TransactionRecord])
async def list_transactions(
    period: PeriodFilter = Depends(get_period),
    session: SessionContext = Depends(get_session),
):
    """List the caller's transactions (newest first) for the active period."""
    _, transaction_store = get_db()
    return filter_transactions(transaction_store.list_for_owner(session.owner_id), period)


@app.post("/api/transactions", response_model=TransactionBatchResponse)
async def create_transaction(
    tx: TransactionCreate,
    session: SessionContext = Depends(get_session),
):
    """
    Record a transaction, expanding installments into one record per month.

    All installments are written as one atomic batch. A repeated
    idempotency key returns the batch stored the first time.
    """
    _, transaction_store = get_db()

    if tx.idempotency_key:
        existing = transaction_store.find_by_idempotency_key(session.owner_id, tx.idempotency_key)
        if existing:
            logger.info("Duplicate submission ignored", extra={"idempotency_key": tx.idempotency_key})
            return TransactionBatchResponse(
                count=len(existing),
                batch_id=existing[0].batch_id,
                duplicate=True,
                transactions=existing,
            )

    records = installment_expander.expand(tx, session.owner_id)
    try:
        stored = transaction_store.add_batch(records)
    except sqlite3.Error as e:
        logger.exception("Saving transactions failed")
        raise HTTPException(status_code=500, detail="Could not save transaction") from e

    logger.debug("Transactions stored", extra={"records": obfuscate_transactions(stored)})
    return TransactionBatchResponse(
        count=len(stored),
        batch_id=stored[0].batch_id if stored else None,
        transactions=stored,
    )


@app.delete("/api/transactions/{tx_id}", response_model=MessageResponse)
async def delete_transaction(tx_id: str, session: SessionContext = Depends(get_session)):
    """Delete one record. Other installments of the same batch are kept."""
    _, transaction_store = get_db()
    if not transaction_store.delete(session.owner_id, tx_id):
        raise TransactionNotFoundError()
    return MessageResponse(message="Transaction deleted")


# ---------------------------------------------------------------------------
# Dashboard endpoints
# ---------------------------------------------------------------------------

@app.get("/api/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    period: PeriodFilter = Depends(get_period),
    session: SessionContext = Depends(require_access),
):
    """Stats, category pie, evolution series, alerts and goal for the active period."""
    _, transaction_store = get_db()
    transactions = transaction_store.list_for_owner(session.owner_id)
    return dashboard_service.build(transactions, period, session, today=date.today())


@app.get("/api/views/{kind}", response_model=KindDetail)
async def get_kind_view(
    kind: TransactionKind,
    period: PeriodFilter = Depends(get_period),
    session: SessionContext = Depends(require_access),
):
    """Income or expense detail view."""
    _, transaction_store = get_db()
    transactions = transaction_store.list_for_owner(session.owner_id)
    return kind_detail(transactions, kind, period, today=date.today())


@app.post("/api/alerts/dismiss", response_model=MessageResponse)
async def dismiss_alert(request: DismissAlertRequest, session: SessionContext = Depends(get_session)):
    """Hide an alert for the rest of the session."""
    session.dismissed_alerts.add(request.key)
    return MessageResponse(message="Alert dismissed")


@app.put("/api/goal", response_model=GoalProgress)
async def set_goal(
    request: GoalRequest,
    year: int = Query(-1, ge=-1),
    session: SessionContext = Depends(get_session),
):
    """Set the session's monthly savings goal and return its progress."""
    session.monthly_goal = request.monthly_target
    _, transaction_store = get_db()
    transactions = transaction_store.list_for_owner(session.owner_id)
    return goal_progress(transactions, request.monthly_target, resolve_year(PeriodFilter(year=year), date.today()))


@app.post("/api/projection", response_model=ProjectionResponse)
async def projection(request: ProjectionRequest):
    """Savings projection with monthly deposits and compound interest."""
    return savings_projection(request.monthly_saving, request.annual_rate_percent, request.months)


# ---------------------------------------------------------------------------
# User data and payments
# ---------------------------------------------------------------------------

@app.get("/api/user-data")
async def get_user_data(session: SessionContext = Depends(get_session)):
    user_store, _ = get_db()
    return {"success": True, "data": user_store.get_extra_data(session.owner_id)}


@app.post("/api/user-data", response_model=MessageResponse)
async def save_user_data(payload: UserDataPayload, session: SessionContext = Depends(get_session)):
    user_store, _ = get_db()
    if not user_store.save_extra_data(session.owner_id, payload.data):
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="User data saved")


@app.post("/api/create-checkout-session", response_model=CheckoutResponse)
async def create_checkout_session(session: SessionContext = Depends(get_session)):
    url = await checkout_service.create_checkout_session(session.owner_id)
    return CheckoutResponse(url=url)


@app.post("/api/checkout/complete", response_model=MessageResponse)
async def complete_checkout(
    session_id: str = Query(..., description="Stripe Checkout session id"),
    session: SessionContext = Depends(get_session),
):
    """Grant lifetime access once Stripe reports the checkout as paid."""
    if not await checkout_service.is_paid(session_id, session.owner_id):
        raise PaywallError("Checkout session is not paid")
    user_store, _ = get_db()
    checkout_service.mark_lifetime_access(user_store, session.owner_id)
    session.lifetime_access = True
    return MessageResponse(message="Lifetime access granted")


@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def api_not_found(path: str, request: Request):
    """Catch-all for unknown API routes."""
    return JSONResponse(
        status_code=404,
        content={"detail": f"API route {request.method} {request.url.path} not found"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
