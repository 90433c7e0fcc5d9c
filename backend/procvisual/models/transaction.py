"""Transaction data models."""
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from procvisual.utils.dates import parse_date
from procvisual.utils.money import MAX_AMOUNT, parse_amount


class TransactionKind(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


CATEGORIES: Dict[TransactionKind, List[str]] = {
    TransactionKind.INCOME: ["Salary", "Investments", "Freelance", "Gift", "Other"],
    TransactionKind.EXPENSE: ["Food", "Housing", "Transport", "Leisure", "Health", "Education", "Other"],
}


class _AmountDateMixin(BaseModel):
    """Permissive amount and date parsing shared by the transaction models."""

    @field_validator("amount", mode="before", check_fields=False)
    @classmethod
    def _parse_amount(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return parse_date(value)

    @field_serializer("amount", when_used="json", check_fields=False)
    def _serialize_amount(self, amount: Decimal) -> float:
        return float(amount)


class TransactionCreate(_AmountDateMixin):
    """Transaction as submitted by the client."""

    kind: TransactionKind = Field(..., description="income or expense")
    amount: Decimal = Field(
        ..., ge=-MAX_AMOUNT, le=MAX_AMOUNT, description="Entered amount; non-numeric input reads as 0"
    )
    category: str = Field(..., min_length=1, description="Category label (not validated against the vocabulary)")
    date: dt.date = Field(..., description="Calendar date of the (first) transaction")
    description: str = Field(default="", description="Free-text label")
    installments: Optional[int] = Field(None, ge=1, le=360, description="Split into N monthly installments")
    idempotency_key: Optional[str] = Field(None, max_length=128, description="Client key guarding double submission")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "kind": "expense",
                "amount": "1200.00",
                "category": "Housing",
                "date": "2024-01-31",
                "description": "New sofa",
                "installments": 3,
            }
        }
    )


class TransactionRecordCreate(_AmountDateMixin):
    """One record ready to be persisted (a single installment)."""

    owner_id: str = Field(..., description="Owner email")
    kind: TransactionKind
    amount: Decimal
    category: str
    date: dt.date
    description: str = ""
    batch_id: Optional[str] = Field(None, description="Shared by all installments of one submission")
    idempotency_key: Optional[str] = None


class TransactionRecord(TransactionRecordCreate):
    """Persisted transaction record."""

    id: str
    created_at: Optional[dt.datetime] = None


class TransactionBatchResponse(BaseModel):
    """Response from transaction creation."""

    success: bool = True
    count: int
    batch_id: Optional[str] = None
    duplicate: bool = Field(default=False, description="True when the idempotency key was already used")
    transactions: List[TransactionRecord] = Field(default_factory=list)
