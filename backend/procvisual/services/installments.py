"""Installment expansion: one submitted transaction into N monthly records."""
import uuid
from decimal import Decimal
from typing import List

from procvisual.models.transaction import TransactionCreate, TransactionRecordCreate
from procvisual.utils.dates import add_months
from procvisual.utils.money import quantize_cents

AMOUNT_MODES = ("repeat", "split")


class InstallmentExpander:
    """Expands a submitted transaction into its persisted installment records."""

    def __init__(self, amount_mode: str = "repeat"):
        """
        Initialize expander.

        Args:
            amount_mode: "repeat" gives every installment the full entered
                amount; "split" divides the amount across installments
        """
        if amount_mode not in AMOUNT_MODES:
            raise ValueError(f"Unknown installment amount mode: {amount_mode!r}")
        self.amount_mode = amount_mode

    def _amounts(self, amount: Decimal, count: int) -> List[Decimal]:
        if self.amount_mode == "repeat":
            return [amount] * count
        share = quantize_cents(amount / count)
        remainder = amount - share * count
        return [share + remainder] + [share] * (count - 1)

    def expand(self, tx: TransactionCreate, owner_id: str) -> List[TransactionRecordCreate]:
        """
        Expand a transaction into one record per installment.

        With ``installments`` unset or 1 the record is emitted unchanged.
        Otherwise record i (1-based) is dated i-1 months after the entered
        date and its description gets the " (i/N)" suffix. All records of
        a batch share one batch_id.

        Args:
            tx: Submitted transaction
            owner_id: Authenticated owner

        Returns:
            Records to hand to the store as one atomic batch
        """
        count = tx.installments or 1
        batch_id = str(uuid.uuid4())

        if count <= 1:
            return [
                TransactionRecordCreate(
                    owner_id=owner_id,
                    kind=tx.kind,
                    amount=tx.amount,
                    category=tx.category,
                    date=tx.date,
                    description=tx.description,
                    batch_id=batch_id,
                    idempotency_key=tx.idempotency_key,
                )
            ]

        amounts = self._amounts(tx.amount, count)
        return [
            TransactionRecordCreate(
                owner_id=owner_id,
                kind=tx.kind,
                amount=amounts[i],
                category=tx.category,
                date=add_months(tx.date, i),
                description=f"{tx.description} ({i + 1}/{count})",
                batch_id=batch_id,
                idempotency_key=tx.idempotency_key,
            )
            for i in range(count)
        ]
