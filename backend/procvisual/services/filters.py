"""Period and search filtering of transaction records."""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from procvisual.models.transaction import TransactionRecord

ALL = -1


@dataclass(frozen=True)
class PeriodFilter:
    """
    Active (month, year) selection plus free-text search.

    month is 0-based (0 = January); -1 selects all months.
    year -1 selects all years.
    """

    month: int = ALL
    year: int = ALL
    search: str = ""

    def __post_init__(self):
        if self.month != ALL and not 0 <= self.month <= 11:
            raise ValueError(f"month must be -1 or 0..11, got {self.month}")

    def matches_period(self, tx: TransactionRecord) -> bool:
        if self.month != ALL and tx.date.month - 1 != self.month:
            return False
        if self.year != ALL and tx.date.year != self.year:
            return False
        return True

    def matches_search(self, tx: TransactionRecord) -> bool:
        needle = (self.search or "").strip().lower()
        if not needle:
            return True
        return (
            needle in (tx.description or "").lower()
            or needle in (tx.category or "").lower()
            or needle in _amount_text(tx)
        )

    def matches(self, tx: TransactionRecord) -> bool:
        return self.matches_period(tx) and self.matches_search(tx)


def _amount_text(tx: TransactionRecord) -> str:
    # Whole amounts read as "100", not "100.00"
    amount = tx.amount
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount.normalize())


def filter_transactions(
    transactions: Iterable[TransactionRecord],
    period: PeriodFilter,
) -> List[TransactionRecord]:
    """Keep the records matching the period and the search text, in input order."""
    return [tx for tx in transactions if period.matches(tx)]


def resolve_year(period: PeriodFilter, today: Optional[date] = None) -> int:
    """Selected year, or the current year when all years are selected."""
    if period.year != ALL:
        return period.year
    return (today or date.today()).year
