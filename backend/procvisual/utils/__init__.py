from .privacy import mask_email, obfuscate_description, obfuscate_transactions
from .money import parse_amount, quantize_cents, round_half_up
from .dates import parse_date, add_months, days_in_month, previous_month

__all__ = [
    "mask_email",
    "obfuscate_description",
    "obfuscate_transactions",
    "parse_amount",
    "quantize_cents",
    "round_half_up",
    "parse_date",
    "add_months",
    "days_in_month",
    "previous_month",
]
