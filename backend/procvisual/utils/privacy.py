"""Privacy utilities for masking sensitive data in logs."""
import re
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from procvisual.models.transaction import TransactionRecord


def mask_email(email: str) -> str:
    """
    Mask the local part of an email address, keeping its first character.
    "maria@example.com" -> "m****@example.com"
    """
    if not email or "@" not in email:
        return "***"
    local, _, domain = email.partition("@")
    return f"{local[:1]}{'*' * max(len(local) - 1, 1)}@{domain}"


def obfuscate_description(description: str) -> str:
    """
    Obfuscate free-text descriptions.
    Replaces alphanumeric characters with asterisks, preserves structure
    and the installment suffix.
    """
    match = re.search(r" \(\d+/\d+\)$", description or "")
    suffix = match.group(0) if match else ""
    body = description[: len(description) - len(suffix)] if suffix else (description or "")
    return re.sub(r"[A-Za-z0-9]", "*", body) + suffix


def obfuscate_transactions(transactions: List["TransactionRecord"]) -> List[dict]:
    """
    Obfuscate transaction data for logging.
    Returns a list of dictionaries with masked owner and description.
    """
    return [
        {
            "date": tx.date.isoformat(),
            "kind": tx.kind.value,
            "amount": str(tx.amount),
            "category": tx.category or "***",
            "description": obfuscate_description(tx.description),
            "owner_id": mask_email(tx.owner_id),
        }
        for tx in transactions
    ]
