"""Database storage layer using SQLite."""
import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from procvisual.config import settings
from procvisual.exceptions import DuplicateEmailError
from procvisual.models.auth import UserProfile
from procvisual.models.transaction import TransactionKind, TransactionRecord, TransactionRecordCreate

logger = logging.getLogger(__name__)


class _SQLiteStore:
    """Connection handling shared by the stores."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        raise NotImplementedError

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()


class UserStore(_SQLiteStore):
    """Storage for user profiles and their extra data."""

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT UNIQUE NOT NULL,
                    contact TEXT,
                    password_hash TEXT NOT NULL,
                    lifetime_access INTEGER NOT NULL DEFAULT 0,
                    extra_data TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @staticmethod
    def _to_profile(row: sqlite3.Row) -> UserProfile:
        return UserProfile(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            contact=row["contact"],
            password_hash=row["password_hash"],
            lifetime_access=bool(row["lifetime_access"]),
        )

    def create_user(self, name: str, email: str, contact: Optional[str], password_hash: str) -> UserProfile:
        """Insert a user; a taken email raises DuplicateEmailError."""
        with self._get_conn() as conn:
            try:
                cursor = conn.execute("""
                    INSERT INTO users (name, email, contact, password_hash, created_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (name, email, contact, password_hash, datetime.now(timezone.utc).isoformat()))
                conn.commit()
            except sqlite3.IntegrityError as e:
                raise DuplicateEmailError() from e
            return UserProfile(
                id=cursor.lastrowid,
                name=name,
                email=email,
                contact=contact,
                password_hash=password_hash,
            )

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        with self._get_conn() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._to_profile(row) if row else None

    def set_lifetime_access(self, email: str, value: bool = True) -> bool:
        """Set the lifetime access flag. Returns False if the user does not exist."""
        with self._get_conn() as conn:
            cursor = conn.execute(
                "UPDATE users SET lifetime_access = ? WHERE email = ?",
                (1 if value else 0, email),
            )
            conn.commit()
            return cursor.rowcount > 0

    def get_extra_data(self, email: str) -> Optional[Dict[str, Any]]:
        with self._get_conn() as conn:
            row = conn.execute("SELECT extra_data FROM users WHERE email = ?", (email,)).fetchone()
            if not row or not row["extra_data"]:
                return None
            return json.loads(row["extra_data"])

    def save_extra_data(self, email: str, data: Dict[str, Any]) -> bool:
        with self._get_conn() as conn:
            cursor = conn.execute(
                "UPDATE users SET extra_data = ? WHERE email = ?",
                (json.dumps(data, default=str), email),
            )
            conn.commit()
            return cursor.rowcount > 0


class TransactionStore(_SQLiteStore):
    """Storage for transactions."""

    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    amount TEXT NOT NULL,
                    category TEXT NOT NULL,
                    date TEXT NOT NULL,
                    description TEXT NOT NULL,
                    batch_id TEXT,
                    idempotency_key TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_owner_date
                ON transactions(owner_id, date)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_owner_idempotency
                ON transactions(owner_id, idempotency_key)
            """)
            conn.commit()

    @staticmethod
    def _to_record(row: sqlite3.Row) -> TransactionRecord:
        return TransactionRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            kind=TransactionKind(row["kind"]),
            amount=Decimal(row["amount"]),
            category=row["category"],
            date=date.fromisoformat(row["date"]),
            description=row["description"],
            batch_id=row["batch_id"],
            idempotency_key=row["idempotency_key"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def add_batch(self, records: List[TransactionRecordCreate]) -> List[TransactionRecord]:
        """
        Insert records in a single SQLite transaction.

        Either every record of the batch is stored or none is.
        """
        created_at = datetime.now(timezone.utc)
        stored = [
            TransactionRecord(id=str(uuid.uuid4()), created_at=created_at, **record.model_dump())
            for record in records
        ]
        with self._get_conn() as conn:
            try:
                conn.executemany("""
                    INSERT INTO transactions
                    (id, owner_id, kind, amount, category, date, description, batch_id, idempotency_key, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, [
                    (
                        tx.id,
                        tx.owner_id,
                        tx.kind.value,
                        str(tx.amount),
                        tx.category,
                        tx.date.isoformat(),
                        tx.description,
                        tx.batch_id,
                        tx.idempotency_key,
                        created_at.isoformat(),
                    )
                    for tx in stored
                ])
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                logger.error("Batch insert rolled back", extra={"batch_size": len(stored)})
                raise
        return stored

    def list_for_owner(self, owner_id: str) -> List[TransactionRecord]:
        """Get an owner's transactions, newest date first."""
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT * FROM transactions
                WHERE owner_id = ?
                ORDER BY date DESC, created_at ASC, description ASC
            """, (owner_id,)).fetchall()
            return [self._to_record(row) for row in rows]

    def find_by_idempotency_key(self, owner_id: str, key: str) -> List[TransactionRecord]:
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT * FROM transactions
                WHERE owner_id = ? AND idempotency_key = ?
                ORDER BY date ASC
            """, (owner_id, key)).fetchall()
            return [self._to_record(row) for row in rows]

    def delete(self, owner_id: str, tx_id: str) -> bool:
        """Delete one record of the owner. Installment siblings are left alone."""
        with self._get_conn() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND owner_id = ?",
                (tx_id, owner_id),
            )
            conn.commit()
            return cursor.rowcount > 0


# Global instances
_user_store = None
_transaction_store = None


def init_db(db_path: Optional[str] = None) -> Tuple[UserStore, TransactionStore]:
    """(Re)create the global stores against ``db_path``."""
    global _user_store, _transaction_store
    path = db_path or settings.database_path
    _user_store = UserStore(path)
    _transaction_store = TransactionStore(path)
    return _user_store, _transaction_store


def get_db() -> Tuple[UserStore, TransactionStore]:
    """Get database store instances."""
    if _user_store is None or _transaction_store is None:
        return init_db()
    return _user_store, _transaction_store
