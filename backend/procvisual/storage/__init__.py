from .database import UserStore, TransactionStore, get_db, init_db

__all__ = ["UserStore", "TransactionStore", "get_db", "init_db"]
