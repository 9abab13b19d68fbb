"""Database models and session management."""
from .engine import DB_PATH, get_engine, init_db, make_session_factory
from .models import COLLECTION_NAME, Base, MilkBank
from .repository import (
    create_bank,
    delete_bank,
    get_bank,
    list_banks,
    to_bank,
    update_bank,
)

__all__ = [
    "DB_PATH",
    "get_engine",
    "init_db",
    "make_session_factory",
    "COLLECTION_NAME",
    "Base",
    "MilkBank",
    "create_bank",
    "delete_bank",
    "get_bank",
    "list_banks",
    "to_bank",
    "update_bank",
]
