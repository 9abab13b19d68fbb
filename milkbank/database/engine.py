"""Database engine and session helpers.

This centralizes engine creation so both the app and tests can share the
same configuration. By default we store the SQLite database under the
project root in `data/milkbanks.db`; point DATABASE_URL at a shared server
(e.g. Postgres) to let several people work the same pipeline.

The store reads and writes from several threads, so use a file or server
database with it; SQLite `:memory:` is per-connection.
"""

import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .models import Base

PROJECT_ROOT = os.path.abspath(
    os.path.join(os.path.dirname(__file__), os.pardir, os.pardir)
)
DB_PATH = os.path.join(PROJECT_ROOT, "data", "milkbanks.db")


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Return a SQLAlchemy engine, creating data dir as needed."""
    url = database_url or f"sqlite:///{DB_PATH}"
    if url.startswith("sqlite:///"):
        db_location = url.replace("sqlite:///", "")
        if db_location != ":memory:" and db_location:
            os.makedirs(os.path.dirname(os.path.abspath(db_location)), exist_ok=True)
    return create_engine(url, echo=False, future=True, pool_pre_ping=True)


def make_session_factory(eng: Engine) -> sessionmaker:
    return sessionmaker(bind=eng, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(eng: Engine) -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(eng)
