from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Date, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Single collection holding every tracked bank.
COLLECTION_NAME = "milkbanks"


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo anyway)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MilkBank(Base):
    """One tracked milk bank.

    Optional text fields are stored as empty strings when unset; stage and
    pasteurizer type hold the enum values from `milkbank.models.schemas`.
    """

    __tablename__ = COLLECTION_NAME

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False, index=True)
    location = Column(String, default="")
    contact = Column(String, default="")
    email = Column(String, default="")
    phone = Column(String, default="")
    stage = Column(String, default="unknown")  # unknown | compatible | sampled | converted
    notes = Column(Text, default="")
    pasteurizer_type = Column(String, default="Unknown")
    volume_potential = Column(Integer, default=0)  # bottles / month
    bottle_sizes = Column(JSON, default=list)  # canonical-order list, no duplicates
    next_action = Column(Date, nullable=True)
    last_contact = Column(Date, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - repr utility
        return f"MilkBank(id={self.id}, name={self.name}, stage={self.stage})"
