"""Thin repository helpers for milk bank rows.

These functions provide a small abstraction over SQLAlchemy sessions so the
store adapter can persist form payloads deterministically. They commit on
success and leave error handling to the caller.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from milkbank.models.schemas import Bank, BankCreate

from .models import MilkBank, utcnow


def _column_value(value):
    # Enums are stored by value; lists of enums become lists of strings.
    if isinstance(value, list):
        return [getattr(v, "value", v) for v in value]
    return getattr(value, "value", value)


def to_bank(row: MilkBank) -> Bank:
    """Convert a row into the validated snapshot schema."""
    return Bank(
        id=row.id,
        name=row.name,
        location=row.location,
        contact=row.contact,
        email=row.email,
        phone=row.phone,
        stage=row.stage,
        notes=row.notes,
        pasteurizer_type=row.pasteurizer_type,
        volume_potential=row.volume_potential,
        bottle_sizes=row.bottle_sizes,
        next_action=row.next_action,
        last_contact=row.last_contact,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def create_bank(
    session: Session, payload: BankCreate, now: Optional[datetime] = None
) -> MilkBank:
    """Insert a new bank with createdAt == updatedAt.

    Returns the persisted MilkBank instance.
    """
    stamp = now or utcnow()
    row = MilkBank(
        **{field: _column_value(value) for field, value in payload.model_dump().items()},
        created_at=stamp,
        updated_at=stamp,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def update_bank(
    session: Session, bank_id: str, changes: dict, now: Optional[datetime] = None
) -> Optional[MilkBank]:
    """Merge `changes` into an existing bank and refresh updatedAt.

    Returns None if the bank no longer exists. updatedAt never moves
    backwards, even if the clock does.
    """
    row = session.get(MilkBank, bank_id)
    if row is None:
        return None
    for field, value in changes.items():
        setattr(row, field, _column_value(value))
    stamp = now or utcnow()
    row.updated_at = max(stamp, row.updated_at or stamp)
    session.commit()
    session.refresh(row)
    return row


def delete_bank(session: Session, bank_id: str) -> bool:
    """Delete a bank; returns False if it was already gone."""
    row = session.get(MilkBank, bank_id)
    if row is None:
        return False
    session.delete(row)
    session.commit()
    return True


def get_bank(session: Session, bank_id: str) -> Optional[MilkBank]:
    return session.get(MilkBank, bank_id)


def list_banks(session: Session) -> List[MilkBank]:
    """Return every bank ordered by name ascending."""
    q = select(MilkBank).order_by(MilkBank.name, MilkBank.id)
    return list(session.execute(q).scalars().all())
