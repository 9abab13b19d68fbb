"""Pydantic schemas for milk bank records.

These schemas act as contracts at the store boundary: rows coming back from
the database are normalized into `Bank`, and payloads from the add/edit
forms are validated by `BankCreate` / `BankUpdate` before anything is
written. Field aliases carry the camelCase document names used in exports.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from milkbank.dates import coerce_date, is_overdue


class Stage(str, Enum):
    """Qualification stages, in pipeline order."""

    UNKNOWN = "unknown"
    COMPATIBLE = "compatible"
    SAMPLED = "sampled"
    CONVERTED = "converted"


class PasteurizerType(str, Enum):
    UNKNOWN = "Unknown"
    CIRCULATING_WATER_BATH = "Circulating Water Bath"
    HOLDER_PASTEURIZER = "Holder Pasteurizer"
    FLASH_HEATING = "Flash Heating"
    OTHER = "Other"


class BottleSize(str, Enum):
    ML_120 = "120ml"
    ML_240 = "240ml"
    OZ_1 = "1oz"
    OZ_2 = "2oz"
    OZ_4 = "4oz"


STAGES: List[Stage] = list(Stage)
PASTEURIZER_TYPES: List[PasteurizerType] = list(PasteurizerType)
BOTTLE_SIZES: List[BottleSize] = list(BottleSize)


def normalize_bottle_sizes(value: Any) -> List[BottleSize]:
    """Deduplicate bottle sizes and return them in canonical order."""
    if not value:
        return []
    chosen = {BottleSize(v) for v in value}
    return [size for size in BOTTLE_SIZES if size in chosen]


class _BankFields(BaseModel):
    """Shared field normalization for all bank schemas."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("stage", mode="before", check_fields=False)
    @classmethod
    def stage_default(cls, v):
        return Stage.UNKNOWN if v in (None, "") else v

    @field_validator("pasteurizer_type", mode="before", check_fields=False)
    @classmethod
    def pasteurizer_default(cls, v):
        return PasteurizerType.UNKNOWN if v in (None, "") else v

    @field_validator("volume_potential", mode="before", check_fields=False)
    @classmethod
    def volume_default(cls, v):
        return 0 if v in (None, "") else v

    @field_validator("bottle_sizes", mode="before", check_fields=False)
    @classmethod
    def bottle_sizes_unique(cls, v):
        return normalize_bottle_sizes(v)

    @field_validator("next_action", "last_contact", mode="before", check_fields=False)
    @classmethod
    def blank_date_is_unset(cls, v):
        return coerce_date(v)

    @field_validator(
        "location", "contact", "email", "phone", "notes", mode="before", check_fields=False
    )
    @classmethod
    def text_default(cls, v):
        return "" if v is None else v


class BankCreate(_BankFields):
    """Payload accepted by the add form."""

    name: str
    location: str = ""
    contact: str = ""
    email: str = ""
    phone: str = ""
    stage: Stage = Stage.UNKNOWN
    notes: str = ""
    pasteurizer_type: PasteurizerType = Field(
        default=PasteurizerType.UNKNOWN, alias="pasteurizerType"
    )
    volume_potential: int = Field(default=0, ge=0, alias="volumePotential")
    bottle_sizes: List[BottleSize] = Field(default_factory=list, alias="bottleSizes")
    next_action: Optional[date] = Field(default=None, alias="nextAction")
    last_contact: Optional[date] = Field(default=None, alias="lastContact")

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Bank name is required")
        return v.strip()


class BankUpdate(_BankFields):
    """Partial payload accepted by the edit form.

    Only fields present in the payload are written; use
    `model_dump(exclude_unset=True)` to get the change set.
    """

    name: Optional[str] = None
    location: Optional[str] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    stage: Optional[Stage] = None
    notes: Optional[str] = None
    pasteurizer_type: Optional[PasteurizerType] = Field(default=None, alias="pasteurizerType")
    volume_potential: Optional[int] = Field(default=None, ge=0, alias="volumePotential")
    bottle_sizes: Optional[List[BottleSize]] = Field(default=None, alias="bottleSizes")
    next_action: Optional[date] = Field(default=None, alias="nextAction")
    last_contact: Optional[date] = Field(default=None, alias="lastContact")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> str:
        # Only runs when a name was supplied; an explicit null would clear it.
        if v is None or not v.strip():
            raise ValueError("Bank name cannot be blank")
        return v.strip()

    def changes(self) -> dict:
        """Return only the fields the caller actually supplied."""
        return self.model_dump(exclude_unset=True)


class Bank(_BankFields):
    """A tracked milk bank as delivered in store snapshots."""

    id: str
    name: str = ""
    location: str = ""
    contact: str = ""
    email: str = ""
    phone: str = ""
    stage: Stage = Stage.UNKNOWN
    notes: str = ""
    pasteurizer_type: PasteurizerType = Field(
        default=PasteurizerType.UNKNOWN, alias="pasteurizerType"
    )
    volume_potential: int = Field(default=0, ge=0, alias="volumePotential")
    bottle_sizes: List[BottleSize] = Field(default_factory=list, alias="bottleSizes")
    next_action: Optional[date] = Field(default=None, alias="nextAction")
    last_contact: Optional[date] = Field(default=None, alias="lastContact")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def is_overdue(self, today: Optional[date] = None) -> bool:
        return is_overdue(self.next_action, today)

    def to_document(self) -> dict:
        """Return the camelCase, JSON-friendly document for this bank."""
        return self.model_dump(mode="json", by_alias=True)
