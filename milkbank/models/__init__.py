"""Data schemas and validation."""
from .schemas import (
    Bank,
    BankCreate,
    BankUpdate,
    BottleSize,
    PasteurizerType,
    Stage,
    BOTTLE_SIZES,
    PASTEURIZER_TYPES,
    STAGES,
)

__all__ = [
    "Bank",
    "BankCreate",
    "BankUpdate",
    "BottleSize",
    "PasteurizerType",
    "Stage",
    "BOTTLE_SIZES",
    "PASTEURIZER_TYPES",
    "STAGES",
]
