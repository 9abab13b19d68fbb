"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Entrypoints (the Streamlit app, tests)
call get_settings() rather than reading os.environ directly.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


@dataclass
class Settings:
    # Store connection (shared database = shared pipeline)
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(PROJECT_ROOT, "data", "milkbanks.db"),
    )

    # Size of the known universe of eligible banks (progress bar denominator)
    total_eligible: int = int(os.getenv("MILKBANK_TOTAL_ELIGIBLE", "28"))

    # Live feed + writes
    poll_seconds: float = float(os.getenv("MILKBANK_POLL_SECONDS", "2.0"))
    write_workers: int = int(os.getenv("MILKBANK_WRITE_WORKERS", "2"))

    # UI
    ui_refresh_seconds: float = float(os.getenv("MILKBANK_UI_REFRESH_SECONDS", "5"))

    # Logging
    log_level: str = os.getenv("MB_LOG_LEVEL", "INFO")


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()
