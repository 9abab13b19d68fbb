"""Logging helpers for the GUI.

Avoids configuring global logging in tests. `remember_error` keeps a small
rolling buffer of UI-level errors (shown on the Logs page) in whatever
mapping the caller passes, usually `st.session_state`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import MutableMapping

logger = logging.getLogger("milkbank.gui")

UI_LOG_KEY = "ui_logs"
UI_LOG_LIMIT = 200


def log(message: str, level: int = logging.INFO) -> None:
    logger.log(level, message)


def remember_error(session: MutableMapping, message: str) -> None:
    log(message, logging.ERROR)
    logs = list(session.get(UI_LOG_KEY, []))
    logs.append(f"[{datetime.now().strftime('%H:%M:%S')}] {message}")
    session[UI_LOG_KEY] = logs[-UI_LOG_LIMIT:]
