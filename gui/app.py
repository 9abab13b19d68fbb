"""Main application object.

`TrackerApp` owns the one live subscription to the store and the record
list it keeps current. It is created once per server process, started
explicitly, closed on shutdown, and handed to the page functions rather than
being read from module globals.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from milkbank.config import Settings, get_settings
from milkbank.models.schemas import Bank
from milkbank.store import BankStore, Subscription

from gui.utils.logging import log


@dataclass
class TrackerApp:
    """Live record list plus the store it mirrors."""

    store: BankStore
    settings: Settings = field(default_factory=get_settings)
    banks: List[Bank] = field(default_factory=list)
    loaded: bool = False
    last_snapshot_at: Optional[datetime] = None
    _subscription: Optional[Subscription] = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _first_snapshot: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TrackerApp":
        settings = settings or get_settings()
        return cls(store=BankStore.from_settings(settings), settings=settings)

    def start(self) -> "TrackerApp":
        """Open the live subscription (idempotent)."""
        if self._subscription is None:
            self._subscription = self.store.subscribe(self._on_snapshot)
            log("Live subscription opened")
        return self

    def close(self) -> None:
        """Tear down the subscription and the store."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self.store.close()
        log("Live subscription closed")

    def _on_snapshot(self, banks: List[Bank]) -> None:
        with self._lock:
            self.banks = banks
            self.loaded = True
            self.last_snapshot_at = datetime.now()
        self._first_snapshot.set()

    def current_banks(self) -> List[Bank]:
        """Return a copy of the latest snapshot."""
        with self._lock:
            return list(self.banks)

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        return self._first_snapshot.wait(timeout)

    def __enter__(self) -> "TrackerApp":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.close()
