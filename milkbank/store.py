"""Live store adapter for the milk bank collection.

`BankStore` exposes the subscribe/create/update/delete contract the UI is
built on:

- subscribers get the complete, name-ordered record list on the initial
  load and again after every change anywhere in the collection;
- writes run on a small thread pool and return a Future resolving to a
  `WriteResult`, so callers decide whether to wait, poll, or ignore them.

Changes made through this store wake the watcher immediately. Changes made
by other processes sharing the same database are picked up on the next
poll.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from milkbank.config import Settings, get_settings
from milkbank.database import (
    create_bank,
    delete_bank,
    get_engine,
    init_db,
    list_banks,
    make_session_factory,
    to_bank,
    update_bank,
)
from milkbank.models.schemas import Bank, BankCreate, BankUpdate
from milkbank.utils.logger import get_logger

logger = get_logger(__name__)

SnapshotCallback = Callable[[List[Bank]], None]


class StoreError(Exception):
    """Raised when the store cannot complete an operation."""
    pass


class NotFoundError(StoreError):
    """Raised when a bank vanished before an update reached it."""
    pass


class InvalidBankError(StoreError):
    """Raised when a payload fails schema validation or a store constraint."""
    pass


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a create/update/delete."""

    ok: bool
    operation: str
    bank_id: Optional[str] = None
    error: Optional[StoreError] = None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class Subscription:
    """Handle returned by `BankStore.subscribe`.

    Call `unsubscribe()` (or leave the `with` block) on teardown to stop
    receiving snapshots.
    """

    def __init__(self, store: "BankStore", callback: SnapshotCallback):
        self._store = store
        self.callback = callback
        self.active = True
        # Last list delivered to this subscriber; None until the initial load.
        self.delivered: Optional[List[Bank]] = None

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._store._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.unsubscribe()


class BankStore:
    """Subscribe/create/update/delete over the `milkbanks` collection."""

    def __init__(
        self,
        session_factory: sessionmaker,
        poll_interval: float = 2.0,
        max_workers: int = 2,
    ):
        """Initialize the store.

        Args:
            session_factory: SQLAlchemy sessionmaker bound to an initialized engine
            poll_interval: Seconds between checks for changes made elsewhere
            max_workers: Size of the write thread pool
        """
        self._session_factory = session_factory
        self.poll_interval = poll_interval
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="bank-store-write"
        )
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []
        self._wake = threading.Event()
        self._stop: Optional[threading.Event] = None
        self._watcher: Optional[threading.Thread] = None
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "BankStore":
        """Build a store (engine, tables, session factory) from settings."""
        settings = settings or get_settings()
        engine = get_engine(settings.database_url)
        init_db(engine)
        logger.info(f"BankStore connected to {engine.url.render_as_string(hide_password=True)}")
        return cls(
            make_session_factory(engine),
            poll_interval=settings.poll_seconds,
            max_workers=settings.write_workers,
        )

    # ------------------------------------------------------------------
    # Reads + live feed
    # ------------------------------------------------------------------

    def snapshot(self) -> List[Bank]:
        """Return the complete record set ordered by name.

        Rows that no longer fit the schema (written by another tool, or by an
        older version) are logged and left out rather than failing the read.
        """
        try:
            with self._session_factory() as session:
                rows = list_banks(session)
        except SQLAlchemyError as e:
            raise StoreError(f"Store unreachable: {e}") from e

        banks: List[Bank] = []
        for row in rows:
            try:
                banks.append(to_bank(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed bank {row.id}: {e.error_count()} invalid field(s)")
        return banks

    def subscribe(self, callback: SnapshotCallback) -> Subscription:
        """Open a live feed of the full record set.

        The callback runs on the watcher thread with the initial snapshot and
        then once per change.
        """
        if self._closed:
            raise StoreError("Store is closed")
        sub = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(sub)
            self._ensure_watcher()
        self._wake.set()
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)
            if self._subscriptions:
                return
            watcher, stop = self._watcher, self._stop
            self._watcher = None
            self._stop = None
        # Last subscriber gone: stop the watcher so the connection is released.
        if stop is not None:
            stop.set()
            self._wake.set()
        if watcher is not None and watcher is not threading.current_thread():
            watcher.join(timeout=5)

    def _ensure_watcher(self) -> None:
        if self._watcher is not None and self._watcher.is_alive():
            return
        self._stop = threading.Event()
        self._watcher = threading.Thread(
            target=self._watch, args=(self._stop,), name="bank-store-watcher", daemon=True
        )
        self._watcher.start()

    def _watch(self, stop: threading.Event) -> None:
        while not stop.is_set():
            # Clear before reading so a write landing mid-read triggers another pass.
            self._wake.clear()
            try:
                banks = self.snapshot()
            except StoreError as e:
                logger.warning(f"Snapshot failed, keeping last delivered state: {e}")
            else:
                self._publish(banks, stop)
            self._wake.wait(self.poll_interval)

    def _publish(self, banks: List[Bank], stop: threading.Event) -> None:
        with self._lock:
            subscribers = list(self._subscriptions)
        for sub in subscribers:
            if stop.is_set() or not sub.active:
                continue
            if sub.delivered is not None and sub.delivered == banks:
                continue
            sub.delivered = banks
            try:
                sub.callback(list(banks))
            except Exception:
                logger.exception("Snapshot callback failed")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, fields: Dict) -> "Future[WriteResult]":
        """Write a new bank with a store-assigned id and timestamps."""
        return self._submit("create", None, self._create, fields)

    def update(self, bank_id: str, fields: Dict) -> "Future[WriteResult]":
        """Merge `fields` into an existing bank, refreshing updatedAt."""
        return self._submit("update", bank_id, self._update, bank_id, fields)

    def delete(self, bank_id: str) -> "Future[WriteResult]":
        """Remove a bank. Deleting a missing bank is not an error."""
        return self._submit("delete", bank_id, self._delete, bank_id)

    def _submit(self, operation: str, bank_id: Optional[str], fn, *args) -> "Future[WriteResult]":
        if self._closed:
            raise StoreError("Store is closed")
        return self._executor.submit(self._run_write, operation, bank_id, fn, *args)

    def _run_write(self, operation: str, bank_id: Optional[str], fn, *args) -> WriteResult:
        try:
            bank_id = fn(*args)
        except StoreError as e:
            logger.error(f"{operation} failed for {bank_id or 'new bank'}: {e}")
            return WriteResult(ok=False, operation=operation, bank_id=bank_id, error=e)
        self._wake.set()
        return WriteResult(ok=True, operation=operation, bank_id=bank_id)

    def _create(self, fields: Dict) -> str:
        try:
            payload = BankCreate.model_validate(fields)
        except ValidationError as e:
            raise InvalidBankError(str(e)) from e
        try:
            with self._session_factory() as session:
                row = create_bank(session, payload)
                logger.info(f"Created bank {row.id} ({row.name})")
                return row.id
        except IntegrityError as e:
            raise InvalidBankError(f"Rejected by the store: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Store write failed: {e}") from e

    def _update(self, bank_id: str, fields: Dict) -> str:
        try:
            changes = BankUpdate.model_validate(fields).changes()
        except ValidationError as e:
            raise InvalidBankError(str(e)) from e
        try:
            with self._session_factory() as session:
                row = update_bank(session, bank_id, changes)
        except IntegrityError as e:
            raise InvalidBankError(f"Rejected by the store: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Store write failed: {e}") from e
        if row is None:
            raise NotFoundError(f"Bank {bank_id} no longer exists")
        logger.info(f"Updated bank {bank_id} ({len(changes)} fields)")
        return bank_id

    def _delete(self, bank_id: str) -> str:
        try:
            with self._session_factory() as session:
                removed = delete_bank(session, bank_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Store write failed: {e}") from e
        if removed:
            logger.info(f"Deleted bank {bank_id}")
        return bank_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """End every subscription and shut the write pool down."""
        if self._closed:
            return
        with self._lock:
            subscriptions = list(self._subscriptions)
        for sub in subscriptions:
            sub.unsubscribe()
        self._executor.shutdown(wait=True)
        self._closed = True
        logger.info("BankStore closed")
