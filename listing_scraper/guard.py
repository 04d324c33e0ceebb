"""
Change Guard: detect a stalled top-of-list.

When a scan returns the same ad id as the previous call, the guard runs one
extra scan. If that still returns the same ad, the original record comes back
annotated with same_as_last=True. It never scans more than once extra.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Awaitable, Callable, Optional

from .database import db_connect, db_get_last_seen, db_init, db_set_last_seen
from .errors import BrowserCrashed, ScrapeError
from .models import LastSeen, ListingRecord
from .utils import now_iso


class StateStore(ABC):
    """Holds the last observed ad id between calls."""

    @abstractmethod
    def get(self) -> Optional[LastSeen]:
        ...

    @abstractmethod
    def set(self, ad_id: Optional[str], observed_at: str) -> None:
        ...


class MemoryStateStore(StateStore):
    def __init__(self, initial: Optional[LastSeen] = None) -> None:
        self._value = initial

    def get(self) -> Optional[LastSeen]:
        return self._value

    def set(self, ad_id: Optional[str], observed_at: str) -> None:
        self._value = LastSeen(ad_id=ad_id, observed_at=observed_at)


class SqliteStateStore(StateStore):
    """
    State kept in a one-row SQLite table, so it survives restarts.

    Reads and writes are synchronous sqlite3 calls made from the event loop;
    each touches a single row, at most twice per scrape.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._conn = db_connect(path)
        db_init(self._conn)

    def get(self) -> Optional[LastSeen]:
        with self._lock:
            row = db_get_last_seen(self._conn)
        if row is None:
            return None
        return LastSeen(ad_id=row["ad_id"], observed_at=row["observed_at"])

    def set(self, ad_id: Optional[str], observed_at: str) -> None:
        with self._lock:
            db_set_last_seen(self._conn, ad_id, observed_at)

    def close(self) -> None:
        with self._lock:
            self._conn.close()


Rescan = Callable[[], Awaitable[ListingRecord]]


class ChangeGuard:
    def __init__(self, store: Optional[StateStore] = None, logger: Optional[logging.Logger] = None) -> None:
        self.store = store or MemoryStateStore()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def last_ad_id(self) -> Optional[str]:
        state = self.store.get()
        return state.ad_id if state else None

    async def check(self, record: ListingRecord, rescan: Rescan) -> ListingRecord:
        """
        Return record, a fresher record from one rescan, or record marked same_as_last.

        BrowserCrashed from the rescan propagates (the orchestrator owns crash
        recovery); any other ScrapeError from it counts as "no change".
        """
        last = self.last_ad_id
        if record.ad_id is None or record.ad_id != last:
            self._remember(record.ad_id)
            return record

        self.logger.info(f">>> Same ad as last time ({record.ad_id}); re-scanning once")
        try:
            fresh = await rescan()
        except BrowserCrashed:
            raise
        except ScrapeError as exc:
            self.logger.warning(f">>> Re-scan failed ({exc.__class__.__name__}: {exc}); treating as unchanged")
            fresh = None

        if fresh is not None and fresh.ad_id != record.ad_id:
            self.logger.info(f">>> Re-scan found a newer ad: {fresh.ad_id}")
            self._remember(fresh.ad_id)
            return fresh

        self._remember(record.ad_id)
        return replace(record, same_as_last=True)

    def _remember(self, ad_id: Optional[str]) -> None:
        self.store.set(ad_id, now_iso())
