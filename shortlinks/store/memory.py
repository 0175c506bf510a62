"""In-memory implementations of the link store and click log."""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..errors import AllocationExhausted
from .base import ClickLogBase, LinkStoreBase
from .models import ClickEvent, LinkRecord


class _StripedLocks:
    """Fixed pool of locks; a token always maps to the same lock."""

    def __init__(self, stripes: int):
        if stripes < 1:
            raise ValueError("stripes must be positive")
        self._locks = [threading.Lock() for _ in range(stripes)]

    def for_token(self, token: str) -> threading.Lock:
        return self._locks[hash(token) % len(self._locks)]


class InMemoryLinkStore(LinkStoreBase):
    """Link store backed by a dict guarded by striped locks.

    Every read-modify-write on a token happens under that token's stripe
    lock, so operations on the same token are linearizable while operations
    on different tokens rarely contend.
    """

    def __init__(self, stripes: int = 64, logger: Optional[logging.Logger] = None):
        """Initialize the store.

        Args:
            stripes: Number of lock stripes
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[str, LinkRecord] = {}
        self._locks = _StripedLocks(stripes)

    def try_insert(self, token: str, record: LinkRecord) -> bool:
        with self._locks.for_token(token):
            if token in self._records:
                return False
            self._records[token] = replace(record)
            return True

    def allocate(
        self,
        candidate_fn: Callable[[], str],
        max_attempts: int,
        record_factory: Callable[[str], LinkRecord],
    ) -> str:
        for attempt in range(1, max_attempts + 1):
            token = candidate_fn()
            if self.try_insert(token, record_factory(token)):
                if attempt > 1:
                    self.logger.debug(f"Allocated {token} after {attempt} attempts")
                return token
            self.logger.debug(f"Token collision on {token} (attempt {attempt}/{max_attempts})")

        self.logger.error(f"Token allocation exhausted after {max_attempts} attempts")
        raise AllocationExhausted(
            f"Unable to allocate a unique short code after {max_attempts} attempts"
        )

    def get(self, token: str) -> Optional[LinkRecord]:
        with self._locks.for_token(token):
            record = self._records.get(token)
            return replace(record) if record else None

    def increment_hit(self, token: str, created_at: Optional[datetime] = None) -> bool:
        with self._locks.for_token(token):
            record = self._records.get(token)
            if record is None:
                return False
            if created_at is not None and record.created_at != created_at:
                return False
            record.hit_count += 1
            return True

    def delete(self, token: str) -> bool:
        with self._locks.for_token(token):
            return self._records.pop(token, None) is not None

    def delete_if_expired(self, token: str, now: datetime) -> Optional[LinkRecord]:
        with self._locks.for_token(token):
            record = self._records.get(token)
            if record is None or not record.is_expired(now):
                return None
            return self._records.pop(token)

    def snapshot_all(self) -> List[LinkRecord]:
        # dict.copy() is a single C-level call, so writers wait only for the copy
        records = self._records.copy()
        return [replace(record) for record in records.values()]

    def __len__(self) -> int:
        return len(self._records)


class InMemoryClickLog(ClickLogBase):
    """Click log keyed by token, one list per token."""

    def __init__(self, stripes: int = 64, logger: Optional[logging.Logger] = None):
        """Initialize the click log.

        Args:
            stripes: Number of lock stripes
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._events: Dict[str, List[ClickEvent]] = {}
        self._locks = _StripedLocks(stripes)

    def append(self, token: str, event: ClickEvent) -> None:
        with self._locks.for_token(token):
            self._events.setdefault(token, []).append(event)

    def get_all(self, token: str) -> List[ClickEvent]:
        with self._locks.for_token(token):
            return list(self._events.get(token, ()))

    def count(self, token: str) -> int:
        with self._locks.for_token(token):
            return len(self._events.get(token, ()))

    def delete(self, token: str, before: Optional[datetime] = None) -> None:
        with self._locks.for_token(token):
            if before is None:
                self._events.pop(token, None)
                return
            kept = [event for event in self._events.get(token, ()) if event.timestamp >= before]
            if kept:
                self._events[token] = kept
            else:
                self._events.pop(token, None)

    def purge_orphans(self, exists: Callable[[str], bool]) -> int:
        removed = 0
        for token in list(self._events.copy()):
            with self._locks.for_token(token):
                if token in self._events and not exists(token):
                    del self._events[token]
                    removed += 1
        if removed:
            self.logger.debug(f"Purged {removed} orphaned click sequences")
        return removed
