"""Abstract interfaces for link and click storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from .models import ClickEvent, LinkRecord


class LinkStoreBase(ABC):
    """Token -> LinkRecord map with atomic per-token operations."""

    @abstractmethod
    def try_insert(self, token: str, record: LinkRecord) -> bool:
        """Insert a record if the token is not present.

        Args:
            token: The token to claim
            record: Record to store under the token

        Returns:
            True if inserted, False if the token is already present
            (live or expired but not yet reaped)
        """

    @abstractmethod
    def allocate(
        self,
        candidate_fn: Callable[[], str],
        max_attempts: int,
        record_factory: Callable[[str], LinkRecord],
    ) -> str:
        """Claim a fresh token drawn from ``candidate_fn``.

        Args:
            candidate_fn: Produces candidate tokens
            max_attempts: Number of candidates to try before giving up
            record_factory: Builds the record to store for the winning token

        Returns:
            The allocated token

        Raises:
            AllocationExhausted: If every candidate collided
        """

    @abstractmethod
    def get(self, token: str) -> Optional[LinkRecord]:
        """Get a copy of the record for a token, or None."""

    @abstractmethod
    def increment_hit(self, token: str, created_at: Optional[datetime] = None) -> bool:
        """Increment hit_count for a token.

        Args:
            token: The token to update
            created_at: If given, only increment when the stored record has
                this creation time

        Returns:
            True if a record was updated
        """

    @abstractmethod
    def delete(self, token: str) -> bool:
        """Delete a token. Returns True if a record was removed."""

    @abstractmethod
    def delete_if_expired(self, token: str, now: datetime) -> Optional[LinkRecord]:
        """Delete a token only if its stored record is expired at ``now``.

        Returns:
            The removed record, or None if nothing was removed
        """

    @abstractmethod
    def snapshot_all(self) -> List[LinkRecord]:
        """Point-in-time copy of every stored record."""

    @abstractmethod
    def __len__(self) -> int:
        pass


class ClickLogBase(ABC):
    """Append-only, per-token ordered sequences of click events."""

    @abstractmethod
    def append(self, token: str, event: ClickEvent) -> None:
        """Append an event to the token's sequence."""

    @abstractmethod
    def get_all(self, token: str) -> List[ClickEvent]:
        """Events for a token in insertion order (empty if none)."""

    @abstractmethod
    def count(self, token: str) -> int:
        pass

    @abstractmethod
    def delete(self, token: str, before: Optional[datetime] = None) -> None:
        """Drop the token's events. Idempotent.

        Args:
            token: The token whose events to drop
            before: If given, only drop events stamped before this time;
                later events belong to a newer link under the same token
        """

    @abstractmethod
    def purge_orphans(self, exists: Callable[[str], bool]) -> int:
        """Drop sequences whose token no longer has a link record.

        Returns:
            Number of sequences removed
        """
