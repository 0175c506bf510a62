"""Data models for the short-link store."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """Expiry predicate shared by lazy expiry on resolve and the reaper."""
    return now >= expires_at


@dataclass
class LinkRecord:
    """A token mapped to its target URL."""

    token: str
    target: str
    created_at: datetime
    expires_at: datetime
    hit_count: int = 0

    def is_expired(self, now: datetime) -> bool:
        return is_expired(self.expires_at, now)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "token": self.token,
            "target": self.target,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
            "hit_count": self.hit_count,
        }


@dataclass(frozen=True)
class ClickMetadata:
    """Requester details captured at redirect time."""

    source_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    country_hint: Optional[str] = None


@dataclass(frozen=True)
class ClickEvent:
    """One recorded redirect."""

    token: str
    timestamp: datetime
    source_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    country_hint: Optional[str] = None

    @classmethod
    def from_metadata(cls, token: str, timestamp: datetime, metadata: ClickMetadata) -> "ClickEvent":
        return cls(
            token=token,
            timestamp=timestamp,
            source_address=metadata.source_address,
            user_agent=metadata.user_agent,
            referrer=metadata.referrer,
            country_hint=metadata.country_hint,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp,
            "source_address": self.source_address,
            "user_agent": self.user_agent,
            "referrer": self.referrer,
            "country_hint": self.country_hint,
        }
