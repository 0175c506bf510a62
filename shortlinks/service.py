"""Business logic service for short links."""

import enum
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from .common.validators import is_valid_short_code, is_valid_url, is_valid_validity
from .errors import TokenTaken, ValidationError
from .shortcode import ShortCodeGenerator
from .store.base import ClickLogBase, LinkStoreBase
from .store.models import ClickEvent, ClickMetadata, LinkRecord, utc_now


class ResolveOutcome(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    GONE = "gone"


@dataclass(frozen=True)
class Resolution:
    """Result of resolving a token."""

    outcome: ResolveOutcome
    target: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.outcome is ResolveOutcome.FOUND


class LinkService:
    """Service layer composing the link store, click log and token generator."""

    def __init__(
        self,
        link_store: LinkStoreBase,
        click_log: ClickLogBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = utc_now,
        enable_custom_codes: bool = True,
        alloc_max_attempts: int = 10,
        max_validity_minutes: int = 525600,
        default_validity_minutes: int = 30,
    ):
        """Initialize the link service.

        Args:
            link_store: Store owning token -> record mappings
            click_log: Store owning per-token click events
            short_code_generator: Optional short code generator
            logger: Optional logger
            clock: Returns the current UTC time
            enable_custom_codes: Whether to allow caller-supplied tokens
            alloc_max_attempts: Candidate tokens tried before giving up
            max_validity_minutes: Upper bound for a link's lifetime
            default_validity_minutes: Lifetime used when none is given
        """
        self.link_store = link_store
        self.click_log = click_log
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.enable_custom_codes = enable_custom_codes
        self.alloc_max_attempts = alloc_max_attempts
        self.max_validity_minutes = max_validity_minutes
        self.default_validity_minutes = default_validity_minutes
        self._started = time.monotonic()

    def create(
        self,
        target: str,
        validity_minutes: Optional[int] = None,
        custom_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a new short link.

        Args:
            target: The URL to redirect to
            validity_minutes: Lifetime in minutes (default if None)
            custom_token: Optional caller-chosen token (empty means generate one)

        Returns:
            Dictionary with token, target, created_at, expires_at

        Raises:
            ValidationError: If the URL, validity or custom token is malformed
            TokenTaken: If the custom token is already in use
            AllocationExhausted: If no free token could be generated
        """
        is_valid, error = is_valid_url(target)
        if not is_valid:
            raise ValidationError(f"Invalid URL: {error}", "invalid_url")

        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes
        is_valid, error = is_valid_validity(validity_minutes, self.max_validity_minutes)
        if not is_valid:
            raise ValidationError(error, "invalid_validity")

        created_at = self.clock()
        expires_at = created_at + timedelta(minutes=validity_minutes)

        def build_record(token: str) -> LinkRecord:
            return LinkRecord(
                token=token,
                target=target,
                created_at=created_at,
                expires_at=expires_at,
            )

        if custom_token:
            if not self.enable_custom_codes:
                raise ValidationError("Custom short codes are not enabled", "invalid_shortcode")

            is_valid, error = is_valid_short_code(custom_token)
            if not is_valid:
                raise ValidationError(f"Invalid short code: {error}", "invalid_shortcode")

            if not self.link_store.try_insert(custom_token, build_record(custom_token)):
                self.logger.warning(f"Short code already exists: {custom_token}")
                raise TokenTaken(f"Short code '{custom_token}' already exists")
            token = custom_token
        else:
            token = self.link_store.allocate(
                self.generator.generate,
                self.alloc_max_attempts,
                build_record,
            )

        self.logger.info(f"Created short link: {token} -> {target} (expires {expires_at.isoformat()})")

        return {
            "token": token,
            "target": target,
            "created_at": created_at,
            "expires_at": expires_at,
        }

    def resolve(self, token: str, metadata: Optional[ClickMetadata] = None) -> Resolution:
        """Resolve a token and record the click.

        Args:
            token: The token to resolve
            metadata: Requester details for the click event

        Returns:
            Resolution with FOUND and the target, NOT_FOUND or GONE
        """
        record = self.link_store.get(token)
        if record is None:
            self.logger.warning(f"Short code not found: {token}")
            return Resolution(ResolveOutcome.NOT_FOUND)

        now = self.clock()
        if record.is_expired(now):
            self._evict_expired(token, now)
            self.logger.warning(f"Short code expired: {token} (expired {record.expires_at.isoformat()})")
            return Resolution(ResolveOutcome.GONE)

        if not self.link_store.increment_hit(token, record.created_at):
            # Reaped after the read; the record was live when we looked.
            self.logger.debug(f"Short code {token} removed during resolve; click not recorded")
            return Resolution(ResolveOutcome.FOUND, record.target)

        event = ClickEvent.from_metadata(token, now, metadata or ClickMetadata())
        try:
            self.click_log.append(token, event)
        except Exception:
            self.logger.exception(f"Failed to record click for {token}")

        self.logger.debug(f"Resolved {token} -> {record.target}")
        return Resolution(ResolveOutcome.FOUND, record.target)

    def stats(self, token: str) -> Optional[Dict[str, Any]]:
        """Get a link's record fields and its click events.

        Args:
            token: The token to look up

        Returns:
            Dictionary with record fields and ``clicks``, or None
        """
        record = self.link_store.get(token)
        if record is None:
            return None

        # Events stamped before creation belong to an earlier link under the same token
        clicks = [
            event for event in self.click_log.get_all(token)
            if event.timestamp >= record.created_at
        ]
        return {
            **record.to_dict(),
            "is_expired": record.is_expired(self.clock()),
            "clicks": clicks,
        }

    def all_stats(self) -> List[Dict[str, Any]]:
        """Summarize every stored link, oldest first."""
        now = self.clock()
        records = sorted(self.link_store.snapshot_all(), key=lambda r: r.created_at)
        return [
            {
                **record.to_dict(),
                "click_count": self.click_log.count(record.token),
                "is_expired": record.is_expired(now),
            }
            for record in records
        ]

    def health(self) -> Dict[str, Any]:
        """Report liveness and store size."""
        return {
            "status": "healthy",
            "timestamp": self.clock(),
            "total_urls": len(self.link_store),
            "uptime": time.monotonic() - self._started,
        }

    def _evict_expired(self, token: str, now: datetime) -> bool:
        # Record first: once it is gone the token no longer resolves
        removed = self.link_store.delete_if_expired(token, now)
        if removed is None:
            return False
        # Clicks at or after expiry belong to a link re-created under this token
        self.click_log.delete(token, before=removed.expires_at)
        return True
