"""Storage layer for short links and click events."""

from .base import LinkStoreBase, ClickLogBase
from .memory import InMemoryLinkStore, InMemoryClickLog
from .models import LinkRecord, ClickEvent, ClickMetadata, is_expired

__all__ = [
    "LinkStoreBase",
    "ClickLogBase",
    "InMemoryLinkStore",
    "InMemoryClickLog",
    "LinkRecord",
    "ClickEvent",
    "ClickMetadata",
    "is_expired",
]
