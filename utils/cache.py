"""
Date-aware, time-boxed memo cells.

Each `TimedCache` holds at most one entry. An entry is served only on the
UTC calendar day it was computed and only while it is younger than the TTL.
Replacement is a single reference assignment: concurrent writers are not
coordinated and the last write wins.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Generic, Optional, TypeVar

from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today(clock: Optional[Clock] = None) -> str:
    """Calendar-day cache key (YYYY-MM-DD, UTC)."""
    now = (clock or utc_now)()
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """One cached value with the day it belongs to and when it was stored."""
    date: str
    value: T
    cached_at: datetime


class TimedCache(Generic[T]):
    """Single-slot cache keyed by calendar day with a rolling TTL"""

    def __init__(self, name: str, ttl_seconds: float, clock: Optional[Clock] = None):
        """
        Args:
            name: Label used in log lines
            ttl_seconds: Maximum entry age
            clock: Callable returning the current aware datetime (defaults to UTC now)
        """
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.clock = clock or utc_now
        self._entry: Optional[CacheEntry[T]] = None

    def is_valid(self, entry: Optional[CacheEntry[T]], date_key: str) -> bool:
        if entry is None or entry.date != date_key:
            return False
        age = (self.clock() - entry.cached_at).total_seconds()
        return age < self.ttl_seconds

    def get(self, date_key: str) -> Optional[T]:
        """Return the cached value for `date_key`, or None if absent or stale."""
        entry = self._entry
        if self.is_valid(entry, date_key):
            logger.debug(f"{self.name} cache hit for {date_key}")
            return entry.value
        return None

    def put(self, date_key: str, value: T) -> None:
        """Replace the slot with a fresh entry."""
        self._entry = CacheEntry(date=date_key, value=value, cached_at=self.clock())
        logger.debug(f"{self.name} cache stored for {date_key}")

    def clear(self) -> None:
        self._entry = None
