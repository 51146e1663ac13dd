"""Short-lived cache of the last successful extraction."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from processor.models import Event

DEFAULT_CACHE_DURATION = timedelta(minutes=5)


@dataclass(frozen=True)
class EventCache:
    """
    Immutable cache record owned by the caller.

    Updates return a new record so the data and timestamp are always
    replaced together.
    """
    data: Optional[Tuple[Event, ...]] = None
    timestamp: Optional[datetime] = None
    duration: timedelta = DEFAULT_CACHE_DURATION

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Check whether the cached data is present and younger than the TTL."""
        if self.data is None or self.timestamp is None:
            return False
        now = now or datetime.now()
        return now - self.timestamp < self.duration

    def store(self, events: Sequence[Event], now: Optional[datetime] = None) -> 'EventCache':
        return EventCache(
            data=tuple(events),
            timestamp=now or datetime.now(),
            duration=self.duration
        )

    def invalidate(self) -> 'EventCache':
        return EventCache(duration=self.duration)

    @classmethod
    def with_ttl_ms(cls, ttl_ms: int) -> 'EventCache':
        """
        Create an empty cache with a TTL in milliseconds.

        Raises:
            ValueError: If ttl_ms is not positive
        """
        if ttl_ms <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl_ms}")
        return cls(duration=timedelta(milliseconds=ttl_ms))
