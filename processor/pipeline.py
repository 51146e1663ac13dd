"""Cache-aware extraction pipeline."""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup

from processor.cache import EventCache
from processor.event_builder import EventBuilder
from processor.event_processor import EventProcessor
from processor.models import Event, EventFeed

logger = logging.getLogger(__name__)

DocumentFetcher = Callable[[], BeautifulSoup]


def extract_events(
    document: BeautifulSoup,
    builder: Optional[EventBuilder] = None
) -> List[Event]:
    """Extract deduplicated events from a parsed events page."""
    builder = builder or EventBuilder()
    return builder.build_events(document)


def load_events(
    cache: EventCache,
    fetch_document: DocumentFetcher,
    builder: Optional[EventBuilder] = None,
    processor: Optional[EventProcessor] = None,
    now: Optional[datetime] = None
) -> Tuple[EventFeed, EventCache]:
    """
    Load events, reusing the cache while it is valid.

    Cached events are re-normalized and re-filtered on every call so the
    month cutoff always uses the current date.

    Args:
        cache: Current cache record
        fetch_document: Callable returning the parsed events page
        builder: Event builder (default: EventBuilder())
        processor: Event processor (default: EventProcessor())
        now: Current time

    Returns:
        Tuple of (feed, cache) where cache is the record to keep

    Raises:
        EventExtractionError: If fetching or extraction fails; the cache
            passed in is left as it was
    """
    processor = processor or EventProcessor()
    now = now or datetime.now()

    if cache.is_valid(now):
        logger.info("Using cached events")
        raw_events = cache.data
        last_updated = cache.timestamp
        from_cache = True
    else:
        logger.info("Cache empty or expired, fetching events")
        raw_events = extract_events(fetch_document(), builder)
        cache = cache.store(raw_events, now)
        last_updated = now
        from_cache = False

    events = processor.process_events(raw_events, today=now.date())
    countries, event_types = processor.build_filter_options(events)

    feed = EventFeed(
        events=tuple(events),
        countries=countries,
        event_types=event_types,
        last_updated=last_updated,
        from_cache=from_cache
    )
    return feed, cache


def refresh_events(
    cache: EventCache,
    fetch_document: DocumentFetcher,
    builder: Optional[EventBuilder] = None,
    processor: Optional[EventProcessor] = None,
    now: Optional[datetime] = None
) -> Tuple[EventFeed, EventCache]:
    """Invalidate the cache and load events from scratch."""
    logger.info("Forcing refresh of events")
    return load_events(cache.invalidate(), fetch_document, builder, processor, now)
