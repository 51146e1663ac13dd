"""Event processor for normalizing, filtering and searching events."""
import dataclasses
import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple

from processor.dates import first_of_month, normalize_date, parse_date
from processor.models import Event

logger = logging.getLogger(__name__)


def normalize_event(event: Event) -> Event:
    """
    Normalize the date fields of an event to YYYY-MM-DD.

    Args:
        event: Event as extracted from the page

    Returns:
        Copy of the event with canonical dates where they parse
    """
    return dataclasses.replace(
        event,
        start_date=normalize_date(event.start_date),
        end_date=normalize_date(event.end_date)
    )


def is_current(event: Event, cutoff: date) -> bool:
    """
    Check whether an event starts or ends on or after the cutoff.

    Events without any parseable date never pass.
    """
    start = parse_date(event.start_date)
    end = parse_date(event.end_date or event.start_date)
    if end and end >= cutoff:
        return True
    if start and start >= cutoff:
        return True
    return False


def filter_current_events(
    events: Iterable[Event],
    today: Optional[date] = None
) -> List[Event]:
    """
    Keep events intersecting the period from the first of this month on.

    Args:
        events: Normalized events
        today: Reference date (default: today's date at call time)

    Returns:
        Events that have not ended before the current month
    """
    cutoff = first_of_month(today)
    return [event for event in events if is_current(event, cutoff)]


class EventProcessor:
    """Processor for normalizing and filtering extracted events."""

    def process_events(
        self,
        raw_events: Iterable[Event],
        today: Optional[date] = None
    ) -> List[Event]:
        """
        Normalize event dates and drop events before the current month.

        Args:
            raw_events: Events from the event builder
            today: Reference date for the month cutoff

        Returns:
            List of normalized current events
        """
        raw_events = list(raw_events)
        normalized = [normalize_event(event) for event in raw_events]
        current = filter_current_events(normalized, today)

        logger.info(
            f"Kept {len(current)} current events out of "
            f"{len(raw_events)} total events"
        )
        return current

    def build_filter_options(
        self,
        events: Iterable[Event]
    ) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """
        Collect the distinct countries and event types of events.

        Returns:
            Tuple of (countries, event_types), each sorted ascending
        """
        events = list(events)
        countries = sorted({event.country for event in events if event.country})
        event_types = sorted({event.event_type for event in events if event.event_type})
        return tuple(countries), tuple(event_types)

    def filter_events(
        self,
        events: Iterable[Event],
        query: str = '',
        country: str = '',
        event_type: str = '',
        participation: str = ''
    ) -> List[Event]:
        """
        Narrow a processed event list by search text and exact criteria.

        Empty criteria do not constrain the result.

        Args:
            events: Processed events
            query: Case-insensitive text searched in title and description
            country: Exact country
            event_type: Exact event type
            participation: Exact participation mode

        Returns:
            Matching events in their original order
        """
        query = (query or '').lower().strip()
        matching = []
        for event in events:
            if query and query not in event.title.lower() \
                    and query not in (event.description or '').lower():
                continue
            if country and event.country != country:
                continue
            if event_type and event.event_type != event_type:
                continue
            if participation and event.participation_options != participation:
                continue
            matching.append(event)
        return matching
