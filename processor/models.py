"""Data models for event extraction."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


UNTITLED_EVENT = 'Untitled event'
DEFAULT_EVENT_TYPE = 'Other'
REJECTED_LINK = '#'


class Participation:
    """Participation mode values."""
    ONLINE = 'online'
    IN_PERSON = 'in-person'
    HYBRID = 'hybrid'
    UNKNOWN = ''


@dataclass(frozen=True)
class Event:
    """Community event extracted from the wiki events listing."""
    id: str
    title: str
    description: str
    start_date: Optional[str]
    end_date: Optional[str]
    country: str
    location: str
    event_type: str
    participation_options: str
    topics: Tuple[str, ...]
    organizers: Tuple[str, ...]
    link: str

    @property
    def composite_key(self) -> Tuple[str, str]:
        """Key used to collapse duplicate listings of the same event."""
        return (self.title, self.start_date or '')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'country': self.country,
            'location': self.location,
            'event_type': self.event_type,
            'participation_options': self.participation_options,
            'topics': list(self.topics),
            'organizers': list(self.organizers),
            'link': self.link
        }


@dataclass(frozen=True)
class EventFeed:
    """Processed events plus the filter options derived from them."""
    events: Tuple[Event, ...]
    countries: Tuple[str, ...]
    event_types: Tuple[str, ...]
    last_updated: datetime
    from_cache: bool = False
