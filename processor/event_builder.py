"""Builds Event records from candidate nodes of the events page."""
import logging
from typing import Dict, List, Optional, Set, Tuple

from bs4 import Tag

from processor import labels
from processor.classifier import (
    classify_country,
    classify_event_type,
    classify_participation,
)
from processor.dates import derive_date_range
from processor.exceptions import NoEventsFoundError
from processor.link_sanitizer import DEFAULT_BASE_URL, sanitize_link
from processor.models import REJECTED_LINK, UNTITLED_EVENT, Event
from processor.selector import has_class, select_candidate_nodes

logger = logging.getLogger(__name__)

_is_wrapper_card = has_class('card', 'mw-ui-card')
_is_location = has_class('mw-event-location', 'event-location')
_is_description = has_class('mw-event-description', 'event-desc')

WRAPPER_TAGS = ('li', 'tr', 'div')


def _is_wrapper(node: Tag) -> bool:
    return node.name in WRAPPER_TAGS or _is_wrapper_card(node)


def _is_location_element(node: Tag) -> bool:
    if _is_location(node):
        return True
    return any('location' in class_name for class_name in node.get('class') or ())


def _is_description_element(node: Tag) -> bool:
    return _is_description(node) or node.name in ('p', 'small')


def node_text(node: Optional[Tag]) -> str:
    """Whitespace-collapsed text content of a node."""
    if node is None:
        return ''
    return labels.collapse_whitespace(node.get_text(' '))


class EventBuilder:
    """Turns a parsed events page into deduplicated Event records."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        """
        Initialize the builder.

        Args:
            base_url: Origin used to resolve relative links
        """
        self.base_url = base_url

    def build_events(self, root: Tag) -> List[Event]:
        """
        Extract events from a parsed events page.

        Args:
            root: Parsed markup tree of the events listing

        Returns:
            List of Event objects in discovery order, unique by composite key

        Raises:
            NoEventsFoundError: If no event could be built from the page
        """
        nodes = select_candidate_nodes(root)
        events = []
        seen_links: Set[str] = set()

        for node in nodes:
            event = self._build_event(node, seen_links)
            if event:
                events.append(event)

        if not events:
            raise NoEventsFoundError()

        unique = self.deduplicate(events)
        logger.info(
            f"Built {len(unique)} unique events from {len(nodes)} candidate nodes"
        )
        return unique

    @staticmethod
    def deduplicate(events: List[Event]) -> List[Event]:
        """Keep the first event for each (title, start_date) key."""
        unique: Dict[Tuple[str, str], Event] = {}
        for event in events:
            if event.composite_key not in unique:
                unique[event.composite_key] = event
            else:
                logger.debug(f"Dropping duplicate event '{event.title}'")
        return list(unique.values())

    def _find_anchor(self, node: Tag) -> Optional[Tag]:
        if node.name == 'a':
            return node
        return node.find('a', href=True)

    def _find_wrapper(self, node: Tag) -> Tag:
        if _is_wrapper(node):
            return node
        return node.find_parent(_is_wrapper) or node

    def _build_event(self, node: Tag, seen_links: Set[str]) -> Optional[Event]:
        """
        Build a single event from a candidate node.

        Args:
            node: Candidate node
            seen_links: Sanitized links already used by earlier nodes

        Returns:
            Event object or None if the node has no usable link
        """
        anchor = self._find_anchor(node)
        if anchor is None:
            return None

        link = sanitize_link(anchor.get('href'), self.base_url)
        if link == REJECTED_LINK or link in seen_links:
            return None
        seen_links.add(link)

        title = (anchor.get('title') or anchor.get_text() or '').strip()

        wrapper = self._find_wrapper(node)
        text = node_text(wrapper) or node_text(node)

        organizers_raw = labels.extract_labeled_value(text, labels.ORGANIZER_LABELS)
        country_labeled = labels.extract_labeled_value(text, labels.COUNTRY_LABELS)
        type_labeled = labels.extract_labeled_value(text, labels.EVENT_TYPE_LABELS)
        topics_raw = labels.extract_labeled_value(text, labels.TOPIC_LABELS)
        location_labeled = labels.extract_labeled_value(text, labels.LOCATION_LABELS)
        dates_labeled = labels.extract_labeled_value(text, labels.DATE_LABELS)

        start_date, end_date = derive_date_range(dates_labeled, text)
        country = classify_country(country_labeled, text)

        location = labels.collapse_whitespace(
            location_labeled or node_text(wrapper.find(_is_location_element))
        ) or country

        description = node_text(wrapper.find(_is_description_element)) or text

        return Event(
            id=link,
            title=title or UNTITLED_EVENT,
            description=labels.strip_known_labels(description),
            start_date=start_date,
            end_date=end_date,
            country=country,
            location=location,
            event_type=classify_event_type(type_labeled, text),
            participation_options=classify_participation(text),
            topics=labels.split_list(topics_raw),
            organizers=labels.split_list(organizers_raw),
            link=link
        )
