"""Hint-vocabulary classifiers for participation mode, event type and country.

Each classifier is a ranked rule list evaluated top-down; the first rule
whose pattern occurs in the text decides the value.
"""
from typing import Optional, Sequence, Tuple

from processor.models import DEFAULT_EVENT_TYPE, Participation


Rule = Tuple[str, str]

# hybrid must be checked before in-person and online
PARTICIPATION_RULES: Tuple[Rule, ...] = (
    ('hybrid', Participation.HYBRID),
    ('mtandaoni na la ana kwa ana', Participation.HYBRID),
    ('in-person', Participation.IN_PERSON),
    ('in person', Participation.IN_PERSON),
    ('ana kwa ana', Participation.IN_PERSON),
    ('online', Participation.ONLINE),
    ('mtandaoni', Participation.ONLINE),
)

EVENT_TYPE_HINTS: Tuple[str, ...] = (
    'Conference',
    'Workshop',
    'Meetup',
    'Hackathon',
    'Training',
    'Competition',
    'Contest',
    'Edit-a-thon',
    'Editing event',
    'Community',
    'Other',
)

COUNTRY_HINTS: Tuple[str, ...] = (
    'Tanzania',
    'Kenya',
    'Uganda',
    'Rwanda',
    'Burundi',
    'DRC',
    'Ethiopia',
    'Nigeria',
    'Ghana',
    'South Africa',
    'United States',
    'United Kingdom',
    'France',
    'Germany',
    'India',
    'Canada',
    'Singapore',
    'Netherlands',
    'Benin',
    'Jamhuri ya Kidemokrasia ya Kongo',
)


def first_match(text: str, rules: Sequence[Rule]) -> Optional[str]:
    """Return the value of the first rule whose pattern occurs in text."""
    for pattern, value in rules:
        if pattern in text:
            return value
    return None


def hint_rules(hints: Sequence[str], case_sensitive: bool = False) -> Tuple[Rule, ...]:
    """Build a rule list that maps each hint to itself."""
    if case_sensitive:
        return tuple((hint, hint) for hint in hints)
    return tuple((hint.lower(), hint) for hint in hints)


EVENT_TYPE_RULES = hint_rules(EVENT_TYPE_HINTS)
COUNTRY_RULES = hint_rules(COUNTRY_HINTS, case_sensitive=True)


def classify_participation(text: str) -> str:
    """
    Infer the participation mode of an event.

    Args:
        text: Full text of the event block

    Returns:
        'hybrid', 'in-person', 'online' or an empty string
    """
    return first_match((text or '').lower(), PARTICIPATION_RULES) or Participation.UNKNOWN


def classify_event_type(labeled_type: Optional[str], text: str) -> str:
    """
    Infer the event type from the labeled value, then the full text.

    Args:
        labeled_type: Value of the "Event type" field, if present
        text: Full text of the event block

    Returns:
        A type hint, or 'Other' when nothing matches
    """
    if labeled_type:
        matched = first_match(labeled_type.lower(), EVENT_TYPE_RULES)
        if matched:
            return matched
    return first_match((text or '').lower(), EVENT_TYPE_RULES) or DEFAULT_EVENT_TYPE


def classify_country(labeled_country: Optional[str], text: str) -> str:
    """Use the labeled country, else the first gazetteer name in the text."""
    if labeled_country:
        return labeled_country
    return first_match(text or '', COUNTRY_RULES) or ''
