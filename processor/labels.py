"""Bilingual field labels and the labeled-value extractor."""
import re
from typing import Optional, Sequence, Tuple


ORGANIZER_LABELS = (
    'Waandaaji', 'Organizers', 'Organiser(s)', 'Organisateurs', 'Organisateur(s)'
)
COUNTRY_LABELS = ('Country', 'Nchi')
# 'Event types' must precede its prefix 'Event type'
EVENT_TYPE_LABELS = ('Event types', 'Event type', 'Aina ya tukio')
TOPIC_LABELS = ('Wiki', 'Topics')
LOCATION_LABELS = ('Location', 'Mahali')
DATE_LABELS = ('Dates', 'Tarehe')
PARTICIPATION_LABELS = ('Participation options', 'Ushiriki')

# Any of these ends the value of a preceding field
STOP_LABELS = (
    DATE_LABELS
    + LOCATION_LABELS
    + COUNTRY_LABELS
    + EVENT_TYPE_LABELS
    + PARTICIPATION_LABELS
    + TOPIC_LABELS
    + ORGANIZER_LABELS
)

PARTICIPATION_VALUE_LABELS = ('Tukio la mtandaoni', 'Tukio la ana kwa ana')

KNOWN_LABELS = (
    PARTICIPATION_LABELS
    + PARTICIPATION_VALUE_LABELS
    + COUNTRY_LABELS
    + EVENT_TYPE_LABELS
    + TOPIC_LABELS
    + ORGANIZER_LABELS
    + DATE_LABELS
    + LOCATION_LABELS
)

_WHITESPACE = re.compile(r'\s+')
_REPEATED_WHITESPACE = re.compile(r'\s{2,}')
_LEADING_SEPARATOR = re.compile(r'^[:\s]+')
_LIST_SEPARATOR = re.compile(r',|;|\s+(?:na|and|&)\s+', re.IGNORECASE)
_LABEL_PATTERNS = tuple(
    re.compile(r'(?<!\w)' + re.escape(label) + r'(?!\w)\s*:?\s*', re.IGNORECASE)
    for label in KNOWN_LABELS
)


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces and strip."""
    return _WHITESPACE.sub(' ', text or '').strip()


def _find_earliest(haystack: str, needles: Sequence[str]) -> Tuple[int, Optional[str]]:
    # Lowest index wins, ties go to the earlier needle
    best_index, best = -1, None
    for needle in needles:
        index = haystack.find(needle.lower())
        if index >= 0 and (best_index == -1 or index < best_index):
            best_index, best = index, needle
    return best_index, best


def extract_labeled_value(
    text: str,
    labels: Sequence[str],
    stop_labels: Sequence[str] = STOP_LABELS
) -> Optional[str]:
    """
    Extract the value following a label in free text.

    The value runs from the earliest matching label up to the earliest
    stop label after it, or to the end of the text.

    Args:
        text: Free text block
        labels: Candidate labels for the field, in tie-break order
        stop_labels: Labels that end the field's value

    Returns:
        Field value, or None if no label occurs or the value is empty
    """
    collapsed = collapse_whitespace(text)
    start, label = _find_earliest(collapsed.lower(), labels)
    if label is None:
        return None

    rest = collapsed[start + len(label):]
    rest = _LEADING_SEPARATOR.sub('', rest).strip()

    cut_at, _ = _find_earliest(rest.lower(), stop_labels)
    if cut_at >= 0:
        rest = rest[:cut_at].strip()

    return rest or None


def strip_known_labels(text: str) -> str:
    """Remove every known label token (and its colon) from text."""
    stripped = text or ''
    for pattern in _LABEL_PATTERNS:
        stripped = pattern.sub('', stripped)
    return _REPEATED_WHITESPACE.sub(' ', stripped).strip()


def split_list(text: Optional[str]) -> Tuple[str, ...]:
    """Split an organizer or topic run into its ordered items."""
    if not text:
        return ()
    items = (item.strip() for item in _LIST_SEPARATOR.split(text))
    return tuple(item for item in items if item)
