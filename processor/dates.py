"""Date parsing and date range derivation for event text."""
import logging
import re
from datetime import date, datetime
from typing import Optional, Tuple

from dateutil import parser as dtp

logger = logging.getLogger(__name__)

ISO_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')

# Separators between the two ends of a labeled range
RANGE_SPLIT = re.compile(r'\s*[-–—]\s*|\s*\bto\b\s*', re.IGNORECASE)

# Hyphens inside these tokens never separate a range
ISO_TOKEN = re.compile(r'\d{4}-\d{2}-\d{2}')
_ISO_HYPHEN = '\x00'

DATE_IN_TEXT = re.compile(
    r'(\d{4}-\d{2}-\d{2}'
    r'|\d{1,2}\s+[^\W\d_]+\s+\d{4}'
    r'|[^\W\d_]+\s+\d{1,2},\s*\d{4})'
)


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Parse loose date text into a calendar date.

    Strict YYYY-MM-DD text is built from its components directly; anything
    else goes through dateutil.

    Args:
        text: Date text

    Returns:
        date object or None if the text cannot be parsed
    """
    if not text or not text.strip():
        return None
    text = text.strip()

    match = ISO_DATE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    default = datetime(date.today().year, 1, 1)
    try:
        return dtp.parse(text, default=default).date()
    except (ValueError, OverflowError):
        return None


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Normalize a date string to YYYY-MM-DD.

    Unparseable values are returned unchanged rather than dropped.
    """
    if not value:
        return None
    if ISO_DATE.match(value):
        return value
    parsed = parse_date(value)
    if parsed is None:
        logger.debug(f"Leaving unparseable date as-is: {value!r}")
        return value
    return parsed.isoformat()


def split_date_range(labeled: str) -> Tuple[str, str]:
    """
    Split a labeled date range into its start and end text.

    Args:
        labeled: Value of the "Dates" field

    Returns:
        Tuple of (start, end); both are the whole value for a single day
    """
    protected = ISO_TOKEN.sub(lambda m: m.group().replace('-', _ISO_HYPHEN), labeled)
    parts = [
        part.replace(_ISO_HYPHEN, '-').strip()
        for part in RANGE_SPLIT.split(protected)
    ]
    parts = [part for part in parts if part]
    if len(parts) == 2:
        return parts[0], parts[1]
    return labeled, labeled


def find_dates_in_text(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Scan free text for date-like runs; the first two bound the range."""
    matches = DATE_IN_TEXT.findall(text or '')
    if not matches:
        return None, None
    start = matches[0]
    end = matches[1] if len(matches) > 1 else start
    return start, end


def derive_date_range(
    labeled: Optional[str],
    text: str
) -> Tuple[Optional[str], Optional[str]]:
    """
    Derive the raw start and end date text of an event.

    Args:
        labeled: Value of the "Dates" field, if present
        text: Full text of the event block, scanned when no label exists

    Returns:
        Tuple of (start_date, end_date) text, either possibly None
    """
    if labeled:
        return split_date_range(labeled)
    return find_dates_in_text(text)


def first_of_month(today: Optional[date] = None) -> date:
    """First calendar day of the month containing today."""
    today = today or date.today()
    return today.replace(day=1)
