"""Allow-list based sanitizer for links found in wiki markup."""
import logging
from typing import Optional
from urllib.parse import urlsplit

from requests.utils import requote_uri

from processor.models import REJECTED_LINK

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://sw.wikipedia.org'

ALLOWED_HOST_SUFFIXES = (
    '.wikipedia.org',
    '.wikimedia.org',
    '.wikidata.org',
    '.mediawiki.org',
    '.wikinews.org',
    '.wikivoyage.org',
    '.wikibooks.org',
    '.wiktionary.org',
    '.wikiversity.org',
    '.wikimediafoundation.org',
)


def resolve_href(href: Optional[str], base_url: str = DEFAULT_BASE_URL) -> str:
    """
    Resolve a raw href against the wiki base URL.

    Args:
        href: Raw href attribute value
        base_url: Origin of the wiki the markup came from

    Returns:
        Absolute URL string, or an empty string when href is empty
    """
    if not href:
        return ''
    href = href.strip()
    base_url = base_url.rstrip('/')
    if href.startswith('//'):
        return 'https:' + href
    if href.startswith('http://') or href.startswith('https://'):
        return href
    if href.startswith('/'):
        return base_url + href
    return base_url + '/' + href


def is_allowed_host(hostname: Optional[str]) -> bool:
    """Check a hostname against the wiki-family allow-list."""
    if not hostname:
        return False
    return hostname.endswith(ALLOWED_HOST_SUFFIXES)


def sanitize_link(href: Optional[str], base_url: str = DEFAULT_BASE_URL) -> str:
    """
    Resolve and validate a link, returning '#' for anything unsafe.

    Only http(s) URLs on allow-listed wiki-family hosts are accepted.
    Never raises.

    Args:
        href: Raw href attribute value
        base_url: Origin of the wiki the markup came from

    Returns:
        Canonical absolute URL or '#'
    """
    absolute = resolve_href(href, base_url)
    if not absolute:
        return REJECTED_LINK

    try:
        parts = urlsplit(absolute)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        logger.debug(f"Rejected unparseable link {href!r}: {e}")
        return REJECTED_LINK

    if parts.scheme not in ('http', 'https'):
        logger.debug(f"Rejected link with scheme {parts.scheme!r}: {href!r}")
        return REJECTED_LINK

    if not is_allowed_host(parts.hostname):
        logger.debug(f"Rejected link to host {parts.hostname!r}: {href!r}")
        return REJECTED_LINK

    path = parts.path or '/'
    canonical = parts._replace(path=path).geturl()
    return requote_uri(canonical)
