"""Client for the wiki parse API that renders the community events listing."""
import logging
import time

import requests
from bs4 import BeautifulSoup

from processor.exceptions import AcquisitionError, EmptyPayloadError
from processor.link_sanitizer import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


class WikiEventsScraper:
    """Fetches the rendered {{Special:AllEvents}} listing from a wiki."""

    EVENTS_TEMPLATE = '{{Special:AllEvents}}'
    MAX_RETRIES = 3
    BASE_DELAY = 1  # seconds

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 30):
        """
        Initialize the scraper.

        Args:
            base_url: Wiki origin (default: Swahili Wikipedia)
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/w/api.php"

    def fetch_document(self) -> BeautifulSoup:
        """
        Fetch the events listing and parse it into a markup tree.

        Returns:
            BeautifulSoup document of the rendered listing
        """
        html_content = self.fetch_events_html()
        return BeautifulSoup(html_content, 'html.parser')

    def fetch_events_html(self) -> str:
        """
        Fetch the rendered HTML fragment of the events listing.

        Returns:
            HTML fragment as string

        Raises:
            AcquisitionError: If all retry attempts fail
            EmptyPayloadError: If the response carries no HTML fragment
        """
        params = {
            'action': 'parse',
            'format': 'json',
            'formatversion': '2',
            'prop': 'text',
            'contentmodel': 'wikitext',
            'text': self.EVENTS_TEMPLATE
        }

        response = self._get_with_retries(params)

        try:
            data = response.json()
        except ValueError as e:
            raise EmptyPayloadError(f"Invalid JSON from parse API: {e}") from e

        parsed = data.get('parse') if isinstance(data, dict) else None
        html_content = parsed.get('text') if isinstance(parsed, dict) else None
        if not isinstance(html_content, str) or not html_content.strip():
            raise EmptyPayloadError("Empty HTML from parse API")

        logger.info(f"Fetched {len(html_content)} characters of event markup")
        return html_content

    def _get_with_retries(self, params: dict) -> requests.Response:
        """
        GET the parse API with exponential backoff between attempts.

        Args:
            params: Query parameters

        Returns:
            Successful response

        Raises:
            AcquisitionError: If all retry attempts fail
        """
        for attempt in range(self.MAX_RETRIES):
            try:
                logger.info(
                    f"Fetching events listing (attempt {attempt + 1}/{self.MAX_RETRIES})"
                )
                response = requests.get(
                    self.api_url,
                    params=params,
                    timeout=self.timeout
                )
                response.raise_for_status()
                return response

            except requests.RequestException as e:
                if attempt < self.MAX_RETRIES - 1:
                    delay = self.BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.MAX_RETRIES}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.MAX_RETRIES} retry attempts failed. Last error: {e}"
                    )
                    raise AcquisitionError(f"Failed to fetch events listing: {e}") from e
