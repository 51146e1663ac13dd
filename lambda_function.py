"""AWS Lambda handler for the wiki community events feed."""
import json
import logging
import os
import time
from typing import Dict, Any

from scraper.wiki_events import WikiEventsScraper
from processor.cache import EventCache
from processor.event_builder import EventBuilder
from processor.event_processor import EventProcessor
from processor.exceptions import EventExtractionError
from processor.link_sanitizer import DEFAULT_BASE_URL
from processor.pipeline import load_events, refresh_events


# Survives between invocations of a warm container
_cache = None


# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord('', logging.INFO, '', 0, '', None, None).__dict__
) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Renders a record and its extra= context as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }
        context = {
            key: value for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        }
        if context:
            entry['context'] = context
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Route all loggers through a single JSON handler on the root logger.

    Args:
        log_level: Level name; unknown names fall back to INFO
    """
    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    json_handler = logging.StreamHandler()
    json_handler.setFormatter(JsonFormatter())
    root_logger.addHandler(json_handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_cache(ttl_ms: int) -> EventCache:
    """Return the container's cache, recreating it if the TTL changed."""
    global _cache
    fresh = EventCache.with_ttl_ms(ttl_ms)
    if _cache is None or _cache.duration != fresh.duration:
        _cache = fresh
    return _cache


def reset_cache() -> None:
    global _cache
    _cache = None


def _error_response(message: str, error: Exception, start_time: float) -> Dict[str, Any]:
    duration = time.time() - start_time
    return {
        'statusCode': 500,
        'body': json.dumps({
            'message': message,
            'error': str(error),
            'error_type': type(error).__name__,
            'duration_seconds': round(duration, 2)
        })
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler returning the current community events.

    Args:
        event: Request payload; optional keys 'refresh', 'search', 'country',
            'event_type' and 'participation'
        context: Lambda context object

    Returns:
        Response dict with statusCode and the events feed
    """
    global _cache

    # Read configuration from environment variables
    base_url = os.environ.get('WIKI_BASE_URL', DEFAULT_BASE_URL)
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_setting = os.environ.get('TIMEOUT_SECONDS', '30')
    cache_ttl_setting = os.environ.get('CACHE_TTL_MS', '300000')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    event = event or {}
    force_refresh = bool(event.get('refresh', False))

    start_time = time.time()
    logger.info(
        f"Lambda execution started",
        extra={
            'base_url': base_url,
            'refresh': force_refresh,
            'cache_ttl_ms': cache_ttl_setting
        }
    )

    try:
        timeout_seconds = int(timeout_setting)
        cache = get_cache(int(cache_ttl_setting))
        scraper = WikiEventsScraper(base_url=base_url, timeout=timeout_seconds)
        builder = EventBuilder(base_url=base_url)
        processor = EventProcessor()

        load = refresh_events if force_refresh else load_events
        try:
            feed, _cache = load(cache, scraper.fetch_document, builder, processor)
        except EventExtractionError as e:
            logger.error(
                f"Failed to load events: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _error_response('Failed to load wiki events', e, start_time)

        filtered = processor.filter_events(
            feed.events,
            query=event.get('search', ''),
            country=event.get('country', ''),
            event_type=event.get('event_type', ''),
            participation=event.get('participation', '')
        )

        duration = time.time() - start_time
        logger.info(
            f"Lambda execution completed successfully",
            extra={
                'duration_seconds': round(duration, 2),
                'total_events': len(feed.events),
                'filtered_events': len(filtered),
                'from_cache': feed.from_cache
            }
        )

        return {
            'statusCode': 200,
            'body': json.dumps({
                'events': [ev.to_dict() for ev in filtered],
                'countries': list(feed.countries),
                'event_types': list(feed.event_types),
                'last_updated': feed.last_updated.isoformat(),
                'statistics': {
                    'total_events': len(feed.events),
                    'filtered_events': len(filtered),
                    'from_cache': feed.from_cache,
                    'duration_seconds': round(duration, 2)
                }
            })
        }

    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(time.time() - start_time, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _error_response('Event loading failed', e, start_time)
