"""Errors raised by the event extraction pipeline."""


class EventExtractionError(Exception):
    """Base class for fatal extraction failures."""


class AcquisitionError(EventExtractionError):
    """The events page could not be fetched."""


class EmptyPayloadError(EventExtractionError):
    """The parse API returned no HTML fragment."""


class NoEventsFoundError(EventExtractionError):
    """No events could be extracted from the markup."""

    def __init__(self, message: str = (
        'No events parsed. The page layout may have changed '
        'or there are no events.'
    )):
        super().__init__(message)
