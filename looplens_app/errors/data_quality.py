"""
Data quality error classifications for market signal retrieval.

These exceptions describe problems with the market data feeds. They are
always recovered locally, either with a static fallback snapshot or with
a neutral default.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class DataUnavailableError(DataQualityError):
    """A market data endpoint could not be reached or returned nothing usable."""

    def __init__(self, message: str, source: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source = source
        self.status_code = status_code


class SentimentUnavailableError(DataQualityError):
    """Sentiment inputs (fear/greed index, trending list) are unavailable."""

    def __init__(self, message: str, indicator: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.indicator = indicator


class MalformedDataError(DataQualityError):
    """Data exists but is in incorrect format."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
