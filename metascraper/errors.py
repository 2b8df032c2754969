from __future__ import annotations

from typing import Optional


class ScraperError(Exception):
    """Base class for all errors raised by the scraper."""


class InvalidConfig(ScraperError, ValueError):
    """A configuration value could not be used to build the pipeline."""


class FetchExhausted(ScraperError):
    """Every attempt to fetch a URL failed."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"failed to fetch {url} after {attempts} attempt(s)")
        self.url = url
        self.attempts = attempts


class ParseError(ScraperError):
    """The response body could not be parsed as HTML at all."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class StreamCloseError(ScraperError):
    """Releasing a response body failed."""


class InputError(ScraperError):
    """The URL input could not be read."""
