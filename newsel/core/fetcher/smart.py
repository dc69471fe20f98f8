"""Fetcher that escalates from plain HTTP to a browser when needed."""

import logging

from newsel.core.fetcher.base import HTMLFetcher
from newsel.core.fetcher.playwright import PlaywrightFetcher
from newsel.core.fetcher.simple import SimpleFetcher
from newsel.exceptions import BotDetectionError
from newsel.models.results import FetchResult


class SmartFetcher(HTMLFetcher):
    """Tries SimpleFetcher first and falls back to PlaywrightFetcher.

    The browser is used when the plain request is blocked, fails, or returns
    a page that looks client-side rendered.
    """

    def __init__(self, timeout: int = 30, playwright_timeout: int = 60000):
        """Initialize smart fetcher with both simple and Playwright fetchers.

        Args:
            timeout: Timeout for simple fetcher in seconds
            playwright_timeout: Timeout for Playwright fetcher in milliseconds

        """
        self.simple_fetcher = SimpleFetcher(timeout=timeout)
        self.playwright_fetcher = PlaywrightFetcher(timeout=playwright_timeout)
        self.logger = logging.getLogger(__name__)

    def fetch(
        self,
        url: str,
        referer: str | None = None,
        language: str | None = None,
        encoding: str | None = None,
    ) -> FetchResult:
        """Fetch with plain HTTP, escalating to the browser if needed."""
        try:
            result = self.simple_fetcher.fetch(url, referer=referer, language=language, encoding=encoding)
            if result.success and not result.requires_js:
                return result
            reason = result.block_reason or 'page needs JavaScript'
        except BotDetectionError as e:
            reason = e.reason

        self.logger.info(f'Escalating {url} to browser fetch: {reason}')
        return self.playwright_fetcher.fetch(url, referer=referer, language=language, encoding=encoding)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.simple_fetcher.close()
