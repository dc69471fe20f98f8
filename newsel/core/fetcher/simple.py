"""HTTP fetcher built on a requests session with browser-like headers."""

import logging
import random
import time

import requests

from newsel.core.fetcher.base import ContentAnalyzer, HTMLFetcher
from newsel.exceptions import BotDetectionError
from newsel.models.results import FetchResult
from newsel.utils.headers import HeaderGenerator, UserAgentRotator


class SimpleFetcher(HTMLFetcher):
    """Plain HTTP fetcher for server-rendered news sites.

    Waits a random, polite delay between requests and sends realistic
    headers. Most news sites render listings and articles server side, so this
    is the default fetcher.

    Attributes:
        timeout: Request timeout in seconds
        min_delay: Minimum delay between requests in seconds
        max_delay: Maximum delay between requests in seconds
        rotate_user_agent: Pick a new user agent for each request
        session: Shared requests session
        last_request_time: Timestamp of the last request

    """

    def __init__(
        self,
        timeout: int = 30,
        min_delay: float = 0.5,
        max_delay: float = 2.0,
        rotate_user_agent: bool = True,
        session: requests.Session | None = None,
    ):
        """Initialize the simple fetcher.

        Args:
            timeout: Request timeout in seconds
            min_delay: Minimum pause between requests. 0 disables the delay.
            max_delay: Maximum pause between requests
            rotate_user_agent: Pick a new user agent for each request
            session: Session to reuse. Defaults to a new one.

        """
        self.timeout = timeout
        self.min_delay = min_delay
        self.max_delay = max(max_delay, min_delay)
        self.rotate_user_agent = rotate_user_agent
        self.session = session or requests.Session()
        self.user_agent = UserAgentRotator.get_random()
        self.last_request_time = 0.0
        self.logger = logging.getLogger(__name__)

    def _wait_politely(self) -> None:
        if self.min_delay > 0:
            elapsed = time.time() - self.last_request_time
            delay = random.uniform(self.min_delay, self.max_delay)
            if elapsed < delay:
                time.sleep(delay - elapsed)
        self.last_request_time = time.time()

    def fetch(
        self,
        url: str,
        referer: str | None = None,
        language: str | None = None,
        encoding: str | None = None,
    ) -> FetchResult:
        """Fetch a page over HTTP.

        Args:
            url: URL to fetch
            referer: Referer header value
            language: Site language hint
            encoding: Encoding used when the response declares none

        Returns:
            FetchResult; ``html`` is None on network errors.

        Raises:
            BotDetectionError: If the response looks like a block page.

        """
        start_time = time.time()
        self._wait_politely()

        user_agent = UserAgentRotator.get_random() if self.rotate_user_agent else self.user_agent
        headers = HeaderGenerator.generate_headers(user_agent=user_agent, referer=referer, language=language)

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            self.logger.warning(f'Request to {url} failed: {e}')
            return FetchResult(url=url, block_reason=str(e), fetch_time=time.time() - start_time)

        if encoding and 'charset' not in response.headers.get('Content-Type', '').lower():
            response.encoding = encoding
        html = response.text

        is_blocked, indicators = self._check_for_bot_detection(html, response.status_code)
        if is_blocked:
            raise BotDetectionError(url, response.status_code, indicators)

        if response.status_code >= 400:
            return FetchResult(
                url=response.url or url,
                status_code=response.status_code,
                block_reason=f'HTTP {response.status_code}',
                fetch_time=time.time() - start_time,
            )

        return FetchResult(
            url=response.url or url,
            html=html,
            status_code=response.status_code,
            fetch_time=time.time() - start_time,
            metadata=ContentAnalyzer.analyze(html),
        )

    def close(self) -> None:
        """Close the session."""
        self.session.close()
