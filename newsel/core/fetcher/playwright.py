"""Browser fetcher for listings that only render client side."""

import logging
import time

from newsel.core.fetcher.base import ContentAnalyzer, HTMLFetcher
from newsel.exceptions import BotDetectionError
from newsel.models.results import FetchResult
from newsel.utils.headers import ACCEPT_LANGUAGES, UserAgentRotator


class PlaywrightFetcher(HTMLFetcher):
    """Fetches pages with headless Chromium.

    Slower than SimpleFetcher. Requires the ``playwright`` extra and
    ``playwright install chromium``.
    """

    def __init__(self, timeout: int = 60000, headless: bool = True):
        """Initialize Playwright fetcher.

        Args:
            timeout: Page load timeout in milliseconds
            headless: Run browser in headless mode

        """
        self.timeout = timeout
        self.headless = headless
        self.logger = logging.getLogger(__name__)

    def fetch(
        self,
        url: str,
        referer: str | None = None,
        language: str | None = None,
        encoding: str | None = None,
    ) -> FetchResult:
        """Render a page in a browser and return its HTML."""
        try:
            from playwright.sync_api import sync_playwright
        except ImportError as err:
            raise ImportError(
                'Playwright not installed. Install with: '
                'pip install "newsel[playwright]" && playwright install chromium'
            ) from err

        start_time = time.time()
        locale = ACCEPT_LANGUAGES.get((language or 'en').split('-')[0], ACCEPT_LANGUAGES['en'])[0].split(',')[0]

        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=self.headless, args=['--disable-blink-features=AutomationControlled']
                )
                try:
                    context = browser.new_context(
                        user_agent=UserAgentRotator.get_chrome(),
                        viewport={'width': 1366, 'height': 900},
                        locale=locale,
                    )
                    page = context.new_page()
                    response = page.goto(url, referer=referer, wait_until='networkidle', timeout=self.timeout)
                    html = page.content()
                    status_code = response.status if response else 200
                    final_url = page.url or url
                finally:
                    browser.close()
        except Exception as e:
            self.logger.warning(f'Browser fetch of {url} failed: {e}')
            return FetchResult(url=url, block_reason=str(e), fetch_time=time.time() - start_time)

        is_blocked, indicators = self._check_for_bot_detection(html, status_code)
        if is_blocked:
            raise BotDetectionError(url, status_code, indicators)

        return FetchResult(
            url=final_url,
            html=html,
            status_code=status_code,
            fetch_time=time.time() - start_time,
            metadata=ContentAnalyzer.analyze(html),
        )
