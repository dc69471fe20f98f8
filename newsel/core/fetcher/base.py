"""Fetcher interface, block detection and client-side rendering heuristics."""

import re
from abc import ABC, abstractmethod

from newsel.models.results import ContentMetadata, FetchResult

# Checked on non-error responses, where block pages are rare
CHALLENGE_MARKERS = {
    'challenge-form': 'Cloudflare challenge',
    'cf-captcha': 'Cloudflare CAPTCHA',
    'access denied</title>': 'Access denied page',
    'rate limit exceeded': 'Rate limit',
    'please verify you are human': 'Human verification',
    'enable javascript to continue': 'JavaScript block',
}

# Looser markers for error responses
ERROR_MARKERS = {
    'captcha': 'CAPTCHA required',
    'access denied': 'Access denied',
    'cloudflare': 'Cloudflare protection',
    'too many requests': 'Too many requests',
    'forbidden': 'Forbidden',
}

BLOCKING_STATUS = (403, 429, 503)

FRAMEWORK_MARKERS = {
    'next': ('__next', '_next/static'),
    'nuxt': ('__nuxt', '_nuxt/'),
    'react': ('data-reactroot', 'id="root"'),
    'angular': ('ng-version', 'ng-app'),
    'vue': ('data-v-app', 'id="app"'),
}


class ContentAnalyzer:
    """Guesses whether a page only renders its articles in the browser."""

    @staticmethod
    def analyze(html: str) -> ContentMetadata:
        """Analyze HTML content and return metadata.

        Args:
            html: Page HTML

        Returns:
            ContentMetadata with the JS-rendering guess.

        """
        html_lower = html.lower()
        framework = next(
            (name for name, markers in FRAMEWORK_MARKERS.items() if any(m in html_lower for m in markers)),
            None,
        )

        body = re.search(r'<body[^>]*>(.*?)</body>', html_lower, re.DOTALL)
        visible = ''
        if body:
            visible = re.sub(r'<(script|style)[^>]*>.*?</\1>', '', body.group(1), flags=re.DOTALL)
            visible = re.sub(r'<[^>]+>', '', visible).strip()

        noscript_warning = '<noscript>' in html_lower and 'javascript' in html_lower
        requires_js = (framework is not None and len(visible) < 200) or (noscript_warning and len(visible) < 200)

        return ContentMetadata(requires_js=requires_js, js_framework=framework, content_length=len(html))


class HTMLFetcher(ABC):
    """Base class for HTML fetchers.

    ``fetch`` returns a FetchResult whose ``html`` is None when the page could
    not be loaded, and raises BotDetectionError when the site refuses us.
    """

    @abstractmethod
    def fetch(
        self,
        url: str,
        referer: str | None = None,
        language: str | None = None,
        encoding: str | None = None,
    ) -> FetchResult:
        """Fetch HTML from a URL.

        Args:
            url: URL to fetch
            referer: Page that linked to the URL (the listing page for articles)
            language: Site language hint for Accept-Language
            encoding: Site encoding hint, used when the server does not declare one

        Returns:
            FetchResult with HTML, metadata, and status

        Raises:
            BotDetectionError: If bot detection is triggered

        """

    def close(self) -> None:
        """Release network or browser resources. No-op by default."""

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def _check_for_bot_detection(self, html: str, status_code: int) -> tuple[bool, list[str]]:
        """Decide whether a response is a block page.

        Args:
            html: Response body
            status_code: HTTP status code

        Returns:
            Tuple of (is_blocked, reasons).

        """
        if not html or len(html) < 100:
            return True, ['HTML too short']

        if status_code in BLOCKING_STATUS:
            return True, [f'HTTP {status_code}']

        head = html[:2000].lower()
        if status_code < 400:
            markers = CHALLENGE_MARKERS
        else:
            markers = ERROR_MARKERS

        found = [reason for marker, reason in markers.items() if marker in head]
        return bool(found), found
