"""Realistic browser headers for fetching news pages."""

import random

USER_AGENTS = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',  # noqa: E501
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:125.0) Gecko/20100101 Firefox/125.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15',  # noqa: E501
)

# Accept-Language values keyed by the site language hint
ACCEPT_LANGUAGES = {
    'es': ('es-CL,es;q=0.9,en;q=0.6', 'es-ES,es;q=0.9,en;q=0.5', 'es-419,es;q=0.9'),
    'en': ('en-US,en;q=0.9', 'en-GB,en;q=0.9', 'en-US,en;q=0.5'),
}


class UserAgentRotator:
    """Picks user agents from a pool of recent desktop browsers."""

    @staticmethod
    def get_random() -> str:
        """Get a random user agent."""
        return random.choice(USER_AGENTS)

    @staticmethod
    def get_chrome() -> str:
        """Get a random Chrome user agent."""
        return random.choice([ua for ua in USER_AGENTS if 'Chrome' in ua])


class HeaderGenerator:
    """Generates browser-like request headers with some variation."""

    @staticmethod
    def generate_headers(
        user_agent: str | None = None,
        referer: str | None = None,
        language: str | None = None,
    ) -> dict[str, str]:
        """Generate request headers.

        Args:
            user_agent: User agent to send. Defaults to a random one.
            referer: Referer to send, e.g. the listing page for an article fetch.
            language: Site language hint ('es', 'en', ...) used for Accept-Language.

        Returns:
            The headers dict.

        """
        user_agent = user_agent or UserAgentRotator.get_random()
        languages = ACCEPT_LANGUAGES.get((language or 'en').split('-')[0].lower(), ACCEPT_LANGUAGES['en'])

        headers = {
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
            'Accept-Language': random.choice(languages),
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive',
            'Upgrade-Insecure-Requests': '1',
        }

        if 'Chrome' in user_agent:
            headers.update(
                {
                    'Sec-Fetch-Dest': 'document',
                    'Sec-Fetch-Mode': 'navigate',
                    'Sec-Fetch-Site': 'same-origin' if referer else 'none',
                    'Sec-Fetch-User': '?1',
                }
            )

        if referer:
            headers['Referer'] = referer

        return headers
