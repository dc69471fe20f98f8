"""Domain normalization and URL helpers."""

import logging
from urllib.parse import urljoin, urldefrag, urlparse

logger = logging.getLogger(__name__)


def _strip_host(host: str) -> str:
    host = host.strip().lower()
    if host.startswith('www.'):
        host = host[4:]
    return host.split(':')[0]


def normalize_domain(url_or_domain: str) -> str:
    """Normalize a URL or domain into a configuration key.

    Full URLs are reduced to their hostname. Bare domains keep an optional
    path ('site.cl/deportes') so a site section can carry its own config.
    In both cases 'www.', the port and letter case are dropped.

    Args:
        url_or_domain: Full URL or domain string

    Returns:
        Normalized domain key, or '' if nothing usable was given.

    """
    value = (url_or_domain or '').strip()
    if not value:
        return ''

    if '://' in value:
        host = urlparse(value).hostname or ''
        return _strip_host(host)

    host, _, path = value.partition('/')
    host = _strip_host(host)
    path = path.strip('/').lower()
    return f'{host}/{path}' if path and host else host


def url_key(url: str) -> tuple[str, str]:
    """Split a URL into its normalized host and lowercase path (no slashes at the ends)."""
    parsed = urlparse(url if '://' in url else f'http://{url}')
    return _strip_host(parsed.hostname or ''), parsed.path.strip('/').lower()


def match_length(domain_key: str, url: str) -> int | None:
    """Score how specifically a configuration domain matches a URL.

    Args:
        domain_key: Normalized configuration domain (host or host/path)
        url: URL (or domain) being looked up

    Returns:
        Number of matched path segments plus one, or None if the key does not apply.

    """
    key_host, _, key_path = domain_key.partition('/')
    host, path = url_key(url)

    if key_host != host:
        return None
    if not key_path:
        return 1

    key_segments = key_path.split('/')
    segments = path.split('/') if path else []
    if segments[: len(key_segments)] != key_segments:
        return None
    return 1 + len(key_segments)


def absolute_url(href: str | None, base_url: str | None) -> str | None:
    """Resolve an href against a base URL, keeping only http(s) links.

    Args:
        href: Raw href or src attribute value
        base_url: URL of the page (or its <base href>)

    Returns:
        Absolute URL without fragment, or None if the href is unusable.

    """
    href = (href or '').strip()
    if not href or href.startswith(('#', 'javascript:', 'mailto:', 'tel:', 'data:')):
        return None

    try:
        resolved = urljoin(base_url or '', href)
    except ValueError:
        logger.debug('Could not resolve href %r against %r', href, base_url)
        return None

    resolved, _ = urldefrag(resolved)
    if urlparse(resolved).scheme not in ('http', 'https'):
        return None
    return resolved
