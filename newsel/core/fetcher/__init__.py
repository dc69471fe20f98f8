"""Fetcher factory and exports."""

from newsel.core.fetcher.base import ContentAnalyzer, HTMLFetcher
from newsel.core.fetcher.playwright import PlaywrightFetcher
from newsel.core.fetcher.simple import SimpleFetcher
from newsel.core.fetcher.smart import SmartFetcher


def create_fetcher(fetcher_type: str = 'simple', **kwargs) -> HTMLFetcher:
    """Create an HTML fetcher.

    Args:
        fetcher_type: Type of fetcher ('simple', 'playwright', 'smart')
        **kwargs: Additional arguments for the fetcher

    Returns:
        HTMLFetcher instance

    Raises:
        ValueError: If the fetcher type is unknown.

    """
    fetchers: dict[str, type[HTMLFetcher]] = {
        'simple': SimpleFetcher,
        'playwright': PlaywrightFetcher,
        'smart': SmartFetcher,
    }

    if fetcher_type not in fetchers:
        raise ValueError(f'Unknown fetcher type: {fetcher_type}. Choose from: {list(fetchers.keys())}')

    return fetchers[fetcher_type](**kwargs)


__all__ = ['ContentAnalyzer', 'HTMLFetcher', 'PlaywrightFetcher', 'SimpleFetcher', 'SmartFetcher', 'create_fetcher']
