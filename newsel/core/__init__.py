"""Core selector resolution, extraction, fetching and scraping components."""

from newsel.core.cleaning import TextCleaner
from newsel.core.dom import DocumentQuery, SoupDocument
from newsel.core.extraction import ArticleExtractor, ListingExtractor
from newsel.core.fetcher import HTMLFetcher, create_fetcher
from newsel.core.pipeline import ScrapePipeline
from newsel.core.resolution import SelectorResolver

__all__ = [
    'ArticleExtractor',
    'DocumentQuery',
    'HTMLFetcher',
    'ListingExtractor',
    'ScrapePipeline',
    'SelectorResolver',
    'SoupDocument',
    'TextCleaner',
    'create_fetcher',
]
