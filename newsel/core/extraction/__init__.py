"""Listing and article extraction."""

from newsel.core.extraction.article import ArticleExtractor, content_text, image_source
from newsel.core.extraction.listing import ListingExtractor

__all__ = ['ArticleExtractor', 'ListingExtractor', 'content_text', 'image_source']
