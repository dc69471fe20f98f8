"""Pydantic models for site configurations and results."""

from newsel.models.config import (
    ArticleSelectors,
    CleaningRule,
    ListingSelectors,
    SelectorSet,
    SiteConfig,
    SiteMetadata,
)
from newsel.models.results import (
    ArticleFailure,
    ArticlePreview,
    ContentMetadata,
    ExtractedArticle,
    FetchResult,
    FieldResolution,
    ListingCandidate,
    ScrapeReport,
    SelectorFailure,
    ListingTestSummary,
    SelectorTestResult,
)

__all__ = [
    'ArticleSelectors',
    'CleaningRule',
    'ListingSelectors',
    'SelectorSet',
    'SiteConfig',
    'SiteMetadata',
    'ArticleFailure',
    'ArticlePreview',
    'ContentMetadata',
    'ExtractedArticle',
    'FetchResult',
    'FieldResolution',
    'ListingCandidate',
    'ListingTestSummary',
    'ScrapeReport',
    'SelectorFailure',
    'SelectorTestResult',
]
