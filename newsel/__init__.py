"""newsel - news scraping with curated CSS selector chains.

Configure once per site, then resolve listings and articles with plain
BeautifulSoup.
"""

from newsel.core import (
    ArticleExtractor,
    HTMLFetcher,
    ListingExtractor,
    ScrapePipeline,
    SelectorResolver,
    SoupDocument,
    TextCleaner,
    create_fetcher,
)
from newsel.exceptions import (
    BotDetectionError,
    ConfigError,
    ConfigLoadError,
    ConfigNotFoundError,
    ConfigSaveError,
    DuplicateDomainError,
    ExtractionError,
    FetchError,
    IncompleteSelectorsError,
    InvalidSelectorError,
    MissingRequiredFieldError,
    NewselError,
    SelectorValidationFailedError,
)
from newsel.models import (
    ArticleSelectors,
    CleaningRule,
    ExtractedArticle,
    ListingCandidate,
    ListingSelectors,
    ScrapeReport,
    SelectorSet,
    SelectorTestResult,
    SiteConfig,
)
from newsel.services import ConfigPersistenceService
from newsel.settings import Settings
from newsel.storage import ConfigFile, SiteConfigStore, UsageTracker
from newsel.utils import init_newsel, normalize_domain

__version__ = '0.1.0'

__all__ = [
    'ArticleExtractor',
    'ArticleSelectors',
    'BotDetectionError',
    'CleaningRule',
    'ConfigError',
    'ConfigFile',
    'ConfigLoadError',
    'ConfigNotFoundError',
    'ConfigPersistenceService',
    'ConfigSaveError',
    'DuplicateDomainError',
    'ExtractedArticle',
    'ExtractionError',
    'FetchError',
    'HTMLFetcher',
    'IncompleteSelectorsError',
    'InvalidSelectorError',
    'ListingCandidate',
    'ListingExtractor',
    'ListingSelectors',
    'MissingRequiredFieldError',
    'NewselError',
    'ScrapePipeline',
    'ScrapeReport',
    'SelectorResolver',
    'SelectorSet',
    'SelectorTestResult',
    'SelectorValidationFailedError',
    'Settings',
    'SiteConfig',
    'SiteConfigStore',
    'SoupDocument',
    'TextCleaner',
    'UsageTracker',
    'create_fetcher',
    'init_newsel',
    'normalize_domain',
]
