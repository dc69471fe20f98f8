"""Validates, tests and stores site configurations."""

import json
import logging
import threading
from pathlib import Path
from typing import Any

import logfire
from pydantic import ValidationError
from rich.console import Console

from newsel.core.dom import SoupDocument
from newsel.core.extraction import ArticleExtractor, ListingExtractor
from newsel.core.fetcher import HTMLFetcher, create_fetcher
from newsel.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigNotFoundError,
    ConfigSaveError,
    DuplicateDomainError,
    FetchError,
    IncompleteSelectorsError,
    SelectorValidationFailedError,
)
from newsel.models import (
    ArticlePreview,
    CleaningRule,
    ListingTestSummary,
    SelectorSet,
    SelectorTestResult,
    SiteConfig,
)
from newsel.settings import Settings
from newsel.storage import ConfigFile, SiteConfigStore
from newsel.utils.domains import normalize_domain

TEST_METHODS = ('auto', 'article', 'listing')

# listing runs preview this many article links
LISTING_TEST_LIMIT = 5


class ConfigPersistenceService:
    """Entry point for admin actions on site configurations.

    Every write goes through ``save_config`` or ``set_enabled``: the JSON file
    is written first and the store is updated only once the write succeeded,
    so the store never serves a configuration that is not on disk.

    Attributes:
        store: In-memory registry of configurations
        config_file: JSON file written after every change, if any
        article_extractor: Used for selector test runs
        listing_extractor: Used for selector test runs on listing pages
        console: Optional Rich console
        logger: Module logger

    """

    def __init__(
        self,
        store: SiteConfigStore | None = None,
        config_file: ConfigFile | None = None,
        fetcher: HTMLFetcher | None = None,
        article_extractor: ArticleExtractor | None = None,
        listing_extractor: ListingExtractor | None = None,
        console: Console | None = None,
        fetch_timeout: int = 30,
    ):
        """Initialize the service.

        Args:
            store: Configuration registry. Defaults to an empty store.
            config_file: File to persist to. None keeps configurations in memory only.
            fetcher: Fetcher used for test runs. Created on first use when omitted.
            article_extractor: Article extractor for test runs
            listing_extractor: Listing extractor for test runs
            console: Rich console for progress output
            fetch_timeout: Timeout of the default fetcher in seconds

        """
        self.store = store or SiteConfigStore()
        self.config_file = config_file
        self._fetcher = fetcher
        self.article_extractor = article_extractor or ArticleExtractor()
        self.listing_extractor = listing_extractor or ListingExtractor()
        self.console = console
        self.logger = logging.getLogger(__name__)
        self.fetch_timeout = fetch_timeout
        self._write_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, console: Console | None = None) -> 'ConfigPersistenceService':
        """Build a service backed by the configured file and load it.

        Raises:
            ConfigLoadError: If the file exists but cannot be parsed.

        """
        service = cls(
            config_file=ConfigFile(settings.config_file),
            console=console,
            fetch_timeout=settings.fetch_timeout,
        )
        service.load()
        return service

    @property
    def fetcher(self) -> HTMLFetcher:
        """Fetcher used by test runs."""
        if self._fetcher is None:
            self._fetcher = create_fetcher('simple', timeout=self.fetch_timeout)
        return self._fetcher

    def load(self) -> int:
        """Replace the store contents with the configuration file.

        Returns:
            Number of configurations loaded.

        Raises:
            ConfigLoadError: If the file cannot be parsed.

        """
        if self.config_file is None:
            return len(self.store)

        configs = self.config_file.load()
        normalized = [config.model_copy(update={'domain': normalize_domain(config.domain)}) for config in configs]
        self.store.replace_all(normalized)
        self.logger.info(f'Loaded {len(normalized)} site configs from {self.config_file.path}')
        return len(normalized)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_config(
        self,
        candidate: SiteConfig | dict[str, Any],
        test_url: str | None = None,
        update: bool = False,
    ) -> SiteConfig:
        """Validate and store a configuration.

        Checks run in order and the first failure is raised:

        1. The domain is set and not already stored, unless ``update`` is True
           or the stored configuration is identical.
        2. The article selectors have a title or content candidate.
        3. When ``test_url`` is given, a live extraction finds a title or content.

        Args:
            candidate: Configuration to store (model or stored JSON shape)
            test_url: Article URL to test the selectors against before saving
            update: Replace an existing configuration for the same domain

        Returns:
            The stored configuration, with its domain normalized.

        Raises:
            ConfigError: If the domain is empty or the candidate is malformed.
            DuplicateDomainError: If the domain is already taken.
            IncompleteSelectorsError: If there is no title or content selector.
            SelectorValidationFailedError: If the test extraction finds nothing.
            ConfigSaveError: If the configuration file cannot be written.

        """
        config = self._coerce(candidate)

        with logfire.span('save_config', domain=config.domain, update=update, test_url=test_url):
            if not config.domain:
                raise ConfigError('Site config needs a domain')

            existing = self.store.get(config.domain)
            if existing is not None and not update and existing.to_dict() != config.to_dict():
                logfire.warn('Duplicate domain rejected', domain=config.domain)
                raise DuplicateDomainError(config.domain, existing.name or None)

            if not config.is_usable:
                raise IncompleteSelectorsError(config.domain)

            if test_url:
                result = self.test_selectors(test_url, config.selectors, config.cleaning_rules, method='article')
                if not result.success:
                    logfire.warn('Selector test failed', domain=config.domain, url=test_url, error=result.error)
                    raise SelectorValidationFailedError(
                        config.domain, test_url, result.error or 'no title or content extracted', report=result
                    )

            self._write(config, replace=update or existing is not None)

            action = 'Updated' if existing is not None else 'Saved'
            self.logger.info(f'{action} site config for {config.domain}')
            logfire.info('Site config saved', domain=config.domain, created=existing is None)
            return config

    def set_enabled(self, domain: str, enabled: bool) -> SiteConfig:
        """Enable or disable a configuration. Configurations are never deleted.

        Raises:
            ConfigNotFoundError: If no configuration exists for the domain.
            ConfigSaveError: If the configuration file cannot be written.

        """
        config = self.get_config(domain)
        if config.enabled == enabled:
            return config

        updated = config.model_copy(update={'enabled': enabled})
        self._write(updated, replace=True)
        self.logger.info(f'{"Enabled" if enabled else "Disabled"} site config for {updated.domain}')
        return updated

    def import_configs(self, path: str | Path, update: bool = False) -> dict[str, Any]:
        """Import configurations from a JSON file in bulk.

        Sites are saved one by one without live testing. A site that fails
        validation is reported and the import continues.

        Args:
            path: File with ``{"sites": [...]}`` or a bare list of sites
            update: Replace existing configurations

        Returns:
            Dict with 'imported' (list of domains) and 'failed' (domain or position → message).

        Raises:
            ConfigLoadError: If the file cannot be read as JSON.

        """
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigLoadError(f'Could not read {path}: {e}') from e

        sites = data.get('sites', []) if isinstance(data, dict) else data
        if not isinstance(sites, list):
            raise ConfigLoadError(f'{path} must contain a "sites" array')

        report: dict[str, Any] = {'imported': [], 'failed': {}}
        with logfire.span('import_configs', path=str(path), total=len(sites)):
            for position, entry in enumerate(sites, 1):
                key = str(entry.get('domain') or f'#{position}') if isinstance(entry, dict) else f'#{position}'
                try:
                    saved = self.save_config(entry, update=update)
                except ConfigError as e:
                    self.logger.warning(f'Skipping imported site {key}: {e}')
                    report['failed'][key] = str(e)
                    continue
                report['imported'].append(saved.domain)

        self.logger.info(f'Imported {len(report["imported"])} sites, {len(report["failed"])} failed')
        return report

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_config(self, domain: str) -> SiteConfig:
        """Return the configuration for a domain or URL.

        Raises:
            ConfigNotFoundError: If nothing is stored for it.

        """
        config = self.store.get(domain) or self.store.find_for_url(domain, enabled_only=False)
        if config is None:
            raise ConfigNotFoundError(domain)
        return config

    def list_configs(self, enabled_only: bool = False) -> list[SiteConfig]:
        """Return stored configurations ordered by priority."""
        return self.store.all(enabled_only=enabled_only)

    # ------------------------------------------------------------------
    # Test mode
    # ------------------------------------------------------------------

    def test_selectors(
        self,
        url: str,
        selectors: SelectorSet | dict[str, Any],
        cleaning_rules: list[CleaningRule] | None = None,
        method: str = 'auto',
    ) -> SelectorTestResult:
        """Fetch a page and run selectors against it.

        Never raises for fetch or extraction problems; they are reported in
        the result's ``error``.

        Args:
            url: Page to test against
            selectors: Selector set under test
            cleaning_rules: Cleaning rules to apply to the preview
            method: 'article', 'listing', or 'auto' to test the listing
                selectors whenever a container and a link are configured

        Returns:
            SelectorTestResult with the preview and a per-field report.

        """
        if isinstance(selectors, dict):
            selectors = SelectorSet.model_validate(selectors)

        with logfire.span('test_selectors', url=url, method=method):
            try:
                result = self.fetcher.fetch(url)
            except FetchError as e:
                self.logger.warning(f'Selector test fetch failed for {url}: {e}')
                return SelectorTestResult(success=False, error=str(e))

            if not result.success or result.html is None:
                reason = result.block_reason or f'HTTP {result.status_code}'
                return SelectorTestResult(success=False, error=f'Failed to fetch {url}: {reason}')

            return self.test_html(result.html, result.url or url, selectors, cleaning_rules or [], method=method)

    def test_html(
        self,
        html: str,
        url: str,
        selectors: SelectorSet,
        cleaning_rules: list[CleaningRule] | None = None,
        method: str = 'auto',
    ) -> SelectorTestResult:
        """Run selectors against already fetched HTML.

        A listing run passes when at least one article link is found and
        previews the first few teasers. An article run passes when a title or
        content is extracted.
        """
        if method not in TEST_METHODS:
            raise ValueError(f'Unknown test method: {method}')

        dom = SoupDocument.parse(html, url)
        listing_selectors = selectors.listing
        if method == 'listing' or (method == 'auto' and listing_selectors.container and listing_selectors.link):
            return self._test_listing(dom, selectors)

        preview, fields = self.article_extractor.preview(selectors.article, cleaning_rules or [], dom)
        success = bool(preview.title or preview.content)
        error = None if success else 'No title or content could be extracted with the given selectors'
        return SelectorTestResult(success=success, preview=preview, error=error, fields=fields)

    def _test_listing(self, dom: SoupDocument, selectors: SelectorSet) -> SelectorTestResult:
        listing_selectors = selectors.listing
        candidates = self.listing_extractor.extract_listing(
            listing_selectors.container,
            listing_selectors.link,
            listing_selectors.title,
            dom=dom,
            description=listing_selectors.description,
        )
        tested = candidates[:LISTING_TEST_LIMIT]
        summary = ListingTestSummary(
            total_found=len(candidates),
            total_tested=len(tested),
            container=listing_selectors.container,
            link=listing_selectors.link,
        )

        if not candidates:
            return SelectorTestResult(
                success=False,
                method='listing',
                error='No article links could be found with the given listing selectors',
                listing_test=summary,
            )

        preview = ArticlePreview(
            title=f'{len(candidates)} articles found',
            content='\n'.join(
                f'{position}. {candidate.preview_title or candidate.url}'
                for position, candidate in enumerate(tested, 1)
            ),
        )
        self.logger.info(f'Listing test found {len(candidates)} article links')
        return SelectorTestResult(
            success=True, method='listing', preview=preview, listing=tested, listing_test=summary
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _coerce(self, candidate: SiteConfig | dict[str, Any]) -> SiteConfig:
        try:
            config = candidate if isinstance(candidate, SiteConfig) else SiteConfig.from_dict(candidate)
        except ValidationError as e:
            raise ConfigError(f'Invalid site config: {e}') from e
        return config.model_copy(update={'domain': normalize_domain(config.domain)})

    def _write(self, config: SiteConfig, replace: bool) -> None:
        with self._write_lock:
            # another writer may have claimed the domain during the test run
            if not replace and config.domain in self.store:
                raise DuplicateDomainError(config.domain)

            if self.config_file is not None:
                pending = SiteConfigStore(self.store.all())
                pending.put(config)
                try:
                    self.config_file.save(pending.all())
                except OSError as e:
                    logfire.error('Site config write failed', domain=config.domain, error=str(e))
                    raise ConfigSaveError(f'Could not write {self.config_file.path}: {e}') from e

            self.store.put(config)
