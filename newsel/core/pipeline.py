"""Scrape pipeline: listing page to extracted articles for configured sites."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

import logfire
from rich.console import Console
from rich.theme import Theme

from newsel.core.dom import SoupDocument
from newsel.core.extraction import ArticleExtractor, ListingExtractor
from newsel.core.fetcher import HTMLFetcher, create_fetcher
from newsel.exceptions import ExtractionError, FetchError
from newsel.models import ArticleFailure, ExtractedArticle, FetchResult, ListingCandidate, ScrapeReport, SiteConfig
from newsel.storage import SiteConfigStore, UsageTracker
from newsel.utils.retry import get_retryer

PIPELINE_THEME = Theme(
    {
        'info': 'dim cyan',
        'warning': 'magenta',
        'danger': 'bold red',
        'success': 'bold green',
        'step': 'bold blue',
    }
)

ArticleSink = Callable[[ExtractedArticle], None]


class ScrapePipeline:
    """Scrapes listing pages of configured sites and extracts their articles.

    A run looks up the configuration for the listing URL, fetches the listing,
    enumerates article candidates and extracts each article. An article that
    fails to fetch or extract is recorded in the report and the run goes on.

    Attributes:
        store: Site configurations
        fetcher_type: Fetcher created for each run when no fetcher is injected
        tracker: Optional usage statistics tracker
        console: Rich console for progress output
        listing_extractor: Enumerates article links
        article_extractor: Extracts article fields
        max_workers: Sites scraped in parallel by scrape_many
        max_fetch_retries: Attempts per page fetch
        on_article: Callback receiving every extracted article
        logger: Module logger

    """

    def __init__(
        self,
        store: SiteConfigStore,
        fetcher: HTMLFetcher | None = None,
        fetcher_type: str = 'simple',
        tracker: UsageTracker | None = None,
        console: Console | None = None,
        max_workers: int = 4,
        max_fetch_retries: int = 2,
        fetch_timeout: int = 30,
        on_article: ArticleSink | None = None,
    ):
        """Initialize the pipeline.

        Args:
            store: Site configurations to look listing URLs up in
            fetcher: Fetcher shared by every run. When omitted each run creates its own.
            fetcher_type: Kind of fetcher to create ('simple', 'playwright', 'smart')
            tracker: Usage statistics tracker. Defaults to None (no tracking).
            console: Rich console. Defaults to a themed console.
            max_workers: Sites scraped in parallel by scrape_many. Defaults to 4.
            max_fetch_retries: Attempts per page fetch. Defaults to 2.
            fetch_timeout: Timeout in seconds for created fetchers
            on_article: Called with each extracted article, e.g. to persist it

        """
        self.store = store
        self._fetcher = fetcher
        self.fetcher_type = fetcher_type
        self.tracker = tracker
        self.console = console or Console(theme=PIPELINE_THEME)
        self.listing_extractor = ListingExtractor()
        self.article_extractor = ArticleExtractor()
        self.max_workers = max_workers
        self.max_fetch_retries = max_fetch_retries
        self.fetch_timeout = fetch_timeout
        self.on_article = on_article
        self.logger = logging.getLogger(__name__)

    def scrape(self, listing_url: str, limit: int | None = None) -> ScrapeReport:
        """Scrape one listing page and the articles it links to.

        Args:
            listing_url: URL of the listing page
            limit: Maximum number of articles to extract. Defaults to all.

        Returns:
            ScrapeReport with the extracted articles and per-article failures.

        Raises:
            ValueError: If limit is less than 1.

        """
        if limit is not None and limit < 1:
            raise ValueError(f'limit must be at least 1, got {limit}')

        with logfire.span('scrape', listing_url=listing_url, limit=limit):
            config = self.store.find_for_url(listing_url)
            if config is None:
                self.console.print(f'[danger]No enabled site config for {listing_url}[/danger]')
                self.logger.warning(f'No enabled site config for {listing_url}')
                return ScrapeReport(listing_url=listing_url, error=f'No site configuration found for: {listing_url}')

            self.console.print(f'[step]Scraping {listing_url} with config {config.domain}[/step]')
            fetcher = self._fetcher or create_fetcher(self.fetcher_type, timeout=self._fetcher_timeout())
            try:
                report = self._run(listing_url, config, fetcher, limit)
            finally:
                if self._fetcher is None:
                    fetcher.close()

            self._track(config, report)
            logfire.info(
                'Scrape complete',
                domain=config.domain,
                candidates=report.candidates_found,
                articles=len(report.articles),
                failures=len(report.failures),
            )
            return report

    def scrape_many(self, listing_urls: list[str], limit: int | None = None) -> list[ScrapeReport]:
        """Scrape several listing pages concurrently.

        Reports are returned in the order of ``listing_urls``; the order in
        which sites are actually scraped is not defined.
        """
        if limit is not None and limit < 1:
            raise ValueError(f'limit must be at least 1, got {limit}')

        reports: dict[int, ScrapeReport] = {}
        with logfire.span('scrape_many', total=len(listing_urls)):
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(self.scrape, url, limit): i for i, url in enumerate(listing_urls)}
                for future in as_completed(futures):
                    index = futures[future]
                    try:
                        reports[index] = future.result()
                    except Exception as e:
                        url = listing_urls[index]
                        self.logger.exception(f'Critical error scraping {url}')
                        logfire.error('Error scraping listing', url=url, error=str(e))
                        reports[index] = ScrapeReport(listing_url=url, error=str(e))

        return [reports[i] for i in range(len(listing_urls))]

    # ============================================================================
    # Private helper methods
    # ============================================================================

    def _fetcher_timeout(self) -> int:
        # playwright timeouts are in milliseconds
        return self.fetch_timeout * 1000 if self.fetcher_type == 'playwright' else self.fetch_timeout

    def _run(self, listing_url: str, config: SiteConfig, fetcher: HTMLFetcher, limit: int | None) -> ScrapeReport:
        report = ScrapeReport(listing_url=listing_url, domain=config.domain)

        try:
            listing_page = self._fetch(fetcher, listing_url, config)
        except FetchError as e:
            self.console.print(f'[danger]Listing fetch failed: {e.reason}[/danger]')
            report.error = str(e)
            return report

        assert listing_page.html is not None
        candidates = self._candidates(listing_page, config)
        report.candidates_found = len(candidates)
        if limit is not None:
            candidates = candidates[:limit]

        if not candidates:
            report.error = 'No article links found on listing page'
            self.console.print('[warning]⚠ No article links found[/warning]')
            return report

        for position, candidate in enumerate(candidates, 1):
            self.console.print(f'[info]  [{position}/{len(candidates)}] {candidate.url}[/info]')
            try:
                article = self._article(fetcher, candidate, config, referer=listing_page.url)
            except (FetchError, ExtractionError) as e:
                self.logger.info(f'Skipping article {candidate.url}: {e}')
                report.failures.append(ArticleFailure(url=candidate.url, error_type=type(e).__name__, message=str(e)))
                continue
            except Exception as e:
                self.logger.exception(f'Unexpected error extracting {candidate.url}')
                report.failures.append(ArticleFailure(url=candidate.url, error_type=type(e).__name__, message=str(e)))
                continue

            report.articles.append(article)
            if self.on_article:
                self.on_article(article)

        self.console.print(
            f'[success]✓ {len(report.articles)} articles extracted, {len(report.failures)} skipped[/success]'
        )
        return report

    def _candidates(self, page: FetchResult, config: SiteConfig) -> list[ListingCandidate]:
        listing = config.selectors.listing
        dom = SoupDocument.parse(page.html or '', page.url)
        with logfire.span('extract_listing', domain=config.domain):
            return self.listing_extractor.extract_listing(
                listing.container,
                listing.link,
                listing.title,
                dom=dom,
                description=listing.description,
            )

    def _article(
        self,
        fetcher: HTMLFetcher,
        candidate: ListingCandidate,
        config: SiteConfig,
        referer: str | None = None,
    ) -> ExtractedArticle:
        page = self._fetch(fetcher, candidate.url, config, referer=referer)
        dom = SoupDocument.parse(page.html or '', page.url or candidate.url)
        return self.article_extractor.extract_article(
            config.selectors.article,
            config.cleaning_rules,
            dom,
            source_url=candidate.url,
            domain=config.domain,
        )

    def _fetch(
        self,
        fetcher: HTMLFetcher,
        url: str,
        config: SiteConfig,
        referer: str | None = None,
    ) -> FetchResult:
        """Fetch a page, retrying blocked or failed attempts.

        Raises:
            FetchError: If every attempt fails (BotDetectionError when the last one was blocked).

        """

        def before_sleep_log(retry_state):
            attempt = retry_state.attempt_number
            self.logger.info(f'Fetch retry {attempt}/{self.max_fetch_retries} for {url}')
            logfire.warn('Retrying fetch', url=url, attempt=attempt)

        retryer = get_retryer(
            max_attempts=self.max_fetch_retries,
            wait_min=1,
            wait_max=10,
            exceptions=(FetchError,),
            log_callback=before_sleep_log,
        )

        for attempt in retryer:
            with attempt:
                result = fetcher.fetch(
                    url,
                    referer=referer,
                    language=config.metadata.language,
                    encoding=config.metadata.encoding,
                )
                if not result.success:
                    raise FetchError(url, result.block_reason or f'HTTP {result.status_code}')
                return result

        raise FetchError(url, 'no fetch attempt was made')

    def _track(self, config: SiteConfig, report: ScrapeReport) -> None:
        if self.tracker is None:
            return
        error = report.error
        if not report.success and not error and report.failures:
            error = report.failures[0].message
        try:
            self.tracker.record(config.domain, success=report.success, error=error)
        except OSError as e:
            self.logger.warning(f'Could not record usage for {config.domain}: {e}')
