"""Models for fetch results, selector resolution and extraction output."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class ContentMetadata:
    """Metadata about the fetched content.

    Attributes:
        requires_js: True if the page looks client-side rendered
        js_framework: Detected framework, if any
        content_length: Length of the HTML

    """

    requires_js: bool = False
    js_framework: str | None = None
    content_length: int = 0


@dataclass
class FetchResult:
    """Result of an HTML fetch operation.

    Attributes:
        url: Final URL the HTML was fetched from
        html: HTML content, or None when the fetch failed
        status_code: HTTP status code
        is_blocked: True if the site blocked the request
        block_reason: Why the fetch failed or was blocked
        fetch_time: Seconds spent fetching

    """

    url: str
    html: str | None = None
    status_code: int | None = None
    is_blocked: bool = False
    block_reason: str | None = None
    fetch_time: float = 0.0

    metadata: ContentMetadata = field(default_factory=ContentMetadata)

    @property
    def success(self) -> bool:
        """Whether the fetch returned usable HTML."""
        return self.html is not None and not self.is_blocked

    @property
    def requires_js(self) -> bool:
        """Shortcut to check if content requires JavaScript."""
        return self.metadata.requires_js


FailureReason = Literal['empty_selector', 'invalid_syntax', 'no_elements_found', 'empty_value']


class SelectorFailure(BaseModel):
    """Details about why a single selector candidate was passed over.

    Attributes:
        index: Position of the candidate in its list
        selector: The CSS selector that was attempted
        reason: Why the selector was skipped
        detail: Extra information (e.g. the syntax error message)

    """

    index: int = Field(description='Position in the candidate list')
    selector: str = Field(description='The CSS selector attempted')
    reason: FailureReason = Field(description='Why the selector was skipped')
    detail: str | None = Field(default=None, description='Extra information')


class FieldResolution(BaseModel):
    """Outcome of resolving one field's candidate list against a document.

    Attributes:
        field_name: Name of the field
        status: 'resolved' when a candidate produced a value
        index: Position of the winning candidate
        selector: The winning selector
        value: Trimmed value produced by the winning selector
        failed_selectors: Candidates tried before the winner, with reasons

    """

    field_name: str
    status: Literal['resolved', 'missing']
    index: int | None = None
    selector: str | None = None
    value: str | None = None
    failed_selectors: list[SelectorFailure] = Field(default_factory=list)

    @property
    def resolved(self) -> bool:
        """True if a candidate produced a value."""
        return self.status == 'resolved'


class ListingCandidate(BaseModel):
    """An article link found on a listing page.

    Attributes:
        url: Absolute article URL
        preview_title: Teaser title shown on the listing page
        description: Teaser summary, if configured and present

    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    preview_title: str | None = Field(default=None, alias='previewTitle')
    description: str | None = None


class ExtractedArticle(BaseModel):
    """Structured fields extracted from one article page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    content: str
    date: str | None = None
    author: str | None = None
    images: tuple[str, ...] = ()
    source_url: str | None = Field(default=None, alias='sourceUrl')
    domain: str | None = None


class ArticlePreview(BaseModel):
    """Fields shown to the admin after a test extraction."""

    title: str | None = None
    content: str | None = None
    date: str | None = None
    author: str | None = None
    images: list[str] = Field(default_factory=list)


class ListingTestSummary(BaseModel):
    """Counts reported by a selector test run on a listing page."""

    model_config = ConfigDict(populate_by_name=True)

    total_found: int = Field(alias='totalFound')
    total_tested: int = Field(alias='totalTested')
    container: list[str] = Field(default_factory=list)
    link: list[str] = Field(default_factory=list)


TestMethod = Literal['article', 'listing']


class SelectorTestResult(BaseModel):
    """Response of a selector test run.

    Attributes:
        success: True when the page produced a title or content (article runs)
            or at least one article link (listing runs)
        method: Which selectors the run exercised
        preview: Extracted values
        error: Why the test failed, if it did
        fields: Per-field resolution report for the article selectors
        listing: Candidates found when the tested URL was a listing page
        listing_test: Link counts of a listing run

    """

    success: bool
    method: TestMethod = 'article'
    preview: ArticlePreview = Field(default_factory=ArticlePreview)
    error: str | None = None
    fields: dict[str, FieldResolution] = Field(default_factory=dict)
    listing: list[ListingCandidate] = Field(default_factory=list)
    listing_test: ListingTestSummary | None = None

    def to_response(self) -> dict:
        """Serialize to the admin test endpoint shape, dropping empty preview fields."""
        preview = {key: value for key, value in self.preview.model_dump().items() if value}
        response: dict = {'success': self.success, 'preview': preview}
        if self.error:
            response['error'] = self.error
        if self.listing_test is not None:
            response['method'] = self.method
            response['listingTest'] = self.listing_test.model_dump(by_alias=True)
        return response


class ArticleFailure(BaseModel):
    """An article that was skipped during a listing run."""

    url: str
    error_type: str
    message: str


class ScrapeReport(BaseModel):
    """Result of scraping one listing page and its articles."""

    listing_url: str
    domain: str | None = None
    candidates_found: int = 0
    articles: list[ExtractedArticle] = Field(default_factory=list)
    failures: list[ArticleFailure] = Field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        """True if at least one article was extracted."""
        return bool(self.articles)
