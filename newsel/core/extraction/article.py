"""Extracts structured articles from article pages using configured selectors."""

import logging
from collections.abc import Sequence

from bs4 import Tag
from rich.console import Console

from newsel.core.cleaning import TextCleaner
from newsel.core.dom import DocumentQuery, node_attribute, node_text
from newsel.core.resolution import SelectorResolver, attribute_or_text
from newsel.exceptions import MissingRequiredFieldError
from newsel.models import ArticlePreview, ArticleSelectors, CleaningRule, ExtractedArticle, FieldResolution
from newsel.utils.domains import absolute_url

IMAGE_ATTRIBUTES = ('src', 'data-src', 'data-lazy-src')


def content_text(node: Tag) -> str:
    """Text of a content node; paragraph children are joined with blank lines."""
    paragraphs = [p.get_text().strip() for p in node.find_all('p')]
    paragraphs = [p for p in paragraphs if p]
    if paragraphs:
        return '\n\n'.join(paragraphs)
    return node_text(node)


def image_source(node: Tag) -> str | None:
    """Image URL of a node, or of the first image inside it (e.g. a <figure>)."""
    source = node_attribute(node, IMAGE_ATTRIBUTES)
    if source:
        return source
    img = node.find('img')
    if isinstance(img, Tag):
        return node_attribute(img, IMAGE_ATTRIBUTES)
    return None


class ArticleExtractor:
    """Extracts title, content, date, author and images from an article page.

    Every field is resolved independently. Cleaning rules apply to title and
    content, then the text is normalized. The only fatal condition is an
    article whose title and content are both empty after cleaning.

    Attributes:
        resolver: Selector resolver shared with the other extractors
        cleaner: Applies cleaning rules and normalization
        console: Optional Rich console for per-field output
        logger: Module logger

    """

    TEXT_FIELDS = ('title', 'content', 'date', 'author')

    def __init__(
        self,
        resolver: SelectorResolver | None = None,
        cleaner: TextCleaner | None = None,
        console: Console | None = None,
    ):
        """Initialize the extractor.

        Args:
            resolver: Selector resolver. Defaults to a new one.
            cleaner: Text cleaner. Defaults to a new one.
            console: Rich console for per-field output. Defaults to None (log only).

        """
        self.resolver = resolver or SelectorResolver(console=console)
        self.cleaner = cleaner or TextCleaner(console=console)
        self.console = console
        self.logger = logging.getLogger(__name__)

    def extract_article(
        self,
        selectors: ArticleSelectors,
        cleaning_rules: Sequence[CleaningRule],
        dom: DocumentQuery,
        source_url: str | None = None,
        domain: str | None = None,
    ) -> ExtractedArticle:
        """Extract one article.

        Args:
            selectors: Article selector candidates of the site
            cleaning_rules: Site cleaning rules, applied in order
            dom: Parsed article page
            source_url: URL of the page. Defaults to the document base URL.
            domain: Configuration domain the article belongs to

        Returns:
            The extracted article.

        Raises:
            MissingRequiredFieldError: If title and content are both empty after cleaning.

        """
        source_url = source_url or dom.base_url
        preview, _ = self.preview(selectors, cleaning_rules, dom)

        if not preview.title and not preview.content:
            self.logger.info(f'No title or content extracted from {source_url}')
            raise MissingRequiredFieldError(source_url)

        return ExtractedArticle(
            title=preview.title or '',
            content=preview.content or '',
            date=preview.date,
            author=preview.author,
            images=tuple(preview.images),
            source_url=source_url,
            domain=domain,
        )

    def preview(
        self,
        selectors: ArticleSelectors,
        cleaning_rules: Sequence[CleaningRule],
        dom: DocumentQuery,
    ) -> tuple[ArticlePreview, dict[str, FieldResolution]]:
        """Extract every field without enforcing required ones.

        Args:
            selectors: Article selector candidates
            cleaning_rules: Cleaning rules applied to title and content
            dom: Parsed article page

        Returns:
            Tuple of (cleaned preview, per-field resolution reports).

        """
        fields = self.resolve_fields(selectors, dom)

        title = self.cleaner.clean_title(fields['title'].value, cleaning_rules)
        content = self.cleaner.clean_content(fields['content'].value, cleaning_rules)
        images = self._extract_images(selectors.images, dom)

        preview = ArticlePreview(
            title=title or None,
            content=content or None,
            date=fields['date'].value,
            author=self.cleaner.normalize_title(fields['author'].value or '') or None,
            images=images,
        )
        return preview, fields

    def resolve_fields(self, selectors: ArticleSelectors, dom: DocumentQuery) -> dict[str, FieldResolution]:
        """Resolve the text fields of an article, before cleaning.

        Returns:
            FieldResolution per field name ('title', 'content', 'date', 'author').

        """
        fields = {
            'title': self.resolver.trace('title', selectors.title, dom),
            'content': self.resolver.trace('content', selectors.content, dom, content_text, all_matches=True),
            'date': self.resolver.trace('date', selectors.date, dom, attribute_or_text('datetime', 'content')),
            'author': self.resolver.trace('author', selectors.author, dom),
        }

        for name, result in fields.items():
            if result.resolved:
                self.logger.debug(f'{name}: resolved with candidate #{result.index} ({result.selector})')
            else:
                self.logger.debug(f'{name}: no candidate matched')
            if self.console:
                self.resolver.print_resolution(result)

        return fields

    def _extract_images(self, candidates: Sequence[str], dom: DocumentQuery) -> list[str]:
        images: list[str] = []
        for source in self.resolver.resolve_all(candidates, dom, image_source):
            url = absolute_url(source, dom.base_url)
            if url and url not in images:
                images.append(url)
        return images
