"""DOM query capability used by the resolver and extractors.

Extraction code only needs ``query(selector) -> [node]``, the page's base URL
and a way to narrow queries to a node's subtree. ``SoupDocument`` provides
that on top of BeautifulSoup.
"""

from typing import Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from newsel.exceptions import InvalidSelectorError


class DocumentQuery(Protocol):
    """Anything the extractors can run CSS selectors against."""

    base_url: str | None

    def query(self, selector: str) -> list[Tag]:
        """Return every node matching the selector, in document order."""
        ...

    def scope(self, node: Tag) -> 'DocumentQuery':
        """Return a view that only queries inside ``node``."""
        ...


class SoupDocument:
    """BeautifulSoup-backed document (or subtree).

    Attributes:
        root: Parsed soup or the tag queries are limited to
        base_url: URL relative links are resolved against

    """

    def __init__(self, root: BeautifulSoup | Tag, base_url: str | None = None):
        """Wrap an already parsed tree.

        Args:
            root: Parsed soup or a tag inside one
            base_url: URL relative links are resolved against

        """
        self.root = root
        self.base_url = base_url

    @classmethod
    def parse(cls, html: str, url: str | None = None, parser: str = 'lxml') -> 'SoupDocument':
        """Parse HTML and work out the base URL.

        Args:
            html: Raw HTML
            url: URL the page was fetched from
            parser: BeautifulSoup parser name. Defaults to 'lxml'.

        Returns:
            A document rooted at the whole page.

        """
        soup = BeautifulSoup(html, parser)
        base_url = url
        base_tag = soup.find('base', href=True)
        if isinstance(base_tag, Tag):
            href = base_tag.get('href')
            if isinstance(href, str) and href.strip():
                base_url = urljoin(url or '', href.strip())
        return cls(soup, base_url)

    def query(self, selector: str) -> list[Tag]:
        """Run a CSS selector (or comma-separated selector list).

        Args:
            selector: CSS selector string

        Returns:
            Matching tags in document order; empty for a blank selector.

        Raises:
            InvalidSelectorError: If the selector cannot be compiled.

        """
        selector = (selector or '').strip()
        if not selector:
            return []
        try:
            return list(self.root.select(selector))
        except (SelectorSyntaxError, ValueError, NotImplementedError) as e:
            raise InvalidSelectorError(selector, str(e)) from e

    def scope(self, node: Tag) -> 'SoupDocument':
        """Return a document limited to ``node``'s subtree, sharing the base URL."""
        return SoupDocument(node, self.base_url)


def node_text(node: Tag) -> str:
    """Return the node's text with its original internal whitespace."""
    return node.get_text()


def node_attribute(node: Tag, names: tuple[str, ...]) -> str | None:
    """Return the first non-blank attribute among ``names``.

    Multi-valued attributes (class, rel) are joined with spaces.
    """
    for name in names:
        value = node.get(name)
        if isinstance(value, list):
            value = ' '.join(value)
        if value and value.strip():
            return value.strip()
    return None
