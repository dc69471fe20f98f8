"""Enumerates article links from listing (index) pages."""

import logging
from collections.abc import Sequence

from bs4 import Tag
from rich.console import Console

from newsel.core.dom import DocumentQuery, node_attribute
from newsel.core.resolution import SelectorResolver, attribute_only
from newsel.exceptions import InvalidSelectorError
from newsel.models import ListingCandidate
from newsel.utils.domains import absolute_url

href_value = attribute_only('href')


class ListingExtractor:
    """Turns a listing page into article candidates.

    The first container candidate that matches anything defines the teaser
    elements. Link, title and description are then resolved inside each
    container's own subtree.

    Attributes:
        resolver: Selector resolver
        console: Optional Rich console
        logger: Module logger

    """

    def __init__(self, resolver: SelectorResolver | None = None, console: Console | None = None):
        """Initialize the ListingExtractor."""
        self.resolver = resolver or SelectorResolver()
        self.console = console
        self.logger = logging.getLogger(__name__)

    def extract_listing(
        self,
        container: Sequence[str],
        link: Sequence[str],
        title: Sequence[str] | None = None,
        dom: DocumentQuery | None = None,
        description: Sequence[str] | None = None,
    ) -> list[ListingCandidate]:
        """Extract article candidates from a listing page.

        Args:
            container: Candidates for the teaser container
            link: Candidates for the article link inside a container
            title: Candidates for the teaser title inside a container
            dom: Parsed listing page
            description: Candidates for the teaser summary inside a container

        Returns:
            Candidates in document order, de-duplicated by absolute URL.

        """
        if dom is None:
            raise ValueError('extract_listing needs a document to query')

        containers = self.find_containers(container, dom)
        if not containers:
            self.logger.info('No listing containers matched')
            return []

        candidates: list[ListingCandidate] = []
        seen: set[str] = set()

        for position, node in enumerate(containers):
            try:
                candidate = self._candidate(node, link, title or [], description or [], dom)
            except Exception as e:
                self.logger.warning(f'Skipping listing container #{position + 1}: {e}')
                continue

            if candidate is None:
                self.logger.debug(f'Listing container #{position + 1} has no usable link')
                continue
            if candidate.url in seen:
                continue

            seen.add(candidate.url)
            candidates.append(candidate)

        self.logger.info(f'Found {len(candidates)} article candidates in {len(containers)} containers')
        if self.console:
            self.console.print(f'  [success]✓ {len(candidates)} article links found[/success]')
        return candidates

    def find_containers(self, candidates: Sequence[str], dom: DocumentQuery) -> list[Tag]:
        """Return the nodes of the first container candidate that matches anything."""
        for selector in candidates:
            if not selector or not selector.strip():
                continue
            try:
                nodes = dom.query(selector)
            except InvalidSelectorError as e:
                self.logger.debug(f'Skipping invalid container selector: {e}')
                continue
            if nodes:
                self.logger.debug(f'Container selector {selector!r} matched {len(nodes)} nodes')
                return nodes
        return []

    def _candidate(
        self,
        node: Tag,
        link: Sequence[str],
        title: Sequence[str],
        description: Sequence[str],
        dom: DocumentQuery,
    ) -> ListingCandidate | None:
        scoped = dom.scope(node)

        if link:
            result = self.resolver.trace('link', link, scoped, href_value)
            href = result.value
            link_node = None
            if result.resolved and result.selector:
                matches = scoped.query(result.selector)
                link_node = next((n for n in matches if node_attribute(n, ('href',))), None)
        else:
            href, link_node = self._fallback_link(node)

        url = absolute_url(href, dom.base_url)
        if not url:
            return None

        preview_title = self.resolver.resolve(title, scoped) if title else None
        if not preview_title and link_node is not None:
            preview_title = ' '.join(link_node.get_text().split()) or None

        summary = self.resolver.resolve(description, scoped) if description else None

        return ListingCandidate(url=url, preview_title=preview_title, description=summary)

    def _fallback_link(self, node: Tag) -> tuple[str | None, Tag | None]:
        own = node_attribute(node, ('href',))
        if own:
            return own, node
        anchor = node.find('a', href=True)
        if isinstance(anchor, Tag):
            return node_attribute(anchor, ('href',)), anchor
        return None, None
