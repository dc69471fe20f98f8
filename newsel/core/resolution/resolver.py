"""Resolves ordered CSS selector candidates against a document."""

import logging
from collections.abc import Callable, Sequence

from bs4 import Tag
from rich.console import Console

from newsel.core.dom import DocumentQuery, node_attribute, node_text
from newsel.exceptions import InvalidSelectorError
from newsel.models import FieldResolution, SelectorFailure

ValueGetter = Callable[[Tag], str | None]


def text_value(node: Tag) -> str | None:
    """Default getter: the node's text."""
    return node_text(node)


def attribute_or_text(*names: str) -> ValueGetter:
    """Build a getter that prefers the given attributes and falls back to text."""

    def getter(node: Tag) -> str | None:
        return node_attribute(node, names) or node_text(node)

    return getter


def attribute_only(*names: str) -> ValueGetter:
    """Build a getter that reads only the given attributes."""

    def getter(node: Tag) -> str | None:
        return node_attribute(node, names)

    return getter


class SelectorResolver:
    """Picks the first selector candidate that yields a value.

    Candidates are tried strictly in list order and the first one whose
    match produces non-empty trimmed text wins; later candidates are never
    consulted. There is no scoring. Blank or malformed selectors are skipped.
    Resolution never raises: a missing field is ``None``.

    Attributes:
        console: Optional Rich console for printing resolution reports
        logger: Module logger

    """

    def __init__(self, console: Console | None = None):
        """Initialize the SelectorResolver."""
        self.console = console
        self.logger = logging.getLogger(__name__)

    def resolve(
        self,
        candidates: Sequence[str],
        dom: DocumentQuery,
        value_getter: ValueGetter = text_value,
    ) -> str | None:
        """Return the trimmed value of the first candidate that produces one.

        Args:
            candidates: Ordered selector candidates
            dom: Document (or subtree) to query
            value_getter: Maps a matched node to its raw value. Defaults to the node text.

        Returns:
            The value, or None when no candidate matches.

        """
        return self.trace('field', candidates, dom, value_getter).value

    def trace(
        self,
        field_name: str,
        candidates: Sequence[str],
        dom: DocumentQuery,
        value_getter: ValueGetter = text_value,
        all_matches: bool = False,
    ) -> FieldResolution:
        """Resolve a field and record why earlier candidates were passed over.

        Args:
            field_name: Name used in the report
            candidates: Ordered selector candidates
            dom: Document (or subtree) to query
            value_getter: Maps a matched node to its raw value
            all_matches: Join the values of every match of the winning selector
                with blank lines instead of taking the first one

        Returns:
            FieldResolution with the winning candidate or the list of failures.

        """
        failed: list[SelectorFailure] = []

        for index, selector in enumerate(candidates):
            if not selector or not selector.strip():
                failed.append(SelectorFailure(index=index, selector=selector or '', reason='empty_selector'))
                continue

            try:
                nodes = dom.query(selector)
            except InvalidSelectorError as e:
                self.logger.debug(f'Skipping invalid selector for {field_name}: {e}')
                failed.append(SelectorFailure(index=index, selector=selector, reason='invalid_syntax', detail=e.detail))
                continue

            if not nodes:
                failed.append(SelectorFailure(index=index, selector=selector, reason='no_elements_found'))
                continue

            if all_matches:
                value = self._joined_value(nodes, value_getter)
            else:
                value = self._first_value(nodes, value_getter)
            if value is None:
                failed.append(SelectorFailure(index=index, selector=selector, reason='empty_value'))
                continue

            return FieldResolution(
                field_name=field_name,
                status='resolved',
                index=index,
                selector=selector,
                value=value,
                failed_selectors=failed,
            )

        return FieldResolution(field_name=field_name, status='missing', failed_selectors=failed)

    def resolve_all(
        self,
        candidates: Sequence[str],
        dom: DocumentQuery,
        value_getter: ValueGetter = text_value,
    ) -> list[str]:
        """Collect the values of every match of every candidate.

        Values come in selector-list order, then document order within each
        selector. Duplicates keep their first position.

        Args:
            candidates: Ordered selector candidates
            dom: Document (or subtree) to query
            value_getter: Maps a matched node to its raw value

        Returns:
            De-duplicated list of trimmed values.

        """
        values: list[str] = []
        seen: set[str] = set()

        for selector in candidates:
            try:
                nodes = dom.query(selector)
            except InvalidSelectorError as e:
                self.logger.debug(f'Skipping invalid selector: {e}')
                continue

            for node in nodes:
                value = self._value(node, value_getter)
                if value is not None and value not in seen:
                    seen.add(value)
                    values.append(value)

        return values

    def _first_value(self, nodes: list[Tag], value_getter: ValueGetter) -> str | None:
        for node in nodes:
            value = self._value(node, value_getter)
            if value is not None:
                return value
        return None

    def _joined_value(self, nodes: list[Tag], value_getter: ValueGetter) -> str | None:
        # nested matches would repeat their ancestor's text
        taken: set[int] = set()
        parts: list[str] = []
        for node in nodes:
            if any(id(parent) in taken for parent in node.parents):
                continue
            value = self._value(node, value_getter)
            if value is None:
                continue
            taken.add(id(node))
            parts.append(value)
        return '\n\n'.join(parts) or None

    def _value(self, node: Tag, value_getter: ValueGetter) -> str | None:
        raw = value_getter(node)
        if raw is None:
            return None
        value = raw.strip()
        return value or None

    def print_resolution(self, result: FieldResolution) -> None:
        """Print a field's resolution report to the console, if one is set."""
        if not self.console:
            return

        if result.resolved and result.index is not None:
            if result.index == 0:
                self.console.print(f'  ✓ {result.field_name}: first candidate works ({result.selector})')
            else:
                self.console.print(
                    f'  → {result.field_name}: using candidate #{result.index + 1} ({result.selector})'
                )
        else:
            self.console.print(f'  ✗ {result.field_name}: no candidate matched')

        for failure in result.failed_selectors:
            detail = f' ({failure.detail})' if failure.detail else ''
            self.console.print(f'      → #{failure.index + 1}: "{failure.selector}" → {failure.reason}{detail}')


_default_resolver = SelectorResolver()


def resolve(candidates: Sequence[str], dom: DocumentQuery) -> str | None:
    """Resolve candidates with a shared resolver (text values)."""
    return _default_resolver.resolve(candidates, dom)
