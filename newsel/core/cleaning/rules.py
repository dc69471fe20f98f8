"""Applies site cleaning rules and normalizes extracted text."""

import logging
import re
from collections.abc import Sequence

from rich.console import Console

from newsel.models import CleaningRule


class TextCleaner:
    """Cleans extracted title and content text.

    Site cleaning rules run first, on the raw text, because their patterns may
    depend on the original whitespace. Normalization runs afterwards.

    Attributes:
        console: Optional Rich console for warnings
        logger: Module logger

    """

    def __init__(self, console: Console | None = None):
        """Initialize the text cleaner.

        Args:
            console: Rich console instance for warnings. Defaults to None (log only).

        """
        self.console = console
        self.logger = logging.getLogger(__name__)

    def apply_rules(self, text: str, rules: Sequence[CleaningRule]) -> str:
        """Apply cleaning rules in list order.

        - regex: remove every match of the pattern
        - strip: remove every occurrence of the literal pattern
        - replace: substitute every regex match with the literal replacement

        A rule whose pattern is not a valid regex is skipped with a warning.

        Args:
            text: Raw extracted text
            rules: Rules in the order they must run

        Returns:
            The transformed text.

        """
        for rule in rules:
            if not rule.pattern:
                continue

            if rule.type == 'strip':
                text = text.replace(rule.pattern, '')
                continue

            replacement = rule.replacement if rule.type == 'replace' else ''
            try:
                text = re.sub(rule.pattern, lambda _match, value=replacement: value, text)
            except re.error as e:
                self._warn(f'Skipping cleaning rule {rule.description or rule.pattern!r}: invalid regex ({e})')

        return text

    def normalize_content(self, text: str) -> str:
        """Trim the text and collapse runs of blank lines into a single blank line.

        Args:
            text: Content after cleaning rules

        Returns:
            Normalized content.

        """
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        lines = [line.rstrip() for line in text.split('\n')]
        text = '\n'.join(lines)
        text = re.sub(r'\n{3,}', '\n\n', text)
        return text.strip()

    def normalize_title(self, text: str) -> str:
        """Collapse all whitespace in a title to single spaces."""
        return ' '.join(text.split())

    def clean_content(self, text: str | None, rules: Sequence[CleaningRule]) -> str:
        """Apply rules then normalize content. None becomes ''."""
        if not text:
            return ''
        return self.normalize_content(self.apply_rules(text, rules))

    def clean_title(self, text: str | None, rules: Sequence[CleaningRule]) -> str:
        """Apply rules then normalize a title. None becomes ''."""
        if not text:
            return ''
        return self.normalize_title(self.apply_rules(text, rules))

    def _warn(self, message: str) -> None:
        self.logger.warning(message)
        if self.console:
            self.console.print(f'  [warning]⚠ {message}[/warning]')
