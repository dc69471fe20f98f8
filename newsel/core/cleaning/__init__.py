"""Text cleaning rules and normalization."""

from newsel.core.cleaning.rules import TextCleaner

__all__ = ['TextCleaner']
